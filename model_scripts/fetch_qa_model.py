# Question-answering model download and smoke test
# Run after `pip install -e .[qa]` so the project modules are importable.
import argparse
import json
import time
from pathlib import Path

from oracle import QA_MODEL_NAME, SMOKE_CONTEXT, SMOKE_QUESTION, WARMUP_CONTEXT, WARMUP_QUESTION, TransformersQABackend


def _metadata_path() -> Path:
    project_root = Path(__file__).resolve().parents[1]
    path = project_root / "models" / "qa_model_metadata.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download the extractive QA model and check that it answers.")
    parser.add_argument("--model", default=QA_MODEL_NAME, help="Hugging Face model id")
    parser.add_argument("--question", default=WARMUP_QUESTION)
    parser.add_argument("--context", default=WARMUP_CONTEXT)
    parser.add_argument("--no-metadata", action="store_true", help="Skip writing models/qa_model_metadata.json")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    backend = TransformersQABackend(args.model)

    print(f"Loading {args.model} ...")
    started = time.perf_counter()
    backend.load()
    load_seconds = time.perf_counter() - started
    print(f"Loaded in {load_seconds:.2f}s (smoke question: {SMOKE_QUESTION!r} on {SMOKE_CONTEXT!r})")

    started = time.perf_counter()
    result = backend.answer(args.question, args.context)
    answer_seconds = time.perf_counter() - started
    print(f"Question: {args.question}")
    print(f"Answer: {result['answer']}")
    print(f"Score: {result['score']:.4f}")
    print(f"Inference: {answer_seconds * 1000:.1f} ms")

    if args.no_metadata:
        return

    metadata_path = _metadata_path()
    metadata = {
        "model": args.model,
        "load_seconds": round(load_seconds, 3),
        "inference_ms": round(answer_seconds * 1000, 1),
        "sample_question": args.question,
        "sample_answer": result["answer"],
        "sample_score": round(float(result["score"]), 4),
        "checked_at": time.strftime("%Y-%m-%dT%H:%M:%S"),
    }
    metadata_path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    print(f"Metadata saved: {metadata_path}")


if __name__ == "__main__":
    main()
