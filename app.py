"""Flask application entry point for the VetCare assistant API."""
from __future__ import annotations

import atexit
import os
import logging
import threading
import time
import sys
from functools import wraps
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS

from chatbot import build_default_assistant
from corpus import CorpusUnavailable
from record_store import RecordStore, RecordValidationError
from records import Severity, localize, normalise_language

load_dotenv()

app = Flask(__name__)
app.json.ensure_ascii = False
logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    origin.strip()
    for origin in (
        os.getenv("VETCARE_CORS_ORIGINS") or "http://localhost:3000,http://localhost:5173,http://localhost:4173"
    ).split(",")
    if origin.strip()
]
CORS(app, resources={r"/api/*": {"origins": CORS_ORIGINS}})

MODEL_WARMUP_ENABLED = (os.getenv("MODEL_WARMUP_ENABLED", "true") or "").strip().lower() in {
    "1",
    "true",
    "yes",
    "on",
}
DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 200

record_store = RecordStore()
assistant = build_default_assistant(store=record_store)

LATENCY_METRICS: Dict[str, Dict[str, float]] = {}
_LATENCY_LOCK = threading.Lock()
_BACKGROUND_SERVICES_STARTED = False


def profile_latency(metric_name: str):
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - started) * 1000
                with _LATENCY_LOCK:
                    entry = LATENCY_METRICS.setdefault(metric_name, {"count": 0, "total_ms": 0.0, "max_ms": 0.0})
                    entry["count"] += 1
                    entry["total_ms"] += elapsed_ms
                    entry["max_ms"] = max(entry["max_ms"], elapsed_ms)

        return wrapper

    return decorator


def _startup_warmup() -> None:
    if not MODEL_WARMUP_ENABLED:
        return
    try:
        assistant.warm_up()
    except Exception as exc:
        logger.warning("Startup model warmup failed: %s", exc)


def _start_background_services() -> None:
    global _BACKGROUND_SERVICES_STARTED
    if _BACKGROUND_SERVICES_STARTED:
        return
    if os.getenv("PYTEST_CURRENT_TEST") or "pytest" in sys.modules:
        return

    _BACKGROUND_SERVICES_STARTED = True

    warmup_thread = threading.Thread(target=_startup_warmup, name="model-warmup", daemon=True)
    warmup_thread.start()


def _shutdown_services() -> None:
    assistant.shutdown()


atexit.register(_shutdown_services)


def _int_arg(name: str, default: int, minimum: int = 1, maximum: Optional[int] = None) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"Query parameter '{name}' must be an integer") from exc
    if value < minimum:
        raise ValueError(f"Query parameter '{name}' must be at least {minimum}")
    return min(value, maximum) if maximum is not None else value


def _json_object() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    return payload if isinstance(payload, dict) else {}


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"success": True, "status": "ok"})


@app.route("/api/diseases", methods=["GET"])
@profile_latency("api.diseases.list")
def list_diseases():
    language = normalise_language(request.args.get("language"))
    search = (request.args.get("search") or "").strip() or None
    animal = (request.args.get("animal") or "").strip() or None
    severity_arg = (request.args.get("severity") or "").strip()

    try:
        severity = Severity.parse(severity_arg).value if severity_arg else None
        limit = _int_arg("limit", DEFAULT_PAGE_LIMIT, maximum=MAX_PAGE_LIMIT)
        page = _int_arg("page", 1)
    except ValueError as exc:
        return jsonify({"success": False, "error": str(exc)}), 400

    records = record_store.fetch_records(language, search=search, severity=severity, animal=animal, limit=limit, page=page)
    total = record_store.count_records(search=search, severity=severity, animal=animal)

    return jsonify(
        {
            "success": True,
            "data": [localize(record, language).to_dict() for record in records],
            "pagination": {
                "current": page,
                "limit": limit,
                "total": total,
                "pages": (total + limit - 1) // limit,
            },
            "filters": {
                "language": language,
                "search": search,
                "severity": severity,
                "animal": animal,
            },
        }
    )


@app.route("/api/diseases/<record_id>", methods=["GET"])
def get_disease(record_id: str):
    language = normalise_language(request.args.get("language"))
    record = record_store.get_record(record_id)
    if record is None:
        return jsonify({"success": False, "error": "Disease not found."}), 404
    return jsonify({"success": True, "data": localize(record, language).to_dict()})


@app.route("/api/diseases", methods=["POST"])
@profile_latency("api.diseases.create")
def create_disease():
    payload = _json_object()
    try:
        record = record_store.add_record(payload)
    except RecordValidationError as exc:
        return jsonify({"success": False, "error": str(exc)}), 400

    assistant.corpus.invalidate()
    return jsonify({"success": True, "data": localize(record, "en").to_dict()}), 201


@app.route("/api/search", methods=["GET"])
@profile_latency("api.search")
def search():
    query = request.args.get("q", "")
    mode = request.args.get("mode", "symptoms")
    language = normalise_language(request.args.get("language"))

    try:
        results = assistant.search(query, mode=mode, language=language)
    except ValueError as exc:
        return jsonify({"success": False, "error": str(exc)}), 400

    return jsonify(
        {
            "success": True,
            "data": [view.to_dict() for view in results],
            "count": len(results),
            "query": query,
            "mode": mode,
            "language": language,
        }
    )


@app.route("/api/chat", methods=["POST"])
@profile_latency("api.chat")
def chat():
    payload = _json_object()
    message = str(payload.get("message") or "").strip()
    language = normalise_language(payload.get("language"))

    turn = assistant.chat(message, language)
    return jsonify({"success": True, "response": turn.to_dict()})


@app.route("/api/metrics/model", methods=["GET"])
def get_model_metrics():
    with _LATENCY_LOCK:
        latency = {name: dict(entry) for name, entry in LATENCY_METRICS.items()}
    return jsonify(
        {
            "success": True,
            **assistant.status(),
            "latency": latency,
        }
    )


@app.errorhandler(CorpusUnavailable)
def handle_corpus_unavailable(error):
    logger.error("Record corpus unavailable: %s", error)
    return jsonify({"success": False, "error": "Disease records are temporarily unavailable."}), 503


@app.errorhandler(404)
def handle_not_found(_):
    return jsonify({"success": False, "error": "Endpoint not found."}), 404


@app.errorhandler(500)
def handle_server_error(error):
    return jsonify({"success": False, "error": str(error)}), 500


_start_background_services()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=True)
