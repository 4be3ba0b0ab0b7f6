"""Adapter around an optional extractive question-answering model."""
from __future__ import annotations

import logging
import os
import re
import threading
import time
from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import messages
from keywords import translate_from_base, translate_to_base
from lexicon import Lexicon, load_lexicon
from records import BASE_LANGUAGE, normalise_language
from scoring import top_sentences

logger = logging.getLogger(__name__)

QA_MODEL_ENABLED = (os.getenv("QA_MODEL_ENABLED", "true") or "").strip().lower() in {"1", "true", "yes", "on"}
QA_MODEL_NAME = os.getenv("QA_MODEL_NAME", "distilbert-base-cased-distilled-squad")
QA_READY_TIMEOUT_SECONDS = float(os.getenv("QA_READY_TIMEOUT_SECONDS", "5"))
QA_ANSWER_TIMEOUT_SECONDS = float(os.getenv("QA_ANSWER_TIMEOUT_SECONDS", "10"))
QA_MIN_CONFIDENCE = float(os.getenv("QA_MIN_CONFIDENCE", "0.2"))
QA_CONTEXT_CHAR_BUDGET = int(os.getenv("QA_CONTEXT_CHAR_BUDGET", "2000"))
QA_CONTEXT_MAX_SENTENCES = int(os.getenv("QA_CONTEXT_MAX_SENTENCES", "10"))

CONTEXTUAL_FALLBACK_CONFIDENCE = 0.3
CONTEXTUAL_FALLBACK_SENTENCES = 2
KEYWORD_BOOST = 0.3
DOMAIN_TERM_BOOST = 0.1
DEFAULT_DOMAIN_TERMS = ("treatment", "symptom", "disease", "medicine", "dosage", "cattle", "buffalo")
QA_INFERENCE_WORKERS = 2

SMOKE_QUESTION = "What is this?"
SMOKE_CONTEXT = "This is a test to verify the model is working correctly."
WARMUP_QUESTION = "What is veterinary medicine?"
WARMUP_CONTEXT = (
    "Veterinary medicine is the branch of medicine that deals with the prevention, "
    "diagnosis and treatment of disease, disorder and injury in animals."
)

_LEADING_ARTICLE = re.compile(r"^(the|a|an)\s+", re.IGNORECASE)


class OracleState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class OracleUnavailable(RuntimeError):
    """The model could not produce an answer in time."""


@dataclass(frozen=True)
class OracleAnswer:
    text: str
    confidence: float
    raw_confidence: float
    context: str
    translated: bool = False
    contextual_fallback: bool = False


class NullOracleBackend:
    """Backend for environments without a model; loading always fails."""

    name = "none"

    def load(self) -> None:
        raise OracleUnavailable("No question-answering backend configured")

    def answer(self, question: str, context: str) -> Dict[str, Any]:
        raise OracleUnavailable("No question-answering backend configured")


class TransformersQABackend:
    """``transformers`` question-answering pipeline, imported on first load."""

    def __init__(self, model_name: str = QA_MODEL_NAME) -> None:
        self.model_name = model_name
        self.name = f"transformers:{model_name}"
        self._pipeline = None

    def load(self) -> None:
        from transformers import pipeline

        qa_pipeline = pipeline("question-answering", model=self.model_name, tokenizer=self.model_name)
        result = qa_pipeline(question=SMOKE_QUESTION, context=SMOKE_CONTEXT)
        if not result or not result.get("answer"):
            raise RuntimeError("Model test failed - no answer returned")
        self._pipeline = qa_pipeline

    def answer(self, question: str, context: str) -> Dict[str, Any]:
        if self._pipeline is None:
            raise OracleUnavailable("Question-answering pipeline is not loaded")
        result = self._pipeline(question=question, context=context)
        return {"answer": result.get("answer", ""), "score": float(result.get("score", 0.0))}


def build_backend(enabled: bool = QA_MODEL_ENABLED, model_name: str = QA_MODEL_NAME):
    return TransformersQABackend(model_name) if enabled else NullOracleBackend()


def _run_in_daemon_thread(name: str, func, *args) -> Future:
    """Run ``func`` on a daemon thread so a hung backend cannot block interpreter exit."""
    future: Future = Future()

    def runner() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = func(*args)
        except Exception as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    threading.Thread(target=runner, name=name, daemon=True).start()
    return future


def clean_answer(answer: str) -> str:
    cleaned = " ".join(_LEADING_ARTICLE.sub("", answer or "").split())
    if cleaned:
        cleaned = cleaned[0].upper() + cleaned[1:]
        if cleaned[-1] not in ".!?":
            cleaned += "."
    return cleaned


class OracleAdapter:
    """Lifecycle and answer heuristics for one question-answering backend.

    State moves ``uninitialized -> loading -> ready | failed``. Loading runs on a
    daemon thread and concurrent ``initialize`` calls share the same
    future, so the backend is loaded at most once. A failed load stays failed
    unless ``initialize(retry=True)`` is called. Every wait is bounded.
    """

    def __init__(
        self,
        backend=None,
        ready_timeout: float = QA_READY_TIMEOUT_SECONDS,
        answer_timeout: float = QA_ANSWER_TIMEOUT_SECONDS,
        min_confidence: float = QA_MIN_CONFIDENCE,
        context_char_budget: int = QA_CONTEXT_CHAR_BUDGET,
        context_max_sentences: int = QA_CONTEXT_MAX_SENTENCES,
        lexicon: Optional[Lexicon] = None,
    ) -> None:
        self.backend = backend if backend is not None else NullOracleBackend()
        self.ready_timeout = ready_timeout
        self.answer_timeout = answer_timeout
        self.min_confidence = min_confidence
        self.context_char_budget = context_char_budget
        self.context_max_sentences = context_max_sentences
        self.lexicon = lexicon or load_lexicon()

        self._lock = threading.Lock()
        self._state = OracleState.UNINITIALIZED
        self._load_future: Optional[Future] = None
        self._load_attempts = 0
        self._last_error: Optional[str] = None
        self._loaded_at: Optional[float] = None
        self._inference_slots = threading.BoundedSemaphore(QA_INFERENCE_WORKERS)
        self._closed = False

    @property
    def state(self) -> OracleState:
        return self._state

    @property
    def load_attempts(self) -> int:
        return self._load_attempts

    def is_ready(self) -> bool:
        return self._state is OracleState.READY

    def initialize(self, retry: bool = False) -> Future:
        """Start loading the backend, or return the load already in flight."""
        with self._lock:
            if self._load_future is not None and not (retry and self._state is OracleState.FAILED):
                return self._load_future
            if self._closed:
                raise OracleUnavailable("Question-answering adapter has been shut down")
            self._state = OracleState.LOADING
            self._load_attempts += 1
            self._load_future = _run_in_daemon_thread("qa-loader", self._load)
            return self._load_future

    def _load(self) -> bool:
        started = time.perf_counter()
        logger.info("Loading question-answering backend %s", getattr(self.backend, "name", "unknown"))
        try:
            self.backend.load()
        except OracleUnavailable as exc:
            logger.warning("Question-answering backend unavailable: %s", exc)
            self._mark_failed(exc)
            return False
        except Exception as exc:
            logger.exception("Question-answering model failed to load: %s", exc)
            self._mark_failed(exc)
            return False

        with self._lock:
            self._state = OracleState.READY
            self._last_error = None
            self._loaded_at = time.time()
        logger.info("Question-answering backend ready in %.2fs", time.perf_counter() - started)
        return True

    def _mark_failed(self, exc: Exception) -> None:
        with self._lock:
            self._state = OracleState.FAILED
            self._last_error = str(exc)

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        if self._state is OracleState.READY:
            return True
        if self._state is OracleState.FAILED or self._closed:
            return False
        future = self.initialize()
        try:
            return bool(future.result(timeout=self.ready_timeout if timeout is None else timeout))
        except (FuturesTimeout, CancelledError):
            return False

    def _answer_in_slot(self, question: str, context: str) -> Dict[str, Any]:
        with self._inference_slots:
            return self.backend.answer(question, context)

    def optimise_context(self, context: str, question: str) -> str:
        if len(context) <= self.context_char_budget:
            return context
        sentences = top_sentences(context, question, self.context_max_sentences)
        optimised = ". ".join(sentences) + "."
        logger.info("Context reduced from %s to %s characters", len(context), len(optimised))
        return optimised

    def adjust_confidence(self, answer: str, question: str, context: str, raw_confidence: float) -> float:
        confidence = raw_confidence

        question_words = [word for word in question.lower().split() if len(word) > 2]
        answer_words = answer.lower().split()
        if question_words:
            matches = sum(
                1
                for question_word in question_words
                if any(answer_word in question_word or question_word in answer_word for answer_word in answer_words)
            )
            confidence += matches / len(question_words) * KEYWORD_BOOST

        if len(answer) < 10:
            confidence *= 0.5
        elif len(answer) < 30:
            confidence *= 0.7

        answer_lower = answer.lower()
        context_lower = context.lower()
        terms = self.lexicon.domain_terms or list(DEFAULT_DOMAIN_TERMS)
        domain_matches = sum(1 for term in terms if term in answer_lower or term in context_lower)
        confidence += domain_matches * DOMAIN_TERM_BOOST

        return min(max(confidence, 0.0), 1.0)

    def contextual_fallback(self, question: str, context: str, language: Optional[str] = BASE_LANGUAGE) -> str:
        info = ". ".join(top_sentences(context, question, CONTEXTUAL_FALLBACK_SENTENCES))
        if len(info) > 20:
            return messages.message("oracle_context_found", language, info=info)
        return messages.message("oracle_context_missing", language)

    def answer_question(self, question: str, context: str, language: Optional[str] = BASE_LANGUAGE) -> OracleAnswer:
        """Ask the backend about ``context``; raises OracleUnavailable instead of blocking."""
        language = normalise_language(language)
        if self._closed:
            raise OracleUnavailable("Question-answering adapter has been shut down")
        if not self.wait_until_ready():
            raise OracleUnavailable(f"Question-answering model not ready (state={self._state.value})")

        processed, translated = translate_to_base(question, language, self.lexicon)
        optimised = self.optimise_context(context or "", processed)

        future = _run_in_daemon_thread("qa-inference", self._answer_in_slot, processed, optimised)
        try:
            result = future.result(timeout=self.answer_timeout)
        except FuturesTimeout as exc:
            future.cancel()
            raise OracleUnavailable(f"Question-answering timed out after {self.answer_timeout}s") from exc
        except OracleUnavailable:
            raise
        except Exception as exc:
            raise OracleUnavailable(f"Question-answering failed: {exc}") from exc

        answer = str((result or {}).get("answer") or "").strip()
        if not answer:
            raise OracleUnavailable("No answer returned from model")
        raw_confidence = float((result or {}).get("score") or 0.0)

        confidence = self.adjust_confidence(answer, processed, optimised, raw_confidence)
        answer = clean_answer(answer)

        fallback = False
        if confidence < self.min_confidence:
            logger.warning("Low model confidence %.2f, answering from context sentences", confidence)
            answer = self.contextual_fallback(processed, optimised, language)
            confidence = CONTEXTUAL_FALLBACK_CONFIDENCE
            fallback = True

        answer = translate_from_base(answer, language, self.lexicon)
        return OracleAnswer(
            text=answer,
            confidence=confidence,
            raw_confidence=raw_confidence,
            context=optimised,
            translated=translated,
            contextual_fallback=fallback,
        )

    def warm_up(self) -> bool:
        if not self.wait_until_ready():
            return False
        try:
            self.answer_question(WARMUP_QUESTION, WARMUP_CONTEXT, BASE_LANGUAGE)
        except OracleUnavailable as exc:
            logger.warning("Model warm-up failed: %s", exc)
            return False
        logger.info("Question-answering model warmed up")
        return True

    def status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "state": self._state.value,
                "ready": self._state is OracleState.READY,
                "backend": getattr(self.backend, "name", type(self.backend).__name__),
                "loadAttempts": self._load_attempts,
                "lastError": self._last_error,
                "loadedAt": self._loaded_at,
            }

    def shutdown(self) -> None:
        """Refuse further loads and questions; work already running finishes on its daemon thread."""
        with self._lock:
            self._closed = True
            pending = self._load_future
        if pending is not None:
            pending.cancel()


__all__ = [
    "NullOracleBackend",
    "OracleAdapter",
    "OracleAnswer",
    "OracleState",
    "OracleUnavailable",
    "TransformersQABackend",
    "build_backend",
    "clean_answer",
]
