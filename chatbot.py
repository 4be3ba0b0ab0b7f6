"""Veterinary search and chat assistant used by the Flask routes."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import messages
from composer import (
    ChatTurn,
    build_oracle_context,
    compose_summary,
    compose_turn,
    greeting_turn,
    merge_oracle_answer,
    not_understood_turn,
    ready_turn,
    with_disclaimer,
)
from corpus import CORPUS_CACHE_TTL_SECONDS, CorpusCache, CorpusUnavailable
from intents import GREETING, classify_intent
from keywords import extract_keywords
from lexicon import Lexicon, load_lexicon
from oracle import OracleAdapter, OracleState, OracleUnavailable, build_backend
from record_store import DEFAULT_RECORDS_FILE, RecordStore
from records import BASE_LANGUAGE, LocalizedView, localize, normalise_language
from scoring import DEFAULT_WEIGHTS, MODE_ALL, MODE_NAME, MODE_SYMPTOMS, ScoringWeights, rank_records

logger = logging.getLogger(__name__)

CHAT_MATCH_LIMIT = int(os.getenv("CHAT_MATCH_LIMIT", "3"))
SEARCH_RESULT_LIMIT = int(os.getenv("SEARCH_RESULT_LIMIT", "50"))
QA_LOW_CONFIDENCE = float(os.getenv("QA_LOW_CONFIDENCE", "0.4"))
LOW_CONFIDENCE_FLOOR = 0.6
HEURISTIC_CONFIDENCE = 0.5

SEARCH_MODE_ALIASES = {
    "symptoms": MODE_SYMPTOMS,
    "symptom": MODE_SYMPTOMS,
    "disease": MODE_NAME,
    "name": MODE_NAME,
    "all": MODE_ALL,
}


class VetCareAssistant:
    """Search and chat over the cached record corpus.

    The oracle is optional; without one, or whenever it cannot answer in time,
    replies come from the keyword scorer and the message templates.
    """

    def __init__(
        self,
        corpus: CorpusCache,
        oracle: Optional[OracleAdapter] = None,
        lexicon: Optional[Lexicon] = None,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        chat_limit: int = CHAT_MATCH_LIMIT,
        search_limit: int = SEARCH_RESULT_LIMIT,
        low_confidence: float = QA_LOW_CONFIDENCE,
    ) -> None:
        self.corpus = corpus
        self.oracle = oracle
        self.lexicon = lexicon or load_lexicon()
        self.weights = weights
        self.chat_limit = chat_limit
        self.search_limit = search_limit
        self.low_confidence = low_confidence

    def search(self, query: Optional[str], mode: str = MODE_SYMPTOMS, language: Optional[str] = BASE_LANGUAGE) -> List[LocalizedView]:
        text = (query or "").strip()
        if not text:
            return []

        scoring_mode = SEARCH_MODE_ALIASES.get((mode or "").strip().lower())
        if scoring_mode is None:
            raise ValueError(f"Unsupported search mode: {mode}")

        language = normalise_language(language)
        keywords = extract_keywords(text, language, self.lexicon)
        matches = rank_records(
            self.corpus.get(),
            keywords,
            language,
            limit=self.search_limit,
            weights=self.weights,
            lexicon=self.lexicon,
            mode=scoring_mode,
        )
        return [localize(match.record, language) for match in matches]

    def _oracle_status_message(self, language: str) -> str:
        if self.oracle is None:
            return messages.message("status_traditional", language)
        state = self.oracle.state
        if state is OracleState.LOADING:
            return messages.message("status_loading", language)
        if state is OracleState.READY:
            return messages.message("status_error", language)
        return messages.message("status_traditional", language)

    def chat(self, query: Optional[str], language: Optional[str] = BASE_LANGUAGE) -> ChatTurn:
        language = normalise_language(language)
        text = (query or "").strip()
        if not text:
            return ready_turn(language)

        intent = classify_intent(text, language)
        if intent == GREETING:
            return greeting_turn(language, self.oracle.state.value if self.oracle else None)

        keywords = extract_keywords(text, language, self.lexicon)
        if not keywords:
            return not_understood_turn(intent, language)

        matches = rank_records(
            self.corpus.get(),
            keywords,
            language,
            limit=self.chat_limit,
            weights=self.weights,
            lexicon=self.lexicon,
        )
        matched = [match.record for match in matches]
        turn = compose_turn(matched, intent, language, text, self.lexicon)
        if not matched:
            return turn

        if self.oracle is None:
            turn.confidence = HEURISTIC_CONFIDENCE
            turn.model_status = self._oracle_status_message(language)
            return turn

        try:
            answer = self.oracle.answer_question(text, build_oracle_context(matched, language), language)
        except OracleUnavailable as exc:
            logger.warning("Answering from keyword matches: %s", exc)
            turn.confidence = HEURISTIC_CONFIDENCE
            turn.model_status = self._oracle_status_message(language)
            return turn

        body = answer.text
        confidence = answer.confidence
        if confidence < self.low_confidence:
            logger.warning("Low model confidence %.2f, adding keyword summary", confidence)
            views = [localize(record, language) for record in matched]
            body = merge_oracle_answer(answer.text, compose_summary(views, intent, language, self.lexicon), language)
            confidence = max(confidence, LOW_CONFIDENCE_FLOOR)

        turn.text = with_disclaimer(body, language)
        turn.confidence = confidence
        turn.is_ai_generated = True
        turn.model_status = messages.message("status_active", language)
        return turn

    def warm_up(self) -> bool:
        try:
            self.corpus.get()
        except CorpusUnavailable as exc:
            logger.warning("Corpus warm-up failed: %s", exc)
        if self.oracle is None:
            return False
        self.oracle.initialize()
        return self.oracle.warm_up()

    def shutdown(self) -> None:
        if self.oracle is not None:
            self.oracle.shutdown()

    def status(self) -> Dict[str, Any]:
        age = self.corpus.age()
        return {
            "oracle": self.oracle.status() if self.oracle is not None else {"state": "disabled", "ready": False},
            "corpus": {
                "records": self.corpus.size(),
                "ageSeconds": None if age is None else round(age, 3),
                "ttlSeconds": self.corpus.ttl_seconds,
            },
        }


def build_default_assistant(
    records_file: str = DEFAULT_RECORDS_FILE,
    store: Optional[RecordStore] = None,
    enable_oracle: Optional[bool] = None,
) -> VetCareAssistant:
    store = store or RecordStore(records_file)
    backend = build_backend() if enable_oracle is None else build_backend(enabled=enable_oracle)
    lexicon = load_lexicon()
    return VetCareAssistant(
        corpus=CorpusCache(store, ttl_seconds=CORPUS_CACHE_TTL_SECONDS),
        oracle=OracleAdapter(backend, lexicon=lexicon),
        lexicon=lexicon,
    )


__all__ = ["SEARCH_MODE_ALIASES", "VetCareAssistant", "build_default_assistant"]
