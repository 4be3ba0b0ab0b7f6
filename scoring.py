"""Keyword-overlap relevance scoring for disease records and context sentences."""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from lexicon import Lexicon, load_lexicon
from records import BASE_LANGUAGE, Record, localize, normalise_language

MODE_ALL = "all"
MODE_SYMPTOMS = "symptoms"
MODE_NAME = "name"
SEARCH_MODES = (MODE_ALL, MODE_SYMPTOMS, MODE_NAME)

_SENTENCE_SPLIT = re.compile(r"[.!?\n]+")
MIN_SENTENCE_LENGTH = 10


@dataclass(frozen=True)
class ScoringWeights:
    exact: int = int(os.getenv("SCORE_EXACT_WEIGHT", "5"))
    partial: int = int(os.getenv("SCORE_PARTIAL_WEIGHT", "2"))
    cross_language: int = int(os.getenv("SCORE_CROSS_LANGUAGE_WEIGHT", "3"))


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ScoredMatch:
    record: Record
    score: int


def searchable_text(record: Record, language: Optional[str] = BASE_LANGUAGE, mode: str = MODE_ALL) -> str:
    """Concatenate the fields of ``record`` that a query in ``mode`` is matched against.

    Non-base languages also get the base-language name, treatment and symptoms
    appended so that English keywords can still hit an untranslated record.
    """
    language = normalise_language(language)
    view = localize(record, language)
    cross_lingual = language != BASE_LANGUAGE

    parts: List[str] = []
    if mode == MODE_SYMPTOMS:
        parts.extend(view.symptoms)
        if cross_lingual:
            parts.extend(record.symptoms)
    elif mode == MODE_NAME:
        parts.extend([view.name, view.treatment_name])
        if cross_lingual:
            parts.extend([record.name, record.treatment_name])
    else:
        parts.extend([view.name, view.treatment_name])
        parts.extend(view.symptoms)
        parts.extend(view.ingredients)
        parts.extend([view.preparation, view.dosage])
        if cross_lingual:
            parts.extend([record.name, record.treatment_name])
            parts.extend(record.symptoms)
        parts.extend(record.affected_animals)

    return " ".join(part for part in parts if part)


def score_text(
    text: str,
    keywords: Iterable[str],
    language: Optional[str] = BASE_LANGUAGE,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    lexicon: Optional[Lexicon] = None,
) -> int:
    text_lower = (text or "").lower()
    words = text_lower.split()
    language = normalise_language(language)
    cross_table = (lexicon or load_lexicon()).keyword_map(language) if language != BASE_LANGUAGE else {}

    score = 0
    for keyword in keywords:
        keyword_lower = (keyword or "").lower()
        if not keyword_lower:
            continue

        if keyword_lower in text_lower:
            score += weights.exact

        equivalents = [
            equivalent
            for term, term_equivalents in cross_table.items()
            if keyword_lower in term or term in keyword_lower
            for equivalent in term_equivalents
        ]

        for word in words:
            if keyword_lower in word or word in keyword_lower:
                score += weights.partial
            for equivalent in equivalents:
                if equivalent in word:
                    score += weights.cross_language

    return score


def score_record(
    record: Record,
    keywords: Iterable[str],
    language: Optional[str] = BASE_LANGUAGE,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    lexicon: Optional[Lexicon] = None,
    mode: str = MODE_ALL,
) -> int:
    return score_text(searchable_text(record, language, mode), keywords, language, weights, lexicon)


def rank_records(
    records: Sequence[Record],
    keywords: Sequence[str],
    language: Optional[str] = BASE_LANGUAGE,
    limit: Optional[int] = 3,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    lexicon: Optional[Lexicon] = None,
    mode: str = MODE_ALL,
) -> List[ScoredMatch]:
    """Score every record and return the positive ones, best first.

    Ties keep corpus order. An empty keyword list matches nothing.
    """
    if not records or not keywords:
        return []

    scores = np.fromiter(
        (score_record(record, keywords, language, weights, lexicon, mode) for record in records),
        dtype=np.int64,
        count=len(records),
    )
    order = np.argsort(-scores, kind="stable")
    matches = [ScoredMatch(records[int(index)], int(scores[index])) for index in order if scores[index] > 0]
    return matches if limit is None else matches[:limit]


def sentence_relevance(sentence: str, question: str) -> float:
    """Overlap of question words (longer than two characters) with sentence words."""
    question_words = question.lower().split()
    if not question_words:
        return 0.0
    sentence_words = sentence.lower().split()

    relevance = 0
    for question_word in question_words:
        if len(question_word) <= 2:
            continue
        for sentence_word in sentence_words:
            if sentence_word in question_word or question_word in sentence_word:
                relevance += 1
    return relevance / len(question_words)


def split_sentences(text: str) -> List[str]:
    return [part.strip() for part in _SENTENCE_SPLIT.split(text or "") if len(part.strip()) > MIN_SENTENCE_LENGTH]


def top_sentences(text: str, question: str, limit: int) -> List[str]:
    sentences = split_sentences(text)
    ranked = sorted(sentences, key=lambda sentence: sentence_relevance(sentence, question), reverse=True)
    return ranked[:limit]


__all__ = [
    "DEFAULT_WEIGHTS",
    "MODE_ALL",
    "MODE_NAME",
    "MODE_SYMPTOMS",
    "SEARCH_MODES",
    "ScoredMatch",
    "ScoringWeights",
    "rank_records",
    "score_record",
    "score_text",
    "searchable_text",
    "sentence_relevance",
    "split_sentences",
    "top_sentences",
]
