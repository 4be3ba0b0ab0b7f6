"""Keyword extraction with cross-language expansion, plus phrase translation helpers."""
from __future__ import annotations

import re
import unicodedata
from typing import List, Optional, Tuple

from lexicon import Lexicon, load_lexicon
from records import BASE_LANGUAGE, normalise_language

MIN_KEYWORD_LENGTH = 2

_JOINERS = {"_", "\u200c", "\u200d"}


def _is_word_char(char: str) -> bool:
    # Combining marks carry the vowel signs of Indic scripts.
    return char.isalnum() or char in _JOINERS or unicodedata.category(char).startswith("M")


def normalise_text(text: Optional[str]) -> str:
    """Lowercase and replace every non-word character with a space."""
    lowered = (text or "").lower()
    return "".join(char if _is_word_char(char) else " " for char in lowered)


def tokenize(text: Optional[str]) -> List[str]:
    return normalise_text(text).split()


def extract_keywords(text: Optional[str], language: Optional[str] = BASE_LANGUAGE, lexicon: Optional[Lexicon] = None) -> List[str]:
    """Return the deduplicated keywords of ``text`` in first-seen order.

    Non-base languages are expanded with the base-language equivalents from the
    keyword map. Tokens without a table entry are kept as they are.
    """
    lexicon = lexicon or load_lexicon()
    language = normalise_language(language)
    stop_words = lexicon.stop_words(language)

    tokens = [
        token
        for token in tokenize(text)
        if len(token) >= MIN_KEYWORD_LENGTH and token not in stop_words
    ]

    keywords: List[str] = list(tokens)
    if language != BASE_LANGUAGE:
        table = lexicon.keyword_map(language)
        for token in tokens:
            keywords.extend(table.get(token, []))

    return list(dict.fromkeys(keywords))


def translate_to_base(text: str, language: Optional[str], lexicon: Optional[Lexicon] = None) -> Tuple[str, bool]:
    """Translate ``text`` token by token into the base language.

    Returns the translated text and whether any token was replaced.
    """
    language = normalise_language(language)
    if language == BASE_LANGUAGE or not text:
        return text, False

    phrases = (lexicon or load_lexicon()).phrase_map(language)
    translated: List[str] = []
    changed = False
    for raw in text.split():
        core = normalise_text(raw).strip()
        replacement = phrases.get(core) if core and " " not in core else None
        if replacement is None:
            translated.append(raw)
            continue
        # keep punctuation around the token
        start = raw.lower().find(core)
        if start < 0:
            translated.append(replacement)
        else:
            translated.append(raw[:start] + replacement + raw[start + len(core):])
        changed = True
    return " ".join(translated), changed


def translate_from_base(text: str, language: Optional[str], lexicon: Optional[Lexicon] = None) -> str:
    """Replace base-language phrases in ``text`` with their source-language terms."""
    language = normalise_language(language)
    if language == BASE_LANGUAGE or not text:
        return text

    inverse = (lexicon or load_lexicon()).inverse_phrase_map(language)
    for phrase in sorted(inverse, key=len, reverse=True):
        pattern = re.compile(rf"\b{re.escape(phrase)}\b", re.IGNORECASE)
        text = pattern.sub(inverse[phrase], text)
    return text


__all__ = [
    "MIN_KEYWORD_LENGTH",
    "extract_keywords",
    "normalise_text",
    "tokenize",
    "translate_from_base",
    "translate_to_base",
]
