"""Static language tables (stop-words, keyword maps, phrase maps) loaded from bot_data."""
from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_FILE = os.getenv(
    "VETCARE_LEXICON_FILE",
    str(Path(__file__).resolve().parent / "bot_data" / "lexicon.json"),
)


class Lexicon:
    """Read-only view over the language tables.

    ``keyword_map`` maps a source-language term to one or more base-language
    equivalents and drives keyword expansion. ``phrase_map`` maps a source term to a
    single base-language phrase and drives question translation; its inverse
    translates answers back.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        data = data or {}
        self._stop_words: Dict[str, FrozenSet[str]] = {
            language: frozenset(word.lower() for word in words)
            for language, words in (data.get("stop_words") or {}).items()
        }
        self._keyword_map: Dict[str, Dict[str, List[str]]] = {
            language: {term.lower(): [str(item).lower() for item in equivalents] for term, equivalents in table.items()}
            for language, table in (data.get("keyword_map") or {}).items()
        }
        self._explicit_phrases: Dict[str, Dict[str, str]] = {
            language: {term.lower(): str(phrase) for term, phrase in table.items()}
            for language, table in (data.get("phrase_map") or {}).items()
        }
        self._species_labels: Dict[str, Dict[str, str]] = dict(data.get("species_labels") or {})
        self.domain_terms: List[str] = [str(term).lower() for term in data.get("domain_terms") or []]

    def stop_words(self, language: str) -> FrozenSet[str]:
        return self._stop_words.get(language, frozenset())

    def keyword_map(self, language: str) -> Dict[str, List[str]]:
        return self._keyword_map.get(language, {})

    def phrase_map(self, language: str) -> Dict[str, str]:
        phrases = {term: equivalents[0] for term, equivalents in self.keyword_map(language).items() if equivalents}
        phrases.update(self._explicit_phrases.get(language, {}))
        return phrases

    def inverse_phrase_map(self, language: str) -> Dict[str, str]:
        inverse: Dict[str, str] = {}
        for term, phrase in self._explicit_phrases.get(language, {}).items():
            inverse.setdefault(phrase.lower(), term)
        for term, phrase in self.phrase_map(language).items():
            inverse.setdefault(phrase.lower(), term)
        return inverse

    def species_label(self, language: str, species: str) -> str:
        return self._species_labels.get(language, {}).get(species, species)

    @property
    def languages(self) -> List[str]:
        return sorted(set(self._stop_words) | set(self._keyword_map))


@lru_cache(maxsize=4)
def load_lexicon(path: str = DEFAULT_LEXICON_FILE) -> Lexicon:
    lexicon_path = Path(path)
    if not lexicon_path.exists():
        logger.warning("Lexicon file not found at %s; continuing with empty tables", lexicon_path)
        return Lexicon()

    with open(lexicon_path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    lexicon = Lexicon(data)
    logger.info("Loaded lexicon from %s (%s languages)", lexicon_path, len(lexicon.languages))
    return lexicon


__all__ = ["Lexicon", "load_lexicon", "DEFAULT_LEXICON_FILE"]
