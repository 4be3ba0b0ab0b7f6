"""Read-through, time-limited cache of the disease record corpus."""
from __future__ import annotations

import logging
import os
import threading
import time
from typing import Callable, List, Optional, Protocol, Tuple

from records import Record

logger = logging.getLogger(__name__)

CORPUS_CACHE_TTL_SECONDS = float(os.getenv("CORPUS_CACHE_TTL_SECONDS", "300"))


class CorpusUnavailable(RuntimeError):
    """The record source failed and nothing is cached to fall back on."""


class RecordSource(Protocol):
    def fetch_records(
        self,
        language: Optional[str] = None,
        search: Optional[str] = None,
        severity: Optional[str] = None,
        animal: Optional[str] = None,
        limit: Optional[int] = None,
        page: int = 1,
    ) -> List[Record]:
        ...


class CorpusCache:
    """Keeps the full corpus for ``ttl_seconds``.

    Concurrent refreshes may both hit the source; whichever finishes last is
    stored. A failed refresh serves the previous corpus, however old.
    """

    def __init__(
        self,
        source: RecordSource,
        ttl_seconds: float = CORPUS_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.source = source
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: Optional[Tuple[float, List[Record]]] = None

    def _fresh(self) -> Optional[List[Record]]:
        with self._lock:
            entry = self._entry
        if entry is None:
            return None
        stored_at, records = entry
        if not records or self._clock() - stored_at >= self.ttl_seconds:
            return None
        return records

    def get(self) -> List[Record]:
        cached = self._fresh()
        if cached is not None:
            return cached

        try:
            records = list(self.source.fetch_records())
        except Exception as exc:
            with self._lock:
                stale = self._entry
            if stale is not None:
                logger.warning("Record fetch failed, serving cached corpus: %s", exc)
                return stale[1]
            raise CorpusUnavailable(f"Record source unavailable: {exc}") from exc

        with self._lock:
            self._entry = (self._clock(), records)
        logger.info("Corpus refreshed with %s records", len(records))
        return records

    def age(self) -> Optional[float]:
        with self._lock:
            entry = self._entry
        return None if entry is None else self._clock() - entry[0]

    def size(self) -> int:
        with self._lock:
            return 0 if self._entry is None else len(self._entry[1])

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None


__all__ = ["CORPUS_CACHE_TTL_SECONDS", "CorpusCache", "CorpusUnavailable", "RecordSource"]
