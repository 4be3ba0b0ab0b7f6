"""JSON-file document store for disease records."""

from __future__ import annotations

import json
import logging
import math
import os
import threading
from copy import deepcopy
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from records import BASE_LANGUAGE, SUPPORTED_LANGUAGES, TRANSLATABLE_FIELDS, Record, Severity

logger = logging.getLogger(__name__)

DEFAULT_RECORDS_FILE = os.getenv(
    "VETCARE_RECORDS_FILE",
    str(Path(__file__).resolve().parent / "bot_data" / "diseases.json"),
)
CSV_LIST_SEPARATOR = ";"
_LIST_FIELDS = ("symptoms", "ingredients", "affectedAnimals", "tags")
_TEXT_FIELDS = ("name", "treatmentName", "preparation", "dosage", "category")


class RecordValidationError(ValueError):
    """A record payload cannot be stored."""


def _split_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return [part.strip() for part in str(value).split(CSV_LIST_SEPARATOR) if part.strip()]


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


class RecordStore:
    """Disease records kept in a single JSON file.

    Reads are served from an in-process copy that is refreshed whenever the
    file's mtime changes. Writes replace the file atomically under a lock.
    """

    def __init__(self, records_file: str = DEFAULT_RECORDS_FILE) -> None:
        self.records_file = os.path.abspath(records_file)
        self._lock = threading.Lock()
        self._json_cache: Optional[List[Dict[str, Any]]] = None
        self._json_cache_mtime: Optional[float] = None
        self._ensure_file()

    def _ensure_file(self) -> None:
        directory = os.path.dirname(self.records_file)
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.records_file):
            with open(self.records_file, "w", encoding="utf-8") as fh:
                json.dump([], fh, indent=4)
        self._json_cache = None
        self._json_cache_mtime = None

    def _file_mtime_unlocked(self) -> Optional[float]:
        try:
            return os.path.getmtime(self.records_file)
        except OSError:
            return None

    def _load_documents_unlocked(self) -> List[Dict[str, Any]]:
        current_mtime = self._file_mtime_unlocked()
        if self._json_cache is not None and self._json_cache_mtime == current_mtime:
            return deepcopy(self._json_cache)

        with open(self.records_file, "r", encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError:
                logger.warning("Records file %s is not valid JSON; treating it as empty", self.records_file)
                data = []
        documents = [entry for entry in data if isinstance(entry, dict)] if isinstance(data, list) else []
        self._json_cache = deepcopy(documents)
        self._json_cache_mtime = current_mtime
        return documents

    def _write_documents_unlocked(self, documents: List[Dict[str, Any]]) -> None:
        temp_file = f"{self.records_file}.tmp"
        with open(temp_file, "w", encoding="utf-8") as fh:
            json.dump(documents, fh, indent=4, ensure_ascii=False)
        os.replace(temp_file, self.records_file)
        self._json_cache = deepcopy(documents)
        self._json_cache_mtime = self._file_mtime_unlocked()

    def load_documents(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._load_documents_unlocked()

    @staticmethod
    def _matches(
        document: Dict[str, Any],
        search: Optional[str],
        severity: Optional[str],
        animal: Optional[str],
    ) -> bool:
        if not document.get("isActive", True):
            return False

        if severity and str(document.get("severity", "")) != severity:
            return False

        if animal:
            animal_lower = animal.lower()
            if not any(animal_lower in str(item).lower() for item in document.get("affectedAnimals") or []):
                return False

        if search:
            search_lower = search.lower()
            haystack = [str(document.get("name", "")), str(document.get("treatmentName", ""))]
            haystack.extend(str(item) for item in document.get("symptoms") or [])
            haystack.extend(str(item) for item in document.get("ingredients") or [])
            if not any(search_lower in text.lower() for text in haystack):
                return False

        return True

    def _filtered(
        self,
        search: Optional[str] = None,
        severity: Optional[str] = None,
        animal: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        documents = [
            document
            for document in self.load_documents()
            if self._matches(document, (search or "").strip() or None, severity, (animal or "").strip() or None)
        ]
        documents.sort(key=lambda document: str(document.get("lastUpdated") or ""), reverse=True)
        return documents

    def fetch_records(
        self,
        language: Optional[str] = None,
        search: Optional[str] = None,
        severity: Optional[str] = None,
        animal: Optional[str] = None,
        limit: Optional[int] = None,
        page: int = 1,
    ) -> List[Record]:
        """Active records matching the filters, most recently updated first.

        Records carry every translation; ``language`` is accepted for interface
        compatibility and resolution happens in the caller.
        """
        _ = language
        documents = self._filtered(search, severity, animal)
        if limit is not None:
            start = max(page - 1, 0) * limit
            documents = documents[start : start + limit]
        return [Record.from_document(document) for document in documents]

    def count_records(
        self,
        search: Optional[str] = None,
        severity: Optional[str] = None,
        animal: Optional[str] = None,
    ) -> int:
        return len(self._filtered(search, severity, animal))

    def get_record(self, record_id: str) -> Optional[Record]:
        for document in self.load_documents():
            if str(document.get("id")) == str(record_id) and document.get("isActive", True):
                return Record.from_document(document)
        return None

    @staticmethod
    def _generate_record_id(documents: List[Dict[str, Any]]) -> str:
        existing = []
        for entry in documents:
            record_id = entry.get("id")
            if isinstance(record_id, str) and record_id.startswith("rec_"):
                try:
                    existing.append(int(record_id.split("_")[1]))
                except (IndexError, ValueError):
                    continue
        next_index = max(existing, default=0) + 1
        return f"rec_{next_index:03d}"

    def validate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Return a normalised document for ``payload`` or raise RecordValidationError."""
        if not isinstance(payload, dict):
            raise RecordValidationError("Record payload must be an object")

        document: Dict[str, Any] = {}
        for key in _TEXT_FIELDS:
            value = payload.get(key)
            document[key] = "" if _is_missing(value) else str(value).strip()
        for key in _LIST_FIELDS:
            document[key] = _split_list(payload.get(key))

        if not document["name"]:
            raise RecordValidationError("Disease name is required")
        if not document["treatmentName"]:
            raise RecordValidationError("Treatment name is required")

        try:
            document["severity"] = Severity.parse(payload.get("severity") or Severity.MEDIUM.value).value
        except ValueError as exc:
            raise RecordValidationError(str(exc)) from exc

        raw_translations = payload.get("translations") or {}
        if not isinstance(raw_translations, dict):
            raise RecordValidationError("Translations must be an object keyed by language")

        translations: Dict[str, Dict[str, Any]] = {}
        for language, override in raw_translations.items():
            if language not in SUPPORTED_LANGUAGES or language == BASE_LANGUAGE:
                raise RecordValidationError(f"Unsupported translation language: {language}")
            if not isinstance(override, dict):
                raise RecordValidationError(f"Translation for {language} must be an object")
            cleaned: Dict[str, Any] = {}
            for key in TRANSLATABLE_FIELDS:
                value = override.get(key)
                if key in ("symptoms", "ingredients"):
                    items = _split_list(value)
                    if items:
                        cleaned[key] = items
                elif not _is_missing(value):
                    cleaned[key] = str(value).strip()
            if cleaned:
                translations[language] = cleaned
        document["translations"] = translations
        document["isActive"] = bool(payload.get("isActive", True))
        return document

    def _add_unlocked(self, documents: List[Dict[str, Any]], payload: Dict[str, Any]) -> Dict[str, Any]:
        document = self.validate(payload)
        requested_id = str(payload.get("id") or "").strip()
        if requested_id and any(str(entry.get("id")) == requested_id for entry in documents):
            raise RecordValidationError(f"Record id already exists: {requested_id}")
        timestamp = datetime.now().isoformat(timespec="seconds")
        document = {
            "id": requested_id or self._generate_record_id(documents),
            **document,
            "createdAt": timestamp,
            "lastUpdated": timestamp,
        }
        documents.append(document)
        return document

    def add_record(self, payload: Dict[str, Any]) -> Record:
        with self._lock:
            documents = self._load_documents_unlocked()
            document = self._add_unlocked(documents, payload)
            self._write_documents_unlocked(documents)
        logger.info("Added record %s (%s)", document["id"], document["name"])
        return Record.from_document(document)

    @staticmethod
    def _read_csv(csv_path: Path) -> pd.DataFrame:
        last_error: Optional[Exception] = None
        for encoding in ("utf-8", "latin-1"):
            try:
                return pd.read_csv(csv_path, encoding=encoding, dtype=str, keep_default_na=False)
            except UnicodeDecodeError as exc:
                last_error = exc
                continue
        raise RecordValidationError(f"Could not decode {csv_path}: {last_error}")

    @staticmethod
    def _row_to_payload(row: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {key: row.get(key) for key in _TEXT_FIELDS + _LIST_FIELDS + ("severity",)}
        translations: Dict[str, Dict[str, Any]] = {}
        for column, value in row.items():
            if _is_missing(value) or "_" not in str(column):
                continue
            key, _, language = str(column).rpartition("_")
            if key in TRANSLATABLE_FIELDS and language in SUPPORTED_LANGUAGES and language != BASE_LANGUAGE:
                translations.setdefault(language, {})[key] = value
        payload["translations"] = translations
        return payload

    def import_csv(self, csv_path: str) -> Dict[str, int]:
        """Bulk import rows from a CSV file.

        List columns use ``;`` between items; translated columns are named
        ``<field>_<language>``, e.g. ``symptoms_ta``. Invalid rows are skipped.
        """
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(f"CSV file not found: {path}")
        frame = self._read_csv(path)
        frame.columns = [str(column).strip() for column in frame.columns]

        imported = 0
        skipped = 0
        with self._lock:
            documents = self._load_documents_unlocked()
            for position, row in enumerate(frame.to_dict(orient="records"), start=2):
                try:
                    self._add_unlocked(documents, self._row_to_payload(row))
                except RecordValidationError as exc:
                    logger.warning("Skipping CSV line %s: %s", position, exc)
                    skipped += 1
                    continue
                imported += 1
            if imported:
                self._write_documents_unlocked(documents)

        logger.info("Imported %s records from %s (%s skipped)", imported, path, skipped)
        return {"imported": imported, "skipped": skipped}


__all__ = ["DEFAULT_RECORDS_FILE", "RecordStore", "RecordValidationError"]
