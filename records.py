"""Disease/treatment records and their per-language resolution."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

BASE_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "ta", "hi", "te", "ml")

TRANSLATABLE_FIELDS = ("name", "treatmentName", "symptoms", "ingredients", "preparation", "dosage")
_LIST_FIELDS = {"symptoms", "ingredients"}


class Severity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: Any, default: "Severity | None" = None) -> "Severity":
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        if default is not None:
            return default
        raise ValueError(f"Invalid severity: {value!r}")


def normalise_language(language: Optional[str]) -> str:
    code = (language or "").strip().lower()
    return code if code in SUPPORTED_LANGUAGES else BASE_LANGUAGE


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


@dataclass(frozen=True)
class Record:
    """A disease entry with its treatment, read-only once loaded."""

    id: str
    name: str
    treatment_name: str
    symptoms: List[str] = field(default_factory=list)
    ingredients: List[str] = field(default_factory=list)
    preparation: str = ""
    dosage: str = ""
    severity: Severity = Severity.MEDIUM
    affected_animals: List[str] = field(default_factory=list)
    translations: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    category: str = ""
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Record":
        """Build a record from a stored document (camelCase keys).

        Translation blocks for languages outside SUPPORTED_LANGUAGES are dropped.
        """
        translations: Dict[str, Dict[str, Any]] = {}
        for language, override in (document.get("translations") or {}).items():
            if language not in SUPPORTED_LANGUAGES or language == BASE_LANGUAGE:
                continue
            if not isinstance(override, dict):
                continue
            cleaned: Dict[str, Any] = {}
            for key in TRANSLATABLE_FIELDS:
                if key not in override:
                    continue
                cleaned[key] = _as_list(override[key]) if key in _LIST_FIELDS else _as_text(override[key])
            translations[language] = cleaned

        return cls(
            id=_as_text(document.get("id") or document.get("_id")),
            name=_as_text(document.get("name")),
            treatment_name=_as_text(document.get("treatmentName")),
            symptoms=_as_list(document.get("symptoms")),
            ingredients=_as_list(document.get("ingredients")),
            preparation=_as_text(document.get("preparation")),
            dosage=_as_text(document.get("dosage")),
            severity=Severity.parse(document.get("severity"), default=Severity.MEDIUM),
            affected_animals=_as_list(document.get("affectedAnimals")),
            translations=translations,
            category=_as_text(document.get("category")),
            tags=_as_list(document.get("tags")),
        )

    def base_value(self, key: str) -> Any:
        return {
            "name": self.name,
            "treatmentName": self.treatment_name,
            "symptoms": self.symptoms,
            "ingredients": self.ingredients,
            "preparation": self.preparation,
            "dosage": self.dosage,
        }[key]


@dataclass(frozen=True)
class LocalizedView:
    """A record with every translatable field resolved for one language."""

    id: str
    language: str
    name: str
    treatment_name: str
    symptoms: List[str]
    ingredients: List[str]
    preparation: str
    dosage: str
    severity: Severity
    affected_animals: List[str]
    category: str = ""
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "language": self.language,
            "name": self.name,
            "treatmentName": self.treatment_name,
            "symptoms": list(self.symptoms),
            "ingredients": list(self.ingredients),
            "preparation": self.preparation,
            "dosage": self.dosage,
            "severity": self.severity.value,
            "affectedAnimals": list(self.affected_animals),
            "category": self.category,
            "tags": list(self.tags),
        }


def localize(record: Record, language: Optional[str]) -> LocalizedView:
    """Resolve ``record`` for ``language``, falling back field by field to base values.

    A translated value is used only when present and non-empty, so every field of
    the returned view is populated whenever the base record is.
    """
    language = normalise_language(language)
    override = record.translations.get(language, {}) if language != BASE_LANGUAGE else {}

    resolved: Dict[str, Any] = {}
    for key in TRANSLATABLE_FIELDS:
        value = override.get(key)
        resolved[key] = value if value else record.base_value(key)

    return LocalizedView(
        id=record.id,
        language=language,
        name=resolved["name"],
        treatment_name=resolved["treatmentName"],
        symptoms=list(resolved["symptoms"]),
        ingredients=list(resolved["ingredients"]),
        preparation=resolved["preparation"],
        dosage=resolved["dosage"],
        severity=record.severity,
        affected_animals=list(record.affected_animals),
        category=record.category,
        tags=list(record.tags),
    )


__all__ = [
    "BASE_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "Record",
    "LocalizedView",
    "Severity",
    "localize",
    "normalise_language",
]
