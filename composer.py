"""Assembles chat turns from ranked records, intents and the message catalog."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import messages
from intents import GENERAL_QUERY
from lexicon import Lexicon, load_lexicon
from records import BASE_LANGUAGE, LocalizedView, Record, localize, normalise_language

RELATED_DISPLAY_LIMIT = 2
SUGGESTION_LIMIT = 3
PREPARATION_PREVIEW_CHARS = 100
DOSAGE_PREVIEW_CHARS = 80
SUMMARY_LIST_ITEMS = 3

CONTEXT_PREPARATION_CHARS = 200
CONTEXT_DOSAGE_CHARS = 150
GENERAL_CONTEXT = "General veterinary medicine and animal health information"


@dataclass
class ChatTurn:
    text: str
    related: List[LocalizedView] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    confidence: Optional[float] = None
    is_ai_generated: bool = False
    model_status: Optional[str] = None
    intent: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "relatedDiseases": [view.to_dict() for view in self.related],
            "suggestions": list(self.suggestions),
            "confidence": self.confidence,
            "isAiGenerated": self.is_ai_generated,
            "modelStatus": self.model_status,
            "intent": self.intent,
        }


def truncate(text: str, limit: int) -> str:
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def _species_labels(view: LocalizedView, lexicon: Lexicon) -> str:
    return ", ".join(lexicon.species_label(view.language, species) for species in view.affected_animals)


def compose_summary(
    views: Sequence[LocalizedView],
    intent: str,
    language: Optional[str] = BASE_LANGUAGE,
    lexicon: Optional[Lexicon] = None,
) -> str:
    """Render the intent template for the top-ranked view.

    ``views`` must be non-empty and ordered best first; every view contributes
    its name to the headline.
    """
    lexicon = lexicon or load_lexicon()
    primary = views[0]
    key = intent if intent in messages.INTENT_SUGGESTIONS[BASE_LANGUAGE] else GENERAL_QUERY
    return messages.message(
        key,
        language,
        count=len(views),
        names=", ".join(view.name for view in views),
        name=primary.name,
        symptoms=", ".join(primary.symptoms[:SUMMARY_LIST_ITEMS]),
        severity=messages.severity_label(primary.severity, language),
        animals=_species_labels(primary, lexicon),
        treatment=primary.treatment_name,
        ingredients=", ".join(primary.ingredients[:SUMMARY_LIST_ITEMS]),
        preparation=truncate(primary.preparation, PREPARATION_PREVIEW_CHARS),
        dosage=truncate(primary.dosage, DOSAGE_PREVIEW_CHARS),
    )


def build_suggestions(
    records: Sequence[Record],
    intent: str,
    language: Optional[str] = BASE_LANGUAGE,
    lexicon: Optional[Lexicon] = None,
) -> List[str]:
    """Two intent suggestions, then one per species seen in ``records``, topped up to three."""
    lexicon = lexicon or load_lexicon()
    language = normalise_language(language)
    fixed = messages.intent_suggestions(intent, language)

    species: List[str] = []
    for record in records:
        for animal in record.affected_animals:
            if animal not in species:
                species.append(animal)

    suggestions = fixed[:2]
    for animal in species:
        suggestions.append(messages.species_suggestion(animal, lexicon.species_label(language, animal), language))
    for extra in fixed[2:]:
        suggestions.append(extra)

    return list(dict.fromkeys(suggestions))[:SUGGESTION_LIMIT]


def with_disclaimer(text: str, language: Optional[str] = BASE_LANGUAGE) -> str:
    return f"{text}\n\n{messages.message('disclaimer', language)}"


def merge_oracle_answer(answer: str, summary: str, language: Optional[str] = BASE_LANGUAGE) -> str:
    return f"{answer}\n\n{messages.message('additional_information', language)}\n{summary}"


def compose_turn(
    records: Sequence[Record],
    intent: str,
    language: Optional[str],
    query: str,
    lexicon: Optional[Lexicon] = None,
) -> ChatTurn:
    """Heuristic chat turn for ``records`` ranked best first."""
    language = normalise_language(language)
    if not records:
        return ChatTurn(
            text=with_disclaimer(messages.message("not_found", language, query=query), language),
            suggestions=build_suggestions([], intent, language, lexicon),
            intent=intent,
        )

    views = [localize(record, language) for record in records]
    return ChatTurn(
        text=with_disclaimer(compose_summary(views, intent, language, lexicon), language),
        related=views[:RELATED_DISPLAY_LIMIT],
        suggestions=build_suggestions(records, intent, language, lexicon),
        intent=intent,
    )


def ready_turn(language: Optional[str] = BASE_LANGUAGE) -> ChatTurn:
    return ChatTurn(text=messages.message("ready", language), intent=GENERAL_QUERY)


def not_understood_turn(intent: str, language: Optional[str] = BASE_LANGUAGE) -> ChatTurn:
    return ChatTurn(
        text=messages.message("not_understood", language),
        suggestions=messages.intent_suggestions(intent, language),
        intent=intent,
    )


def greeting_turn(language: Optional[str] = BASE_LANGUAGE, model_state: Optional[str] = None) -> ChatTurn:
    text = messages.message("greeting", language)
    status = None
    if model_state == "ready":
        text += "\n\n" + messages.message("greeting_model_ready", language)
        status = messages.message("status_ready", language)
    elif model_state == "loading":
        text += "\n\n" + messages.message("greeting_model_loading", language)
        status = messages.message("status_loading", language)
    elif model_state is not None:
        status = messages.message("status_traditional", language)
    return ChatTurn(
        text=text,
        suggestions=messages.greeting_suggestions(language),
        model_status=status,
        intent="greeting",
    )


def build_oracle_context(records: Sequence[Record], language: Optional[str] = BASE_LANGUAGE) -> str:
    """One labelled block per record, fields resolved for ``language``."""
    if not records:
        return GENERAL_CONTEXT

    blocks: List[str] = []
    for index, record in enumerate(records, start=1):
        view = localize(record, language)
        blocks.append(
            "\n".join(
                [
                    f"Disease {index}: {view.name}",
                    f"Symptoms: {', '.join(view.symptoms)}",
                    f"Treatment: {view.treatment_name}",
                    f"Ingredients: {', '.join(view.ingredients[:SUMMARY_LIST_ITEMS])}",
                    f"Preparation: {view.preparation[:CONTEXT_PREPARATION_CHARS]}",
                    f"Dosage: {view.dosage[:CONTEXT_DOSAGE_CHARS]}",
                    f"Severity: {view.severity.value}",
                    f"Affected Animals: {', '.join(view.affected_animals)}",
                ]
            )
        )
    return "\n\n".join(blocks)


__all__ = [
    "ChatTurn",
    "RELATED_DISPLAY_LIMIT",
    "SUGGESTION_LIMIT",
    "build_oracle_context",
    "build_suggestions",
    "compose_summary",
    "compose_turn",
    "greeting_turn",
    "merge_oracle_answer",
    "not_understood_turn",
    "ready_turn",
    "truncate",
    "with_disclaimer",
]
