"""Rule-based query intent classification."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from records import BASE_LANGUAGE, normalise_language

GREETING = "greeting"
SYMPTOM_QUERY = "symptom_query"
TREATMENT_QUERY = "treatment_query"
DISEASE_QUERY = "disease_query"
GENERAL_QUERY = "general_query"

INTENTS = (GREETING, SYMPTOM_QUERY, TREATMENT_QUERY, DISEASE_QUERY, GENERAL_QUERY)

# Checked in this order; the first intent with a matching pattern wins.
INTENT_PATTERNS: Dict[str, List[Tuple[str, List[str]]]] = {
    "en": [
        (GREETING, [r"\bhello\b", r"\bhi\b", r"\bhey\b", r"\bgreetings\b", r"\bnamaste\b", r"\bvanakkam\b"]),
        (SYMPTOM_QUERY, ["symptom", "sign", "showing", "fever", "cough", "diarrhea"]),
        (TREATMENT_QUERY, ["treatment", "cure", "medicine", "therapy", "heal", "remedy"]),
        (DISEASE_QUERY, ["disease", "illness", "condition", "problem"]),
    ],
    "ta": [
        (GREETING, ["வணக்கம்", "வாங்க", "ஹலோ", "ஹாய்", "நமஸ்காரம்"]),
        (SYMPTOM_QUERY, ["அறிகுறி", "அடையாளம்", "லக்ஷணம்", "காய்ச்சல்", "வயிற்றுப்போக்கு", "இருமல்", "வீக்கம்"]),
        (TREATMENT_QUERY, ["சிகிச்சை", "மருந்து", "மருத்துவம்", "குணப்படுத்து", "தடுப்பூசி", "எப்படி சரி"]),
        (DISEASE_QUERY, ["நோய்", "வியாதி", "தொற்று", "பிரச்சனை"]),
    ],
    "hi": [
        (GREETING, ["नमस्ते", "नमस्कार", "हैलो", "हाय", "प्रणाम"]),
        (SYMPTOM_QUERY, ["लक्षण", "बुखार", "खांसी", "दस्त", "सूजन"]),
        (TREATMENT_QUERY, ["इलाज", "उपचार", "दवा", "टीका", "चिकित्सा"]),
        (DISEASE_QUERY, ["रोग", "बीमारी", "संक्रमण", "समस्या"]),
    ],
    "te": [
        (GREETING, ["నమస్కారం", "హలో", "హాయ్"]),
        (SYMPTOM_QUERY, ["లక్షణ", "జ్వరం", "దగ్గు", "విరేచనాలు", "వాపు"]),
        (TREATMENT_QUERY, ["చికిత్స", "మందు", "టీకా"]),
        (DISEASE_QUERY, ["వ్యాధి", "రోగం", "సమస్య"]),
    ],
    "ml": [
        (GREETING, ["നമസ്കാരം", "ഹലോ", "ഹായ്"]),
        (SYMPTOM_QUERY, ["ലക്ഷണ", "പനി", "ചുമ", "വയറിളക്കം", "വീക്കം"]),
        (TREATMENT_QUERY, ["ചികിത്സ", "മരുന്ന്", "വാക്സിൻ"]),
        (DISEASE_QUERY, ["രോഗ", "അസുഖ", "പ്രശ്നം"]),
    ],
}

_COMPILED: Dict[str, List[Tuple[str, List[re.Pattern]]]] = {
    language: [(intent, [re.compile(pattern) for pattern in patterns]) for intent, patterns in rules]
    for language, rules in INTENT_PATTERNS.items()
}


def classify_intent(text: Optional[str], language: Optional[str] = BASE_LANGUAGE) -> str:
    """Map ``text`` to exactly one intent label, ``general_query`` when nothing matches."""
    lowered = (text or "").lower().strip()
    if not lowered:
        return GENERAL_QUERY

    rules = _COMPILED.get(normalise_language(language), _COMPILED[BASE_LANGUAGE])
    for intent, patterns in rules:
        if any(pattern.search(lowered) for pattern in patterns):
            return intent
    return GENERAL_QUERY


__all__ = [
    "DISEASE_QUERY",
    "GENERAL_QUERY",
    "GREETING",
    "INTENTS",
    "INTENT_PATTERNS",
    "SYMPTOM_QUERY",
    "TREATMENT_QUERY",
    "classify_intent",
]
