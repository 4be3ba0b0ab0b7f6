"""Per-language message catalog for chat replies."""
from __future__ import annotations

from typing import Dict, List, Optional

from records import BASE_LANGUAGE, Severity, normalise_language

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "ready": "Ready to search. Describe the symptoms or name a disease to get started.",
        "not_found": (
            "I couldn't find specific information about \"{query}\". Please try:\n\n"
            "• Using the search feature above\n"
            "• Rephrasing your question\n"
            "• Providing more detailed symptoms"
        ),
        "not_understood": (
            "🤔 I didn't fully understand your question.\n\n"
            "**Please try:**\n"
            "• Mentioning specific symptoms\n"
            "• Using disease names\n"
            "• Specifying the animal type\n\n"
            "**Example:** \"fever in cattle\" or \"milk reduction in buffalo\""
        ),
        "greeting": (
            "Hello! 🙏 I'm your VetCare assistant, ready to help with animal health questions.\n\n"
            "🔍 **I can help with:**\n"
            "• Symptom identification\n"
            "• Disease information\n"
            "• Treatment methods\n"
            "• Prevention measures\n\n"
            "Ask me anything!"
        ),
        "greeting_model_ready": "🤖 AI model ready!",
        "greeting_model_loading": "🤖 AI model is loading...",
        "disclaimer": (
            "⚠️ **Medical Disclaimer:** This is for educational purposes only. "
            "Always consult a qualified veterinarian for proper diagnosis and treatment."
        ),
        "additional_information": "**Additional Information:**",
        "status_active": "AI model active",
        "status_loading": "AI model loading",
        "status_error": "AI model error - traditional method",
        "status_traditional": "Traditional method",
        "status_ready": "Ready",
        "oracle_context_found": (
            "Based on available information: {info}. For detailed guidance, please consult with a veterinarian."
        ),
        "oracle_context_missing": (
            "I couldn't find specific information for your question. "
            "Please consult with a veterinarian for detailed guidance."
        ),
        "symptom_query": (
            "Found {count} disease(s) related to your symptoms:\n\n"
            "🔍 **Key Findings:**\n"
            "• Diseases: {names}\n"
            "• Main symptoms: {symptoms}\n"
            "• Severity: {severity}\n"
            "• Affects: {animals}"
        ),
        "treatment_query": (
            "Treatment information for {names}:\n\n"
            "💊 **Treatment Method:** {treatment}\n"
            "🌿 **Key Ingredients:** {ingredients}\n"
            "📋 **Preparation:** {preparation}\n"
            "⚡ **Dosage:** {dosage}"
        ),
        "disease_query": (
            "Detailed information about {names}:\n\n"
            "📊 **Disease Details:**\n"
            "• Name: {name}\n"
            "• Affects: {animals}\n"
            "• Severity: {severity}\n"
            "• Treatment: {treatment}"
        ),
        "general_query": (
            "Found {count} related disease(s): **{names}**\n\n"
            "Use the search feature above for detailed information or click on the disease cards below."
        ),
        "species_suggestion": "Common {species} diseases",
    },
    "ta": {
        "ready": "தேட தயார். தொடங்க அறிகுறிகளை விவரிக்கவும் அல்லது நோயின் பெயரைக் குறிப்பிடவும்.",
        "not_found": (
            "\"{query}\" பற்றிய குறிப்பிட்ட தகவல் தற்போது கிடைக்கவில்லை. தயவுசெய்து:\n\n"
            "• மேலே உள்ள தேடல் அம்சத்தைப் பயன்படுத்துங்கள்\n"
            "• வேறு வார்த்தைகளில் கேள்வியைக் கேளுங்கள்\n"
            "• அறிகுறிகளை விரிவாக விவரிக்கவும்"
        ),
        "not_understood": (
            "🤔 உங்கள் கேள்வியை நான் முழுமையாக புரிந்து கொள்ளவில்லை.\n\n"
            "**தயவுசெய்து இவற்றை முயற்சிக்கவும்:**\n"
            "• குறிப்பிட்ட அறிகுறிகளைக் குறிப்பிடுங்கள்\n"
            "• நோய் பெயர்களைப் பயன்படுத்துங்கள்\n"
            "• விலங்கின் வகையைக் குறிப்பிடுங்கள்\n\n"
            "**உதாரணம்:** \"மாட்டில் காய்ச்சல்\" அல்லது \"எருமையின் பால் குறைவு\""
        ),
        "greeting": (
            "வணக்கம்! 🙏 நான் உங்கள் வெட்கேர் உதவியாளர். விலங்கு நல கேள்விகளில் உங்களுக்கு உதவ தயாராக இருக்கிறேன்.\n\n"
            "🔍 **நான் உதவக்கூடிய விஷயங்கள்:**\n"
            "• அறிகுறிகள் அடையாளம் காணுதல்\n"
            "• நோய் தகவல்கள்\n"
            "• சிகிச்சை முறைகள்\n"
            "• தடுப்பு நடவடிக்கைகள்\n\n"
            "எனக்கு எதையும் கேளுங்கள்!"
        ),
        "greeting_model_ready": "🤖 AI மாடல் தயார்!",
        "greeting_model_loading": "🤖 AI மாடல் ஏற்றுகிறது...",
        "disclaimer": (
            "⚠️ **மருத்துவ அறிவிப்பு:** இது கல்வி நோக்கங்களுக்காக மட்டுமே. "
            "சரியான நோயறிதல் மற்றும் சிகிச்சைக்கு எப்போதும் தகுதிவாய்ந்த கால்நடை மருத்துவரை அணுகவும்."
        ),
        "additional_information": "**கூடுதல் தகவல்:**",
        "status_active": "AI மாடல் செயலில்",
        "status_loading": "AI மாடல் ஏற்றுகிறது",
        "status_error": "AI மாடல் பிழை - பாரம்பரிய முறை",
        "status_traditional": "பாரம்பரிய முறை",
        "status_ready": "தயார்",
        "oracle_context_found": "தொடர்புடைய தகவல்: {info}. மேலும் விரிவான தகவல்களுக்கு கால்நடை மருத்துவரை அணுகவும்.",
        "oracle_context_missing": "உங்கள் கேள்விக்கு குறிப்பிட்ட தகவல் கிடைக்கவில்லை. தயவுசெய்து கால்நடை மருத்துவரை அணுகவும்.",
        "symptom_query": (
            "உங்கள் கேள்விக்கு {count} தொடர்புடைய நோய்(கள்) கண்டறியப்பட்டன:\n\n"
            "🔍 **முக்கிய கண்டுபிடிப்புகள்:**\n"
            "• {names}\n"
            "• முக்கிய அறிகுறிகள்: {symptoms}\n"
            "• தீவிரத்தன்மை: {severity}\n"
            "• பாதிக்கும் விலங்குகள்: {animals}"
        ),
        "treatment_query": (
            "{names} நோய்(களுக்கு) சிகிச்சை தகவல்:\n\n"
            "💊 **சிகிச்சை முறை:** {treatment}\n"
            "🌿 **முக்கிய பொருட்கள்:** {ingredients}\n"
            "📋 **தயாரிப்பு:** {preparation}\n"
            "⚡ **அளவு:** {dosage}"
        ),
        "disease_query": (
            "{names} பற்றிய விரிவான தகவல்:\n\n"
            "📊 **நோய் விவரம்:**\n"
            "• பெயர்: {name}\n"
            "• பாதிக்கும் விலங்குகள்: {animals}\n"
            "• தீவிரத்தன்மை: {severity}\n"
            "• சிகிச்சை: {treatment}"
        ),
        "general_query": (
            "உங்கள் கேள்விக்கு {count} தொடர்புடைய நோய்(கள்) கண்டறியப்பட்டன: **{names}**\n\n"
            "விரிவான தகவல்களுக்கு மேலே உள்ள தேடல் அம்சத்தைப் பயன்படுத்துங்கள் அல்லது கீழே உள்ள நோய் அட்டைகளைக் கிளிக் செய்யுங்கள்."
        ),
        "species_suggestion": "{species} பொதுவான நோய்கள்",
    },
    "hi": {
        "ready": "खोज के लिए तैयार। शुरू करने के लिए लक्षण बताएं या रोग का नाम लिखें।",
        "not_found": (
            "\"{query}\" के बारे में विशेष जानकारी नहीं मिली। कृपया:\n\n"
            "• ऊपर दिए गए खोज विकल्प का उपयोग करें\n"
            "• अपना प्रश्न दूसरे शब्दों में पूछें\n"
            "• लक्षणों का अधिक विस्तार से वर्णन करें"
        ),
        "not_understood": (
            "🤔 मैं आपका प्रश्न पूरी तरह समझ नहीं पाया।\n\n"
            "**कृपया यह आज़माएं:**\n"
            "• विशेष लक्षण बताएं\n"
            "• रोग के नाम का उपयोग करें\n"
            "• पशु का प्रकार बताएं\n\n"
            "**उदाहरण:** \"गाय में बुखार\" या \"भैंस में दूध की कमी\""
        ),
        "greeting": (
            "नमस्ते! 🙏 मैं आपका वेटकेयर सहायक हूँ, पशु स्वास्थ्य के प्रश्नों में मदद के लिए तैयार।\n\n"
            "🔍 **मैं इनमें मदद कर सकता हूँ:**\n"
            "• लक्षणों की पहचान\n"
            "• रोग की जानकारी\n"
            "• उपचार के तरीके\n"
            "• बचाव के उपाय\n\n"
            "मुझसे कुछ भी पूछें!"
        ),
        "greeting_model_ready": "🤖 AI मॉडल तैयार है!",
        "greeting_model_loading": "🤖 AI मॉडल लोड हो रहा है...",
        "disclaimer": (
            "⚠️ **चिकित्सा अस्वीकरण:** यह केवल शैक्षिक उद्देश्य के लिए है। "
            "सही निदान और उपचार के लिए हमेशा योग्य पशु चिकित्सक से परामर्श करें।"
        ),
        "additional_information": "**अतिरिक्त जानकारी:**",
        "status_active": "AI मॉडल सक्रिय",
        "status_loading": "AI मॉडल लोड हो रहा है",
        "status_error": "AI मॉडल त्रुटि - पारंपरिक तरीका",
        "status_traditional": "पारंपरिक तरीका",
        "status_ready": "तैयार",
        "oracle_context_found": "उपलब्ध जानकारी के अनुसार: {info}. विस्तृत मार्गदर्शन के लिए कृपया पशु चिकित्सक से परामर्श करें।",
        "oracle_context_missing": "आपके प्रश्न के लिए विशेष जानकारी नहीं मिली। कृपया पशु चिकित्सक से परामर्श करें।",
        "symptom_query": (
            "आपके लक्षणों से संबंधित {count} रोग मिले:\n\n"
            "🔍 **मुख्य निष्कर्ष:**\n"
            "• रोग: {names}\n"
            "• मुख्य लक्षण: {symptoms}\n"
            "• गंभीरता: {severity}\n"
            "• प्रभावित पशु: {animals}"
        ),
        "treatment_query": (
            "{names} के उपचार की जानकारी:\n\n"
            "💊 **उपचार विधि:** {treatment}\n"
            "🌿 **मुख्य सामग्री:** {ingredients}\n"
            "📋 **तैयारी:** {preparation}\n"
            "⚡ **खुराक:** {dosage}"
        ),
        "disease_query": (
            "{names} के बारे में विस्तृत जानकारी:\n\n"
            "📊 **रोग विवरण:**\n"
            "• नाम: {name}\n"
            "• प्रभावित पशु: {animals}\n"
            "• गंभीरता: {severity}\n"
            "• उपचार: {treatment}"
        ),
        "general_query": (
            "{count} संबंधित रोग मिले: **{names}**\n\n"
            "विस्तृत जानकारी के लिए ऊपर खोज का उपयोग करें या नीचे दिए गए रोग कार्ड पर क्लिक करें।"
        ),
        "species_suggestion": "{species} के सामान्य रोग",
    },
}

SEVERITY_LABELS: Dict[str, Dict[Severity, str]] = {
    "ta": {Severity.HIGH: "அதிகம்", Severity.MEDIUM: "நடுத்தரம்", Severity.LOW: "குறைவு"},
    "hi": {Severity.HIGH: "अधिक", Severity.MEDIUM: "मध्यम", Severity.LOW: "कम"},
}

INTENT_SUGGESTIONS: Dict[str, Dict[str, List[str]]] = {
    "en": {
        "symptom_query": [
            "What treatment is needed for these symptoms?",
            "How serious is this condition?",
            "What prevention measures should I take?",
        ],
        "treatment_query": [
            "What is the correct dosage?",
            "How long does treatment take?",
            "Are there any side effects?",
        ],
        "disease_query": [
            "What are the main symptoms?",
            "How does this disease spread?",
            "What treatment options are available?",
        ],
        "general_query": [
            "Fever symptoms in cattle",
            "Milk reduction in buffaloes",
            "Livestock vaccination schedule",
        ],
    },
    "ta": {
        "symptom_query": [
            "இந்த அறிகுறிகளுக்கான சிகிச்சை என்ன?",
            "இந்த நோய் எவ்வளவு தீவிரமானது?",
            "தடுப்பு நடவடிக்கைகள் என்ன?",
        ],
        "treatment_query": [
            "இந்த மருந்துகளின் அளவு என்ன?",
            "எத்தனை நாட்கள் சிகிச்சை தேவை?",
            "பக்க விளைவுகள் உள்ளதா?",
        ],
        "disease_query": [
            "இந்த நோயின் முக்கிய அறிகுறிகள் என்ன?",
            "இது எப்படி பரவுகிறது?",
            "சிகிச்சை முறைகள் என்ன?",
        ],
        "general_query": [
            "மாட்டில் காய்ச்சல் அறிகுறிகள்",
            "எருமையின் பால் குறைவு",
            "கால்நடை தடுப்பூசி அட்டவணை",
        ],
    },
    "hi": {
        "symptom_query": [
            "इन लक्षणों के लिए कौन सा इलाज चाहिए?",
            "यह स्थिति कितनी गंभीर है?",
            "बचाव के लिए क्या उपाय करें?",
        ],
        "treatment_query": [
            "सही खुराक क्या है?",
            "इलाज में कितना समय लगता है?",
            "क्या कोई दुष्प्रभाव हैं?",
        ],
        "disease_query": [
            "मुख्य लक्षण क्या हैं?",
            "यह रोग कैसे फैलता है?",
            "कौन से उपचार उपलब्ध हैं?",
        ],
        "general_query": [
            "गाय में बुखार के लक्षण",
            "भैंस में दूध की कमी",
            "पशु टीकाकरण सारणी",
        ],
    },
}

GREETING_SUGGESTIONS: Dict[str, List[str]] = {
    "en": ["Fever symptoms in cattle", "Milk reduction in buffaloes", "Livestock vaccination"],
    "ta": ["மாட்டில் காய்ச்சல் அறிகுறிகள்", "எருமையின் பால் குறைவு", "கால்நடை தடுப்பூசி"],
    "hi": ["गाय में बुखार के लक्षण", "भैंस में दूध की कमी", "पशु टीकाकरण"],
}

# Fixed phrasings for the species the seed corpus uses; other species go through
# the "species_suggestion" template.
SPECIES_SUGGESTIONS: Dict[str, Dict[str, str]] = {
    "en": {"Cattle": "Common cattle diseases", "Buffaloes": "Common buffalo diseases"},
    "ta": {"Cattle": "மாடுகளின் பொதுவான நோய்கள்", "Buffaloes": "எருமைகளின் பொதுவான நோய்கள்"},
    "hi": {"Cattle": "गायों के सामान्य रोग", "Buffaloes": "भैंसों के सामान्य रोग"},
}


def catalog_language(language: Optional[str]) -> str:
    """Language whose catalog is used for ``language`` (te and ml read the base catalog)."""
    language = normalise_language(language)
    return language if language in MESSAGES else BASE_LANGUAGE


def message(key: str, language: Optional[str] = BASE_LANGUAGE, **values: object) -> str:
    template = MESSAGES[catalog_language(language)].get(key) or MESSAGES[BASE_LANGUAGE][key]
    return template.format(**values) if values else template


def severity_label(severity: Severity, language: Optional[str] = BASE_LANGUAGE) -> str:
    return SEVERITY_LABELS.get(catalog_language(language), {}).get(severity, severity.value)


def intent_suggestions(intent: str, language: Optional[str] = BASE_LANGUAGE) -> List[str]:
    table = INTENT_SUGGESTIONS[catalog_language(language)]
    return list(table.get(intent) or table["general_query"])


def greeting_suggestions(language: Optional[str] = BASE_LANGUAGE) -> List[str]:
    return list(GREETING_SUGGESTIONS[catalog_language(language)])


def species_suggestion(species: str, label: str, language: Optional[str] = BASE_LANGUAGE) -> str:
    fixed = SPECIES_SUGGESTIONS[catalog_language(language)].get(species)
    if fixed:
        return fixed
    return message("species_suggestion", language, species=label)


__all__ = [
    "MESSAGES",
    "catalog_language",
    "greeting_suggestions",
    "intent_suggestions",
    "message",
    "severity_label",
    "species_suggestion",
]
