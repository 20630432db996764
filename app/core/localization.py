"""
User-facing Nepali strings shared by services and routes
"""

# Chat
DEFAULT_CHAT_TITLE = "नयाँ कुराकानी"
CHAT_CREATE_FAILED = "च्याट बनाउन सकिएन"
CHAT_SEND_FAILED = "सन्देश पठाउन सकिएन"
CHAT_APOLOGY = "माफ गर्नुहोला, केही समस्या भयो। कृपया पुन: प्रयास गर्नुहोस्।"
CHAT_NO_ANSWER = "माफ गर्नुहोला, यस विषयमा पर्याप्त कानुनी जानकारी उपलब्ध छैन।"
CHAT_DELETE_FAILED = "च्याट मेट्न सकिएन"
CHAT_TITLE_SAVE_FAILED = "शीर्षक बचत गर्न सकिएन"

# Documents
UNSUPPORTED_FORMAT = "कृपया फोटो वा PDF फाइल छान्नुहोस्"
EMPTY_EXTRACTION = "कागजातबाट पाठ निकाल्न सकिएन"
DOCUMENT_PROCESSING_FAILED = "कागजात प्रक्रिया गर्न सकिएन"
DOCUMENT_ANALYSIS_DONE = "कागजात विश्लेषण सम्पन्न!"
ANALYSIS_FAILED_SUMMARY = "कागजात विश्लेषण गर्न सकिएन।"

DOC_TYPE_NAMES = {
    "contract": "करार",
    "visa": "भिसा",
    "offer_letter": "अफर लेटर",
    "id": "परिचय पत्र",
    "other": "अन्य",
}

# Upstream AI services
TOO_MANY_REQUESTS = "धेरै अनुरोधहरू। कृपया केही समय पछि पुन: प्रयास गर्नुहोस्।"
CREDIT_REQUIRED = "क्रेडिट आवश्यक छ।"
UNKNOWN_ERROR = "अज्ञात त्रुटि भयो"
SAVE_FAILED = "बचत गर्न सकिएन"

# Translation and voice
TRANSLATION_FAILED = "अनुवाद गर्न सकिएन"
VOICE_INPUT_UNAVAILABLE = "तपाईंको उपकरणमा भ्वाइस इनपुट उपलब्ध छैन"
VOICE_RECOGNITION_FAILED = "भ्वाइस पहिचान गर्न सकिएन"

# Legal advisors
ADVISOR_PDF_ONLY = "कृपया PDF फाइल मात्र अपलोड गर्नुहोस्"
ADVISOR_FIELDS_REQUIRED = "कृपया सबै आवश्यक फिल्डहरू भर्नुहोस्"
ADVISOR_REQUEST_SENT = "तपाईंको अनुरोध पठाइयो! हामी छिट्टै सम्पर्क गर्नेछौं।"
ADVISOR_EMAIL_SUBJECT = "कानुनी सहायता अनुरोध"
ADVISOR_EMAIL_BODY = "नमस्ते, मलाई कानुनी सहायता चाहिएको छ।"


def doc_type_name(doc_type: str) -> str:
    """Nepali display name for a document type code"""
    return DOC_TYPE_NAMES.get(doc_type, doc_type)
