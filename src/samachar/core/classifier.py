"""Keyword-based genre and region tagging."""

import re
from typing import NamedTuple

GENRE_CANDIDATES = [
    "Crime",
    "Politics",
    "Sports",
    "Entertainment",
    "Business",
    "Technology",
    "Health",
    "Environment",
    "Education",
    "Lifestyle",
    "Weather",
    "Other",
]
DEFAULT_GENRE = "Other"

REGION_UTTARAKHAND = "uttarakhand"
REGION_INDIA = "india"
REGION_INTERNATIONAL = "international"


class Classification(NamedTuple):
    """Genre and region tags."""

    genre: str
    region: str


def _genre_rule(genre: str, latin: list[str], native: list[str]) -> tuple[str, re.Pattern[str]]:
    # Devanagari combining marks break \b, so native keywords match as substrings
    pattern = r"\b(?:" + "|".join(latin) + r")\b"
    if native:
        pattern += "|" + "|".join(re.escape(word) for word in native)
    return genre, re.compile(pattern, re.IGNORECASE)


# Evaluated top to bottom, first match wins. The order is the tie-break
# policy for text that mentions several topics.
GENRE_RULES: list[tuple[str, re.Pattern[str]]] = [
    _genre_rule(
        "Crime",
        ["police", r"murder\w*", r"accident\w*", r"crimes?", r"arrest\w*", "case",
         r"courts?", "theft", r"robber\w*"],
        ["पुलिस", "हत्या", "दुर्घटना", "हादसा", "हादसे", "अपराध", "गिरफ्तार",
         "गिरफ़्तार", "मुकदमा", "अदालत", "कोर्ट", "चोरी", "लूट", "ठगी"],
    ),
    _genre_rule(
        "Politics",
        [r"elections?", r"ministers?", "congress", "bjp", "government", "mp", "mla",
         r"politic\w*", "parliament"],
        ["चुनाव", "मंत्री", "सरकार", "कांग्रेस", "भाजपा", "विधायक", "सांसद",
         "राजनीति", "राजनीतिक", "संसद", "विधानसभा"],
    ),
    _genre_rule(
        "Sports",
        [r"match(?:es)?", r"scores?", r"tournaments?", "cricket", "football",
         r"players?", r"olympics?"],
        ["क्रिकेट", "फुटबॉल", "मैच", "खिलाड़ी", "टूर्नामेंट", "खेल", "ओलंपिक"],
    ),
    _genre_rule(
        "Entertainment",
        [r"movies?", r"films?", r"actors?", r"actress(?:es)?", r"songs?",
         r"celebrit\w*", "bollywood", "tv"],
        ["फिल्म", "फ़िल्म", "अभिनेता", "अभिनेत्री", "बॉलीवुड", "गाना", "सिनेमा",
         "मनोरंजन"],
    ),
    _genre_rule(
        "Business",
        [r"stocks?", r"markets?", r"econom\w*", "business", r"compan(?:y|ies)",
         r"shares?", r"prices?", "sensex", "nifty"],
        ["शेयर", "बाजार", "बाज़ार", "अर्थव्यवस्था", "कंपनी", "कारोबार", "व्यापार",
         "सेंसेक्स", "निफ्टी", "महंगाई"],
    ),
    _genre_rule(
        "Technology",
        [r"tech\w*", "ai", "software", r"startups?", "google", "microsoft", "apple",
         r"smartphones?"],
        ["तकनीक", "टेक्नोलॉजी", "सॉफ्टवेयर", "स्टार्टअप", "इंटरनेट", "स्मार्टफोन"],
    ),
    _genre_rule(
        "Health",
        ["health", "covid", r"hospitals?", r"doctors?", r"diseases?", r"vaccin\w*"],
        ["स्वास्थ्य", "अस्पताल", "डॉक्टर", "बीमारी", "वैक्सीन", "कोरोना", "इलाज"],
    ),
    _genre_rule(
        "Environment",
        ["climate", r"forests?", r"rivers?", "pollution", "environment", "wildlife"],
        ["जलवायु", "जंगल", "नदी", "प्रदूषण", "पर्यावरण", "वन्यजीव", "वन विभाग"],
    ),
    _genre_rule(
        "Education",
        [r"schools?", r"colleges?", "education", r"exams?", r"universit(?:y|ies)"],
        ["स्कूल", "कॉलेज", "शिक्षा", "परीक्षा", "विश्वविद्यालय", "छात्र"],
    ),
    _genre_rule(
        "Lifestyle",
        ["food", "travel", "fashion", "lifestyle", "culture"],
        ["भोजन", "यात्रा", "फैशन", "जीवनशैली", "संस्कृति", "पर्यटन", "त्योहार"],
    ),
    _genre_rule(
        "Weather",
        ["weather", r"rain\w*", r"storms?", r"floods?", "temperature", "snowfall"],
        ["मौसम", "बारिश", "तूफान", "बाढ़", "तापमान", "बर्फबारी", "भूस्खलन"],
    ),
]

# Region tiers, checked in order against text and source host
REGION_TIERS: list[tuple[str, list[str]]] = [
    (
        REGION_UTTARAKHAND,
        [
            "uttarakhand", "uttaranchal", "dehradun", "nainital", "almora",
            "pithoragarh", "rudraprayag", "chamoli", "pauri", "champawat",
            "haridwar", "rishikesh", "uttarkashi", "tehri", "bageshwar",
            "udham singh nagar", "kedarnath", "badrinath",
            "उत्तराखंड", "उत्तराखण्ड", "देहरादून", "नैनीताल", "अल्मोड़ा",
            "पिथौरागढ़", "रुद्रप्रयाग", "चमोली", "पौड़ी", "चंपावत", "हरिद्वार",
            "ऋषिकेश", "उत्तरकाशी", "टिहरी", "बागेश्वर", "ऊधमसिंह नगर",
            "केदारनाथ", "बदरीनाथ",
        ],
    ),
    (
        REGION_INDIA,
        [
            "india", "delhi", "mumbai", "kolkata", "chennai", "bengaluru",
            "lucknow", "uttar pradesh", "bihar", "rajasthan",
            "भारत", "भारतीय", "दिल्ली", "मुंबई", "कोलकाता", "चेन्नई", "बेंगलुरु",
            "लखनऊ", "उत्तर प्रदेश", "बिहार", "राजस्थान",
        ],
    ),
]


def detect_region(text: str, source_host: str = "") -> str:
    """Regional tier, then national tier, else international."""
    t = (text or "").lower()
    s = (source_host or "").lower()
    for region, keywords in REGION_TIERS:
        if any(k in t or k in s for k in keywords):
            return region
    return REGION_INTERNATIONAL


def detect_genre(text: str) -> str:
    """First matching genre rule, else the catch-all genre."""
    t = (text or "").lower()
    for genre, pattern in GENRE_RULES:
        if pattern.search(t):
            return genre
    return DEFAULT_GENRE


def classify(text: str, source_host: str = "") -> Classification:
    """Tag text with a genre and a region. Pure and deterministic."""
    return Classification(
        genre=detect_genre(text),
        region=detect_region(text, source_host),
    )
