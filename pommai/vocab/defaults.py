"""Built-in Tamil vocabulary used when no vocabulary file is configured."""

_TWEMOJI = "https://cdn.jsdelivr.net/gh/twitter/twemoji@14.0.2/assets/svg/{}.svg"

# Animation key -> trigger phrases.
COMMANDS: dict[str, list[str]] = {
    "walk": ["நட", "நடை"],
    "run": ["ஓடு", "ஓட்டம்"],
    "jump": ["குதி", "குதித்தல்"],
    "sit": ["உட்கார்", "உட்காரு", "அமர்"],
    "dance": ["நடனம்", "நடன", "டான்ஸ்"],
}

VOWELS: list[dict] = [
    {"letter": "அ", "name": "அகரம்", "sound": "a"},
    {"letter": "ஆ", "name": "ஆகாரம்", "sound": "aa"},
    {"letter": "இ", "name": "இகரம்", "sound": "i"},
    {"letter": "ஈ", "name": "ஈகாரம்", "sound": "ii"},
    {"letter": "உ", "name": "உகரம்", "sound": "u"},
    {"letter": "ஊ", "name": "ஊகாரம்", "sound": "uu"},
    {"letter": "எ", "name": "எகரம்", "sound": "e"},
    {"letter": "ஏ", "name": "ஏகாரம்", "sound": "ee"},
    {"letter": "ஐ", "name": "ஐகாரம்", "sound": "ai"},
    {"letter": "ஒ", "name": "ஒகரம்", "sound": "o"},
    {"letter": "ஓ", "name": "ஓகாரம்", "sound": "oo"},
    {"letter": "ஔ", "name": "ஔகாரம்", "sound": "au"},
]

CONSONANTS: list[dict] = [
    {"letter": "க்", "name": "ககரம்", "sound": "k"},
    {"letter": "ங்", "name": "ஙகரம்", "sound": "ng"},
    {"letter": "ச்", "name": "சகரம்", "sound": "ch"},
    {"letter": "ஞ்", "name": "ஞகரம்", "sound": "nj"},
    {"letter": "ட்", "name": "டகரம்", "sound": "t"},
    {"letter": "ண்", "name": "ணகரம்", "sound": "n"},
    {"letter": "த்", "name": "தகரம்", "sound": "th"},
    {"letter": "ந்", "name": "நகரம்", "sound": "n"},
    {"letter": "ப்", "name": "பகரம்", "sound": "p"},
    {"letter": "ம்", "name": "மகரம்", "sound": "m"},
    {"letter": "ய்", "name": "யகரம்", "sound": "y"},
    {"letter": "ர்", "name": "ரகரம்", "sound": "r"},
    {"letter": "ல்", "name": "லகரம்", "sound": "l"},
    {"letter": "வ்", "name": "வகரம்", "sound": "v"},
    {"letter": "ழ்", "name": "ழகரம்", "sound": "zh"},
    {"letter": "ள்", "name": "ளகரம்", "sound": "ll"},
    {"letter": "ற்", "name": "றகரம்", "sound": "rr"},
    {"letter": "ன்", "name": "னகரம்", "sound": "nn"},
]


def _word(word, transliteration, english, pronunciation, category, emoji, code):
    return {
        "word": word,
        "transliteration": transliteration,
        "english": english,
        "pronunciation": pronunciation,
        "meaning": english,
        "category": category,
        "emoji": emoji,
        "imageUrl": _TWEMOJI.format(code),
    }


WORDS: dict[str, list[dict]] = {
    "nature": [
        _word("இலை", "ilai", "leaf", "ee-lai", "nature", "🍃", "1f343"),
        _word("மரம்", "maram", "tree", "ma-ram", "nature", "🌳", "1f333"),
        _word("பூ", "poo", "flower", "poo", "nature", "🌸", "1f338"),
        _word("தண்ணீர்", "thanneer", "water", "than-neer", "nature", "💧", "1f4a7"),
    ],
    "animals": [
        _word("பூனை", "poonai", "cat", "poo-nai", "animals", "🐱", "1f408"),
        _word("நாய்", "naai", "dog", "naai", "animals", "🐶", "1f436"),
        _word("பறவை", "paravai", "bird", "pa-ra-vai", "animals", "🐦", "1f426"),
        _word("மீன்", "meen", "fish", "meen", "animals", "🐠", "1f420"),
        _word("யானை", "yaanai", "elephant", "yaa-nai", "animals", "🐘", "1f418"),
    ],
    "family": [
        _word("அம்மா", "amma", "mother", "am-maa", "family", "👩", "1f469"),
        _word("அப்பா", "appa", "father", "ap-paa", "family", "👨", "1f468"),
        _word("தாத்தா", "thaththa", "grandfather", "thaath-thaa", "family", "👴", "1f474"),
    ],
    "body": [
        _word("கண்", "kann", "eye", "kan", "body", "👁️", "1f441"),
        _word("கை", "kai", "hand", "kai", "body", "🤚", "1f91a"),
        _word("கால்", "kaal", "leg", "kaal", "body", "🦵", "1f9b5"),
        _word("மூக்கு", "mookku", "nose", "mook-ku", "body", "👃", "1f443"),
    ],
    "food": [
        _word("சோறு", "soru", "rice", "soa-ru", "food", "🍚", "1f35a"),
        _word("பால்", "paal", "milk", "paal", "food", "🥛", "1f95b"),
    ],
    "things": [
        _word("புத்தகம்", "puththagam", "book", "puth-tha-gam", "things", "📖", "1f4d6"),
        _word("பந்து", "panthu", "ball", "pan-thu", "things", "⚽", "26bd"),
        _word("வீடு", "veedu", "house", "vee-du", "things", "🏠", "1f3e0"),
    ],
    "weather": [
        _word("மழை", "mazhai", "rain", "ma-zhai", "weather", "🌧️", "1f327"),
        _word("சூரியன்", "sooriyan", "sun", "soo-ri-yan", "weather", "☀️", "2600"),
    ],
}
