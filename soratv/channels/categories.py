"""
Category classification for catalog channels.

A channel belongs to a requested category when its own ``category`` field
matches, or when its name contains one of the category's keywords.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from soratv.channels.models import Channel

ALL_CHANNELS = "all-channels"
RANDOM_CHANNEL = "random-channel"

# Page-like categories that never filter anything
PASSTHROUGH_CATEGORIES = frozenset({ALL_CHANNELS, "about", "history", "favorites"})
PASSTHROUGH_PREFIXES = ("faq", "privacy", "feedback")

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "music": [
        "music", "mtv", "radio", "fm", "hits", "rap", "pop", "rock", "schlager",
        "vevo", "musica", "música", "musique", "aghani", "tarab", "songtv", "melody",
        "rotana", "stereo", "anghami", "mazzika",
    ],
    "news": [
        "news", "nachrichten", "noticias", "info", "akhbar", "إخبارية", "خبر",
        "jazeera", "cnn", "bbc", "fox", "dw", "rt", "sky news", "cbs", "abc",
        "nbc", "notizie", "nouvelles", "24/7", "24h", "alarabiya", "al hadath",
        "alghad", "al mayadeen", "france 24", "العربية", "الحدث", "أخبار",
    ],
    "movies": [
        "movie", "film", "cinema", "cine", "kino", "aflam", "أفلام", "hollywood",
        "action", "drama", "fox movies",
    ],
    "sports": [
        "sport", "sports", "nfl", "nba", "mlb", "football", "futbol", "tennis",
        "golf", "racing", "carreras", "f1", "رياضة", "bein", "espn", "tnt sports",
        "ad sports", "ssc", "alkass", "الكاس",
    ],
    "kids": [
        "kids", "animation", "cartoon", "niños", "enfants", "kinder", "أطفال",
        "junior", "disney", "nick", "cn", "cartoonito", "spaceto.o.n", "peppa",
        "gumball", "smurfs", "سنافر", "كرتون", "اطفال",
    ],
    "documentary": [
        "documentary", "doc", "discovery", "geo", "history", "animal",
        "planet", "nat geo", "national geographic", "وثائقي", "wathaiqi",
    ],
    "shop": ["shop", "qvc", "hse", "tjc", "ideal world", "citruss"],
    "religious": [
        "religious", "quran", "قرآن", "sunnah", "bible", "ewtn", "mta", "islam",
        "makkah", "mecca", "saudi quran", "al majid", "iqraa",
    ],
    "cooking": ["cooking", "kitchen", "food", "chef", "مطبخ", "طبخ", "food network"],
    "auto": ["auto", "car", "motor", "racing", "f1", "vehicle", "automotive", "سيارات"],
    "animation": ["animation", "anime", "أنمي"],
    "business": [
        "business", "finance", "money", "invest", "stock", "market", "bloomberg",
        "cnbc", "مال", "أعمال",
    ],
    "classic": ["classic", "retro", "vintage", "oldies", "golden age", "كلاسيك"],
    "comedy": ["comedy", "funny", "laugh", "standup", "humor", "كوميديا", "ضحك"],
    "culture": ["culture", "arts", "cultural", "heritage", "thakafia", "ثقافة"],
    "education": ["education", "school", "learn", "teach", "university", "تعليم"],
    "entertainment": ["entertainment", "celeb", "gossip", "hollywood", "e!", "فن", "ترفيه"],
    "family": ["family", "familia", "famille", "عائلة"],
    "general": ["general", "generalista", "général", "عام", "منوعات"],
    "legislative": [
        "legislative", "government", "parliament", "c-span", "senate", "parlamento", "مجلس",
    ],
    "lifestyle": [
        "lifestyle", "life", "style", "home", "garden", "fashion", "health", "wellbeing",
    ],
    "series": ["series", "tv show", "drama", "sitcom", "مسلسلات"],
    "outdoor": ["outdoor", "nature", "adventure", "hunting", "fishing", "طبيعة"],
    "relax": ["relax", "chill", "ambience", "fireplace", "calm", "ambiant", "استرخاء"],
    "science": ["science", "tech", "technology", "sci", "space", "nasa", "علوم"],
    "travel": ["travel", "tourism", "voyage", "safar", "trip", "vacation", "سفر"],
    "weather": ["weather", "meteo", "forecast", "طقس", "wetter", "tiempo"],
}

# Requested categories that borrow another category's keyword list
KEYWORD_ALIASES = {"top news": "news"}


def is_passthrough(category: Optional[str]) -> bool:
    """True for categories that disable filtering entirely."""
    if not category:
        return True
    return category in PASSTHROUGH_CATEGORIES or category.startswith(PASSTHROUGH_PREFIXES)


def normalize_category(category: str) -> str:
    """Lowercase and turn the first hyphen into a space ("top-news" -> "top news")."""
    return category.lower().replace("-", " ", 1)


class CategoryClassifier:
    """Decides whether a channel belongs to a requested category."""

    def __init__(self, keywords: Optional[Mapping[str, Iterable[str]]] = None):
        table = CATEGORY_KEYWORDS if keywords is None else keywords
        self.keywords: Dict[str, List[str]] = {
            name.lower(): [keyword.lower() for keyword in words]
            for name, words in table.items()
        }

    def keywords_for(self, requested: str) -> Optional[List[str]]:
        return self.keywords.get(KEYWORD_ALIASES.get(requested, requested))

    def matches(self, channel: Channel, category: Optional[str]) -> bool:
        if is_passthrough(category) or category == RANDOM_CHANNEL:
            return True

        requested = normalize_category(category)
        channel_name = channel.name.lower()
        channel_category = (
            channel.category.lower() if isinstance(channel.category, str) else None
        )

        if channel_category == requested:
            return True

        if channel_category == "news" and requested in ("news", "top news"):
            return True

        keywords = self.keywords_for(requested)
        if keywords is not None:
            return any(keyword in channel_name for keyword in keywords)

        return requested in channel_name
