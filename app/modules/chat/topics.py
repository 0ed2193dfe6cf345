import re

MAX_TOPICS_PER_MESSAGE = 5
MAX_TOPIC_LENGTH = 80

# Group 1 holds the topic
DISCOMFORT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"(.*?)\bmakes?\s+me\s+(?:uneasy|uncomfortable|nervous|anxious|upset|sad|scared)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:please\s+)?(?:don't|do not)\s+(?:talk|speak|go)\s+about\s+([^.!?]+)",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:don't|do not)\s+mention\s+([^.!?]+)", re.IGNORECASE),
    re.compile(r"\bi\s+don't\s+like\s+talking\s+about\s+([^.!?]+)", re.IGNORECASE),
    re.compile(r"\b(?:avoid|stop)\s+talking\s+about\s+([^.!?]+)", re.IGNORECASE),
)

_TRAILING_PREPOSITION = re.compile(r"(?:about|on|of)\s+$", re.IGNORECASE)
_DISALLOWED = re.compile(r"[^a-z0-9\s'-]", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def normalize_topic(raw: str | None) -> str | None:
    if not raw:
        return None
    topic = _TRAILING_PREPOSITION.sub("", raw)
    topic = _DISALLOWED.sub("", topic).strip().lower()
    topic = _WHITESPACE.sub(" ", topic)[:MAX_TOPIC_LENGTH]
    return topic or None


def extract_discomfort_topics(text: str) -> list[str]:
    """Topics the user asked not to talk about, in order of appearance per pattern."""
    if not text:
        return []
    topics: dict[str, None] = {}
    for pattern in DISCOMFORT_PATTERNS:
        for match in pattern.finditer(text):
            topic = normalize_topic(match.group(1))
            if topic and len(topic) > 2:
                topics.setdefault(topic)
    return list(topics)[:MAX_TOPICS_PER_MESSAGE]
