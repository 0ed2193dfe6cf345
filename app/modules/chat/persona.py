"""
Companion persona: warm, slow, simple phrasing for elderly users.

Scripted replies are used where no model is involved (check-ins, empathy) and as
the fallback when the chat model is unavailable.
"""

import random
import re
from typing import Literal

from app.modules.chat.memory import Emotion

PlanMood = Literal["low", "ok", "good"]

REASSURANCE_LINES = (
    "It's okay… take your time.",
    "I'm here with you.",
    "You're doing fine.",
    "Let's go slowly.",
    "No need to rush.",
)

SIMPLE_WORDS = {
    "utilize": "use",
    "implement": "do",
    "configure": "set up",
    "optimize": "make better",
    "initialize": "start",
}

EMPATHETIC_RESPONSES: dict[Emotion, tuple[str, ...]] = {
    "stressed": (
        "It's okay to feel this way… let's breathe together and go slowly.",
        "This sounds heavy… we can take things one small step at a time.",
        "Thank you for telling me… we will go gently, there is no rush.",
    ),
    "confused": (
        "That's alright… let's look at this step by step, nice and easy.",
        "It can be confusing sometimes… we will go through it slowly together.",
        "You do not have to understand everything at once… we can take our time.",
    ),
    "lonely": (
        "I'm here with you… you're not alone. Let's talk for a while.",
        "Feeling lonely can be very hard… I am right here listening to you.",
        "Even if the room feels empty, I am here with you now.",
    ),
    "calm": (
        "I'm glad you're here… let's enjoy this moment together.",
        "It sounds like a gentle moment… we can simply be here together.",
        "Thank you for sharing this time with me… let's keep things soft and easy.",
    ),
}

CHECK_IN_MESSAGES: dict[PlanMood, str] = {
    "low": "I'm here with you… let's take things one step at a time today.",
    "ok": "You're doing just fine… let's see what today brings.",
    "good": "It's wonderful to see you… let's make today a good one.",
}

_EMOTION_KEYWORDS: tuple[tuple[Emotion, tuple[str, ...]], ...] = (
    ("stressed", ("stress", "worried", "anxious")),
    ("confused", ("confused", "don't understand", "lost")),
    ("lonely", ("lonely", "alone", "miss")),
)

_SIMPLE_WORD_PATTERNS = [
    (re.compile(rf"\b{complex_word}\b", re.IGNORECASE), simple)
    for complex_word, simple in SIMPLE_WORDS.items()
]


def detect_emotion(user_input: str) -> Emotion:
    lowered = user_input.lower()
    for emotion, keywords in _EMOTION_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return emotion
    return "calm"


def plan_mood(emotion: Emotion) -> PlanMood:
    if emotion in ("stressed", "lonely"):
        return "low"
    if emotion == "confused":
        return "ok"
    return "good"


def simplify_language(text: str) -> str:
    for pattern, simple in _SIMPLE_WORD_PATTERNS:
        text = pattern.sub(simple, text)
    return text


def add_tts_pauses(text: str) -> str:
    text = text.replace("...", "…")
    text = re.sub(r"([.!?])\s+", r"\1 ", text)
    return re.sub(r",(\S)", r", \1", text)


def format_for_tts(
    text: str,
    simple_words: bool = True,
    pauses: bool = True,
    include_reassurance: bool = False,
    rng: random.Random | None = None,
) -> str:
    formatted = text
    if simple_words:
        formatted = simplify_language(formatted)
    if pauses:
        formatted = add_tts_pauses(formatted)
    if include_reassurance:
        formatted = f"{(rng or random).choice(REASSURANCE_LINES)} {formatted}"
    return formatted


def empathetic_response(emotion: Emotion, rng: random.Random | None = None) -> str:
    return format_for_tts((rng or random).choice(EMPATHETIC_RESPONSES[emotion]))


def check_in_message(mood: PlanMood) -> str:
    return format_for_tts(CHECK_IN_MESSAGES[mood])
