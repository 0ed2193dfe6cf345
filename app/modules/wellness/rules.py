"""
Gentle wellness nudges.

Every rule is a pure function of what the caller already knows (schedule,
water intake, weather, mood); nothing here touches the store or the network.
"""

from typing import Iterable

from app.modules.chat.persona import PlanMood
from app.modules.wellness.models import (
    HydrationGoal,
    MedicationSchedule,
    NudgePriority,
    StressLevel,
    TimeOfDay,
    WeatherData,
    WellnessNudge,
)

WARM_DAY_F = 75
HOT_DAY_F = 85
COLD_DAY_F = 35
PLEASANT_DAY_F = 65

_PRIORITY_RANK: dict[NudgePriority, int] = {"high": 0, "medium": 1, "low": 2}

# (message, spoken message, action) per time of day and mood
_ACTIVITY: dict[TimeOfDay, dict[PlanMood, tuple[str, str, str]]] = {
    "morning": {
        "low": (
            "Let's start gentle today. Maybe some stretches in your chair?",
            "Let's take it easy this morning… how about some gentle stretches? "
            "Just what feels comfortable.",
            "chair_stretches",
        ),
        "ok": (
            "A short morning walk might feel good. Just around the block?",
            "How about a short walk this morning? Just around the block… "
            "fresh air can feel so nice.",
            "short_walk",
        ),
        "good": (
            "You're feeling good! How about a morning walk or some light exercise?",
            "You seem to be feeling well today… maybe a nice walk or some light exercise?",
            "morning_activity",
        ),
    },
    "afternoon": {
        "low": (
            "Rest is important. Maybe sit by a window and enjoy the view?",
            "It's okay to rest… how about sitting by a window? "
            "The light and view can be calming.",
            "rest_time",
        ),
        "ok": (
            "A little movement can boost your energy. Short walk or gentle stretches?",
            "A bit of movement might help your energy… nothing too much, "
            "just what feels right.",
            "light_movement",
        ),
        "good": (
            "Great energy! Maybe some gardening or a hobby you enjoy?",
            "You have good energy today… how about spending time on something you love? "
            "Gardening, crafts, whatever brings you joy.",
            "hobby_time",
        ),
    },
    "evening": {
        "low": (
            "Wind down gently. Some calm music or a favorite show?",
            "Let's wind down peacefully… maybe some calm music or a show you like?",
            "calm_evening",
        ),
        "ok": (
            "Evening is for relaxing. Light reading or gentle music?",
            "Time to relax… maybe some light reading or peaceful music before bed?",
            "relaxation",
        ),
        "good": (
            "Nice evening! Maybe a phone call with family or friends?",
            "It's a nice evening… would you like to call someone? Family or friends?",
            "social_connection",
        ),
    },
}

_STRESS: dict[StressLevel, tuple[str, str, str]] = {
    "high": (
        "Let's take some deep breaths together. In slowly… and out slowly…",
        "I can tell you might be feeling stressed… let's breathe together. "
        "Breathe in slowly… two, three, four… and out… two, three, four. "
        "You're doing great.",
        "breathing_exercise",
    ),
    "medium": (
        "Feeling a bit tense? Try relaxing your shoulders and taking a few deep breaths.",
        "Let's relax those shoulders… drop them down… and take a few slow, deep breaths. "
        "That's it… you're doing well.",
        "shoulder_relaxation",
    ),
    "low": (
        "You're doing well. Remember to pause and breathe when you need to.",
        "You're doing just fine… remember, you can always pause and take a breath "
        "whenever you need to.",
        "reminder",
    ),
}


def _glasses(count: int) -> str:
    return "glass" if count == 1 else "glasses"


def medication_reminder(medication: MedicationSchedule) -> WellnessNudge:
    food_note = " Remember to take it with some food." if medication.with_food else ""
    return WellnessNudge(
        type="medication",
        priority="high",
        message=f"Time for your {medication.name} ({medication.dosage}).{food_note}",
        tts_message=(
            f"Hi… it's time for your {medication.name}. {medication.dosage}.{food_note} "
            "I'll wait while you take it… no rush."
        ),
        action="confirm_taken",
    )


def hydration_nudge(
    goal: HydrationGoal, temperature: float | None = None
) -> WellnessNudge | None:
    remaining = goal.daily_glasses - goal.current_glasses
    if remaining <= 0:
        return None

    warm_note = ""
    if temperature is not None and temperature > WARM_DAY_F:
        warm_note = " It is warm today, so staying hydrated is extra important."

    if remaining >= 6:
        return WellnessNudge(
            type="hydration",
            priority="high",
            message=(
                f"You've had {goal.current_glasses} {_glasses(goal.current_glasses)} "
                "of water today. Let's have another one."
            ),
            tts_message=f"How about a glass of water?{warm_note} Take your time… I'll wait.",
            action="log_water",
        )
    if remaining >= 3:
        return WellnessNudge(
            type="hydration",
            priority="medium",
            message=f"{remaining} more {_glasses(remaining)} of water to reach your goal today.",
            tts_message=(
                f"You're doing well… just {remaining} more {_glasses(remaining)} "
                f"of water to go.{warm_note}"
            ),
            action="log_water",
        )
    return WellnessNudge(
        type="hydration",
        priority="low",
        message=f"Almost there! Just {remaining} more {_glasses(remaining)}.",
        tts_message=(
            f"You're almost at your water goal… just {remaining} more to go. "
            "You're doing great!"
        ),
        action="log_water",
    )


def weather_prompt(weather: WeatherData | None) -> WellnessNudge | None:
    if weather is None:
        return None
    temp = round(weather.temp)
    condition = weather.condition.lower()

    if weather.temp > HOT_DAY_F:
        return WellnessNudge(
            type="weather",
            priority="high",
            message=f"It's {temp}°F outside. Stay indoors and drink plenty of water.",
            tts_message=(
                f"It's quite warm today… {temp} degrees. Let's stay inside where it's cool… "
                "and make sure to drink extra water."
            ),
        )
    if weather.temp < COLD_DAY_F:
        return WellnessNudge(
            type="weather",
            priority="medium",
            message=f"It's {temp}°F outside. Dress warmly if you go out.",
            tts_message=(
                f"It's cold today… {temp} degrees. If you go outside, "
                "make sure to bundle up nice and warm."
            ),
        )
    if condition == "rainy":
        return WellnessNudge(
            type="weather",
            priority="low",
            message="It's raining today. Perfect day to stay cozy inside.",
            tts_message=(
                "It's a rainy day… perfect for staying cozy inside. "
                "Maybe a good book or some music?"
            ),
        )
    if PLEASANT_DAY_F <= weather.temp <= WARM_DAY_F and condition == "sunny":
        return WellnessNudge(
            type="weather",
            priority="low",
            message=f"Beautiful day! {temp}°F and sunny. Great for a short walk.",
            tts_message=(
                f"It's a beautiful day outside… {temp} degrees and sunny. "
                "If you feel up to it, a short walk might feel nice."
            ),
        )
    return None


def activity_guidance(time_of_day: TimeOfDay, mood: PlanMood) -> WellnessNudge:
    message, tts_message, action = _ACTIVITY[time_of_day][mood]
    return WellnessNudge(
        type="activity",
        priority="medium",
        message=message,
        tts_message=tts_message,
        action=action,
    )


def stress_reduction(level: StressLevel) -> WellnessNudge:
    message, tts_message, action = _STRESS[level]
    return WellnessNudge(
        type="rest",
        priority="high" if level == "high" else "medium",
        message=message,
        tts_message=tts_message,
        action=action,
    )


def due_medications(
    medications: Iterable[MedicationSchedule], hour: int
) -> list[MedicationSchedule]:
    # Reminders fire on the hour only.
    slot = f"{hour:02d}:00"
    return [medication for medication in medications if slot in medication.times]


def wellness_nudges(
    time_of_day: TimeOfDay,
    medications: Iterable[MedicationSchedule],
    hydration: HydrationGoal,
    weather: WeatherData | None,
    mood: PlanMood,
    hour: int,
    stress_level: StressLevel | None = None,
) -> list[WellnessNudge]:
    """All nudges for this moment, most pressing first."""
    nudges = [medication_reminder(medication) for medication in due_medications(medications, hour)]

    water = hydration_nudge(hydration, weather.temp if weather else None)
    if water is not None:
        nudges.append(water)

    outside = weather_prompt(weather)
    if outside is not None:
        nudges.append(outside)

    nudges.append(activity_guidance(time_of_day, mood))
    if stress_level is not None:
        nudges.append(stress_reduction(stress_level))

    # sorted() is stable, so equal priorities keep the order above.
    return sorted(nudges, key=lambda nudge: _PRIORITY_RANK[nudge.priority])
