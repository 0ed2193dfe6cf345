from enum import Enum


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


CHECK_IN_QUESTIONS: dict[TimeOfDay, tuple[str, ...]] = {
    TimeOfDay.MORNING: (
        "Good morning... how did you sleep?",
        "Did you take your morning medication?",
        "Have you had some water yet today?",
    ),
    TimeOfDay.AFTERNOON: (
        "How are you feeling this afternoon?",
        "Have you had lunch and stayed hydrated?",
        "Did you get some movement or fresh air today?",
    ),
    TimeOfDay.EVENING: (
        "How was your day today?",
        "Did you take your evening medication?",
        "Are you feeling safe and comfortable for the night?",
    ),
}


def check_in_questions(time_of_day: TimeOfDay) -> list[str]:
    return list(CHECK_IN_QUESTIONS[TimeOfDay(time_of_day)])
