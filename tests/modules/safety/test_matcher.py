import pytest

from app.modules.safety import constants
from app.modules.safety.matcher import detect_text_alert, match_phrases
from app.modules.safety.models import SeverityLevel


def test_fall_and_breathing_phrases_are_all_collected() -> None:
    result = match_phrases("I fell down and I can't breathe")

    assert result.level == SeverityLevel.EMERGENCY
    # Emergency list order, every hit kept
    assert result.detected == ["i fell", "i fell down", "can't breathe"]


def test_matching_is_case_insensitive() -> None:
    result = match_phrases("CHEST PAIN since this morning")

    assert result.level == SeverityLevel.EMERGENCY
    assert result.detected == ["chest pain"]


def test_emergency_phrase_suppresses_concern_scan() -> None:
    result = match_phrases("I'm not feeling well and I need help")

    assert result.level == SeverityLevel.EMERGENCY
    assert result.detected == ["i need help"]
    assert "not feeling well" not in result.detected


def test_concern_phrase_without_emergency() -> None:
    result = match_phrases("I forgot to take my medication")

    assert result.level == SeverityLevel.CONCERN
    assert result.detected == ["forgot to take"]


def test_multiple_concern_phrases_in_list_order() -> None:
    result = match_phrases("I feel sad and I feel lonely today")

    assert result.level == SeverityLevel.CONCERN
    assert result.detected == ["feel lonely", "feel sad"]


def test_no_phrase_is_normal() -> None:
    result = match_phrases("The garden looks lovely this afternoon")

    assert result.level == SeverityLevel.NORMAL
    assert result.detected == []


def test_substring_matching_overmatches_inside_longer_tokens() -> None:
    # "911" inside a phone number still triggers; recall over precision
    result = match_phrases("my cousin's number is 555-1911-22")

    assert result.level == SeverityLevel.EMERGENCY
    assert result.detected == ["911"]


def test_punctuation_is_not_stripped() -> None:
    # "can't" is listed with and without the apostrophe; a typographic quote matches neither
    result = match_phrases("I can’t breathe")

    assert result.level == SeverityLevel.NORMAL


@pytest.mark.parametrize("phrase", constants.EMERGENCY_PHRASES)
def test_every_emergency_phrase_is_detected(phrase: str) -> None:
    result = match_phrases(f"Well... {phrase.upper()} ...")

    assert result.level == SeverityLevel.EMERGENCY
    assert phrase in result.detected


def test_detect_text_alert_emergency_shape() -> None:
    alert = detect_text_alert("Please call an ambulance")

    assert alert.level == SeverityLevel.EMERGENCY
    assert alert.detected == ("ambulance",)
    assert alert.caregiver_alert is True
    assert alert.actions == ("alert_caregiver", "emergency_protocol", "location_share")
    assert alert.message == constants.EMERGENCY_PHRASE_MESSAGE


def test_detect_text_alert_concern_does_not_alert_caregiver() -> None:
    alert = detect_text_alert("I forgot to take my medication")

    assert alert.level == SeverityLevel.CONCERN
    assert alert.detected == ("forgot to take",)
    assert alert.caregiver_alert is False
    assert alert.actions == ("offer_support", "suggest_contact")


def test_detect_text_alert_normal_is_empty() -> None:
    alert = detect_text_alert("I had tea with my neighbour")

    assert alert.is_normal
    assert alert.detected == ()
    assert alert.actions == ()
    assert alert.message == ""
