from app.core.logging import redact_transcripts


def test_transcript_fields_are_redacted() -> None:
    event = redact_transcripts(
        None,
        "info",
        {"event": "chat_model_unavailable", "text": "I fell down", "user_id": "u1"},
    )

    assert event["text"] == "<redacted 11 chars>"
    assert event["user_id"] == "u1"
    assert event["event"] == "chat_model_unavailable"


def test_non_string_values_are_left_alone() -> None:
    event = redact_transcripts(None, "info", {"event": "x", "context": None})

    assert event["context"] is None
