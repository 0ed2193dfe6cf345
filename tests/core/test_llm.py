import json

import httpx
import pytest

from app.core.llm import (
    FIRST_TURN_INSTRUCTION,
    PERSONA_INSTRUCTION,
    ChatModelError,
    ChatTurn,
    GeminiChatClient,
    build_system_instruction,
)


def _candidate(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_system_instruction_plain() -> None:
    assert build_system_instruction(False, []) == PERSONA_INSTRUCTION


def test_system_instruction_first_turn_and_topics() -> None:
    topics = ["t1!", "x", "money", "hospitals", "my son", "war", "politics", "weather"]

    instruction = build_system_instruction(True, topics)

    assert instruction.endswith(FIRST_TURN_INSTRUCTION)
    # Last six usable topics, cleaned
    assert "money, hospitals, my son, war, politics, weather" in instruction
    assert "t1" not in instruction


@pytest.mark.asyncio
async def test_reply_sends_history_and_returns_text() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_candidate("  Hello dear.  "))

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        model = GeminiChatClient("key-1", model="gemini-test", client=client)
        text = await model.reply(
            "How are you?",
            history=[ChatTurn("user", "Hi"), ChatTurn("companion", "Hello"), ChatTurn("user", " ")],
        )

    assert text == "Hello dear."
    request = seen[0]
    assert request.url.params["key"] == "key-1"
    assert request.url.path.endswith("/models/gemini-test:generateContent")
    body = json.loads(request.content)
    assert [c["role"] for c in body["contents"]] == ["user", "model", "user"]
    assert body["contents"][-1]["parts"][0]["text"] == "How are you?"
    assert body["generationConfig"]["maxOutputTokens"] == 220


@pytest.mark.asyncio
async def test_missing_key_raises() -> None:
    with pytest.raises(ChatModelError):
        await GeminiChatClient(None).reply("Hi")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500),
        httpx.Response(200, json={"candidates": []}),
        httpx.Response(200, json=_candidate("   ")),
        httpx.Response(200, text="<html>busy</html>"),
        httpx.Response(200, json=[_candidate("Hello")]),
        httpx.Response(200, json={"candidates": ["Hello"]}),
    ],
)
async def test_bad_responses_raise(response: httpx.Response) -> None:
    transport = httpx.MockTransport(lambda request: response)
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(ChatModelError):
            await GeminiChatClient("key-1", client=client).reply("Hi")
