import json

import httpx
import pytest

from humanizer_ai.core.config import Settings
from humanizer_ai.core.errors import InputTooLongError, RewriteError
from humanizer_ai.schemas.humanize import RewriteOptions
from humanizer_ai.services.rewrite_client import RewriteClient, build_prompt

RESULT = {
    "text": "Honestly, this works well.",
    "changes": [
        {
            "type": "REPHRASE",
            "originalText": "This solution is highly effective",
            "humanizedText": "this works well",
            "explanation": "Plainer wording.",
        }
    ],
    "stats": {"totalChanges": 1, "phrasesReplaced": 1, "contractionsAdded": 0},
}


def _settings(**overrides) -> Settings:
    values = {"GEMINI_API_KEY": "test-key", "GEMINI_MODEL": "gemini-test"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(handler, **overrides) -> RewriteClient:
    return RewriteClient(settings=_settings(**overrides), transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_remote_rewrite_parses_structured_response():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_gemini_body(json.dumps(RESULT)))

    client = _client(handler)
    options = RewriteOptions(tone="casual", voice="objective", expand=True)

    result = await client.humanize("This solution is highly effective.", options)

    assert client.mode == "remote"
    assert seen["url"].endswith("/models/gemini-test:generateContent")
    assert seen["key"] == "test-key"
    assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"
    prompt = seen["body"]["contents"][0]["parts"][0]["text"]
    assert "This solution is highly effective." in prompt
    assert "EXPAND" in prompt
    assert result.text == "Honestly, this works well."
    assert result.changes[0].type == "REPHRASE"
    assert result.changes[0].humanized_text == "this works well"
    assert result.stats.phrases_replaced == 1


@pytest.mark.asyncio
async def test_fenced_json_is_accepted():
    fenced = "```json\n" + json.dumps(RESULT) + "\n```"
    client = _client(lambda request: httpx.Response(200, json=_gemini_body(fenced)))

    result = await client.humanize("text", RewriteOptions())

    assert result.stats.total_changes == 1


@pytest.mark.asyncio
async def test_http_error_message_is_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Quota exceeded"}})

    with pytest.raises(RewriteError) as exc:
        await _client(handler).humanize("text", RewriteOptions())

    assert exc.value.message == "Rewrite service error (429): Quota exceeded"


@pytest.mark.asyncio
async def test_transport_failure_becomes_rewrite_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RewriteError) as exc:
        await _client(handler).humanize("text", RewriteOptions())

    assert "Could not reach the rewrite service" in exc.value.message


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"candidates": []},
        _gemini_body("not json at all"),
        _gemini_body(json.dumps({"text": "ok", "changes": [{"type": "SHOUT"}]})),
        _gemini_body(json.dumps(["a", "list"])),
        {"candidates": [{"content": {"parts": [{"text": None}]}}]},
        {"candidates": ["not a candidate"]},
        {"candidates": [{"content": "flat"}]},
        {"promptFeedback": "blocked", "candidates": []},
    ],
)
async def test_malformed_responses_become_rewrite_errors(body):
    client = _client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(RewriteError):
        await client.humanize("text", RewriteOptions())


@pytest.mark.asyncio
async def test_blocked_prompt_is_reported():
    body = {"promptFeedback": {"blockReason": "SAFETY"}}
    client = _client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(RewriteError) as exc:
        await client.humanize("text", RewriteOptions())

    assert "SAFETY" in exc.value.message


@pytest.mark.asyncio
async def test_input_over_limit_is_rejected_without_a_call():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_gemini_body(json.dumps(RESULT)))

    client = _client(handler, REWRITE_MAX_INPUT_CHARS=10)

    with pytest.raises(InputTooLongError):
        await client.humanize("x" * 11, RewriteOptions())
    assert calls == []


@pytest.mark.asyncio
async def test_missing_key_uses_local_fallback():
    client = RewriteClient(settings=_settings(GEMINI_API_KEY=""))

    result = await client.humanize("Moreover, we utilize it.", RewriteOptions())

    assert client.mode == "fallback"
    assert result.text == "Also, we use it."
    assert result.stats.total_changes == 2


@pytest.mark.asyncio
async def test_missing_key_fails_when_remote_is_required():
    client = RewriteClient(settings=_settings(GEMINI_API_KEY="", REWRITE_REQUIRE_REMOTE=True))

    with pytest.raises(RewriteError):
        await client.humanize("text", RewriteOptions())


def test_prompt_reflects_options():
    prompt = build_prompt("Body text.", RewriteOptions(tone="academic", voice="third-person"))

    assert "scholarly" in prompt
    assert "third person" in prompt
    assert "Keep roughly the original length." in prompt
    assert prompt.endswith("Body text.")
