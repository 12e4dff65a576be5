import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.genai import types

from toolcall_bench.core.contracts import ModelRequest
from toolcall_bench.core.exceptions import ModelTimeoutError, TransientModelError
from toolcall_bench.gemini.client import GeminiModelClient, extract_retry_delay, is_transient_error

REQUEST = ModelRequest(model="gemini-3-flash-preview", contents="hello")


def make_response() -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[
                        types.Part(text="  weighing options  ", thought=True),
                        types.Part(text="Hello "),
                        types.Part(text="world"),
                        types.Part(function_call=types.FunctionCall(id="f1", name="sum_numbers", args={"numbers": [1]})),
                    ],
                )
            )
        ]
    )


def make_aclient(side_effect) -> MagicMock:
    aclient = MagicMock()
    aclient.models.generate_content = AsyncMock(side_effect=side_effect)
    return aclient


class FakeAPIError(Exception):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


@pytest.mark.parametrize(
    "error",
    [
        Exception("429 RESOURCE_EXHAUSTED. Quota exceeded."),
        Exception("Rate_limit reached"),
        Exception("503 UNAVAILABLE. The model is overloaded."),
        Exception("SERVICE_UNAVAILABLE: backend busy"),
        Exception('{"error": {"code": 429, "message": "slow down"}}'),
        FakeAPIError(503, "Service busy"),
    ],
)
def test_transient_errors(error) -> None:
    assert is_transient_error(error)


@pytest.mark.parametrize(
    "error",
    [
        Exception("400 INVALID_ARGUMENT"),
        ValueError("bad schema"),
        ModelTimeoutError("Gemini request timed out after 10ms"),
        Exception("expected 4290 items"),
        Exception("404 NOT_FOUND. models/gemini-x is unavailable for generateContent."),
    ],
)
def test_non_transient_errors(error) -> None:
    assert not is_transient_error(error)


def test_extract_retry_delay() -> None:
    assert extract_retry_delay('{"retryDelay": "17s"}') == 17.0
    assert extract_retry_delay("{'retryDelay': '3s'}") == 3.0
    assert extract_retry_delay("Please retry in 4.2s.") == 4.2
    assert extract_retry_delay("no hint") is None
    assert extract_retry_delay('{"retryDelay": "0s"}') is None


@pytest.mark.asyncio
async def test_generate_content_normalizes_response() -> None:
    response = make_response()
    aclient = make_aclient([response])
    client = GeminiModelClient(aclient, request_timeout_ms=1000)
    config = types.GenerateContentConfig(response_mime_type="application/json")

    result = await client.generate_content(ModelRequest(model="m", contents=["x"], config=config))

    aclient.models.generate_content.assert_awaited_once_with(model="m", contents=["x"], config=config)
    assert result.text == "Hello world"
    assert result.thoughts == ["weighing options"]
    assert len(result.function_calls) == 1
    assert result.function_calls[0].id == "f1"
    assert result.function_calls[0].name == "sum_numbers"
    assert result.function_calls[0].args == {"numbers": [1]}
    assert result.raw is response


@pytest.mark.asyncio
async def test_empty_response_normalizes_to_empty_text() -> None:
    client = GeminiModelClient(make_aclient([types.GenerateContentResponse()]), request_timeout_ms=1000)

    result = await client.generate_content(REQUEST)

    assert result.text == ""
    assert result.function_calls == []
    assert result.thoughts == []


@pytest.mark.asyncio
async def test_transient_errors_are_retried() -> None:
    response = make_response()
    aclient = make_aclient([Exception("429 RESOURCE_EXHAUSTED"), Exception("503 UNAVAILABLE"), response])
    client = GeminiModelClient(aclient, request_timeout_ms=1000, base_retry_delay=0.01)

    result = await client.generate_content(REQUEST)

    assert result.raw is response
    assert aclient.models.generate_content.await_count == 3


@pytest.mark.asyncio
async def test_retry_delay_prefers_provider_hint() -> None:
    aclient = make_aclient(
        [Exception('429 RESOURCE_EXHAUSTED {"retryDelay": "17s"}'), Exception("503 UNAVAILABLE"), make_response()]
    )
    client = GeminiModelClient(aclient, request_timeout_ms=1000)

    with patch("toolcall_bench.gemini.client.asyncio.sleep", new_callable=AsyncMock) as sleep_mock:
        await client.generate_content(REQUEST)

    assert [call.args[0] for call in sleep_mock.await_args_list] == [17.0, 4.0]


@pytest.mark.asyncio
async def test_transient_retries_are_bounded() -> None:
    aclient = make_aclient([Exception("429 RESOURCE_EXHAUSTED")] * 5)
    client = GeminiModelClient(aclient, request_timeout_ms=1000, base_retry_delay=0.01)

    with pytest.raises(TransientModelError, match="RESOURCE_EXHAUSTED"):
        await client.generate_content(REQUEST)

    assert aclient.models.generate_content.await_count == 3


@pytest.mark.asyncio
async def test_non_transient_error_propagates_immediately() -> None:
    aclient = make_aclient([ValueError("400 INVALID_ARGUMENT")])
    client = GeminiModelClient(aclient, request_timeout_ms=1000, base_retry_delay=0.01)

    with pytest.raises(ValueError, match="INVALID_ARGUMENT"):
        await client.generate_content(REQUEST)

    assert aclient.models.generate_content.await_count == 1


@pytest.mark.asyncio
async def test_timeout_is_not_retried() -> None:
    calls = 0

    async def slow(**kwargs):
        nonlocal calls
        calls += 1
        await asyncio.sleep(1)

    aclient = MagicMock()
    aclient.models.generate_content = slow
    client = GeminiModelClient(aclient, request_timeout_ms=10)

    with pytest.raises(ModelTimeoutError, match="timed out after 10ms"):
        await client.generate_content(REQUEST)

    assert calls == 1


def test_request_timeout_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_REQUEST_TIMEOUT_MS", "1500")
    assert GeminiModelClient(MagicMock()).request_timeout_ms == 1500

    monkeypatch.setenv("GEMINI_REQUEST_TIMEOUT_MS", "soon")
    assert GeminiModelClient(MagicMock()).request_timeout_ms == 45_000

    monkeypatch.delenv("GEMINI_REQUEST_TIMEOUT_MS")
    assert GeminiModelClient(MagicMock()).request_timeout_ms == 45_000
    assert GeminiModelClient(MagicMock(), request_timeout_ms=250).request_timeout_ms == 250
