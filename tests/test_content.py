from conftest import raw_function_call_response
from google.genai import types

from toolcall_bench.gemini.content import (
    extract_first_model_function_call_content,
    function_response_content,
    model_function_call_content,
    user_text_content,
)


def test_extract_from_sdk_response_keeps_identity() -> None:
    raw = raw_function_call_response("sum_numbers", {"numbers": [1]}, signature=b"opaque")

    content = extract_first_model_function_call_content(raw)

    assert content is raw.candidates[0].content
    assert content.parts[0].thought_signature == b"opaque"


def test_extract_from_mapping() -> None:
    content = {"role": "model", "parts": [{"functionCall": {"name": "x", "args": {}}, "thoughtSignature": "abc"}]}
    raw = {"candidates": [{"content": content}]}

    assert extract_first_model_function_call_content(raw) is content


def test_extract_returns_none_without_function_call() -> None:
    text_only = types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=[types.Part(text="hi")]))]
    )
    assert extract_first_model_function_call_content(text_only) is None
    assert extract_first_model_function_call_content(None) is None
    assert extract_first_model_function_call_content({"candidates": []}) is None
    assert extract_first_model_function_call_content({"candidates": [{"content": None}]}) is None
    assert extract_first_model_function_call_content({"candidates": [{"content": {"parts": "bad"}}]}) is None


def test_content_builders() -> None:
    assert user_text_content("hello").parts[0].text == "hello"

    call = model_function_call_content("dispatch_tool", {"toolName": "sum_numbers"})
    assert call.role == "model"
    assert call.parts[0].function_call.args == {"toolName": "sum_numbers"}

    response = function_response_content("call_0", "sum_numbers", {"result": {"total": 3}})
    assert response.role == "user"
    assert response.parts[0].function_response.id == "call_0"
    assert response.parts[0].function_response.response == {"result": {"total": 3}}
