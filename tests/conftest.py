from typing import Any, Callable, Dict, List, Optional, Union

import pytest
from google.genai import types

from toolcall_bench.core.contracts import ModelFunctionCall, ModelRequest, ModelResult
from toolcall_bench.demo_tools import create_test_tool_registry
from toolcall_bench.gemini.registry import GeminiToolRegistry


class ScriptedModelClient:
    """Model client double: replays queued results and records every request."""

    def __init__(self, results: List[Union[ModelResult, Exception]]) -> None:
        self.results = list(results)
        self.calls: List[ModelRequest] = []

    async def generate_content(self, request: ModelRequest) -> ModelResult:
        self.calls.append(request)
        if not self.results:
            raise AssertionError(f"Unexpected model call #{len(self.calls)}")
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def text_result(text: str, thoughts: Optional[List[str]] = None) -> ModelResult:
    return ModelResult(text=text, thoughts=thoughts or [])


def call_result(name: str, args: Any, call_id: Optional[str] = None, raw: Any = None) -> ModelResult:
    return ModelResult(function_calls=[ModelFunctionCall(id=call_id, name=name, args=args)], raw=raw)


def raw_function_call_response(name: str, args: Dict[str, Any], signature: bytes = b"sig-1") -> Any:
    """A provider response whose model turn carries an opaque thought signature."""
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[
                        types.Part(
                            function_call=types.FunctionCall(name=name, args=args),
                            thought_signature=signature,
                        )
                    ],
                )
            )
        ]
    )


@pytest.fixture
def scripted_client() -> Callable[..., ScriptedModelClient]:
    def factory(*results: Union[ModelResult, Exception]) -> ScriptedModelClient:
        return ScriptedModelClient(list(results))

    return factory


@pytest.fixture
def test_registry() -> GeminiToolRegistry:
    return create_test_tool_registry()
