"""Build Gemini conversation content and replay the model's own prior turn verbatim."""

from typing import Any, Dict, Mapping, Optional

from google.genai import types

from ..core.logger import get_logger

logger = get_logger(__name__)


def user_text_content(text: str) -> types.Content:
    return types.Content(role="user", parts=[types.Part(text=text)])


def model_function_call_content(name: str, args: Dict[str, Any]) -> types.Content:
    """Synthesize a model turn from extracted function-call fields.

    Only used when the raw response carries no replayable content.
    """
    return types.Content(role="model", parts=[types.Part(function_call=types.FunctionCall(name=name, args=args))])


def function_response_content(call_id: str, name: str, response: Dict[str, Any]) -> types.Content:
    return types.Content(
        role="user",
        parts=[
            types.Part(
                function_response=types.FunctionResponse(
                    id=call_id,
                    name=name,
                    response=response,
                )
            )
        ],
    )


def extract_first_model_function_call_content(raw: Any) -> Optional[Any]:
    """Return the first candidate's content object, unchanged, if it holds a function call.

    The returned object is the very instance found in ``raw`` so that opaque continuation data
    (e.g. thought signatures) is replayed exactly. Both SDK response objects and plain mappings
    are supported.

    Args:
        raw: The provider response kept on ``ModelResult.raw``.

    Returns:
        The content object, or None when there is nothing to replay.
    """
    candidates = _field(raw, "candidates")
    if not isinstance(candidates, (list, tuple)) or not candidates:
        return None

    content = _field(candidates[0], "content")
    if content is None:
        return None

    parts = _field(content, "parts")
    if not isinstance(parts, (list, tuple)):
        return None

    if not any(_part_has_function_call(part) for part in parts):
        return None

    logger.debug("Replaying raw model content with %d part(s).", len(parts))
    return content


def _part_has_function_call(part: Any) -> bool:
    if isinstance(part, Mapping):
        call = part.get("functionCall", part.get("function_call"))
        return isinstance(call, Mapping)
    return getattr(part, "function_call", None) is not None


def _field(value: Any, name: str) -> Any:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)
