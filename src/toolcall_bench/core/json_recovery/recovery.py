"""
Recover structured JSON from unreliable model text.

Recovery is applied in a fixed order and the first success wins:

1. strip a single enclosing markdown code fence (optionally tagged ``json``),
2. strict ``json.loads``,
3. heuristic syntax repair (``json_repair``) followed by a parse,
4. extraction of the first balanced ``{...}`` substring, repaired and parsed.
"""

import json
import re
from typing import Any, Dict, Optional

from json_repair import repair_json

from ..exceptions import RecoveryError, ShapeError
from ..logger import get_logger

logger = get_logger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$", re.IGNORECASE)


def unwrap_markdown_code_fence(text: str) -> str:
    """Return the fenced body if the whole trimmed text is one code fence, else the text unchanged."""
    match = _CODE_FENCE.match(text.strip())
    if not match:
        return text
    return match.group(1)


def extract_first_balanced_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` substring of ``text``, or None."""
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]

    return None


def _parse_repaired(text: str) -> Any:
    repaired = repair_json(text)
    # json_repair degrades unparseable prose to an empty string instead of raising
    if not isinstance(repaired, str) or repaired.strip() in ("", '""'):
        raise ValueError("Heuristic repair produced no JSON value")
    return json.loads(repaired)


def _matches_leading_delimiter(text: str, value: Any) -> bool:
    """Whether a repaired value has the shape the text announces.

    json_repair folds several top-level values (an object followed by prose containing
    braces, or two objects) into one array; such a result does not count as recovered.
    """
    if text.startswith("["):
        return isinstance(value, list)
    return isinstance(value, dict)


def recover(raw: str) -> Any:
    """Turn raw model text into a parsed JSON value.

    Args:
        raw: Text returned by the model.

    Returns:
        The recovered JSON value.

    Raises:
        RecoveryError: If the text is empty or no plausible JSON object can be found.
    """
    normalized = unwrap_markdown_code_fence(raw).strip()
    if not normalized:
        raise RecoveryError("Empty JSON string")

    try:
        return json.loads(normalized)
    except ValueError:
        pass

    try:
        value = _parse_repaired(normalized)
    except ValueError:
        pass
    else:
        if _matches_leading_delimiter(normalized, value):
            logger.debug("Recovered JSON through heuristic repair.")
            return value

    candidate = extract_first_balanced_json_object(normalized)
    if candidate is None:
        raise RecoveryError("No JSON object found")

    try:
        value = _parse_repaired(candidate)
    except ValueError as exc:
        raise RecoveryError("No JSON object found") from exc

    logger.debug("Recovered JSON from embedded object substring.")
    return value


def is_json_object(value: Any) -> bool:
    """Check whether ``value`` is a plain keyed mapping (not an array, primitive or null)."""
    return isinstance(value, dict)


def as_json_object(value: Any, label: str) -> Dict[str, Any]:
    """Narrow a recovered value to a JSON object.

    Raises:
        ShapeError: If ``value`` is not a plain keyed mapping.
    """
    if not is_json_object(value):
        raise ShapeError(f"{label} must be a JSON object")
    return value


def parse_object_with_repair(raw: str, label: str) -> Dict[str, Any]:
    """Recover ``raw`` and require the result to be a JSON object."""
    return as_json_object(recover(raw), label)
