"""LLM-driven repair of tool arguments that failed schema validation."""

import json
from typing import Any, Optional, Tuple

from ..core.contracts import JsonObject, ModelClient, ModelRequest
from ..core.exceptions import RecoveryError, ShapeError, ToolValidationError
from ..core.json_recovery import as_json_object, parse_object_with_repair
from ..core.logger import get_logger
from ..core.tools import ToolRegistry, ValidationResult
from ..gemini.generation_settings import GenerationSettings
from .base import RunState, json_response_config

logger = get_logger(__name__)


def validate_raw_tool_args(registry: ToolRegistry, tool_name: str, raw_args: Any, label: str) -> ValidationResult:
    """Validate model-produced arguments that may be a JSON object or a JSON string. Never raises."""
    try:
        if isinstance(raw_args, str):
            candidate = parse_object_with_repair(raw_args, label)
        else:
            candidate = as_json_object(raw_args, label)
    except (RecoveryError, ShapeError) as exc:
        return ValidationResult.failure(str(exc))

    return registry.validate_args(tool_name, candidate)


def build_repair_prompt(registry: ToolRegistry, tool_name: str, user_prompt: str, broken_args: Any) -> str:
    return "\n".join(
        [
            "Repair the tool args so they match the schema exactly.",
            "Return only JSON for the repaired args object.",
            f"Tool: {tool_name}",
            f"Schema: {json.dumps(registry.get_args_json_schema(tool_name))}",
            f"User request: {user_prompt}",
            f"Broken args: {json.dumps(broken_args, default=str)}",
        ]
    )


async def repair_tool_args(
    client: ModelClient,
    registry: ToolRegistry,
    user_prompt: str,
    tool_name: str,
    broken_args: Any,
    repair_model: str,
    generation_settings: Optional[GenerationSettings],
) -> JsonObject:
    """Send one schema-constrained repair request and return the repaired args object.

    Raises:
        RecoveryError: If the reply holds no JSON.
        ShapeError: If the reply is not a JSON object.
    """
    request = ModelRequest(
        model=repair_model,
        contents=build_repair_prompt(registry, tool_name, user_prompt, broken_args),
        config=json_response_config(registry.get_args_json_schema(tool_name), generation_settings, repair_model),
    )
    response = await client.generate_content(request)
    return parse_object_with_repair(response.text, "Repaired tool args")


async def resolve_tool_args(
    client: ModelClient,
    registry: ToolRegistry,
    user_prompt: str,
    tool_name: str,
    raw_args: Any,
    state: RunState,
    repair_model: str,
    generation_settings: Optional[GenerationSettings] = None,
    max_repair_attempts: int = 1,
    label: str = "functionCall.args",
) -> Tuple[JsonObject, bool]:
    """
    Validate ``raw_args`` and fall back to LLM repair when they are invalid.

    Each repair attempt feeds the latest broken arguments back to the model.

    Args:
        client: The model-call capability.
        registry: Registry holding the tool.
        user_prompt: The user's request, given to the repair model as context.
        tool_name: Name of a registered tool.
        raw_args: Arguments as produced by the model (object or JSON string).
        state: Run state receiving the repair trace steps.
        repair_model: Model id used for repair requests.
        generation_settings: Reasoning options for repair requests.
        max_repair_attempts: Number of repair exchanges allowed.
        label: Name of the arguments used in shape errors.

    Returns:
        The validated arguments and whether repair was needed.

    Raises:
        ToolValidationError: If the arguments are still invalid after the last repair attempt.
    """
    direct = validate_raw_tool_args(registry, tool_name, raw_args, label)
    if direct.ok and direct.args is not None:
        return direct.args, False

    error = direct.error
    broken = raw_args
    for attempt in range(1, max_repair_attempts + 1):
        state.add_trace(
            "repair",
            "raw_args_invalid_attempting_llm_repair",
            {"toolName": tool_name, "reason": error},
        )
        logger.info(f"Repairing args for '{tool_name}' (attempt {attempt}/{max_repair_attempts}): {error}")

        try:
            repaired = await repair_tool_args(
                client, registry, user_prompt, tool_name, broken, repair_model, generation_settings
            )
        except (RecoveryError, ShapeError) as exc:
            error = str(exc)
            continue

        revalidated = registry.validate_args(tool_name, repaired)
        if revalidated.ok and revalidated.args is not None:
            return revalidated.args, True

        error = revalidated.error
        broken = repaired

    msg = f"Tool args still invalid after repair: {error}"
    logger.warning(msg)
    raise ToolValidationError(msg)
