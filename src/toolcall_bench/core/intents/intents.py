"""
JSON-only exchanges shared by the strategies.

Two prompt/schema pairs are defined here: tool selection ("call a tool or respond") and
finalization ("respond after a tool result"). The schemas are sent to the transport as
response constraints; the recovery pipeline handles replies that still break the contract.
"""

import json
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_core import PydanticCustomError

from ..exceptions import IntentError
from ..json_recovery import recover
from ..tools.registry import ToolRegistry
from ..tools.schema import SchemaValidator


class ToolIntent(BaseModel):
    """The model's decision: call one tool, or respond directly."""

    model_config = ConfigDict(populate_by_name=True)

    action: Literal["call_tool", "respond"]
    tool_name: Optional[str] = Field(default=None, alias="toolName")
    args: Optional[Dict[str, Any]] = None
    response: Optional[str] = None
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _require_fields_for_action(self) -> "ToolIntent":
        issues: List[str] = []
        if self.action == "call_tool":
            if not self.tool_name:
                issues.append("toolName is required when action=call_tool")
            if self.args is None:
                issues.append("args is required when action=call_tool")
        if self.action == "respond" and not self.response:
            issues.append("response is required when action=respond")
        if issues:
            raise PydanticCustomError("intent_fields", "; ".join(issues))
        return self


class FinalResponse(BaseModel):
    """The finalization reply after a tool ran."""

    action: Literal["respond"]
    response: str


def tool_intent_json_schema() -> Dict[str, Any]:
    return SchemaValidator.sanitize_schema(ToolIntent.model_json_schema(by_alias=True))


def final_response_json_schema() -> Dict[str, Any]:
    return SchemaValidator.sanitize_schema(FinalResponse.model_json_schema())


def _issues(exc: ValidationError) -> str:
    return "; ".join(error["msg"] for error in exc.errors())


def parse_tool_intent_text(text: str) -> ToolIntent:
    """Recover and validate a tool-selection reply.

    Raises:
        RecoveryError: If no JSON can be recovered from the text.
        IntentError: If the recovered value does not match the intent schema.
    """
    parsed = recover(text)
    try:
        return ToolIntent.model_validate(parsed)
    except ValidationError as exc:
        raise IntentError(_issues(exc)) from exc


def parse_final_response_text(text: str) -> str:
    """Recover and validate a finalization reply and return its response text.

    Raises:
        RecoveryError: If no JSON can be recovered from the text.
        IntentError: If the recovered value does not match the final-response schema.
    """
    parsed = recover(text)
    try:
        return FinalResponse.model_validate(parsed).response
    except ValidationError as exc:
        raise IntentError(_issues(exc)) from exc


def build_tool_selection_prompt(user_prompt: str, registry: ToolRegistry) -> str:
    return "\n".join(
        [
            "You are a tool planner for a deterministic tool-calling pipeline.",
            "Decide whether to call exactly one tool or respond directly.",
            "Output must be valid JSON matching the response schema exactly.",
            "Do not wrap JSON in markdown, code fences, or prose.",
            "If action='call_tool':",
            "- toolName must exactly match one available tool name.",
            "- args must be a JSON object that matches the chosen tool schema.",
            "If action='respond':",
            "- include a concise response string in 'response'.",
            "- omit toolName and args.",
            "Available tools:",
            json.dumps(registry.describe_for_prompt(), indent=2),
            "User request:",
            user_prompt,
        ]
    )


def build_final_response_prompt(user_prompt: str, tool_name: str, tool_args: Dict[str, Any], tool_result: Any) -> str:
    return "\n".join(
        [
            "You are finalizing an assistant reply after a tool call.",
            "Return only valid JSON that matches this exact shape:",
            '{"action":"respond","response":"<concise answer>"}',
            "Do not add markdown, code fences, or additional keys.",
            "Ground the response in the tool result and the original user request.",
            "Original user request:",
            user_prompt,
            "Tool that was executed:",
            tool_name,
            "Tool args:",
            json.dumps(tool_args),
            "Tool result:",
            json.dumps(tool_result, default=str),
        ]
    )
