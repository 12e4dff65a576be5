"""Selection and finalization exchanges shared by the strategy engines."""

from .intents import (
    ToolIntent,
    FinalResponse,
    tool_intent_json_schema,
    final_response_json_schema,
    parse_tool_intent_text,
    parse_final_response_text,
    build_tool_selection_prompt,
    build_final_response_prompt,
)

__all__ = [
    "ToolIntent",
    "FinalResponse",
    "tool_intent_json_schema",
    "final_response_json_schema",
    "parse_tool_intent_text",
    "parse_final_response_text",
    "build_tool_selection_prompt",
    "build_final_response_prompt",
]
