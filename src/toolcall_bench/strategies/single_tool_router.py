"""Single-Tool-Router strategy: native calling through one generic dispatch function."""

import json
from typing import Any, Dict, List

from google.genai import types
from pydantic import BaseModel, ConfigDict, ValidationError

from ..core.contracts import ModelClient, ModelRequest, RunnerResult, Strategy
from ..core.exceptions import ToolValidationError, UnknownToolError
from ..core.logger import get_logger
from ..core.tools import ToolExecutionContext, ToolRegistry
from ..gemini.content import (
    extract_first_model_function_call_content,
    function_response_content,
    model_function_call_content,
    user_text_content,
)
from ..gemini.generation_settings import apply_generation_settings
from .base import SingleToolRouterOptions, StrategyOptions, StrategyRunner
from .repair import resolve_tool_args

logger = get_logger(__name__)

DISPATCH_TOOL_NAME = "dispatch_tool"

NO_DISPATCH_MESSAGE = "Model did not provide a dispatch tool call."
NO_RESULT_MESSAGE = "No result."


class DispatchPayload(BaseModel):
    """Arguments of the dispatch function as sent by the model."""

    model_config = ConfigDict(strict=True)

    toolName: str
    argumentsJson: str


def dispatch_declaration(registry: ToolRegistry) -> types.FunctionDeclaration:
    return types.FunctionDeclaration(
        name=DISPATCH_TOOL_NAME,
        description="Route a call to one of the available tools. argumentsJson must be valid JSON.",
        parameters_json_schema={
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "toolName": {
                    "type": "string",
                    "enum": registry.names(),
                    "description": "Exact name of the tool to run.",
                },
                "argumentsJson": {
                    "type": "string",
                    "description": "JSON string for tool arguments. Must parse into a JSON object.",
                },
            },
            "required": ["toolName", "argumentsJson"],
        },
    )


def _parse_dispatch_payload(raw_args: Any) -> DispatchPayload:
    try:
        return DispatchPayload.model_validate(raw_args)
    except ValidationError as exc:
        issues = "; ".join(error["msg"] for error in exc.errors())
        raise ToolValidationError(f"dispatch_tool args are invalid: {issues}") from exc


class SingleToolRouterRunner(StrategyRunner):
    """
    Offer the model a single `dispatch_tool` function and route each dispatch to the registry.

    `argumentsJson` goes through JSON recovery and, when still invalid, through the LLM repair
    exchange. The model's own previous turn is replayed verbatim alongside the function response.
    """

    strategy = Strategy.SINGLE_TOOL_ROUTER

    async def run(
        self,
        client: ModelClient,
        registry: ToolRegistry,
        user_prompt: str,
        options: StrategyOptions,
    ) -> RunnerResult:
        opts = options if isinstance(options, SingleToolRouterOptions) else SingleToolRouterOptions(**options.model_dump())
        state = self.new_state()
        repair_model = opts.repair_model or opts.model

        config = apply_generation_settings(
            types.GenerateContentConfig(
                tools=[types.Tool(function_declarations=[dispatch_declaration(registry)])],
                tool_config=types.ToolConfig(
                    function_calling_config=types.FunctionCallingConfig(
                        mode=types.FunctionCallingConfigMode.VALIDATED,
                        allowed_function_names=[DISPATCH_TOOL_NAME],
                    )
                ),
            ),
            opts.generation_settings,
            opts.model,
        )
        contents: List[Any] = [user_text_content(user_prompt)]

        for turn in range(opts.max_turns):
            state.add_trace("llm", f"turn_{turn}_request_dispatch")
            response = await client.generate_content(
                ModelRequest(model=opts.model, contents=list(contents), config=config)
            )
            state.add_thoughts(f"turn_{turn}", response.thoughts)

            if not response.function_calls:
                if response.text.strip():
                    return state.finish(response.text)

                last_call = state.last_tool_call
                if last_call is None:
                    return state.finish(NO_DISPATCH_MESSAGE)

                final_text = await self.finalize_with_json(
                    client, user_prompt, last_call, opts, state, "finalize_after_dispatch_with_json"
                )
                return state.finish(final_text)

            function_call = response.function_calls[0]
            payload = _parse_dispatch_payload(function_call.args)
            tool_name = payload.toolName
            if not registry.has(tool_name):
                msg = f"Model requested unknown tool: {tool_name}"
                logger.warning(msg)
                raise UnknownToolError(msg)

            args, repaired = await resolve_tool_args(
                client,
                registry,
                user_prompt,
                tool_name,
                payload.argumentsJson,
                state,
                repair_model=repair_model,
                generation_settings=opts.generation_settings,
                max_repair_attempts=opts.max_repair_attempts,
                label="dispatch argumentsJson",
            )

            tool_result = await registry.execute(tool_name, args, ToolExecutionContext())
            state.record_tool_call(tool_name, args, tool_result, repaired)

            call_id = function_call.id or f"dispatch_call_{turn}"
            prior_turn = extract_first_model_function_call_content(response.raw)
            if prior_turn is None:
                prior_turn = model_function_call_content(DISPATCH_TOOL_NAME, payload.model_dump())
            contents.append(prior_turn)
            contents.append(
                function_response_content(call_id, DISPATCH_TOOL_NAME, self._function_response(tool_name, tool_result))
            )

        last_call = state.last_tool_call
        if last_call is None:
            return state.finish(NO_RESULT_MESSAGE)
        return state.finish(json.dumps(last_call.result, indent=2, default=str))

    @staticmethod
    def _function_response(tool_name: str, result: Any) -> Dict[str, Any]:
        return {"toolName": tool_name, "result": result}
