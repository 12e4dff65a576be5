"""Hybrid-Repair strategy: every tool offered natively, invalid arguments repaired by the LLM."""

from typing import Any, List

from google.genai import types

from ..core.contracts import ModelClient, ModelRequest, RunnerResult, Strategy
from ..core.exceptions import UnknownToolError
from ..core.logger import get_logger
from ..core.tools import ToolExecutionContext, ToolRegistry
from ..gemini.content import (
    extract_first_model_function_call_content,
    function_response_content,
    model_function_call_content,
    user_text_content,
)
from ..gemini.generation_settings import apply_generation_settings
from .base import HybridRepairOptions, RunState, StrategyOptions, StrategyRunner
from .repair import resolve_tool_args

logger = get_logger(__name__)

NO_FINAL_TEXT_MESSAGE = "No final text response after max tool turns."


class HybridRepairRunner(StrategyRunner):
    """
    Native per-tool function calling with a repair exchange for invalid arguments.

    When the model neither calls a tool nor answers, the structured selection exchange is
    used as a fallback; a tool picked there is reported but not executed.
    """

    strategy = Strategy.HYBRID_REPAIR

    async def run(
        self,
        client: ModelClient,
        registry: ToolRegistry,
        user_prompt: str,
        options: StrategyOptions,
    ) -> RunnerResult:
        opts = options if isinstance(options, HybridRepairOptions) else HybridRepairOptions(**options.model_dump())
        state = self.new_state()
        repair_model = opts.repair_model or opts.model

        config = apply_generation_settings(
            types.GenerateContentConfig(
                tools=[types.Tool(function_declarations=registry.to_function_declarations())],
                tool_config=types.ToolConfig(
                    function_calling_config=types.FunctionCallingConfig(mode=opts.function_calling_mode)
                ),
            ),
            opts.generation_settings,
            opts.model,
        )
        contents: List[Any] = [user_text_content(user_prompt)]

        for turn in range(opts.max_turns):
            state.add_trace("llm", f"turn_{turn}_request")
            response = await client.generate_content(
                ModelRequest(model=opts.model, contents=list(contents), config=config)
            )
            state.add_thoughts(f"turn_{turn}", response.thoughts)

            if not response.function_calls:
                if response.text.strip():
                    state.add_trace("llm", f"turn_{turn}_text_response")
                    return state.finish(response.text)

                last_call = state.last_tool_call
                if last_call is not None:
                    final_text = await self.finalize_with_json(
                        client, user_prompt, last_call, opts, state, "finalize_after_tool_call_with_json"
                    )
                    return state.finish(final_text)

                fallback_text = await self._fallback_via_structured_intent(client, registry, user_prompt, opts, state)
                return state.finish(fallback_text)

            function_call = response.function_calls[0]
            tool_name = function_call.name
            if not tool_name or not registry.has(tool_name):
                msg = f"Model requested unknown tool: {tool_name}"
                logger.warning(msg)
                raise UnknownToolError(msg)

            args, repaired = await resolve_tool_args(
                client,
                registry,
                user_prompt,
                tool_name,
                function_call.args,
                state,
                repair_model=repair_model,
                generation_settings=opts.generation_settings,
                max_repair_attempts=opts.max_repair_attempts,
            )

            tool_result = await registry.execute(tool_name, args, ToolExecutionContext())
            state.record_tool_call(tool_name, args, tool_result, repaired)

            call_id = function_call.id or f"call_{turn}"
            prior_turn = extract_first_model_function_call_content(response.raw)
            if prior_turn is None:
                prior_turn = model_function_call_content(tool_name, args)
            contents.append(prior_turn)
            contents.append(function_response_content(call_id, tool_name, {"result": tool_result}))

        return state.finish(NO_FINAL_TEXT_MESSAGE)

    async def _fallback_via_structured_intent(
        self,
        client: ModelClient,
        registry: ToolRegistry,
        user_prompt: str,
        options: HybridRepairOptions,
        state: RunState,
    ) -> str:
        state.add_trace("fallback", "structured_intent_fallback")
        intent = await self.request_tool_intent(client, registry, user_prompt, options, state)
        if intent.action == "respond":
            return intent.response or ""
        return f"Fallback selected tool '{intent.tool_name}', but no direct execution was run in fallback mode."
