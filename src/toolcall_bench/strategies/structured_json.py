"""Structured-JSON strategy: no native tool calling, only schema-constrained JSON exchanges."""

from ..core.contracts import ModelClient, RunnerResult, Strategy
from ..core.exceptions import ToolValidationError
from ..core.logger import get_logger
from ..core.tools import ToolExecutionContext, ToolRegistry
from .base import StrategyOptions, StrategyRunner

logger = get_logger(__name__)


class StructuredJsonRunner(StrategyRunner):
    """
    Selection exchange, then at most one tool execution and one finalization exchange.

    Arguments are not repaired here: the selection reply is already schema-constrained,
    so invalid arguments are fatal for the attempt.
    """

    strategy = Strategy.STRUCTURED_JSON

    async def run(
        self,
        client: ModelClient,
        registry: ToolRegistry,
        user_prompt: str,
        options: StrategyOptions,
    ) -> RunnerResult:
        state = self.new_state()

        state.add_trace("llm", "request_tool_intent")
        intent = await self.request_tool_intent(client, registry, user_prompt, options, state)

        if intent.action == "respond":
            return state.finish(intent.response or "")

        tool_name = intent.tool_name or ""
        validation = registry.validate_args(tool_name, intent.args)
        if not validation.ok or validation.args is None:
            msg = f"Tool args validation failed: {validation.error}"
            logger.warning(msg)
            raise ToolValidationError(msg)

        result = await registry.execute(tool_name, validation.args, ToolExecutionContext())
        state.record_tool_call(tool_name, validation.args, result, repaired=False)

        final_text = await self.finalize_with_json(
            client, user_prompt, state.tool_calls[-1], options, state, "request_final_response"
        )
        return state.finish(final_text)
