"""Shared pieces of the strategy engines: options, run state and the JSON-only exchanges."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

from google.genai import types
from pydantic import BaseModel, ConfigDict, Field

from ..core.contracts import (
    JsonObject,
    ModelClient,
    ModelRequest,
    RunnerResult,
    RunnerTraceStep,
    Strategy,
    ToolCallRecord,
)
from ..core.intents import (
    ToolIntent,
    build_final_response_prompt,
    build_tool_selection_prompt,
    final_response_json_schema,
    parse_final_response_text,
    parse_tool_intent_text,
    tool_intent_json_schema,
)
from ..core.logger import get_logger
from ..core.tools import ToolRegistry
from ..gemini.generation_settings import GenerationSettings, apply_generation_settings

logger = get_logger(__name__)


class StrategyOptions(BaseModel):
    """Options common to every strategy.

    Attributes:
        model: Model id used for the main exchanges.
        generation_settings: Reasoning options passed through to every request.
    """

    model: str
    generation_settings: Optional[GenerationSettings] = None


class StructuredJsonOptions(StrategyOptions):
    pass


class SingleToolRouterOptions(StrategyOptions):
    max_turns: int = Field(default=4, ge=1)
    repair_model: Optional[str] = None
    max_repair_attempts: int = Field(default=1, ge=1)


class HybridRepairOptions(StrategyOptions):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    max_turns: int = Field(default=3, ge=1)
    repair_model: Optional[str] = None
    function_calling_mode: types.FunctionCallingConfigMode = types.FunctionCallingConfigMode.VALIDATED
    max_repair_attempts: int = Field(default=1, ge=1)


@dataclass
class RunState:
    """Mutable bookkeeping of one strategy attempt: executed tools and the trace."""

    strategy: Strategy
    tool_calls: List[ToolCallRecord] = field(default_factory=list)
    trace: List[RunnerTraceStep] = field(default_factory=list)

    def add_trace(self, kind: str, detail: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.trace.append(RunnerTraceStep(kind=kind, detail=detail, data=data))

    def add_thoughts(self, step: str, thoughts: List[str]) -> None:
        for thought in thoughts:
            self.add_trace("thought", f"{step}_thought", {"text": thought})

    def record_tool_call(self, tool_name: str, args: JsonObject, result: Any, repaired: bool) -> None:
        self.tool_calls.append(ToolCallRecord(tool_name=tool_name, args=args, result=result, repaired=repaired))

    @property
    def last_tool_call(self) -> Optional[ToolCallRecord]:
        return self.tool_calls[-1] if self.tool_calls else None

    def finish(self, final_text: str) -> RunnerResult:
        return RunnerResult(
            strategy=self.strategy,
            final_text=final_text,
            tool_calls=list(self.tool_calls),
            trace=list(self.trace),
        )


def json_response_config(
    schema: Dict[str, Any], settings: Optional[GenerationSettings], model: str
) -> types.GenerateContentConfig:
    """Request config constraining the reply to JSON matching ``schema``."""
    config = types.GenerateContentConfig(response_mime_type="application/json", response_json_schema=schema)
    return apply_generation_settings(config, settings, model)


class StrategyRunner(ABC):
    """
    One tool-calling protocol.

    Runners hold no per-run state; every call to `run` starts from an empty `RunState`,
    so a single instance can serve the dispatch table for the whole process.
    """

    strategy: ClassVar[Strategy]

    @abstractmethod
    async def run(
        self,
        client: ModelClient,
        registry: ToolRegistry,
        user_prompt: str,
        options: StrategyOptions,
    ) -> RunnerResult:
        """
        Negotiate tool calls with the model until a final reply is reached.

        Args:
            client: The model-call capability.
            registry: Registry holding the tools offered to the model.
            user_prompt: The user's request.
            options: Strategy-specific options.

        Returns:
            The final text, executed tool calls and a diagnostic trace.
        """
        pass

    def new_state(self) -> RunState:
        return RunState(strategy=self.strategy)

    async def request_tool_intent(
        self,
        client: ModelClient,
        registry: ToolRegistry,
        user_prompt: str,
        options: StrategyOptions,
        state: RunState,
    ) -> ToolIntent:
        """Run the "call a tool or respond" exchange and parse its reply."""
        request = ModelRequest(
            model=options.model,
            contents=build_tool_selection_prompt(user_prompt, registry),
            config=json_response_config(tool_intent_json_schema(), options.generation_settings, options.model),
        )
        response = await client.generate_content(request)
        state.add_thoughts("intent", response.thoughts)
        state.add_trace("llm", "received_tool_intent", {"textLength": len(response.text)})

        intent = parse_tool_intent_text(response.text)
        state.add_trace("intent", "parsed_intent", {"action": intent.action})
        return intent

    async def finalize_with_json(
        self,
        client: ModelClient,
        user_prompt: str,
        call: ToolCallRecord,
        options: StrategyOptions,
        state: RunState,
        detail: str,
    ) -> str:
        """Ask the model for a grounded reply to ``user_prompt`` given the result of ``call``."""
        state.add_trace("llm", detail)
        request = ModelRequest(
            model=options.model,
            contents=build_final_response_prompt(user_prompt, call.tool_name, call.args, call.result),
            config=json_response_config(final_response_json_schema(), options.generation_settings, options.model),
        )
        response = await client.generate_content(request)
        state.add_thoughts("finalize", response.thoughts)
        return parse_final_response_text(response.text)
