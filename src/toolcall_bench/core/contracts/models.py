"""Provider-agnostic data model shared by the strategy engines, the retry layer and the benchmark."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

JsonObject = Dict[str, Any]


class Strategy(str, Enum):
    """The closed set of tool-calling protocols that can be run and benchmarked."""

    STRUCTURED_JSON = "structured-json"
    SINGLE_TOOL_ROUTER = "single-tool-router"
    HYBRID_REPAIR = "hybrid-repair"


STRATEGIES: List[Strategy] = list(Strategy)


class ToolCallRecord(BaseModel):
    """One successful tool execution inside a strategy run.

    Attributes:
        tool_name: Name of the executed tool.
        args: Arguments that passed the tool's schema validation.
        result: Value returned by the tool executor.
        repaired: Whether the arguments went through the LLM repair exchange.
    """

    model_config = ConfigDict(frozen=True)

    tool_name: str
    args: JsonObject
    result: Any = None
    repaired: bool = False


class RunnerTraceStep(BaseModel):
    """Append-only diagnostic entry produced during a strategy run."""

    model_config = ConfigDict(frozen=True)

    kind: str
    detail: str
    data: Optional[JsonObject] = None


class RunnerResult(BaseModel):
    """Terminal output of a single strategy attempt."""

    strategy: Strategy
    final_text: str
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    trace: List[RunnerTraceStep] = Field(default_factory=list)


class ModelFunctionCall(BaseModel):
    """A function call returned by the model, as extracted for local decision-making."""

    id: Optional[str] = None
    name: Optional[str] = None
    args: Any = None


class ModelResult(BaseModel):
    """Normalized response of the abstract model-call capability.

    Attributes:
        text: Concatenated non-thought text of the first candidate.
        function_calls: Function calls requested by the model.
        thoughts: Reasoning traces, when the model returned them.
        raw: The provider response object, kept verbatim so the prior turn can be replayed.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    text: str = ""
    function_calls: List[ModelFunctionCall] = Field(default_factory=list)
    thoughts: List[str] = Field(default_factory=list)
    raw: Any = None


@dataclass(frozen=True)
class ModelRequest:
    """A single generate-content request.

    ``contents`` is either a prompt string or a list of provider content entries; entries
    replayed from earlier turns are kept by reference.
    """

    model: str
    contents: Any
    config: Any = None


class ModelClient(Protocol):
    """Protocol for the abstract model-call capability consumed by every strategy."""

    async def generate_content(self, request: ModelRequest) -> ModelResult:
        """Send one request to the model and return its normalized result."""
        ...
