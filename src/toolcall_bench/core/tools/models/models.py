from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class ToolExecutionContext(BaseModel):
    """Context handed to a tool executor. Built fresh for every execution."""

    model_config = ConfigDict(frozen=True)

    now: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ToolDefinition(BaseModel):
    """
    Represents a tool that can be offered to the model.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        args_model: Pydantic model describing and validating the tool's JSON arguments.
        func: Executor called as ``func(args, context)``, where ``args`` is an instance of
              ``args_model``. May be sync or async.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    description: str
    args_model: Type[BaseModel]
    func: Callable[..., Any]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating raw arguments against a tool schema."""

    ok: bool
    args: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, args: Dict[str, Any]) -> "ValidationResult":
        return cls(ok=True, args=args)

    @classmethod
    def failure(cls, error: str) -> "ValidationResult":
        return cls(ok=False, error=error)
