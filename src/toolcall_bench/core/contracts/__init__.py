"""Shared data contracts for strategies, transport and benchmark."""

from .models import (
    JsonObject,
    Strategy,
    STRATEGIES,
    ToolCallRecord,
    RunnerTraceStep,
    RunnerResult,
    ModelFunctionCall,
    ModelResult,
    ModelRequest,
    ModelClient,
)

__all__ = [
    "JsonObject",
    "Strategy",
    "STRATEGIES",
    "ToolCallRecord",
    "RunnerTraceStep",
    "RunnerResult",
    "ModelFunctionCall",
    "ModelResult",
    "ModelRequest",
    "ModelClient",
]
