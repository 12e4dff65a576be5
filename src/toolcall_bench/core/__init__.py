"""Public exports for the provider-agnostic core: contracts, recovery, tools and intents."""

from .contracts import (
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
from .exceptions import (
    ToolBenchError,
    RecoveryError,
    ShapeError,
    ToolRegistrationError,
    UnknownToolError,
    ToolValidationError,
    IntentError,
    ConfigurationError,
    ModelCallError,
    TransientModelError,
    ModelTimeoutError,
    StrategyRunError,
)
from .json_recovery import recover, as_json_object, parse_object_with_repair
from .logger import get_logger, setup_logging
from .tools import ToolDefinition, ToolExecutionContext, ValidationResult, ToolRegistry, SchemaValidator
from .intents import ToolIntent, FinalResponse

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
    "ToolBenchError",
    "RecoveryError",
    "ShapeError",
    "ToolRegistrationError",
    "UnknownToolError",
    "ToolValidationError",
    "IntentError",
    "ConfigurationError",
    "ModelCallError",
    "TransientModelError",
    "ModelTimeoutError",
    "StrategyRunError",
    "recover",
    "as_json_object",
    "parse_object_with_repair",
    "get_logger",
    "setup_logging",
    "ToolDefinition",
    "ToolExecutionContext",
    "ValidationResult",
    "ToolRegistry",
    "SchemaValidator",
    "ToolIntent",
    "FinalResponse",
]
