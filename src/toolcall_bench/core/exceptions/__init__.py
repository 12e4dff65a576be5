"""Export the exception hierarchy used across recovery, tools, transport and retries."""

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

__all__ = [
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
]
