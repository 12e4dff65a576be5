"""
Custom exception classes for the tool-calling benchmark.

This module defines the hierarchy of exceptions raised while recovering JSON
from model output, validating and executing tools, talking to the model
transport, and retrying strategy runs.
"""

from typing import List, Optional


class ToolBenchError(Exception):
    """Base exception for all benchmark errors."""

    pass


class RecoveryError(ToolBenchError):
    """Raised when no plausible JSON value can be recovered from model text."""

    pass


class ShapeError(ToolBenchError):
    """Raised when a recovered JSON value is not a plain JSON object."""

    pass


class ToolRegistrationError(ToolBenchError):
    """Raised when there is an error registering a tool."""

    pass


class UnknownToolError(ToolBenchError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolValidationError(ToolBenchError):
    """Raised when tool arguments are still invalid and no further repair is allowed."""

    pass


class IntentError(ToolBenchError):
    """Raised when a schema-constrained model reply is missing required fields."""

    pass


class ConfigurationError(ToolBenchError):
    """Raised when required configuration (e.g. an API key) is missing or invalid."""

    pass


class ModelCallError(ToolBenchError):
    """Raised when a model call fails at the transport layer."""

    pass


class TransientModelError(ModelCallError):
    """Raised when the transport reports a temporary condition (rate limit, unavailable)."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class ModelTimeoutError(ModelCallError):
    """Raised when a model call exceeds its request timeout."""

    pass


class StrategyRunError(ToolBenchError):
    """Raised when every attempt of a strategy run has failed."""

    def __init__(self, message: str, errors: Optional[List[str]] = None, attempts: int = 0):
        super().__init__(message)
        self.errors = list(errors or [])
        self.attempts = attempts
