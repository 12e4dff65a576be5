from .models import ToolDefinition, ToolExecutionContext, ValidationResult
from .registry import ToolRegistry
from .schema import SchemaValidator

__all__ = [
    "ToolDefinition",
    "ToolExecutionContext",
    "ValidationResult",
    "ToolRegistry",
    "SchemaValidator",
]
