"""Tool-related data models."""

from .models import ToolDefinition, ToolExecutionContext, ValidationResult

__all__ = ["ToolDefinition", "ToolExecutionContext", "ValidationResult"]
