"""Gemini transport, tool registry and request helpers."""

from .client import GeminiModelClient, is_transient_error, extract_retry_delay
from .registry import GeminiToolRegistry
from .generation_settings import GenerationSettings, apply_generation_settings, default_generation_settings
from .content import extract_first_model_function_call_content

__all__ = [
    "GeminiModelClient",
    "is_transient_error",
    "extract_retry_delay",
    "GeminiToolRegistry",
    "GenerationSettings",
    "apply_generation_settings",
    "default_generation_settings",
    "extract_first_model_function_call_content",
]
