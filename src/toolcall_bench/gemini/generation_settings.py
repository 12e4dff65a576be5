"""Map provider-neutral reasoning options onto Gemini thinking configuration."""

from typing import Literal, Optional

from google.genai import types
from pydantic import BaseModel

ReasoningEffort = Literal["minimal", "low", "medium", "high"]

_THINKING_BUDGETS = {
    "minimal": 256,
    "low": 1024,
    "medium": 4096,
    "high": 8192,
}

_THINKING_LEVELS = {
    "minimal": types.ThinkingLevel.MINIMAL,
    "low": types.ThinkingLevel.LOW,
    "medium": types.ThinkingLevel.MEDIUM,
    "high": types.ThinkingLevel.HIGH,
}


class GenerationSettings(BaseModel):
    """
    Generation-shaping options passed through to every model request.

    Attributes:
        thinking: Whether extended reasoning is requested.
        reasoning_effort: Intensity of the reasoning when enabled.
        include_thoughts: Whether reasoning traces should be returned.
    """

    thinking: bool = True
    reasoning_effort: ReasoningEffort = "medium"
    include_thoughts: bool = False


def default_generation_settings() -> GenerationSettings:
    return GenerationSettings()


def apply_generation_settings(
    config: Optional[types.GenerateContentConfig],
    settings: Optional[GenerationSettings],
    model: Optional[str] = None,
) -> Optional[types.GenerateContentConfig]:
    """Merge the thinking configuration derived from ``settings`` into ``config``.

    Args:
        config: The request configuration to extend. Not mutated.
        settings: Generation settings; when None the config is returned unchanged.
        model: Target model id, used to pick budget or level based thinking.

    Returns:
        A new configuration carrying the merged ``thinking_config``.
    """
    if settings is None:
        return config

    existing = config or types.GenerateContentConfig()
    thinking = _to_thinking_config(settings, model)
    if existing.thinking_config is not None:
        thinking = existing.thinking_config.model_copy(update=thinking.model_dump(exclude_none=True))

    return existing.model_copy(update={"thinking_config": thinking})


def _to_thinking_config(settings: GenerationSettings, model: Optional[str]) -> types.ThinkingConfig:
    if _uses_budget_mode(model):
        return types.ThinkingConfig(
            include_thoughts=settings.include_thoughts,
            thinking_budget=_THINKING_BUDGETS[settings.reasoning_effort] if settings.thinking else 0,
        )

    if not settings.thinking:
        level = types.ThinkingLevel.MINIMAL
    elif settings.reasoning_effort == "medium" and _is_pro_level_only(model):
        # Gemini 3 pro models reject MEDIUM
        level = types.ThinkingLevel.LOW
    else:
        level = _THINKING_LEVELS[settings.reasoning_effort]

    return types.ThinkingConfig(include_thoughts=settings.include_thoughts, thinking_level=level)


def _uses_budget_mode(model: Optional[str]) -> bool:
    if not model:
        return False
    return "2.5" in model or "2.0" in model


def _is_pro_level_only(model: Optional[str]) -> bool:
    if not model:
        return False
    return model.startswith("gemini-3") and "-pro" in model
