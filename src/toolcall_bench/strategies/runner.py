"""Select a strategy engine and run it with bounded attempt retry."""

import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import resolve_api_key
from ..core.contracts import ModelClient, RunnerResult, Strategy
from ..core.exceptions import StrategyRunError
from ..core.logger import emit_line, get_logger
from ..core.tools import ToolRegistry
from ..demo_tools import create_demo_tool_registry
from ..gemini.client import GeminiModelClient
from ..gemini.generation_settings import GenerationSettings, default_generation_settings
from .base import (
    HybridRepairOptions,
    SingleToolRouterOptions,
    StrategyOptions,
    StrategyRunner,
    StructuredJsonOptions,
)
from .hybrid_repair import HybridRepairRunner
from .single_tool_router import SingleToolRouterRunner
from .structured_json import StructuredJsonRunner

logger = get_logger(__name__)

RUNNERS: Dict[Strategy, StrategyRunner] = {
    Strategy.STRUCTURED_JSON: StructuredJsonRunner(),
    Strategy.SINGLE_TOOL_ROUTER: SingleToolRouterRunner(),
    Strategy.HYBRID_REPAIR: HybridRepairRunner(),
}


class StrategyRunConfig(BaseModel):
    """
    Inputs of a single strategy run.

    Attributes:
        strategy: Which protocol to run.
        prompt: The user request.
        model: Model id for the main exchanges.
        repair_model: Model id for argument repair; defaults to ``model``.
        router_max_turns: Turn budget of the Single-Tool-Router strategy.
        hybrid_max_turns: Turn budget of the Hybrid-Repair strategy.
        max_repair_attempts: Repair exchanges allowed per invalid tool call.
        max_retries: Extra attempts after the first failure (clamped to >= 0).
        logs: Whether progress lines are sent to ``logger``.
        verbose: Whether the result carries generation notes.
        generation_settings: Reasoning options; defaults are used when omitted.
        logger: Optional progress-line callback.
        client: Model-call capability; a Gemini client is built from ``api_key`` when omitted.
        registry: Tool registry; the demo registry is used when omitted.
        api_key: Explicit API key; resolved from `.env.local`/environment when omitted.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    strategy: Strategy
    prompt: str
    model: str
    repair_model: Optional[str] = None
    router_max_turns: Optional[int] = Field(default=None, ge=1)
    hybrid_max_turns: Optional[int] = Field(default=None, ge=1)
    max_repair_attempts: int = Field(default=1, ge=1)
    max_retries: int = 0
    logs: bool = False
    verbose: bool = False
    generation_settings: Optional[GenerationSettings] = None
    logger: Optional[Callable[[str], None]] = None
    client: Any = None
    registry: Optional[ToolRegistry] = None
    api_key: Optional[str] = None


class StrategyRunResult(RunnerResult):
    used_model: str
    used_strategy: Strategy
    attempts: int
    duration_ms: int
    errors: Optional[List[str]] = None
    verbose_notes: Optional[List[str]] = None


def build_options(config: StrategyRunConfig, settings: GenerationSettings) -> StrategyOptions:
    """Translate run configuration into the options of the selected strategy."""
    if config.strategy is Strategy.STRUCTURED_JSON:
        return StructuredJsonOptions(model=config.model, generation_settings=settings)

    kwargs: Dict[str, Any] = {
        "model": config.model,
        "generation_settings": settings,
        "repair_model": config.repair_model,
        "max_repair_attempts": config.max_repair_attempts,
    }

    if config.strategy is Strategy.SINGLE_TOOL_ROUTER:
        if config.router_max_turns is not None:
            kwargs["max_turns"] = config.router_max_turns
        return SingleToolRouterOptions(**kwargs)

    if config.hybrid_max_turns is not None:
        kwargs["max_turns"] = config.hybrid_max_turns
    return HybridRepairOptions(**kwargs)


def _resolve_client(config: StrategyRunConfig) -> ModelClient:
    if config.client is not None:
        return config.client
    return GeminiModelClient.from_api_key(resolve_api_key(config.api_key))


async def _run_once(config: StrategyRunConfig, settings: GenerationSettings) -> RunnerResult:
    client = _resolve_client(config)
    registry = config.registry or create_demo_tool_registry()
    runner = RUNNERS[config.strategy]
    return await runner.run(client, registry, config.prompt, build_options(config, settings))


def _verbose_notes(settings: GenerationSettings, attempt: int) -> List[str]:
    return [
        f"thinking={str(settings.thinking).lower()}",
        f"reasoningEffort={settings.reasoning_effort}",
        f"includeThoughts={str(settings.include_thoughts).lower()}",
        f"retriesUsed={attempt - 1}",
    ]


async def run_strategy(config: StrategyRunConfig) -> StrategyRunResult:
    """
    Run the configured strategy, retrying the whole run on any failure.

    Every attempt starts from scratch; nothing is carried over from a failed attempt.

    Args:
        config: Strategy, prompt, model and retry configuration.

    Returns:
        The runner result extended with attempt count, duration and any earlier errors.

    Raises:
        StrategyRunError: If every attempt failed.
    """
    max_retries = max(0, config.max_retries)
    total_attempts = max_retries + 1
    settings = config.generation_settings or default_generation_settings()
    errors: List[str] = []
    started = time.perf_counter()

    for attempt in range(1, total_attempts + 1):
        emit_line(
            config.logger,
            config.logs,
            f"[run] strategy={config.strategy.value} model={config.model} attempt={attempt}/{total_attempts}",
        )

        try:
            result = await _run_once(config, settings)
        except Exception as e:
            message = str(e)
            errors.append(message)
            logger.warning(f"Attempt {attempt}/{total_attempts} of {config.strategy.value} failed: {message}")
            emit_line(config.logger, config.logs, f"[error] attempt={attempt} {message}")
            continue

        return StrategyRunResult(
            strategy=result.strategy,
            final_text=result.final_text,
            tool_calls=result.tool_calls,
            trace=result.trace,
            used_model=config.model,
            used_strategy=config.strategy,
            attempts=attempt,
            duration_ms=int((time.perf_counter() - started) * 1000),
            errors=errors or None,
            verbose_notes=_verbose_notes(settings, attempt) if config.verbose else None,
        )

    msg = f"Run failed after {total_attempts} attempt(s): {errors[-1]}"
    logger.error(msg)
    raise StrategyRunError(msg, errors=errors, attempts=total_attempts)
