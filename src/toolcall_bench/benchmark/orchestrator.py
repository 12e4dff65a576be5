"""Run the models x strategies x presets x iterations cross product and summarize it."""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.contracts import STRATEGIES, Strategy
from ..core.logger import emit_line, get_logger
from ..core.tools import ToolRegistry
from ..gemini.generation_settings import GenerationSettings
from ..strategies.runner import StrategyRunConfig, run_strategy
from .presets import PROMPT_PRESETS, PromptPreset
from .stats import (
    BenchmarkAggregate,
    BenchmarkComparison,
    BenchmarkRunRecord,
    build_aggregates,
    build_comparisons,
)

logger = get_logger(__name__)


class BenchmarkConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    models: List[str]
    strategies: List[Strategy]
    presets: List[PromptPreset]
    iterations: int = Field(default=1, ge=1)
    max_retries: int = 0
    logs: bool = False
    verbose: bool = False
    generation_settings: Optional[GenerationSettings] = None
    repair_model: Optional[str] = None
    router_max_turns: Optional[int] = Field(default=None, ge=1)
    hybrid_max_turns: Optional[int] = Field(default=None, ge=1)
    max_repair_attempts: int = Field(default=1, ge=1)
    logger: Optional[Callable[[str], None]] = None
    client: Any = None
    registry: Optional[ToolRegistry] = None
    api_key: Optional[str] = None


class BenchmarkResult(BaseModel):
    started_at: str
    finished_at: str
    total_runs: int
    records: List[BenchmarkRunRecord]
    aggregates: List[BenchmarkAggregate]
    comparisons: List[BenchmarkComparison]


def default_benchmark_config(model: str) -> BenchmarkConfig:
    return BenchmarkConfig(models=[model], strategies=list(STRATEGIES), presets=list(PROMPT_PRESETS), iterations=1)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def run_benchmark(config: BenchmarkConfig, stop_event: Optional[asyncio.Event] = None) -> BenchmarkResult:
    """
    Run every (model, strategy, preset, iteration) cell sequentially and aggregate the records.

    A failing cell is recorded with ``success=False`` and never stops the enumeration. When
    ``stop_event`` is set, no further cells are started and the partial records are summarized.

    Args:
        config: The cross product and the per-run settings.
        stop_event: Optional cooperative cancellation signal, checked before each cell.

    Returns:
        Records in enumeration order, plus aggregates and comparisons derived from them.
    """
    records: List[BenchmarkRunRecord] = []
    started_at = _now_iso()

    for model in config.models:
        for strategy in config.strategies:
            for preset in config.presets:
                for iteration in range(1, config.iterations + 1):
                    if stop_event is not None and stop_event.is_set():
                        logger.info(f"Benchmark stopped after {len(records)} run(s).")
                        return _summarize(records, started_at)

                    emit_line(
                        config.logger,
                        config.logs,
                        f"[bench] model={model} strategy={strategy.value} preset={preset.id} "
                        f"iteration={iteration}/{config.iterations}",
                    )
                    records.append(await _run_cell(config, model, strategy, preset, iteration))

    return _summarize(records, started_at)


async def _run_cell(
    config: BenchmarkConfig, model: str, strategy: Strategy, preset: PromptPreset, iteration: int
) -> BenchmarkRunRecord:
    run_started = time.perf_counter()
    try:
        result = await run_strategy(
            StrategyRunConfig(
                strategy=strategy,
                prompt=preset.prompt,
                model=model,
                repair_model=config.repair_model,
                router_max_turns=config.router_max_turns,
                hybrid_max_turns=config.hybrid_max_turns,
                max_repair_attempts=config.max_repair_attempts,
                max_retries=config.max_retries,
                logs=config.logs,
                verbose=config.verbose,
                generation_settings=config.generation_settings,
                logger=config.logger,
                client=config.client,
                registry=config.registry,
                api_key=config.api_key,
            )
        )
    except Exception as e:
        logger.warning(f"Benchmark cell {model}/{strategy.value}/{preset.id}#{iteration} failed: {e}")
        return BenchmarkRunRecord(
            model=model,
            strategy=strategy,
            preset_id=preset.id,
            iteration=iteration,
            success=False,
            duration_ms=_elapsed_ms(run_started),
            attempts=max(1, config.max_retries + 1),
            tool_calls=0,
            repaired_calls=0,
            error=str(e),
        )

    return BenchmarkRunRecord(
        model=model,
        strategy=strategy,
        preset_id=preset.id,
        iteration=iteration,
        success=True,
        duration_ms=_elapsed_ms(run_started),
        attempts=result.attempts,
        tool_calls=len(result.tool_calls),
        repaired_calls=sum(1 for call in result.tool_calls if call.repaired),
    )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _summarize(records: List[BenchmarkRunRecord], started_at: str) -> BenchmarkResult:
    aggregates = build_aggregates(records)
    return BenchmarkResult(
        started_at=started_at,
        finished_at=_now_iso(),
        total_runs=len(records),
        records=records,
        aggregates=aggregates,
        comparisons=build_comparisons(aggregates),
    )
