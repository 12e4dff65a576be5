"""
Reduce benchmark run records into per-(model, strategy) aggregates and per-model comparisons.

All figures are recomputed from the raw records on every call. Rounding is half-up so the
reported numbers do not depend on banker's rounding.
"""

import math
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from ..core.contracts import Strategy


class BenchmarkRunRecord(BaseModel):
    """One cell of the benchmark cross product."""

    model_config = ConfigDict(frozen=True)

    model: str
    strategy: Strategy
    preset_id: str
    iteration: int
    success: bool
    duration_ms: int
    attempts: int
    tool_calls: int
    repaired_calls: int
    error: Optional[str] = None


class BenchmarkAggregate(BaseModel):
    key: str
    strategy: Strategy
    model: str
    total_runs: int
    success_runs: int
    failure_runs: int
    success_rate: float
    error_rate: float
    avg_duration_ms: int
    median_duration_ms: int
    p95_duration_ms: int
    avg_tool_calls: float
    avg_repaired_calls: float
    repair_rate: float
    tool_use_rate: float
    avg_attempts: float


class BenchmarkComparison(BaseModel):
    """A strategy's standing relative to the best strategy for the same model."""

    model: str
    strategy: Strategy
    success_rate: float
    avg_duration_ms: int
    avg_tool_calls: float
    avg_repaired_calls: float
    delta_success_rate: float
    delta_duration_ms: int
    delta_tool_calls: float


def round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percentile(values: Sequence[int], q: float) -> int:
    """
    Nearest-rank percentile of ascending-sorted ``values``.

    The index is ``ceil(n * q) - 1`` clamped into range; an empty sequence yields 0.
    """
    if not values:
        return 0
    index = max(0, min(len(values) - 1, math.ceil(len(values) * q) - 1))
    return values[index]


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def build_aggregates(records: Sequence[BenchmarkRunRecord]) -> List[BenchmarkAggregate]:
    """
    Group records by (model, strategy) and compute the summary statistics of each group.

    Args:
        records: Raw benchmark records, in any order.

    Returns:
        One aggregate per group, sorted by strategy name, then model name.
    """
    groups: Dict[str, List[BenchmarkRunRecord]] = defaultdict(list)
    for record in records:
        groups[f"{record.model}::{record.strategy.value}"].append(record)

    output: List[BenchmarkAggregate] = []
    for key, group in groups.items():
        total_runs = len(group)
        success_runs = sum(1 for item in group if item.success)
        failure_runs = total_runs - success_runs
        durations = sorted(item.duration_ms for item in group)
        sum_tool_calls = sum(item.tool_calls for item in group)
        sum_repaired_calls = sum(item.repaired_calls for item in group)
        tool_used_runs = sum(1 for item in group if item.tool_calls > 0)
        sum_attempts = sum(item.attempts for item in group)

        output.append(
            BenchmarkAggregate(
                key=key,
                strategy=group[0].strategy,
                model=group[0].model,
                total_runs=total_runs,
                success_runs=success_runs,
                failure_runs=failure_runs,
                success_rate=_ratio(success_runs, total_runs),
                error_rate=_ratio(failure_runs, total_runs),
                avg_duration_ms=round_half_up(_ratio(sum(durations), total_runs)),
                median_duration_ms=percentile(durations, 0.5),
                p95_duration_ms=percentile(durations, 0.95),
                avg_tool_calls=round2(_ratio(sum_tool_calls, total_runs)),
                avg_repaired_calls=round2(_ratio(sum_repaired_calls, total_runs)),
                repair_rate=round2(_ratio(sum_repaired_calls, sum_tool_calls)),
                tool_use_rate=round2(_ratio(tool_used_runs, total_runs)),
                avg_attempts=round2(_ratio(sum_attempts, total_runs)),
            )
        )

    return sorted(output, key=lambda row: (row.strategy.value, row.model))


def _rank_key(row: BenchmarkAggregate) -> Tuple[float, int, float, str]:
    return (-row.success_rate, row.avg_duration_ms, row.avg_attempts, row.strategy.value)


def build_comparisons(aggregates: Sequence[BenchmarkAggregate]) -> List[BenchmarkComparison]:
    """
    Compare every strategy of a model against that model's best strategy.

    The baseline is the row with the highest success rate, then the lowest mean duration,
    then the fewest attempts, then the strategy name. It is emitted too, with zero deltas.

    Returns:
        Comparison rows sorted by model, then ascending success-rate delta.
    """
    by_model: Dict[str, List[BenchmarkAggregate]] = defaultdict(list)
    for aggregate in aggregates:
        by_model[aggregate.model].append(aggregate)

    output: List[BenchmarkComparison] = []
    for model, rows in by_model.items():
        ranked = sorted(rows, key=_rank_key)
        baseline = ranked[0]
        for row in ranked:
            output.append(
                BenchmarkComparison(
                    model=model,
                    strategy=row.strategy,
                    success_rate=row.success_rate,
                    avg_duration_ms=row.avg_duration_ms,
                    avg_tool_calls=row.avg_tool_calls,
                    avg_repaired_calls=row.avg_repaired_calls,
                    delta_success_rate=round2((baseline.success_rate - row.success_rate) * 100),
                    delta_duration_ms=row.avg_duration_ms - baseline.avg_duration_ms,
                    delta_tool_calls=round2(row.avg_tool_calls - baseline.avg_tool_calls),
                )
            )

    return sorted(output, key=lambda row: (row.model, row.delta_success_rate))
