"""Benchmark presets, cross-product driver and statistics."""

from .presets import PromptPreset, PROMPT_PRESETS, find_preset
from .stats import (
    BenchmarkRunRecord,
    BenchmarkAggregate,
    BenchmarkComparison,
    build_aggregates,
    build_comparisons,
    percentile,
    round2,
)
from .orchestrator import BenchmarkConfig, BenchmarkResult, default_benchmark_config, run_benchmark

__all__ = [
    "PromptPreset",
    "PROMPT_PRESETS",
    "find_preset",
    "BenchmarkRunRecord",
    "BenchmarkAggregate",
    "BenchmarkComparison",
    "build_aggregates",
    "build_comparisons",
    "percentile",
    "round2",
    "BenchmarkConfig",
    "BenchmarkResult",
    "default_benchmark_config",
    "run_benchmark",
]
