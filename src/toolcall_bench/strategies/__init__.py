"""Strategy engines and the attempt-retry runner."""

from .base import (
    StrategyRunner,
    StrategyOptions,
    StructuredJsonOptions,
    SingleToolRouterOptions,
    HybridRepairOptions,
    RunState,
)
from .structured_json import StructuredJsonRunner
from .single_tool_router import SingleToolRouterRunner, DISPATCH_TOOL_NAME
from .hybrid_repair import HybridRepairRunner
from .repair import resolve_tool_args, repair_tool_args
from .runner import RUNNERS, StrategyRunConfig, StrategyRunResult, run_strategy

__all__ = [
    "StrategyRunner",
    "StrategyOptions",
    "StructuredJsonOptions",
    "SingleToolRouterOptions",
    "HybridRepairOptions",
    "RunState",
    "StructuredJsonRunner",
    "SingleToolRouterRunner",
    "DISPATCH_TOOL_NAME",
    "HybridRepairRunner",
    "resolve_tool_args",
    "repair_tool_args",
    "RUNNERS",
    "StrategyRunConfig",
    "StrategyRunResult",
    "run_strategy",
]
