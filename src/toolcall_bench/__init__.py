"""toolcall-bench - compare and benchmark Gemini tool-calling strategies."""

from .core import (
    Strategy,
    STRATEGIES,
    RunnerResult,
    ToolCallRecord,
    ModelClient,
    ModelRequest,
    ModelResult,
    ToolRegistry,
    ToolDefinition,
    ToolBenchError,
    StrategyRunError,
    recover,
    get_logger,
    setup_logging,
)
from .config import resolve_env_settings, resolve_api_key, resolve_default_model
from .gemini import GeminiModelClient, GeminiToolRegistry, GenerationSettings
from .demo_tools import create_demo_tool_registry, create_test_tool_registry
from .strategies import StrategyRunConfig, StrategyRunResult, run_strategy
from .benchmark import (
    BenchmarkConfig,
    BenchmarkResult,
    PROMPT_PRESETS,
    default_benchmark_config,
    run_benchmark,
)

__all__ = [
    "Strategy",
    "STRATEGIES",
    "RunnerResult",
    "ToolCallRecord",
    "ModelClient",
    "ModelRequest",
    "ModelResult",
    "ToolRegistry",
    "ToolDefinition",
    "ToolBenchError",
    "StrategyRunError",
    "recover",
    "get_logger",
    "setup_logging",
    "resolve_env_settings",
    "resolve_api_key",
    "resolve_default_model",
    "GeminiModelClient",
    "GeminiToolRegistry",
    "GenerationSettings",
    "create_demo_tool_registry",
    "create_test_tool_registry",
    "StrategyRunConfig",
    "StrategyRunResult",
    "run_strategy",
    "BenchmarkConfig",
    "BenchmarkResult",
    "PROMPT_PRESETS",
    "default_benchmark_config",
    "run_benchmark",
]
