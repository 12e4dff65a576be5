from unittest.mock import patch

import pytest
from pydantic import ValidationError

from conftest import call_result, text_result
from toolcall_bench.core.contracts import Strategy
from toolcall_bench.core.exceptions import StrategyRunError
from toolcall_bench.gemini.generation_settings import GenerationSettings
from toolcall_bench.strategies import (
    RUNNERS,
    HybridRepairRunner,
    SingleToolRouterRunner,
    StrategyRunConfig,
    StructuredJsonRunner,
    run_strategy,
)
from toolcall_bench.strategies.base import HybridRepairOptions, SingleToolRouterOptions
from toolcall_bench.strategies.runner import build_options

MODEL = "gemini-3-flash-preview"


def test_dispatch_table_covers_every_strategy() -> None:
    assert set(RUNNERS) == set(Strategy)
    assert isinstance(RUNNERS[Strategy.STRUCTURED_JSON], StructuredJsonRunner)
    assert isinstance(RUNNERS[Strategy.SINGLE_TOOL_ROUTER], SingleToolRouterRunner)
    assert isinstance(RUNNERS[Strategy.HYBRID_REPAIR], HybridRepairRunner)
    for strategy, runner in RUNNERS.items():
        assert runner.strategy is strategy


def test_build_options_applies_turn_budgets() -> None:
    settings = GenerationSettings()
    router = build_options(
        StrategyRunConfig(strategy="single-tool-router", prompt="p", model=MODEL, router_max_turns=6), settings
    )
    assert isinstance(router, SingleToolRouterOptions)
    assert router.max_turns == 6

    hybrid = build_options(
        StrategyRunConfig(strategy="hybrid-repair", prompt="p", model=MODEL, repair_model="r"), settings
    )
    assert isinstance(hybrid, HybridRepairOptions)
    assert hybrid.max_turns == 3
    assert hybrid.repair_model == "r"


@pytest.mark.asyncio
async def test_success_on_first_attempt(scripted_client, test_registry) -> None:
    client = scripted_client(text_result('{"action":"respond","response":"ok"}'))

    result = await run_strategy(
        StrategyRunConfig(
            strategy=Strategy.STRUCTURED_JSON, prompt="hi", model=MODEL, client=client, registry=test_registry
        )
    )

    assert result.final_text == "ok"
    assert result.attempts == 1
    assert result.used_model == MODEL
    assert result.used_strategy == Strategy.STRUCTURED_JSON
    assert result.errors is None
    assert result.verbose_notes is None
    assert result.duration_ms >= 0


@pytest.mark.asyncio
async def test_fails_once_then_succeeds(scripted_client, test_registry) -> None:
    lines = []
    client = scripted_client(
        text_result("not json at all"),
        text_result('{"action":"respond","response":"recovered"}'),
    )

    result = await run_strategy(
        StrategyRunConfig(
            strategy=Strategy.STRUCTURED_JSON,
            prompt="hi",
            model=MODEL,
            max_retries=1,
            logs=True,
            verbose=True,
            logger=lines.append,
            client=client,
            registry=test_registry,
        )
    )

    assert result.attempts == 2
    assert result.final_text == "recovered"
    assert result.errors == ["No JSON object found"]
    assert result.verbose_notes == [
        "thinking=true",
        "reasoningEffort=medium",
        "includeThoughts=false",
        "retriesUsed=1",
    ]
    assert lines == [
        f"[run] strategy=structured-json model={MODEL} attempt=1/2",
        "[error] attempt=1 No JSON object found",
        f"[run] strategy=structured-json model={MODEL} attempt=2/2",
    ]


@pytest.mark.asyncio
async def test_exhausted_attempts_raise(scripted_client, test_registry) -> None:
    client = scripted_client(
        call_result("ghost", {}),
        call_result("ghost", {}),
    )

    with pytest.raises(StrategyRunError) as exc_info:
        await run_strategy(
            StrategyRunConfig(
                strategy=Strategy.HYBRID_REPAIR,
                prompt="hi",
                model=MODEL,
                max_retries=1,
                client=client,
                registry=test_registry,
            )
        )

    error = exc_info.value
    assert str(error) == "Run failed after 2 attempt(s): Model requested unknown tool: ghost"
    assert error.attempts == 2
    assert len(error.errors) == 2


@pytest.mark.asyncio
async def test_negative_retries_are_clamped(scripted_client, test_registry) -> None:
    client = scripted_client(text_result("nope"))

    with pytest.raises(StrategyRunError, match=r"after 1 attempt\(s\)"):
        await run_strategy(
            StrategyRunConfig(
                strategy=Strategy.STRUCTURED_JSON,
                prompt="hi",
                model=MODEL,
                max_retries=-3,
                client=client,
                registry=test_registry,
            )
        )
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_logs_disabled_emit_nothing(scripted_client, test_registry) -> None:
    lines = []
    client = scripted_client(text_result('{"action":"respond","response":"ok"}'))

    await run_strategy(
        StrategyRunConfig(
            strategy=Strategy.STRUCTURED_JSON,
            prompt="hi",
            model=MODEL,
            logger=lines.append,
            client=client,
            registry=test_registry,
        )
    )

    assert lines == []


@pytest.mark.asyncio
async def test_missing_api_key_fails_every_attempt(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_MODEL", raising=False)

    with pytest.raises(StrategyRunError, match="Missing API key"):
        await run_strategy(StrategyRunConfig(strategy=Strategy.STRUCTURED_JSON, prompt="hi", model=MODEL))


@pytest.mark.asyncio
async def test_explicit_api_key_builds_gemini_client(scripted_client) -> None:
    client = scripted_client(text_result('{"action":"respond","response":"ok"}'))

    with patch("toolcall_bench.strategies.runner.GeminiModelClient.from_api_key", return_value=client) as factory:
        result = await run_strategy(
            StrategyRunConfig(strategy=Strategy.STRUCTURED_JSON, prompt="hi", model=MODEL, api_key="k-123")
        )

    factory.assert_called_once_with("k-123")
    assert result.final_text == "ok"
    # Demo registry is used when none is injected
    assert "convert_temperature" in client.calls[0].contents


def test_turn_budgets_below_one_are_rejected() -> None:
    with pytest.raises(ValidationError):
        StrategyRunConfig(strategy="single-tool-router", prompt="p", model=MODEL, router_max_turns=0)
    with pytest.raises(ValidationError):
        StrategyRunConfig(strategy="hybrid-repair", prompt="p", model=MODEL, hybrid_max_turns=-1)

    unchecked = StrategyRunConfig.model_construct(
        strategy=Strategy.SINGLE_TOOL_ROUTER, prompt="p", model=MODEL, router_max_turns=0
    )
    with pytest.raises(ValidationError):
        build_options(unchecked, GenerationSettings())
