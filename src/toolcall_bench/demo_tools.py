"""Deterministic demo tools used by the playground runs and the benchmark."""

import math
import re
from datetime import date
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core.tools import ToolExecutionContext
from .gemini.registry import GeminiToolRegistry

_EMAIL = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_ISO_DATE = r"^\d{4}-\d{2}-\d{2}$"

# Integral arguments stay int after validation
Number = Union[int, float]


def _round_two(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def _as_number(value: float) -> Any:
    return int(value) if float(value).is_integer() else value


class _StrictArgs(BaseModel):
    # No string -> number coercion: such arguments must go through repair
    model_config = ConfigDict(strict=True, extra="forbid")


class NumbersArgs(_StrictArgs):
    numbers: List[Number] = Field(min_length=1)


class TextArgs(_StrictArgs):
    text: str = Field(min_length=1)


class CurrentTimeArgs(_StrictArgs):
    locale: Optional[str] = None


class ConvertTemperatureArgs(_StrictArgs):
    value: Number
    fromUnit: Literal["C", "F"]
    toUnit: Literal["C", "F"]


class DaysBetweenDatesArgs(_StrictArgs):
    startDate: str = Field(pattern=_ISO_DATE)
    endDate: str = Field(pattern=_ISO_DATE)


class SortNumbersArgs(_StrictArgs):
    numbers: List[Number] = Field(min_length=1)
    order: Literal["asc", "desc"] = "asc"


class CalculatePercentageArgs(_StrictArgs):
    numerator: Number
    denominator: Number
    precision: int = Field(default=2, ge=0, le=4)

    @field_validator("denominator")
    @classmethod
    def _non_zero(cls, value: Number) -> Number:
        if value == 0:
            raise ValueError("denominator must not be 0")
        return value


class ExtractNumberSequenceArgs(_StrictArgs):
    text: str = Field(min_length=1)
    dedupe: bool = False


class TrimAndExcerptArgs(_StrictArgs):
    text: str = Field(min_length=1)
    maxLength: int = Field(ge=5, le=240)
    withEllipsis: bool = True


def sum_numbers(args: NumbersArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    return {"total": _as_number(sum(args.numbers))}


def get_current_time(args: CurrentTimeArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    return {
        "iso": context.now.isoformat(),
        "localized": context.now.strftime("%c"),
        "locale": args.locale or "en-US",
    }


def to_uppercase(args: TextArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    return {"transformed": args.text.upper()}


def multiply_numbers(args: NumbersArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    return {"product": _as_number(math.prod(args.numbers))}


def average_numbers(args: NumbersArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    return {"average": _as_number(sum(args.numbers) / len(args.numbers))}


def convert_temperature(args: ConvertTemperatureArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    if args.fromUnit == args.toUnit:
        value = args.value
    elif args.fromUnit == "C":
        value = args.value * 9 / 5 + 32
    else:
        value = (args.value - 32) * 5 / 9
    return {"value": _as_number(_round_two(value)), "unit": args.toUnit}


def extract_emails(args: TextArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    unique = list(dict.fromkeys(_EMAIL.findall(args.text)))
    return {"emails": unique, "count": len(unique)}


def slugify_text(args: TextArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    slug = re.sub(r"[^a-z0-9\s-]", "", args.text.lower().strip())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return {"slug": slug}


def word_stats(args: TextArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    words = args.text.split()
    return {
        "words": len(words),
        "characters": len(args.text),
        "lines": len(re.split(r"\r?\n", args.text)),
        "estimatedReadingMinutes": _as_number(_round_two(len(words) / 200)),
    }


def days_between_dates(args: DaysBetweenDatesArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    start = date.fromisoformat(args.startDate)
    end = date.fromisoformat(args.endDate)
    return {"days": abs((end - start).days)}


def sort_numbers(args: SortNumbersArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    ordered = sorted(args.numbers, reverse=args.order == "desc")
    return {"sorted": [_as_number(n) for n in ordered], "order": args.order}


def calculate_percentage(args: CalculatePercentageArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    percentage = args.numerator / args.denominator * 100
    return {"percentage": _as_number(round(percentage, args.precision)), "precision": args.precision}


def extract_number_sequence(args: ExtractNumberSequenceArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    values = [_as_number(float(match)) for match in _NUMBER.findall(args.text)]
    numbers = list(dict.fromkeys(values)) if args.dedupe else values
    return {"numbers": numbers, "count": len(numbers)}


def trim_and_excerpt(args: TrimAndExcerptArgs, context: ToolExecutionContext) -> Dict[str, Any]:
    trimmed = args.text.strip()
    if len(trimmed) <= args.maxLength:
        return {"excerpt": trimmed, "truncated": False}

    safe_length = max(1, args.maxLength - (3 if args.withEllipsis else 0))
    base = trimmed[:safe_length].rstrip()
    return {"excerpt": f"{base}..." if args.withEllipsis else base, "truncated": True}


ToolSpec = Tuple[str, str, Type[BaseModel], Callable[..., Any]]

DEMO_TOOLS: List[ToolSpec] = [
    ("sum_numbers", "Sum an array of numbers and return the total.", NumbersArgs, sum_numbers),
    ("get_current_time", "Return the current ISO timestamp and locale rendering.", CurrentTimeArgs, get_current_time),
    ("to_uppercase", "Convert text to uppercase.", TextArgs, to_uppercase),
    ("multiply_numbers", "Multiply an array of numbers and return the product.", NumbersArgs, multiply_numbers),
    ("average_numbers", "Return arithmetic mean of number array.", NumbersArgs, average_numbers),
    (
        "convert_temperature",
        "Convert temperature between Celsius and Fahrenheit (units: C or F).",
        ConvertTemperatureArgs,
        convert_temperature,
    ),
    ("extract_emails", "Extract unique emails from free-form text.", TextArgs, extract_emails),
    ("slugify_text", "Convert text to URL-safe slug.", TextArgs, slugify_text),
    ("word_stats", "Return simple text statistics: words, chars, lines, reading minutes.", TextArgs, word_stats),
    (
        "days_between_dates",
        "Calculate absolute day difference between two ISO dates.",
        DaysBetweenDatesArgs,
        days_between_dates,
    ),
    ("sort_numbers", "Sort number array ascending or descending.", SortNumbersArgs, sort_numbers),
    (
        "calculate_percentage",
        "Calculate percentage as (numerator / denominator) * 100 with configurable precision.",
        CalculatePercentageArgs,
        calculate_percentage,
    ),
    (
        "extract_number_sequence",
        "Extract numbers from text in appearance order, with optional dedupe.",
        ExtractNumberSequenceArgs,
        extract_number_sequence,
    ),
    (
        "trim_and_excerpt",
        "Trim text and return a bounded excerpt that optionally appends an ellipsis.",
        TrimAndExcerptArgs,
        trim_and_excerpt,
    ),
]


def create_demo_tool_registry() -> GeminiToolRegistry:
    registry = GeminiToolRegistry()
    for name, description, args_model, func in DEMO_TOOLS:
        registry.register(name, description=description, args_model=args_model, func=func)
    return registry


def create_test_tool_registry() -> GeminiToolRegistry:
    """Small registry with three tools, used by tests and quick experiments."""
    registry = GeminiToolRegistry()
    registry.register("sum_numbers", description="Sum numbers for tests.", args_model=NumbersArgs, func=sum_numbers)
    registry.register(
        "multiply_numbers", description="Multiply numbers for tests.", args_model=NumbersArgs, func=multiply_numbers
    )
    registry.register("to_uppercase", description="Uppercase for tests.", args_model=TextArgs, func=to_uppercase)
    return registry
