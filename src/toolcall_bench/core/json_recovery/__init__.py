"""JSON recovery pipeline for unreliable model output."""

from .recovery import (
    recover,
    as_json_object,
    is_json_object,
    parse_object_with_repair,
    unwrap_markdown_code_fence,
    extract_first_balanced_json_object,
)

__all__ = [
    "recover",
    "as_json_object",
    "is_json_object",
    "parse_object_with_repair",
    "unwrap_markdown_code_fence",
    "extract_first_balanced_json_object",
]
