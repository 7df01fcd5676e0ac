"""Core components for LogLeaf."""

from .health import (
    Category,
    HealthPostParser,
    ParseResult,
    SourceTag,
    classify,
    create_parser,
)

__all__ = [
    "Category",
    "HealthPostParser",
    "ParseResult",
    "SourceTag",
    "classify",
    "create_parser",
]
