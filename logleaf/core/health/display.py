"""Formatting helpers shared by the calendar cell, detail dialog and cards."""

from __future__ import annotations

import re

from .taxonomy import (
    Category,
    DailyActivityRecord,
    ExerciseRecord,
    ParseResult,
    SleepRecord,
)

STAGE_LABELS: dict[str, str] = {
    "deep": "深い睡眠",
    "light": "浅い睡眠",
    "rem": "レム睡眠",
    "awake": "覚醒",
}

_HOURS_MINUTES = re.compile(r"(\d+)\s*時間\s*(?:(\d+)\s*分)?")
_MINUTES = re.compile(r"(\d+)\s*分")


def compact_duration(text: str) -> str:
    """Shorten Japanese durations: "7時間45分" -> "7h45m", "45分" -> "45m".

    Text in any other form is returned unchanged.
    """
    text = _HOURS_MINUTES.sub(
        lambda m: f"{m.group(1)}h{m.group(2)}m" if m.group(2) else f"{m.group(1)}h", text
    )
    return _MINUTES.sub(lambda m: f"{m.group(1)}m", text)


def format_count(value: int) -> str:
    """Insert thousands separators: 8542 -> "8,542"."""
    return f"{value:,}"


def stage_breakdown(record: SleepRecord) -> list[tuple[str, int, float]]:
    """Rows for the sleep stage bar chart.

    Fractions are relative to the sum of stage minutes, not the stated
    total duration; the two are not reconciled.

    Returns:
        (label, minutes, fraction) per stage in display order
    """
    minutes = record.stage_minutes
    total = sum(minutes.values())
    return [
        (STAGE_LABELS[stage], value, value / total if total else 0.0)
        for stage, value in minutes.items()
    ]


def summarize(result: ParseResult) -> str | None:
    """One-line summary for compact views, or None for plain text."""
    record = result.record
    if result.category in (Category.SLEEP, Category.NAP) and isinstance(record, SleepRecord):
        parts = [f"{record.start_time} - {record.end_time}"]
        if record.duration:
            parts.append(compact_duration(record.duration))
        return " ".join(parts)
    if result.category is Category.EXERCISE and isinstance(record, ExerciseRecord):
        parts = [record.activity_type]
        if record.distance:
            parts.append(record.distance)
        parts.append(compact_duration(record.duration))
        return " ".join(parts)
    if result.category is Category.DAILY_ACTIVITY and isinstance(record, DailyActivityRecord):
        parts = []
        if record.steps is not None:
            parts.append(f"{format_count(record.steps)}歩")
        if record.calories is not None:
            parts.append(f"{format_count(record.calories)}kcal")
        return " ".join(parts)
    return None


__all__ = ["STAGE_LABELS", "compact_duration", "format_count", "stage_breakdown", "summarize"]
