"""Typed field extraction from health post text.

Extractors never raise. A field that is absent or malformed comes back as
None (optional fields) or 0 (sleep stage minutes), and the classifier
decides whether the record can still be built.
"""

from __future__ import annotations

from dataclasses import dataclass

from . import patterns

# Counts are stored as 32-bit ints by the sync layer
MAX_COUNT = 2**31 - 1

# Sleep stage labels, tried in order per stage (first hit wins)
SLEEP_STAGE_LABELS: dict[str, tuple[str, ...]] = {
    "deep": ("深い睡眠",),
    "light": ("浅い睡眠",),
    "rem": ("レム睡眠",),
    "awake": ("覚醒",),
}

SLEEP_DURATION_LABEL = "睡眠時間"
SLEEP_EFFICIENCY_LABEL = "睡眠効率"

EXERCISE_TYPE_LABEL = "運動"
EXERCISE_DURATION_LABEL = "継続時間"
DISTANCE_LABEL, DISTANCE_UNIT = "距離", "km"
EXERCISE_CALORIES_LABEL, CALORIES_UNIT = "カロリー", "kcal"

STEPS_LABEL, STEPS_UNIT = "歩数", "歩"
DAILY_CALORIES_LABEL = "消費カロリー"


@dataclass(frozen=True)
class TimeRange:
    """Clock-time range as displayed in the post."""

    start: str
    end: str
    duration: str | None = None


@dataclass(frozen=True)
class ActivityHeader:
    """First-line workout summary: activity name and duration."""

    activity: str
    duration: str
    start: str | None = None
    end: str | None = None


def parse_count(raw: str | None) -> int | None:
    """Parse a digit string with optional thousands separators.

    Args:
        raw: Captured text such as "8,542"

    Returns:
        Integer value, or None for empty, non-numeric or out-of-range input
    """
    if not raw:
        return None
    digits = raw.replace(",", "").strip()
    # isdigit() alone accepts superscripts and other non-ASCII digits
    if not digits or not digits.isascii() or not digits.isdigit():
        return None
    value = int(digits)
    if value > MAX_COUNT:
        return None
    return value


def extract_time_range(
    text: str,
    marker: str | None = None,
    separators: str = "→",
) -> TimeRange | None:
    """Extract the first time range, optionally anchored on a marker.

    Args:
        text: Raw post text
        marker: Literal that must directly precede the range
        separators: Accepted separator characters

    Returns:
        TimeRange, or None unless both clock times were found
    """
    groups = patterns.find_groups(patterns.time_range(marker, separators), text)
    if groups is None:
        return None
    start, end, duration = groups
    if not start or not end:
        return None
    return TimeRange(start=start, end=end, duration=duration)


def extract_minutes(text: str, *labels: str) -> int | None:
    """Extract ``<label>: N分`` for the first label that matches."""
    for label in labels:
        raw = patterns.find_first(patterns.labeled_minutes(label), text)
        if raw is not None:
            return parse_count(raw)
    return None


def extract_stage_minutes(
    text: str,
    stage_labels: dict[str, tuple[str, ...]] | None = None,
) -> dict[str, int]:
    """Extract minutes for every sleep stage, defaulting missing stages to 0.

    Stages are extracted independently and are not reconciled against the
    total duration.
    """
    stage_labels = stage_labels or SLEEP_STAGE_LABELS
    return {
        stage: extract_minutes(text, *labels) or 0 for stage, labels in stage_labels.items()
    }


def extract_count(text: str, label: str, unit: str, bare_fallback: bool = False) -> int | None:
    """Extract an integer count such as steps or calories.

    Args:
        text: Raw post text
        label: Field label, e.g. "歩数"
        unit: Unit suffix, e.g. "歩"
        bare_fallback: Use the first unlabeled ``<digits><unit>`` token when
            the labeled form is absent

    Returns:
        Count with separators stripped, or None
    """
    raw = patterns.find_first(patterns.labeled_count(label, unit), text)
    if raw is None and bare_fallback:
        raw = patterns.find_first(patterns.bare_count(unit), text)
    return parse_count(raw)


def extract_measure(text: str, label: str, unit: str) -> str | None:
    """Extract a unit-suffixed display value, e.g. "2.5km"."""
    raw = patterns.find_first(patterns.labeled_count(label, unit), text)
    if raw is None:
        return None
    return f"{raw}{unit}"


def extract_text(text: str, label: str) -> str | None:
    """Extract free text following ``<label>:`` on the same line."""
    return patterns.find_first(patterns.labeled_text(label), text)


def extract_percent(text: str, label: str) -> int | None:
    """Extract ``<label>: N%`` as an integer in 0-100."""
    value = parse_count(patterns.find_first(patterns.labeled_percent(label), text))
    if value is None or value > 100:
        return None
    return value


def extract_activity_header(text: str, marker: str) -> ActivityHeader | None:
    """Extract activity name and duration from the first line only.

    Searching the whole body would pick up unrelated words further down
    the post.
    """
    groups = patterns.find_groups(patterns.leading_activity(marker), patterns.first_line(text))
    if groups is None:
        return None
    activity, start, end, duration = groups
    if not activity or not duration:
        return None
    return ActivityHeader(activity=activity, duration=duration, start=start, end=end)


__all__ = [
    "MAX_COUNT",
    "SLEEP_STAGE_LABELS",
    "ActivityHeader",
    "TimeRange",
    "extract_activity_header",
    "extract_count",
    "extract_measure",
    "extract_minutes",
    "extract_percent",
    "extract_stage_minutes",
    "extract_text",
    "extract_time_range",
    "parse_count",
]
