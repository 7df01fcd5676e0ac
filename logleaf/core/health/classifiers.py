"""Category classifiers for health post text.

Each classifier tries the dialects of its category in priority order and
returns the first fully-populated record. A classifier that cannot build a
record returns None so the parser can fall through to the next category.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .dialects import Dialect, detect
from .extractors import (
    CALORIES_UNIT,
    DAILY_CALORIES_LABEL,
    DISTANCE_LABEL,
    DISTANCE_UNIT,
    EXERCISE_CALORIES_LABEL,
    EXERCISE_DURATION_LABEL,
    EXERCISE_TYPE_LABEL,
    SLEEP_DURATION_LABEL,
    SLEEP_EFFICIENCY_LABEL,
    STEPS_LABEL,
    STEPS_UNIT,
    TimeRange,
    extract_activity_header,
    extract_count,
    extract_measure,
    extract_percent,
    extract_stage_minutes,
    extract_text,
    extract_time_range,
)
from .taxonomy import (
    Category,
    DailyActivityRecord,
    ExerciseRecord,
    HealthRecord,
    SleepRecord,
)

logger = logging.getLogger(__name__)

BED_MARKER = "🛏️"
RUNNER_MARKER = "🏃‍♂️"

# Shown for workouts whose dialect carries no clock times
DEFAULT_TIME_PLACEHOLDER = "--:--"


@dataclass(frozen=True)
class Classification:
    """A record together with the dialect it was recovered from."""

    record: HealthRecord
    dialect: Dialect


class CategoryClassifier(ABC):
    """Base class: dialect detection followed by field extraction."""

    category: Category

    def classify(self, text: str) -> Classification | None:
        """Build a record from the first dialect that yields one.

        Args:
            text: Raw post text

        Returns:
            Classification, or None if no dialect matched or every matching
            dialect was missing a required field
        """
        for dialect in detect(self.category, text):
            record = self.extract(dialect, text)
            if record is not None:
                logger.debug(f"Matched {dialect.name}")
                return Classification(record=record, dialect=dialect)
            logger.debug(f"{dialect.name} markers present but required fields missing")
        return None

    def __call__(self, text: str) -> HealthRecord | None:
        match = self.classify(text)
        return match.record if match else None

    @abstractmethod
    def extract(self, dialect: Dialect, text: str) -> HealthRecord | None:
        """Extract a record for one detected dialect, or None."""


def build_sleep_record(text: str, span: TimeRange) -> SleepRecord:
    """Combine a time range with best-effort stage minutes."""
    stages = extract_stage_minutes(text)
    duration = span.duration or extract_text(text, SLEEP_DURATION_LABEL) or ""
    return SleepRecord(
        start_time=span.start,
        end_time=span.end,
        duration=duration,
        deep_minutes=stages["deep"],
        light_minutes=stages["light"],
        rem_minutes=stages["rem"],
        awake_minutes=stages["awake"],
        efficiency=extract_percent(text, SLEEP_EFFICIENCY_LABEL),
    )


class SleepClassifier(CategoryClassifier):
    """Overnight sleep. Requires both clock times; stages are optional."""

    category = Category.SLEEP

    def extract(self, dialect: Dialect, text: str) -> SleepRecord | None:
        span = None
        if dialect.name == "sleep.bed":
            span = extract_time_range(text, marker=BED_MARKER, separators="→-")
        if span is None:
            span = extract_time_range(text, separators="→-")
        if span is None:
            return None
        return build_sleep_record(text, span)


class NapClassifier(CategoryClassifier):
    """Naps share the sleep record shape; stage lines are usually absent."""

    category = Category.NAP

    def extract(self, dialect: Dialect, text: str) -> SleepRecord | None:
        # A bare keyword next to "10:00 - 11:00" is usually a schedule, not a nap
        separators = "→" if dialect.name == "nap.keyword" else "→-"
        span = extract_time_range(text, separators=separators)
        if span is None:
            return None
        return build_sleep_record(text, span)


class ExerciseClassifier(CategoryClassifier):
    """Workouts. Requires activity type and duration."""

    category = Category.EXERCISE

    def __init__(self, time_placeholder: str = DEFAULT_TIME_PLACEHOLDER) -> None:
        self.time_placeholder = time_placeholder

    def extract(self, dialect: Dialect, text: str) -> ExerciseRecord | None:
        if dialect.name == "exercise.log":
            activity = extract_text(text, EXERCISE_TYPE_LABEL)
            duration = extract_text(text, EXERCISE_DURATION_LABEL)
            start = end = None
        else:
            header = extract_activity_header(text, RUNNER_MARKER)
            if header is None:
                return None
            activity, duration = header.activity, header.duration
            start, end = header.start, header.end

        if not activity or not duration:
            return None

        return ExerciseRecord(
            activity_type=activity,
            start_time=start or self.time_placeholder,
            end_time=end or self.time_placeholder,
            duration=duration,
            distance=extract_measure(text, DISTANCE_LABEL, DISTANCE_UNIT),
            calories=extract_measure(text, EXERCISE_CALORIES_LABEL, CALORIES_UNIT),
        )


class DailyActivityClassifier(CategoryClassifier):
    """Daily totals. Requires steps or calories (or both)."""

    category = Category.DAILY_ACTIVITY

    def extract(self, dialect: Dialect, text: str) -> DailyActivityRecord | None:
        # Only the unlabeled dialect may fall back to bare "<digits>歩" tokens
        bare = dialect.name == "daily.units"
        steps = extract_count(text, STEPS_LABEL, STEPS_UNIT, bare_fallback=bare)
        calories = extract_count(text, DAILY_CALORIES_LABEL, CALORIES_UNIT, bare_fallback=bare)
        if steps is None and calories is None:
            return None
        return DailyActivityRecord(steps=steps, calories=calories)


# Module-level instances: text -> record | None
classify_sleep = SleepClassifier()
classify_nap = NapClassifier()
classify_exercise = ExerciseClassifier()
classify_daily_activity = DailyActivityClassifier()


__all__ = [
    "BED_MARKER",
    "DEFAULT_TIME_PLACEHOLDER",
    "RUNNER_MARKER",
    "CategoryClassifier",
    "Classification",
    "DailyActivityClassifier",
    "ExerciseClassifier",
    "NapClassifier",
    "SleepClassifier",
    "build_sleep_record",
    "classify_daily_activity",
    "classify_exercise",
    "classify_nap",
    "classify_sleep",
]
