"""Health post taxonomy and record types for LogLeaf.

This module defines the closed set of post categories, the source tags that
upstream sync jobs attach to a post, and the value types produced by the
health post parser.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union


class Category(str, Enum):
    """Semantic category of a post's text."""

    SLEEP = "sleep"
    NAP = "nap"
    EXERCISE = "exercise"
    DAILY_ACTIVITY = "daily_activity"
    PLAIN_TEXT = "plain_text"  # Universal fallback, carries no record


class SourceTag(str, Enum):
    """Where a stored post came from.

    Only a hint: historical rows may carry a stale or missing tag, so the
    parser never relies on it for detection.
    """

    GENERIC_SOCIAL = "generic-social"
    FITBIT = "fitbit"
    GOOGLEFIT = "googlefit"
    UNSPECIFIED_HEALTH = "unspecified-health"

    @property
    def is_health(self) -> bool:
        """Whether posts from this source are expected to carry health data."""
        return self is not SourceTag.GENERIC_SOCIAL

    @classmethod
    def coerce(cls, value: "SourceTag | str | None") -> "SourceTag | None":
        """Convert a raw tag value to a SourceTag.

        Unknown strings map to None rather than raising, because the tag is
        read back from storage written by older app versions.

        Args:
            value: SourceTag, its string value, or None

        Returns:
            Matching SourceTag, or None if the value is empty or unknown
        """
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class SleepRecord:
    """Sleep or nap session recovered from a post.

    Attributes:
        start_time: Bedtime as displayed, "HH:MM" (already localized)
        end_time: Wake time as displayed, "HH:MM"
        duration: Free-form total duration text, e.g. "8h19m" or "7時間45分"
        deep_minutes: Deep sleep minutes (0 when absent)
        light_minutes: Light/shallow sleep minutes (0 when absent)
        rem_minutes: REM sleep minutes (0 when absent)
        awake_minutes: Awake minutes (0 when absent)
        efficiency: Sleep efficiency percentage, if the dialect encodes it
    """

    start_time: str
    end_time: str
    duration: str = ""
    deep_minutes: int = 0
    light_minutes: int = 0
    rem_minutes: int = 0
    awake_minutes: int = 0
    efficiency: int | None = None

    @property
    def stage_minutes(self) -> dict[str, int]:
        """Stage minutes keyed by stage name, in display order."""
        return {
            "deep": self.deep_minutes,
            "light": self.light_minutes,
            "rem": self.rem_minutes,
            "awake": self.awake_minutes,
        }


@dataclass(frozen=True)
class ExerciseRecord:
    """Workout recovered from a post.

    Attributes:
        activity_type: Activity label as written, e.g. "ランニング"
        start_time: Start time "HH:MM", or a placeholder if not encoded
        end_time: End time "HH:MM", or a placeholder if not encoded
        duration: Duration text, e.g. "30分"
        distance: Unit-suffixed distance text, e.g. "2.5km"
        calories: Unit-suffixed calorie text, e.g. "450kcal"
    """

    activity_type: str
    start_time: str
    end_time: str
    duration: str
    distance: str | None = None
    calories: str | None = None


@dataclass(frozen=True)
class DailyActivityRecord:
    """Daily step and calorie totals. At least one field is set."""

    steps: int | None = None
    calories: int | None = None


HealthRecord = Union[SleepRecord, ExerciseRecord, DailyActivityRecord]

# Record type each category carries
CATEGORY_RECORDS: dict[Category, type | None] = {
    Category.SLEEP: SleepRecord,
    Category.NAP: SleepRecord,
    Category.EXERCISE: ExerciseRecord,
    Category.DAILY_ACTIVITY: DailyActivityRecord,
    Category.PLAIN_TEXT: None,
}


@dataclass(frozen=True)
class ParseResult:
    """Result of classifying one post.

    Attributes:
        category: The single category that applies to the text
        record: Structured fields, None exactly when category is PLAIN_TEXT
        dialect: Name of the dialect that matched (for diagnostics)
        source_hint: The source hint the caller supplied, if any
    """

    category: Category
    record: HealthRecord | None = None
    dialect: str | None = None
    source_hint: SourceTag | None = None

    def __post_init__(self) -> None:
        expected = CATEGORY_RECORDS[self.category]
        if expected is None:
            if self.record is not None:
                raise ValueError("PLAIN_TEXT results carry no record")
        elif not isinstance(self.record, expected):
            raise TypeError(
                f"{self.category.value} results require a {expected.__name__}"
            )

    @classmethod
    def plain_text(cls, source_hint: SourceTag | None = None) -> "ParseResult":
        """Create the fallback result for text with no recoverable health data."""
        return cls(category=Category.PLAIN_TEXT, source_hint=source_hint)

    @property
    def is_health_data(self) -> bool:
        """Check if any structured health fields were recovered."""
        return self.category is not Category.PLAIN_TEXT

    def hint_mismatch(self) -> bool:
        """Check if the category contradicts the source hint.

        A health source that produced plain text, or a social source that
        produced health data, usually means a new upstream dialect.
        """
        if self.source_hint is None:
            return False
        return self.source_hint.is_health != self.is_health_data

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "category": self.category.value,
            "dialect": self.dialect,
            "source_hint": self.source_hint.value if self.source_hint else None,
            "record": asdict(self.record) if self.record is not None else None,
        }
