"""Dialect detection for health post text.

Upstream integrations have changed their text templates over time, and old
posts keep their original wording. Each template is a Dialect: a set of
literal markers that must appear in the text. Detection is a pure substring
test; field extraction is left to the classifiers.
"""

from __future__ import annotations

from dataclasses import dataclass

from .patterns import VARIATION_SELECTOR
from .taxonomy import Category


def normalize_markers(text: str) -> str:
    """Drop variation selectors so "🛏️" and "🛏" compare equal."""
    return text.replace(VARIATION_SELECTOR, "")


@dataclass(frozen=True)
class Dialect:
    """One historical text template.

    Attributes:
        name: Stable identifier, "<category>.<variant>"
        category: Category this dialect encodes
        any_of: At least one of these markers must appear
        all_of: Every one of these markers must appear
        description: Example of the template, for listings
    """

    name: str
    category: Category
    any_of: tuple[str, ...] = ()
    all_of: tuple[str, ...] = ()
    description: str = ""

    def matches(self, text: str) -> bool:
        """Check whether text carries this dialect's markers."""
        if not self.any_of and not self.all_of:
            return False
        normalized = normalize_markers(text)
        if not all(normalize_markers(m) in normalized for m in self.all_of):
            return False
        if self.any_of and not any(normalize_markers(m) in normalized for m in self.any_of):
            return False
        return True

    @property
    def markers(self) -> tuple[str, ...]:
        """All markers this dialect tests for."""
        return self.all_of + self.any_of


# Known dialects per category, in detection priority order.
# Some markers are substrings of other dialects' texts ("→" also appears in
# nap posts, "🏃" in legacy activity summaries), so order matters.
DIALECTS: dict[Category, tuple[Dialect, ...]] = {
    Category.SLEEP: (
        Dialect(
            "sleep.log",
            Category.SLEEP,
            any_of=("💤 睡眠記録",),
            description="💤 睡眠記録 / 23:10 → 06:40 (7時間5分) / 覚醒: 25分",
        ),
        Dialect(
            "sleep.bed",
            Category.SLEEP,
            any_of=("🛏️",),
            description="🛏️ 21:06 → 05:25 (8h19m) / 深い睡眠: 63分",
        ),
        Dialect(
            "sleep.staged",
            Category.SLEEP,
            all_of=("→",),
            any_of=("🛏️", "深い睡眠"),
            description="21:06 → 05:25 (8h19m) / 深い睡眠: 63分",
        ),
    ),
    Category.NAP: (
        Dialect(
            "nap.log",
            Category.NAP,
            any_of=("😴 仮眠記録",),
            description="😴 仮眠記録 / 13:00 → 13:30 (30m)",
        ),
        Dialect(
            "nap.keyword",
            Category.NAP,
            any_of=("仮眠",),
            description="仮眠 13:00 → 13:30 (30m)",
        ),
    ),
    Category.EXERCISE: (
        Dialect(
            "exercise.log",
            Category.EXERCISE,
            any_of=("🏃 運動記録",),
            description="🏃 運動記録 / 運動: ウォーキング / 継続時間: 45分",
        ),
        Dialect(
            "exercise.runner",
            Category.EXERCISE,
            any_of=("🏃‍♂️", "🏃 アクティビティ記録", "ランニング"),
            description="🏃‍♂️ ランニング 07:00 - 07:30 30分 / 距離: 2.5km",
        ),
    ),
    Category.DAILY_ACTIVITY: (
        Dialect(
            "daily.summary",
            Category.DAILY_ACTIVITY,
            any_of=("📊 今日の健康データ", "🏃 アクティビティ記録"),
            description="📊 今日の健康データ / 歩数: 8,542歩 / 消費カロリー: 1,850kcal",
        ),
        Dialect(
            "daily.units",
            Category.DAILY_ACTIVITY,
            all_of=("歩", "kcal"),
            description="8,542歩 1,850kcal",
        ),
    ),
}


def dialects_for(category: Category) -> tuple[Dialect, ...]:
    """Return the dialects of a category in priority order."""
    return DIALECTS.get(category, ())


def detect(category: Category, text: str) -> list[Dialect]:
    """Return every dialect of a category whose markers appear in text.

    Args:
        category: Category to test
        text: Raw post text

    Returns:
        Matching dialects in priority order (empty if none match)
    """
    return [dialect for dialect in dialects_for(category) if dialect.matches(text)]


def detect_first(category: Category, text: str) -> Dialect | None:
    """Return the highest-priority matching dialect of a category, or None."""
    for dialect in dialects_for(category):
        if dialect.matches(text):
            return dialect
    return None


def has_health_markers(text: str) -> bool:
    """Check if text carries any known health marker at all."""
    return any(detect_first(category, text) is not None for category in DIALECTS)


def get_dialect(name: str) -> Dialect:
    """Look up a dialect by name.

    Raises:
        KeyError: If no dialect has that name
    """
    for dialects in DIALECTS.values():
        for dialect in dialects:
            if dialect.name == name:
                return dialect
    raise KeyError(name)


__all__ = [
    "DIALECTS",
    "Dialect",
    "detect",
    "detect_first",
    "dialects_for",
    "get_dialect",
    "has_health_markers",
    "normalize_markers",
]
