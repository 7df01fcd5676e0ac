"""Named extraction patterns shared by every health dialect.

Each factory returns a compiled regex; compiled patterns are cached, so
classifiers can ask for the same matcher on every call without recompiling.
The ``find_*`` helpers wrap the search and return captured groups, or None
when the pattern is absent. Nothing in this module raises on missing input.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Stored texts carry emoji with and without variation selector-16
VARIATION_SELECTOR = "\ufe0f"
ZERO_WIDTH_JOINER = "\u200d"

TIME_RANGE_SEPARATORS = ("→", "-")

# "21:06", "7:05"; out-of-range times such as "99:99" do not match
TIME = r"(?<!\d)(?:[01]?\d|2[0-3]):[0-5]\d(?!\d)"

# Label/value separator: half- or full-width colon, optional
LABEL_SEP = r"\s*[:：]?\s*"

# Integer with optional thousands separators: "8,542"
GROUPED_DIGITS = r"\d[\d,]*"

# "30分", "1時間5分", "45m", "1h20m", bare "30"
DURATION = r"\d+(?:時間(?:\d+分)?|分|h(?:\d+m)?|min|m)?"

# A duration must not run on into a decimal, a clock time or a distance
# or count unit: "2.5km" and "5km" are not durations
DURATION_END = r"(?![\d:.,A-Za-z])(?![ \t]*(?:km|kcal|歩))"


def marker_fragment(marker: str) -> str:
    """Escape a literal marker, allowing a variation selector after any symbol."""
    fragment = []
    for char in marker.replace(VARIATION_SELECTOR, ""):
        fragment.append(re.escape(char))
        if not char.isascii() and char != ZERO_WIDTH_JOINER:
            fragment.append(VARIATION_SELECTOR + "?")
    return "".join(fragment)


@lru_cache(maxsize=None)
def time_range(
    marker: str | None = None,
    separators: str = "".join(TIME_RANGE_SEPARATORS),
) -> re.Pattern[str]:
    """Two clock times joined by an arrow-like separator.

    Groups: start, end, duration (the parenthesized text right after the
    range, None if absent).

    Args:
        marker: Literal that must directly precede the range (e.g. "🛏️")
        separators: Characters accepted between the two times
    """
    prefix = marker_fragment(marker) + r"\s*" if marker else ""
    sep = "|".join(re.escape(s) for s in separators)
    return re.compile(
        prefix
        + rf"({TIME})\s*(?:{sep})\s*({TIME})"
        + r"(?:[ \t]*[(（][ \t]*([^()（）\n]+?)[ \t]*[)）])?"
    )


@lru_cache(maxsize=None)
def labeled_minutes(label: str) -> re.Pattern[str]:
    """``<label>: 63分`` -> "63"."""
    return re.compile(re.escape(label) + LABEL_SEP + rf"({GROUPED_DIGITS})\s*分")


@lru_cache(maxsize=None)
def labeled_count(label: str, unit: str) -> re.Pattern[str]:
    """``<label>: 8,542歩`` -> "8,542". Decimals are kept for units like km."""
    return re.compile(
        re.escape(label) + LABEL_SEP + rf"({GROUPED_DIGITS}(?:\.\d+)?)\s*" + re.escape(unit)
    )


@lru_cache(maxsize=None)
def bare_count(unit: str) -> re.Pattern[str]:
    """First unlabeled ``<digits><unit>`` token, e.g. "8,542歩"."""
    return re.compile(rf"(?<![\d.,])({GROUPED_DIGITS})\s*" + re.escape(unit))


@lru_cache(maxsize=None)
def labeled_text(label: str) -> re.Pattern[str]:
    """``<label>: free text`` up to the end of the line. Colon required."""
    return re.compile(re.escape(label) + r"\s*[:：]\s*([^\n]*\S)")


@lru_cache(maxsize=None)
def labeled_percent(label: str) -> re.Pattern[str]:
    """``<label>: 92%`` -> "92"."""
    return re.compile(re.escape(label) + LABEL_SEP + r"(\d+)\s*[%％]")


@lru_cache(maxsize=None)
def leading_activity(marker: str) -> re.Pattern[str]:
    """``<marker> <activity> [HH:MM - HH:MM] <duration>`` on a single line.

    Groups: activity, start, end, duration. Start/end are None for the
    short dialect without clock times. Apply to the first line only.
    """
    return re.compile(
        marker_fragment(marker)
        + r"[ \t]*(\w+)[ \t]+"
        + rf"(?:({TIME})[ \t]*-[ \t]*({TIME})[ \t]+)?"
        + rf"({DURATION})"
        + DURATION_END
    )


def first_line(text: str) -> str:
    """Return the first line of text ("" for empty text)."""
    return text.split("\n", 1)[0].rstrip("\r")


def find_groups(pattern: re.Pattern[str], text: str) -> tuple[str | None, ...] | None:
    """Search text and return all capture groups, or None if no match."""
    match = pattern.search(text)
    if match is None:
        return None
    return match.groups()


def find_first(pattern: re.Pattern[str], text: str) -> str | None:
    """Search text and return the first capture group, or None."""
    groups = find_groups(pattern, text)
    if not groups:
        return None
    return groups[0]


__all__ = [
    "TIME_RANGE_SEPARATORS",
    "VARIATION_SELECTOR",
    "bare_count",
    "find_first",
    "find_groups",
    "first_line",
    "labeled_count",
    "labeled_minutes",
    "labeled_percent",
    "labeled_text",
    "leading_activity",
    "marker_fragment",
    "time_range",
]
