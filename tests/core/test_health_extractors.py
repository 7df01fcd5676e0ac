"""Tests for health field extractors.

Tests cover:
- Count parsing (separators, overflow, non-ASCII digits)
- Time ranges and stage minutes with defaults
- Steps, calories, distance and free-text labels
- First-line-only activity headers
"""

from __future__ import annotations

import pytest

from logleaf.core.health.extractors import (
    MAX_COUNT,
    ActivityHeader,
    TimeRange,
    extract_activity_header,
    extract_count,
    extract_measure,
    extract_minutes,
    extract_percent,
    extract_stage_minutes,
    extract_text,
    extract_time_range,
    parse_count,
)

# ============================================================================
# parse_count Tests
# ============================================================================


class TestParseCount:
    """Tests for parse_count."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("8,542", 8542),
            ("1850", 1850),
            ("0", 0),
            ("1,000,000", 1000000),
            (str(MAX_COUNT), MAX_COUNT),
        ],
    )
    def test_valid(self, raw: str, expected: int) -> None:
        assert parse_count(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", ",", ",,,", "12a", "1.5", "１２３", "²", str(MAX_COUNT + 1), "9" * 40],
    )
    def test_invalid_returns_none(self, raw: str | None) -> None:
        """Malformed or out-of-range input yields None, never an exception."""
        assert parse_count(raw) is None


# ============================================================================
# Sleep Field Tests
# ============================================================================


class TestTimeRangeExtraction:
    """Tests for extract_time_range."""

    def test_full_range(self) -> None:
        span = extract_time_range("🛏️ 21:06 → 05:25 (8h19m)")
        assert span == TimeRange(start="21:06", end="05:25", duration="8h19m")

    def test_missing(self) -> None:
        assert extract_time_range("深い睡眠: 63分") is None

    def test_arrow_only_by_default(self) -> None:
        """Default separator is the arrow used by sleep dialects."""
        assert extract_time_range("07:00 - 07:30") is None
        assert extract_time_range("07:00 - 07:30", separators="→-") is not None

    def test_marker(self) -> None:
        assert extract_time_range("21:06 → 05:25", marker="🛏️") is None


class TestStageMinutes:
    """Tests for extract_minutes and extract_stage_minutes."""

    def test_all_stages(self) -> None:
        text = "深い睡眠: 80分\n浅い睡眠: 240分\nレム睡眠: 90分\n覚醒: 25分"
        assert extract_stage_minutes(text) == {"deep": 80, "light": 240, "rem": 90, "awake": 25}

    def test_missing_stages_default_to_zero(self) -> None:
        assert extract_stage_minutes("深い睡眠: 63分") == {
            "deep": 63,
            "light": 0,
            "rem": 0,
            "awake": 0,
        }

    def test_empty_text(self) -> None:
        assert extract_stage_minutes("") == {"deep": 0, "light": 0, "rem": 0, "awake": 0}

    def test_overflowing_stage_defaults_to_zero(self) -> None:
        assert extract_stage_minutes("深い睡眠: 99999999999分")["deep"] == 0

    def test_first_label_wins(self) -> None:
        """Alternate labels are tried in order; the first hit is used."""
        text = "熟睡: 40分\n深い睡眠: 63分"
        assert extract_minutes(text, "深い睡眠", "熟睡") == 63
        assert extract_minutes(text, "熟睡", "深い睡眠") == 40

    def test_custom_labels(self) -> None:
        stages = extract_stage_minutes("熟睡: 40分", {"deep": ("熟睡",)})
        assert stages == {"deep": 40}

    def test_percent(self) -> None:
        assert extract_percent("睡眠効率: 92%", "睡眠効率") == 92
        assert extract_percent("睡眠効率: 150%", "睡眠効率") is None
        assert extract_percent("", "睡眠効率") is None


# ============================================================================
# Count and Measure Tests
# ============================================================================


class TestCounts:
    """Tests for extract_count and extract_measure."""

    def test_labeled_steps(self) -> None:
        assert extract_count("歩数: 8,542歩", "歩数", "歩") == 8542

    def test_bare_fallback_disabled(self) -> None:
        assert extract_count("今日は8,542歩", "歩数", "歩") is None

    def test_bare_fallback_enabled(self) -> None:
        assert extract_count("今日は8,542歩", "歩数", "歩", bare_fallback=True) == 8542

    def test_labeled_preferred_over_bare(self) -> None:
        text = "目標10,000歩\n歩数: 8,542歩"
        assert extract_count(text, "歩数", "歩", bare_fallback=True) == 8542

    def test_overflow(self) -> None:
        assert extract_count("歩数: 99,999,999,999歩", "歩数", "歩") is None

    def test_measure_keeps_unit(self) -> None:
        assert extract_measure("距離: 2.5km", "距離", "km") == "2.5km"
        assert extract_measure("カロリー: 450kcal", "カロリー", "kcal") == "450kcal"

    def test_measure_missing(self) -> None:
        assert extract_measure("カロリー: 450kcal", "距離", "km") is None

    def test_text_label(self) -> None:
        assert extract_text("運動: ウォーキング", "運動") == "ウォーキング"
        assert extract_text("運動:   ", "運動") is None


# ============================================================================
# Activity Header Tests
# ============================================================================


class TestActivityHeader:
    """Tests for extract_activity_header."""

    RUNNER = "🏃‍♂️"

    def test_short(self) -> None:
        header = extract_activity_header("🏃‍♂️ ランニング 30分\n距離: 2.5km", self.RUNNER)
        assert header == ActivityHeader(activity="ランニング", duration="30分")

    def test_timed(self) -> None:
        header = extract_activity_header("🏃‍♂️ ランニング 07:00 - 07:30 30分", self.RUNNER)
        assert header.start == "07:00"
        assert header.end == "07:30"
        assert header.duration == "30分"

    def test_first_line_only(self) -> None:
        """Activity headers further down the post are ignored."""
        text = "今日も走った\n🏃‍♂️ ランニング 30分"
        assert extract_activity_header(text, self.RUNNER) is None

    def test_empty(self) -> None:
        assert extract_activity_header("", self.RUNNER) is None
