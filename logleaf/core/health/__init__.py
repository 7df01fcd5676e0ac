"""Health post parsing for the LogLeaf timeline.

Health integrations (Fitbit, Google Fit, Zepp imports) store their metrics
as display text inside an ordinary post body. This package recovers the
structured fields from that text so every view renders the same numbers.

The pipeline has five layers:
1. Patterns - named, cached regex matchers
2. Dialects - marker sets for each historical text template
3. Extractors - typed fields with safe defaults
4. Classifiers - one per category, dialect detection + extraction
5. Parser - fixed precedence, plain-text fallback

Example usage:
    ```python
    from logleaf.core.health import Category, classify

    result = classify("🛏️ 21:06 → 05:25 (8h19m)\\n深い睡眠: 63分")
    assert result.category == Category.SLEEP
    assert result.record.deep_minutes == 63
    assert result.record.light_minutes == 0
    ```
"""

from .classifiers import (
    CategoryClassifier,
    Classification,
    DailyActivityClassifier,
    ExerciseClassifier,
    NapClassifier,
    SleepClassifier,
)
from .dialects import (
    DIALECTS,
    Dialect,
    detect,
    has_health_markers,
)
from .display import (
    compact_duration,
    format_count,
    stage_breakdown,
    summarize,
)
from .parser import (
    CLASSIFIER_PRECEDENCE,
    HealthPostParser,
    classify,
    create_parser,
)
from .taxonomy import (
    Category,
    DailyActivityRecord,
    ExerciseRecord,
    ParseResult,
    SleepRecord,
    SourceTag,
)

__all__ = [
    # Entry point
    "classify",
    "HealthPostParser",
    "create_parser",
    "CLASSIFIER_PRECEDENCE",
    # Taxonomy
    "Category",
    "SourceTag",
    "ParseResult",
    "SleepRecord",
    "ExerciseRecord",
    "DailyActivityRecord",
    # Classifiers
    "CategoryClassifier",
    "Classification",
    "SleepClassifier",
    "NapClassifier",
    "ExerciseClassifier",
    "DailyActivityClassifier",
    # Dialects
    "DIALECTS",
    "Dialect",
    "detect",
    "has_health_markers",
    # Display
    "compact_duration",
    "format_count",
    "stage_breakdown",
    "summarize",
]
