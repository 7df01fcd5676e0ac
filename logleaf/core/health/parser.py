"""Post classifier: the single entry point for health post parsing.

Classifiers run in a fixed precedence, Sleep -> Nap -> Exercise ->
DailyActivity, and the first one that builds a record wins. Anything else
is plain text. Sleep and nap go first because a time range with an arrow is
the most specific shape and the least likely to appear in ordinary posts.

The parser is stateless: the same text always yields the same result, so
callers may memoize per post id.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from .classifiers import (
    DEFAULT_TIME_PLACEHOLDER,
    CategoryClassifier,
    DailyActivityClassifier,
    ExerciseClassifier,
    NapClassifier,
    SleepClassifier,
)
from .taxonomy import Category, ParseResult, SourceTag

if TYPE_CHECKING:
    from ...config import ParserConfig

logger = logging.getLogger(__name__)

# Posts longer than this are truncated before matching
MAX_INPUT_LENGTH = 10_000

CLASSIFIER_PRECEDENCE: tuple[Category, ...] = (
    Category.SLEEP,
    Category.NAP,
    Category.EXERCISE,
    Category.DAILY_ACTIVITY,
)


class HealthPostParser:
    """Classify post text into a category and recover its health fields.

    Attributes:
        classifiers: Category classifiers in precedence order
        max_input_length: Texts longer than this are truncated
        warn_on_hint_mismatch: Log a warning when the category contradicts
            the source hint (otherwise logged at debug level)
    """

    def __init__(
        self,
        max_input_length: int = MAX_INPUT_LENGTH,
        time_placeholder: str = DEFAULT_TIME_PLACEHOLDER,
        warn_on_hint_mismatch: bool = True,
        classifiers: Sequence[CategoryClassifier] | None = None,
    ) -> None:
        """Initialize the parser.

        Args:
            max_input_length: Maximum number of characters examined
            time_placeholder: Start/end value for workouts without clock times
            warn_on_hint_mismatch: Whether hint mismatches log at warning level
            classifiers: Override the classifier chain (used by tests)
        """
        self.max_input_length = max_input_length
        self.warn_on_hint_mismatch = warn_on_hint_mismatch
        if classifiers is None:
            by_category = {
                classifier.category: classifier
                for classifier in (
                    SleepClassifier(),
                    NapClassifier(),
                    ExerciseClassifier(time_placeholder=time_placeholder),
                    DailyActivityClassifier(),
                )
            }
            classifiers = [by_category[category] for category in CLASSIFIER_PRECEDENCE]
        self.classifiers: tuple[CategoryClassifier, ...] = tuple(classifiers)

    def parse(self, text: str | None, source_hint: SourceTag | str | None = None) -> ParseResult:
        """Classify post text.

        Never raises: a classifier that fails unexpectedly is skipped, and
        text that matches nothing is returned as PLAIN_TEXT.

        Args:
            text: Raw post text
            source_hint: Where the post came from; recorded on the result
                for diagnostics, never used for detection

        Returns:
            ParseResult with exactly one category
        """
        hint = SourceTag.coerce(source_hint)
        text = text or ""

        if not text.strip():
            return ParseResult.plain_text(hint)

        if len(text) > self.max_input_length:
            logger.warning(f"Input truncated from {len(text)} to {self.max_input_length} chars")
            text = text[: self.max_input_length]

        result = self._run_classifiers(text, hint)
        if result.hint_mismatch():
            self._report_mismatch(result)
        return result

    def _run_classifiers(self, text: str, hint: SourceTag | None) -> ParseResult:
        for classifier in self.classifiers:
            try:
                match = classifier.classify(text)
            except Exception as e:
                logger.warning(f"{classifier.category.value} classifier failed: {e}")
                continue
            if match is not None:
                return ParseResult(
                    category=classifier.category,
                    record=match.record,
                    dialect=match.dialect.name,
                    source_hint=hint,
                )
        return ParseResult.plain_text(hint)

    def _report_mismatch(self, result: ParseResult) -> None:
        hint = result.source_hint.value if result.source_hint else None
        message = f"Post from {hint} classified as {result.category.value}"
        if self.warn_on_hint_mismatch:
            logger.warning(message)
        else:
            logger.debug(message)


def create_parser(config: "ParserConfig | None" = None) -> HealthPostParser:
    """Factory function to create a HealthPostParser.

    Args:
        config: Optional parser settings; defaults are used when omitted

    Returns:
        Configured HealthPostParser instance
    """
    if config is None:
        return HealthPostParser()
    return HealthPostParser(
        max_input_length=config.max_input_length,
        time_placeholder=config.exercise_time_placeholder,
        warn_on_hint_mismatch=config.warn_on_hint_mismatch,
    )


# Module-level instance for convenience
_parser = HealthPostParser()


def classify(text: str | None, source_hint: SourceTag | str | None = None) -> ParseResult:
    """Classify post text using the default parser.

    Args:
        text: Raw post text
        source_hint: Optional source tag of the post

    Returns:
        ParseResult for the text
    """
    return _parser.parse(text, source_hint)


__all__ = [
    "CLASSIFIER_PRECEDENCE",
    "MAX_INPUT_LENGTH",
    "HealthPostParser",
    "classify",
    "create_parser",
]
