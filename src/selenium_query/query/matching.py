"""String matching used by text, class, attribute and property filters."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional, Pattern, Union


@dataclass(frozen=True)
class StringMatch:
    """
    Match a needle against a string value.

    Exact by default. ``partial()`` matches anywhere in the value, ``word()`` matches
    whole words only, ``case_insensitive()`` folds case on both sides.

    Example:
        StringMatch("pure-button").word()
        StringMatch("submit").partial().case_insensitive()
    """

    needle: str
    is_partial: bool = False
    is_word: bool = False
    ignore_case: bool = False

    def partial(self) -> StringMatch:
        return replace(self, is_partial=True)

    def word(self) -> StringMatch:
        return replace(self, is_word=True)

    def case_insensitive(self) -> StringMatch:
        return replace(self, ignore_case=True)

    def matches(self, value: Optional[str]) -> bool:
        if value is None:
            return False

        needle, haystack = self.needle, value
        if self.ignore_case:
            needle, haystack = needle.casefold(), haystack.casefold()

        if self.is_word:
            return re.search(rf"(?<!\S){re.escape(needle)}(?!\S)", haystack) is not None
        if self.is_partial:
            return needle in haystack
        return needle == haystack

    def __str__(self) -> str:
        flags = [
            name
            for name, enabled in (
                ("partial", self.is_partial),
                ("word", self.is_word),
                ("ignore case", self.ignore_case),
            )
            if enabled
        ]
        suffix = f" ({', '.join(flags)})" if flags else ""
        return f"{self.needle!r}{suffix}"


class PatternMatch:
    """Regex matcher, searched anywhere in the value."""

    def __init__(self, pattern: Pattern[str]):
        self.pattern = pattern

    def matches(self, value: Optional[str]) -> bool:
        return value is not None and self.pattern.search(value) is not None

    def __str__(self) -> str:
        return f"/{self.pattern.pattern}/"


Matcher = Union[StringMatch, PatternMatch]
MatchValue = Union[str, Pattern[str], StringMatch]


def as_matcher(value: MatchValue) -> Matcher:
    """Coerce a plain string (exact match), compiled regex or StringMatch to a matcher."""
    if isinstance(value, (StringMatch, PatternMatch)):
        return value
    if isinstance(value, re.Pattern):
        return PatternMatch(value)
    if isinstance(value, str):
        return StringMatch(value)
    raise TypeError(f"Cannot match against {type(value).__name__}")
