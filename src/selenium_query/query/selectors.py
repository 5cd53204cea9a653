"""Selector strategies for locating elements."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from selenium.webdriver.common.by import By


class Strategy(str, Enum):
    """Closed set of locator strategies understood by the engine."""

    ID = "id"
    NAME = "name"
    CLASS_NAME = "class"
    CSS = "css"
    TAG = "tag"
    XPATH = "xpath"
    LINK_TEXT = "link_text"
    PARTIAL_LINK_TEXT = "partial_link_text"


# Map strategies to Selenium By constants
STRATEGY_MAP: dict[Strategy, str] = {
    Strategy.ID: By.ID,
    Strategy.NAME: By.NAME,
    Strategy.CLASS_NAME: By.CLASS_NAME,
    Strategy.CSS: By.CSS_SELECTOR,
    Strategy.TAG: By.TAG_NAME,
    Strategy.XPATH: By.XPATH,
    Strategy.LINK_TEXT: By.LINK_TEXT,
    Strategy.PARTIAL_LINK_TEXT: By.PARTIAL_LINK_TEXT,
}


@dataclass(frozen=True)
class Selector:
    """
    A locator strategy together with its argument.

    Example:
        Selector.css("button.submit")
        Selector.parse("xpath", "//form//input[@name='q']")
    """

    strategy: Strategy
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.strategy, Strategy):
            object.__setattr__(self, "strategy", Strategy(self.strategy))
        if not self.value:
            raise ValueError(f"Empty selector value for strategy {self.strategy.value}")

    @property
    def by(self) -> str:
        """Selenium By constant for this strategy."""
        return STRATEGY_MAP[self.strategy]

    @classmethod
    def parse(cls, strategy: str, value: str) -> Selector:
        """
        Build a selector from a strategy name.

        Args:
            strategy: Locator strategy name (css, xpath, id, name, class, tag, link_text,
                partial_link_text)
            value: Selector string

        Returns:
            Selector

        Raises:
            ValueError: If strategy is not supported or value is empty
        """
        name = strategy.lower()
        try:
            parsed = Strategy(name)
        except ValueError:
            raise ValueError(
                f"Unsupported locator strategy: {strategy}. "
                f"Supported: {[s.value for s in Strategy]}"
            ) from None
        return cls(parsed, value)

    @classmethod
    def id(cls, value: str) -> Selector:
        return cls(Strategy.ID, value)

    @classmethod
    def name(cls, value: str) -> Selector:
        return cls(Strategy.NAME, value)

    @classmethod
    def class_name(cls, value: str) -> Selector:
        return cls(Strategy.CLASS_NAME, value)

    @classmethod
    def css(cls, value: str) -> Selector:
        return cls(Strategy.CSS, value)

    @classmethod
    def tag(cls, value: str) -> Selector:
        return cls(Strategy.TAG, value)

    @classmethod
    def xpath(cls, value: str) -> Selector:
        return cls(Strategy.XPATH, value)

    @classmethod
    def link_text(cls, value: str) -> Selector:
        return cls(Strategy.LINK_TEXT, value)

    @classmethod
    def partial_link_text(cls, value: str) -> Selector:
        return cls(Strategy.PARTIAL_LINK_TEXT, value)

    def __str__(self) -> str:
        return f"{self.strategy.value}={self.value!r}"
