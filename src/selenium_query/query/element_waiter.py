"""
ElementWaiter - explicit waits on an element or a query using the builder pattern.

Example:
    session.wait_until(handle).displayed()
    session.wait_until(handle).error("Timed out waiting for spinner to go").stale()
    session.wait_until(session.query(Selector.id("save"))).clickable()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Mapping, Optional, Union

from ..core.bridge import SyncBridge
from ..core.exceptions import WaitTimeoutError
from ..core.protocol import ElementHandle, ProtocolClient
from . import conditions
from .conditions import ElementPredicate
from .element_query import ElementQuery
from .matching import MatchValue
from .poller import ElementPoller

logger = logging.getLogger(__name__)

WaitTarget = Union[ElementHandle, ElementQuery]


class WaitState(str, Enum):
    """Lifecycle of a single wait."""

    POLLING = "polling"
    SATISFIED = "satisfied"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass(frozen=True)
class ElementWaiter:
    """
    Blocks until every condition holds on the same poll attempt.

    A fixed handle is checked as-is. A query target is resolved once per
    attempt (no inner polling; the waiter's poller governs the whole wait),
    and a round with no match counts as "conditions not met".

    A condition returning False is retried. A condition raising a protocol
    error ends the wait immediately with that error, unless ignore_errors()
    was requested.
    """

    bridge: SyncBridge = field(repr=False, compare=False)
    client: ProtocolClient = field(repr=False, compare=False)
    target: WaitTarget
    poller: ElementPoller
    message: Optional[str] = None
    suppress_errors: bool = False

    # Builders

    def with_poller(self, poller: ElementPoller) -> ElementWaiter:
        return replace(self, poller=poller)

    def wait(self, timeout: float, interval: float) -> ElementWaiter:
        return self.with_poller(ElementPoller.timeout_with_interval(timeout, interval))

    def error(self, message: str) -> ElementWaiter:
        """Message for the WaitTimeoutError raised on timeout."""
        return replace(self, message=message)

    def ignore_errors(self, ignore: bool = True) -> ElementWaiter:
        """Treat protocol errors raised by conditions as 'not met yet'."""
        return replace(self, suppress_errors=ignore)

    @property
    def description(self) -> str:
        if isinstance(self.target, ElementQuery):
            return self.target.description
        return str(self.target)

    # Terminals

    def condition(self, predicate: ElementPredicate) -> None:
        self.conditions([predicate])

    def conditions(self, predicates: Iterable[ElementPredicate]) -> None:
        """
        Wait until all predicates hold at once.

        Raises:
            WaitTimeoutError: If they never held together before the timeout
            ProtocolError: If a predicate could not be evaluated
            SessionClosedError: If the session closed during the wait
        """
        predicates = list(predicates)
        if self.suppress_errors:
            predicates = [p.with_ignore_errors() for p in predicates]

        ticker = self.poller.start()
        state = WaitState.POLLING
        attempts = 0
        unmet: list[str] = []
        try:
            while True:
                attempts += 1
                unmet = self.bridge.run(self._attempt, predicates)
                if not unmet:
                    state = WaitState.SATISFIED
                    return
                if not ticker.tick():
                    state = WaitState.TIMED_OUT
                    break
        except BaseException:
            state = WaitState.FAILED
            raise
        finally:
            logger.debug(f"Wait on {self.description}: {state.value} after {attempts} attempt(s)")

        message = self.message or (
            f"Timed out ({self.poller}) after {attempts} attempt(s) "
            f"waiting for {self.description}: {', '.join(unmet)}"
        )
        raise WaitTimeoutError(message, unmet, self.poller.timeout, attempts)

    async def _attempt(self, predicates: list[ElementPredicate]) -> list[str]:
        """Evaluate once; return the descriptions of unmet conditions."""
        if isinstance(self.target, ElementQuery):
            handle = await self.target.try_first()
            if handle is None:
                return [f"element is present ({self.target.description})"]
        else:
            handle = self.target

        for predicate in predicates:
            if not await predicate(self.client, handle):
                return [predicate.description]
        return []

    def displayed(self) -> None:
        self.condition(conditions.element_is_displayed())

    def not_displayed(self) -> None:
        self.condition(conditions.element_is_not_displayed())

    def enabled(self) -> None:
        self.condition(conditions.element_is_enabled())

    def not_enabled(self) -> None:
        self.condition(conditions.element_is_not_enabled())

    def selected(self) -> None:
        self.condition(conditions.element_is_selected())

    def not_selected(self) -> None:
        self.condition(conditions.element_is_not_selected())

    def clickable(self) -> None:
        self.condition(conditions.element_is_clickable())

    def not_clickable(self) -> None:
        self.condition(conditions.element_is_not_clickable())

    def stale(self) -> None:
        self.condition(conditions.element_is_stale())

    def has_class(self, class_name: MatchValue) -> None:
        self.condition(conditions.element_has_class(class_name))

    def lacks_class(self, class_name: MatchValue) -> None:
        self.condition(conditions.element_lacks_class(class_name))

    def has_text(self, text: MatchValue) -> None:
        self.condition(conditions.element_has_text(text))

    def lacks_text(self, text: MatchValue) -> None:
        self.condition(conditions.element_lacks_text(text))

    def has_value(self, value: MatchValue) -> None:
        self.condition(conditions.element_has_value(value))

    def lacks_value(self, value: MatchValue) -> None:
        self.condition(conditions.element_lacks_value(value))

    def has_attribute(self, name: str, value: MatchValue) -> None:
        self.condition(conditions.element_has_attribute(name, value))

    def lacks_attribute(self, name: str, value: MatchValue) -> None:
        self.condition(conditions.element_lacks_attribute(name, value))

    def has_attributes(self, attributes: Mapping[str, MatchValue]) -> None:
        self.condition(conditions.element_has_attributes(attributes))

    def lacks_attributes(self, attributes: Mapping[str, MatchValue]) -> None:
        self.condition(conditions.element_lacks_attributes(attributes))

    def has_property(self, name: str, value: MatchValue) -> None:
        self.condition(conditions.element_has_property(name, value))

    def lacks_property(self, name: str, value: MatchValue) -> None:
        self.condition(conditions.element_lacks_property(name, value))

    def has_css_property(self, name: str, value: MatchValue) -> None:
        self.condition(conditions.element_has_css_property(name, value))

    def lacks_css_property(self, name: str, value: MatchValue) -> None:
        self.condition(conditions.element_lacks_css_property(name, value))

    def has_properties(self, properties: Mapping[str, MatchValue]) -> None:
        self.condition(conditions.element_has_properties(properties))

    def lacks_properties(self, properties: Mapping[str, MatchValue]) -> None:
        self.condition(conditions.element_lacks_properties(properties))

    def has_css_properties(self, properties: Mapping[str, MatchValue]) -> None:
        self.condition(conditions.element_has_css_properties(properties))

    def lacks_css_properties(self, properties: Mapping[str, MatchValue]) -> None:
        self.condition(conditions.element_lacks_css_properties(properties))
