"""
ElementQuery - resolve elements through competing selector branches, with polling.

Example:
    button = (
        session.query(Selector.css("thiswont.match"))
        .with_text("testing")
        .or_(Selector.id("button1"))
        .and_enabled()
        .desc("submit button")
        .first()
    )

Each branch is evaluated once per poll attempt, in declaration order. Filter
methods apply to the most recently added branch. Every filter costs at least
one extra remote call per candidate element per attempt, so prefer narrowing
with the selector itself (css/xpath) where possible.

NOTE: all() returns an empty list when nothing ever matched, while first() and
all_required() raise NoSuchElementError. Use all() for optional UI elements and
all_required() when an empty page means something is broken.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from ..core.bridge import SyncBridge
from ..core.exceptions import NoSuchElementError
from ..core.protocol import ElementHandle, ProtocolClient
from . import conditions
from .branch import SelectorBranch
from .conditions import ElementPredicate
from .matching import MatchValue
from .poller import ElementPoller
from .selectors import Selector

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ElementQuery:
    """Immutable query builder; every builder method returns a new query."""

    bridge: SyncBridge = field(repr=False, compare=False)
    client: ProtocolClient = field(repr=False, compare=False)
    branches: tuple[SelectorBranch, ...]
    poller: ElementPoller
    scope: Optional[ElementHandle] = None
    name: Optional[str] = None

    @classmethod
    def new(
        cls,
        bridge: SyncBridge,
        client: ProtocolClient,
        selector: Selector,
        poller: ElementPoller,
        scope: Optional[ElementHandle] = None,
    ) -> ElementQuery:
        return cls(
            bridge=bridge,
            client=client,
            branches=(SelectorBranch(selector, scope=scope),),
            poller=poller,
            scope=scope,
        )

    @property
    def description(self) -> str:
        if self.name:
            return self.name
        return " or ".join(b.description for b in self.branches)

    # Branches

    def or_(self, selector: Selector) -> ElementQuery:
        """Add a competing branch, tried after all earlier ones."""
        branch = SelectorBranch(selector, scope=self.scope)
        return replace(self, branches=self.branches + (branch,))

    def with_filter(self, predicate: ElementPredicate) -> ElementQuery:
        """Append a filter to the most recently added branch."""
        last = self.branches[-1].with_filter(predicate)
        return replace(self, branches=self.branches[:-1] + (last,))

    def with_text(self, text: MatchValue) -> ElementQuery:
        return self.with_filter(conditions.element_has_text(text))

    def with_id(self, element_id: MatchValue) -> ElementQuery:
        return self.with_filter(conditions.element_has_id(element_id))

    def with_class(self, class_name: MatchValue) -> ElementQuery:
        return self.with_filter(conditions.element_has_class(class_name))

    def with_tag(self, tag: MatchValue) -> ElementQuery:
        return self.with_filter(conditions.element_has_tag(tag))

    def with_value(self, value: MatchValue) -> ElementQuery:
        return self.with_filter(conditions.element_has_value(value))

    def with_attribute(self, name: str, value: MatchValue) -> ElementQuery:
        return self.with_filter(conditions.element_has_attribute(name, value))

    def with_attributes(self, attributes: Mapping[str, MatchValue]) -> ElementQuery:
        return self.with_filter(conditions.element_has_attributes(attributes))

    def with_property(self, name: str, value: MatchValue) -> ElementQuery:
        return self.with_filter(conditions.element_has_property(name, value))

    def with_properties(self, properties: Mapping[str, MatchValue]) -> ElementQuery:
        return self.with_filter(conditions.element_has_properties(properties))

    def with_css_property(self, name: str, value: MatchValue) -> ElementQuery:
        return self.with_filter(conditions.element_has_css_property(name, value))

    def with_css_properties(self, properties: Mapping[str, MatchValue]) -> ElementQuery:
        return self.with_filter(conditions.element_has_css_properties(properties))

    def and_displayed(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_displayed())

    def and_not_displayed(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_not_displayed())

    def and_enabled(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_enabled())

    def and_not_enabled(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_not_enabled())

    def and_selected(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_selected())

    def and_not_selected(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_not_selected())

    def and_clickable(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_clickable())

    def and_not_clickable(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_not_clickable())

    # Polling and naming

    def desc(self, name: str) -> ElementQuery:
        """Name the element for error messages."""
        return replace(self, name=name)

    def with_poller(self, poller: ElementPoller) -> ElementQuery:
        return replace(self, poller=poller)

    def wait(self, timeout: float, interval: float) -> ElementQuery:
        return self.with_poller(ElementPoller.timeout_with_interval(timeout, interval))

    def nowait(self) -> ElementQuery:
        return self.with_poller(ElementPoller.no_wait())

    # Single attempts (no polling)

    async def try_first(self) -> Optional[ElementHandle]:
        """First match of the first branch that matches anything, this round."""
        for branch in self.branches:
            handles = await branch.resolve(self.client, first_only=True)
            if handles:
                return handles[0]
        return None

    async def try_all(self) -> list[ElementHandle]:
        """Matches of every branch, in branch order, each distinct handle once."""
        found: dict[ElementHandle, None] = {}
        for branch in self.branches:
            for handle in await branch.resolve(self.client):
                found.setdefault(handle, None)
        return list(found)

    # Terminals

    def first(self) -> ElementHandle:
        """
        Poll until some branch matches and return its first element.

        Raises:
            NoSuchElementError: If nothing matched before the timeout
        """
        handle = self.first_opt()
        if handle is None:
            raise NoSuchElementError(self.description, self.poller.timeout)
        return handle

    def first_opt(self) -> Optional[ElementHandle]:
        """As first(), but return None instead of raising."""
        return self._poll(self.try_first, lambda handle: handle is not None)

    def all(self) -> list[ElementHandle]:
        """
        Poll until any branch matches and return every match.

        Returns an empty list, without raising, if nothing matched before the
        timeout.
        """
        return self._poll(self.try_all, bool)

    def all_required(self) -> list[ElementHandle]:
        """
        As all(), but an empty result is an error.

        Raises:
            NoSuchElementError: If nothing matched before the timeout
        """
        handles = self.all()
        if not handles:
            raise NoSuchElementError(self.description, self.poller.timeout)
        return handles

    def exists(self) -> bool:
        """Poll until a match appears; False if none did before the timeout."""
        return self.first_opt() is not None

    def not_exists(self) -> bool:
        """Poll until no branch matches; False if matches remained at the timeout."""
        return self._poll(self.try_first, lambda handle: handle is None) is None

    def _poll(self, attempt: Callable[[], Awaitable[T]], done: Callable[[T], Any]) -> T:
        ticker = self.poller.start()
        while True:
            result = self.bridge.run(attempt)
            if done(result):
                logger.debug(
                    f"Query {self.description} settled after {ticker.tries + 1} attempt(s)"
                )
                return result
            if not ticker.tick():
                logger.debug(
                    f"Query {self.description} gave up after {ticker.tries} attempt(s), "
                    f"{ticker.elapsed:.3f}s"
                )
                return result
