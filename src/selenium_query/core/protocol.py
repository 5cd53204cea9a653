"""
Protocol Client - the asynchronous capability the query engine is built on.

The engine never speaks the WebDriver wire protocol itself. It consumes a
ProtocolClient, which resolves selectors to element handles and reads element
state. SeleniumProtocolClient is the production implementation; tests use an
in-memory client.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from .exceptions import StaleElementError

if TYPE_CHECKING:
    from ..query.selectors import Selector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementHandle:
    """
    Opaque, session-scoped reference to a remote DOM node.

    Two handles are equal iff their remote reference ids match. The native
    object (e.g. a Selenium WebElement) is carried along for the client that
    produced it and takes no part in equality.
    """

    reference_id: str
    native: Any = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"element {self.reference_id}"


@dataclass(frozen=True)
class ElementRect:
    """Bounding geometry of an element in CSS pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


class ProtocolClient(ABC):
    """
    Asynchronous access to one remote browser session.

    Every method is a single request/response round trip (or a small fixed
    number of them). Any call may raise StaleElementError, NoSuchWindowError or
    ProtocolError; after the session is gone calls raise SessionClosedError.
    """

    @property
    def session_id(self) -> Optional[str]:
        """Remote session id, if known."""
        return None

    @abstractmethod
    async def find_elements(
        self, selector: Selector, scope: Optional[ElementHandle] = None
    ) -> list[ElementHandle]:
        """
        Find all elements matching selector.

        Args:
            selector: Locator to resolve
            scope: Optional element to search beneath (session root otherwise)

        Returns:
            Handles in remote document order (possibly empty)
        """

    @abstractmethod
    async def attribute(self, handle: ElementHandle, name: str) -> Optional[str]:
        """Read an attribute, None when it is absent."""

    @abstractmethod
    async def dom_property(self, handle: ElementHandle, name: str) -> Any:
        """Read a DOM property, None when it is absent."""

    @abstractmethod
    async def css_value(self, handle: ElementHandle, name: str) -> str:
        """Read a computed CSS property."""

    @abstractmethod
    async def text(self, handle: ElementHandle) -> str:
        """Rendered text content."""

    @abstractmethod
    async def tag_name(self, handle: ElementHandle) -> str:
        """Lower-case tag name."""

    @abstractmethod
    async def is_displayed(self, handle: ElementHandle) -> bool: ...

    @abstractmethod
    async def is_enabled(self, handle: ElementHandle) -> bool: ...

    @abstractmethod
    async def is_selected(self, handle: ElementHandle) -> bool: ...

    @abstractmethod
    async def rect(self, handle: ElementHandle) -> ElementRect:
        """Bounding rectangle."""

    @abstractmethod
    async def is_obscured(self, handle: ElementHandle) -> bool:
        """Whether another element sits on top of the element's centre point."""

    @abstractmethod
    async def quit(self) -> None:
        """End the remote session."""

    async def class_list(self, handle: ElementHandle) -> set[str]:
        """Class names from the element's class attribute."""
        classes = await self.attribute(handle, "class")
        return set(classes.split()) if classes else set()

    async def is_clickable(self, handle: ElementHandle) -> bool:
        """Displayed AND enabled AND not obscured, checked in that order."""
        if not await self.is_displayed(handle):
            return False
        if not await self.is_enabled(handle):
            return False
        return not await self.is_obscured(handle)

    async def is_present(self, handle: ElementHandle) -> bool:
        """False once the handle has gone stale."""
        try:
            await self.tag_name(handle)
        except StaleElementError:
            logger.debug(f"{handle} is no longer present")
            return False
        return True
