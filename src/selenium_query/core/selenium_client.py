"""Protocol Client implemented over a Selenium RemoteWebDriver."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional, TypeVar

import anyio
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from urllib3.exceptions import HTTPError as TransportError

from ..query.selectors import Selector
from ..utils.error_mapper import map_selenium_error
from .exceptions import SessionClosedError
from .protocol import ElementHandle, ElementRect, ProtocolClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Returns true when the element at the centre of the target's bounding box is
# neither the target nor one of its descendants.
OBSCURED_SCRIPT = """
const el = arguments[0];
const rect = el.getBoundingClientRect();
const hit = document.elementFromPoint(rect.left + rect.width / 2, rect.top + rect.height / 2);
if (!hit) { return false; }
return !(hit === el || el.contains(hit));
"""


class SeleniumProtocolClient(ProtocolClient):
    """
    ProtocolClient backed by a Selenium WebDriver.

    Selenium's API is synchronous, so every call is pushed to a worker thread
    with anyio. Worker threads are abandoned on cancellation so that a bridge
    teardown never waits on a hung HTTP request.
    """

    def __init__(self, driver: WebDriver):
        self._driver = driver
        self._closed = False

    @property
    def driver(self) -> WebDriver:
        return self._driver

    @property
    def session_id(self) -> Optional[str]:
        return self._driver.session_id

    @property
    def closed(self) -> bool:
        return self._closed

    async def _call(
        self,
        command: str,
        func: Callable[..., T],
        *args: Any,
        handle: Optional[ElementHandle] = None,
    ) -> T:
        """Run one blocking Selenium call and translate its failures."""
        if self._closed:
            raise SessionClosedError(self.session_id)

        target = f" on {handle}" if handle is not None else ""
        logger.debug(f"{command}{target}")
        try:
            return await anyio.to_thread.run_sync(
                functools.partial(func, *args), abandon_on_cancel=True
            )
        except (WebDriverException, TransportError, ConnectionError) as e:
            element_id = handle.reference_id if handle is not None else None
            raise map_selenium_error(e, command, element_id) from e

    def _element(self, handle: ElementHandle) -> WebElement:
        if isinstance(handle.native, WebElement):
            return handle.native
        return WebElement(self._driver, handle.reference_id)

    @staticmethod
    def _handle(element: WebElement) -> ElementHandle:
        return ElementHandle(reference_id=element.id, native=element)

    async def find_elements(
        self, selector: Selector, scope: Optional[ElementHandle] = None
    ) -> list[ElementHandle]:
        root = self._element(scope) if scope is not None else self._driver
        elements = await self._call(
            f"find_elements({selector})",
            root.find_elements,
            selector.by,
            selector.value,
            handle=scope,
        )
        return [self._handle(el) for el in elements]

    async def attribute(self, handle: ElementHandle, name: str) -> Optional[str]:
        el = self._element(handle)
        return await self._call(f"attribute({name})", el.get_attribute, name, handle=handle)

    async def dom_property(self, handle: ElementHandle, name: str) -> Any:
        el = self._element(handle)
        return await self._call(f"property({name})", el.get_property, name, handle=handle)

    async def css_value(self, handle: ElementHandle, name: str) -> str:
        el = self._element(handle)
        return await self._call(
            f"css_value({name})", el.value_of_css_property, name, handle=handle
        )

    async def text(self, handle: ElementHandle) -> str:
        el = self._element(handle)
        return await self._call("text", lambda: el.text, handle=handle)

    async def tag_name(self, handle: ElementHandle) -> str:
        el = self._element(handle)
        tag = await self._call("tag_name", lambda: el.tag_name, handle=handle)
        return tag.lower()

    async def is_displayed(self, handle: ElementHandle) -> bool:
        el = self._element(handle)
        return bool(await self._call("is_displayed", el.is_displayed, handle=handle))

    async def is_enabled(self, handle: ElementHandle) -> bool:
        el = self._element(handle)
        return bool(await self._call("is_enabled", el.is_enabled, handle=handle))

    async def is_selected(self, handle: ElementHandle) -> bool:
        el = self._element(handle)
        return bool(await self._call("is_selected", el.is_selected, handle=handle))

    async def rect(self, handle: ElementHandle) -> ElementRect:
        el = self._element(handle)
        r = await self._call("rect", lambda: el.rect, handle=handle)
        return ElementRect(x=r["x"], y=r["y"], width=r["width"], height=r["height"])

    async def is_obscured(self, handle: ElementHandle) -> bool:
        el = self._element(handle)
        return bool(
            await self._call(
                "is_obscured", self._driver.execute_script, OBSCURED_SCRIPT, el, handle=handle
            )
        )

    async def quit(self) -> None:
        if self._closed:
            return
        try:
            await self._call("quit", self._driver.quit)
        finally:
            self._closed = True
