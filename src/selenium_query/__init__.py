"""selenium-query: blocking element queries and waits over Selenium WebDriver."""

from .core.exceptions import (
    SeleniumQueryError,
    ProtocolError,
    StaleElementError,
    NoSuchWindowError,
    InvalidSelectorError,
    SessionClosedError,
    NoSuchElementError,
    WaitTimeoutError,
    SessionNotFoundError,
    SessionLimitError,
    GridConnectionError,
)
from .core.protocol import ElementHandle, ElementRect, ProtocolClient
from .core.bridge import SyncBridge
from .query import (
    conditions,
    Selector,
    Strategy,
    StringMatch,
    ElementPredicate,
    ElementPoller,
    ElementQuery,
    ElementWaiter,
    WaitState,
)
from .core.selenium_client import SeleniumProtocolClient
from .core.driver_factory import DriverFactory
from .core.session_manager import BrowserSession, SessionManager
from .config import Settings, settings, configure_logging

__version__ = "0.1.0"

__all__ = [
    "SeleniumQueryError",
    "ProtocolError",
    "StaleElementError",
    "NoSuchWindowError",
    "InvalidSelectorError",
    "SessionClosedError",
    "NoSuchElementError",
    "WaitTimeoutError",
    "SessionNotFoundError",
    "SessionLimitError",
    "GridConnectionError",
    "ElementHandle",
    "ElementRect",
    "ProtocolClient",
    "SyncBridge",
    "conditions",
    "Selector",
    "Strategy",
    "StringMatch",
    "ElementPredicate",
    "ElementPoller",
    "ElementQuery",
    "ElementWaiter",
    "WaitState",
    "SeleniumProtocolClient",
    "DriverFactory",
    "BrowserSession",
    "SessionManager",
    "Settings",
    "settings",
    "configure_logging",
]
