"""Core runtime: protocol client, sync bridge, errors."""

from .exceptions import (
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
from .protocol import ElementHandle, ElementRect, ProtocolClient
from .bridge import SyncBridge

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
]
