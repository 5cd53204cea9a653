"""Map Selenium and transport exceptions onto the selenium-query error taxonomy."""

from typing import Callable, Optional

from selenium.common.exceptions import (
    StaleElementReferenceException,
    NoSuchWindowException,
    InvalidSelectorException,
    InvalidSessionIdException,
    NoSuchElementException,
    TimeoutException,
    JavascriptException,
    WebDriverException,
)
from urllib3.exceptions import HTTPError as TransportError

from ..core.exceptions import (
    SeleniumQueryError,
    ProtocolError,
    StaleElementError,
    NoSuchWindowError,
    InvalidSelectorError,
    SessionClosedError,
)

ErrorFactory = Callable[[Exception, Optional[str], Optional[str]], SeleniumQueryError]


def _stale(
    exc: Exception, command: Optional[str], element_id: Optional[str]
) -> SeleniumQueryError:
    return StaleElementError(element_id or "unknown", command)


def _no_such_window(
    exc: Exception, command: Optional[str], element_id: Optional[str]
) -> SeleniumQueryError:
    return NoSuchWindowError(_message(exc), command)


def _invalid_selector(
    exc: Exception, command: Optional[str], element_id: Optional[str]
) -> SeleniumQueryError:
    return InvalidSelectorError(_message(exc), command)


def _session_closed(
    exc: Exception, command: Optional[str], element_id: Optional[str]
) -> SeleniumQueryError:
    return SessionClosedError()


def _protocol(
    exc: Exception, command: Optional[str], element_id: Optional[str]
) -> SeleniumQueryError:
    return ProtocolError(_message(exc), command)


# Checked in order; subclasses must precede their bases
EXCEPTION_MAP: dict[type[Exception], ErrorFactory] = {
    StaleElementReferenceException: _stale,
    NoSuchWindowException: _no_such_window,
    InvalidSelectorException: _invalid_selector,
    InvalidSessionIdException: _session_closed,
    NoSuchElementException: _protocol,
    TimeoutException: _protocol,
    JavascriptException: _protocol,
    TransportError: _protocol,
    ConnectionError: _protocol,
}


def _message(exc: Exception) -> str:
    if isinstance(exc, WebDriverException) and exc.msg:
        return exc.msg
    return str(exc) or type(exc).__name__


def map_selenium_error(
    exc: Exception,
    command: Optional[str] = None,
    element_id: Optional[str] = None,
) -> SeleniumQueryError:
    """
    Translate an exception raised while talking to the remote end.

    Args:
        exc: The exception to map
        command: Protocol Client command that was running, for the message
        element_id: Reference id of the element the command targeted, if any

    Returns:
        The matching SeleniumQueryError (callers raise it ``from exc``)
    """
    if isinstance(exc, SeleniumQueryError):
        return exc

    exc_type = type(exc)

    # Check exact type first
    if exc_type in EXCEPTION_MAP:
        return EXCEPTION_MAP[exc_type](exc, command, element_id)

    # Check parent types
    for exc_class, factory in EXCEPTION_MAP.items():
        if isinstance(exc, exc_class):
            return factory(exc, command, element_id)

    # Generic WebDriverException: sniff for a dead session
    if isinstance(exc, WebDriverException):
        msg_lower = _message(exc).lower()
        if "invalid session id" in msg_lower:
            return SessionClosedError()
        if "session" in msg_lower and ("not found" in msg_lower or "deleted" in msg_lower):
            return SessionClosedError()

    # Fallback
    return ProtocolError(_message(exc), command)
