"""Domain-specific exceptions for selenium-query."""

from typing import Iterable, Optional


class SeleniumQueryError(Exception):
    """Base exception for all selenium-query errors."""

    pass


class ProtocolError(SeleniumQueryError):
    """Raised when the remote end cannot evaluate a command (transport or bad response)."""

    def __init__(self, message: str, command: Optional[str] = None):
        self.command = command
        prefix = f"{command} failed: " if command else ""
        super().__init__(f"{prefix}{message}")


class StaleElementError(ProtocolError):
    """Raised when an element handle no longer references a node in the DOM."""

    def __init__(self, element_id: str, command: Optional[str] = None):
        self.element_id = element_id
        super().__init__(f"Element is stale (no longer in DOM): {element_id}", command)


class NoSuchWindowError(ProtocolError):
    """Raised when the window the session is attached to has been closed."""

    pass


class InvalidSelectorError(ProtocolError):
    """Raised when the remote end rejects a selector expression."""

    pass


class SessionClosedError(SeleniumQueryError):
    """Raised when operating on a bridge or session that has been torn down."""

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id
        target = f" {session_id}" if session_id else ""
        super().__init__(f"Session{target} is closed")


class NoSuchElementError(SeleniumQueryError):
    """Raised when a query exhausted its timeout without a qualifying match."""

    def __init__(self, description: str, timeout_seconds: Optional[float] = None):
        self.description = description
        self.timeout_seconds = timeout_seconds
        if timeout_seconds is None:
            message = f"No element found matching: {description}"
        else:
            message = f"No element found matching {description} within {timeout_seconds}s"
        super().__init__(message)


class WaitTimeoutError(SeleniumQueryError):
    """Raised when a waiter's conditions never held within its timeout."""

    def __init__(
        self,
        message: str,
        unmet: Iterable[str] = (),
        timeout_seconds: Optional[float] = None,
        attempts: int = 0,
    ):
        self.unmet = list(unmet)
        self.timeout_seconds = timeout_seconds
        self.attempts = attempts
        super().__init__(message)


class SessionNotFoundError(SeleniumQueryError):
    """Raised when referencing a non-existent or already closed session."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionLimitError(SeleniumQueryError):
    """Raised when max session limit is reached."""

    def __init__(self, max_sessions: int):
        self.max_sessions = max_sessions
        super().__init__(f"Maximum sessions ({max_sessions}) reached")


class GridConnectionError(SeleniumQueryError):
    """Raised when unable to connect to the remote WebDriver endpoint."""

    def __init__(self, grid_url: str, message: str):
        self.grid_url = grid_url
        super().__init__(f"Failed to connect to WebDriver endpoint at {grid_url}: {message}")
