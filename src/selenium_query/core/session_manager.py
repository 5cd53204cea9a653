"""Blocking browser sessions and the registry that owns them."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Dict, Optional

from ..config import Settings, settings
from ..query.element_query import ElementQuery
from ..query.element_waiter import ElementWaiter, WaitTarget
from ..query.poller import ElementPoller
from ..query.selectors import Selector
from .bridge import SyncBridge
from .driver_factory import DriverFactory
from .exceptions import SeleniumQueryError, SessionLimitError, SessionNotFoundError
from .protocol import ElementHandle, ProtocolClient
from .selenium_client import SeleniumProtocolClient

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    Blocking facade over one remote browser session.

    Owns a SyncBridge; every operation, including the polling behind queries
    and waits, runs its async protocol calls on that bridge and blocks the
    caller until done.

    Example:
        with BrowserSession(client) as session:
            session.query(Selector.id("save")).and_clickable().first()
            session.wait_until(spinner).stale()
    """

    def __init__(
        self,
        client: ProtocolClient,
        bridge: Optional[SyncBridge] = None,
        poller: Optional[ElementPoller] = None,
        session_id: Optional[str] = None,
        browser: Optional[str] = None,
    ):
        self.client = client
        self.session_id = session_id or client.session_id or f"sess_{uuid.uuid4().hex[:16]}"
        self.bridge = bridge or SyncBridge(
            name=self.session_id,
            shutdown_timeout=settings.bridge_shutdown_timeout_seconds,
        )
        self.poller = poller or settings.default_poller
        self.browser = browser
        self.created_at = time.time()

    @property
    def closed(self) -> bool:
        return self.bridge.closed

    def set_query_poller(self, poller: ElementPoller) -> None:
        """Default poller for queries and waits created from now on."""
        self.poller = poller

    def query(self, selector: Selector, scope: Optional[ElementHandle] = None) -> ElementQuery:
        """Start a query; scope restricts the search to an element's descendants."""
        return ElementQuery.new(self.bridge, self.client, selector, self.poller, scope=scope)

    def wait_until(self, target: WaitTarget) -> ElementWaiter:
        """Start a wait on an element handle or on a query."""
        return ElementWaiter(self.bridge, self.client, target, self.poller)

    def find_elements(
        self, selector: Selector, scope: Optional[ElementHandle] = None
    ) -> list[ElementHandle]:
        """One lookup, no polling and no filters."""
        return self.bridge.run(self.client.find_elements, selector, scope)

    # Element reads

    def text(self, handle: ElementHandle) -> str:
        return self.bridge.run(self.client.text, handle)

    def attribute(self, handle: ElementHandle, name: str) -> Optional[str]:
        return self.bridge.run(self.client.attribute, handle, name)

    def class_list(self, handle: ElementHandle) -> set[str]:
        return self.bridge.run(self.client.class_list, handle)

    def is_displayed(self, handle: ElementHandle) -> bool:
        return self.bridge.run(self.client.is_displayed, handle)

    def is_enabled(self, handle: ElementHandle) -> bool:
        return self.bridge.run(self.client.is_enabled, handle)

    def is_selected(self, handle: ElementHandle) -> bool:
        return self.bridge.run(self.client.is_selected, handle)

    def is_clickable(self, handle: ElementHandle) -> bool:
        return self.bridge.run(self.client.is_clickable, handle)

    def is_present(self, handle: ElementHandle) -> bool:
        return self.bridge.run(self.client.is_present, handle)

    # Lifecycle

    def quit(self) -> None:
        """End the remote session, then close the bridge."""
        if self.bridge.closed:
            return
        try:
            self.bridge.run(self.client.quit)
        except SeleniumQueryError as e:
            logger.warning(f"Error quitting remote session {self.session_id}: {e}")
        finally:
            self.bridge.close()

    def close(self) -> None:
        """Close the bridge only; the remote session is left running."""
        self.bridge.close()

    def to_dict(self) -> dict:
        """Convert session info to a dictionary."""
        return {
            "session_id": self.session_id,
            "browser": self.browser,
            "created_at": self.created_at,
            "closed": self.closed,
            "poller": str(self.poller),
        }

    def __enter__(self) -> BrowserSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.quit()

    def __repr__(self) -> str:
        return f"BrowserSession({self.session_id!r}, browser={self.browser!r})"


class SessionManager:
    """
    Thread-safe registry of browser sessions.

    Every session gets its own SyncBridge, so sessions never queue behind
    each other; a threading.Lock guards the registry itself.
    """

    def __init__(
        self,
        driver_factory: DriverFactory,
        max_sessions: int = 10,
        poller: Optional[ElementPoller] = None,
        shutdown_timeout: float = 5.0,
    ):
        self._driver_factory = driver_factory
        self._max_sessions = max_sessions
        self._poller = poller
        self._shutdown_timeout = shutdown_timeout
        self._default_browser = settings.default_browser
        self._sessions: Dict[str, BrowserSession] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> SessionManager:
        """Build a manager (and its DriverFactory) from Settings."""
        config = config or settings
        factory = DriverFactory(
            grid_url=config.selenium_grid_url,
            page_load_timeout=config.page_load_timeout_seconds,
            script_timeout=config.script_timeout_seconds,
            implicit_wait=config.implicit_wait_seconds,
        )
        manager = cls(
            factory,
            max_sessions=config.max_concurrent_sessions,
            poller=config.default_poller,
            shutdown_timeout=config.bridge_shutdown_timeout_seconds,
        )
        manager._default_browser = config.default_browser
        return manager

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def create_session(
        self,
        browser: Optional[str] = None,
        headless: bool = True,
        window_size: Optional[tuple[int, int]] = None,
        extra_capabilities: Optional[dict] = None,
    ) -> BrowserSession:
        """
        Create a new browser session.

        Args:
            browser: Browser type (chrome, firefox, edge); the configured default if omitted
            headless: Run in headless mode
            window_size: Optional (width, height)
            extra_capabilities: Additional browser capabilities

        Returns:
            New BrowserSession

        Raises:
            SessionLimitError: If max sessions reached
            GridConnectionError: If unable to connect to the remote end
        """
        browser = browser or self._default_browser
        with self._lock:
            if len(self._sessions) >= self._max_sessions:
                raise SessionLimitError(self._max_sessions)

            session_id = f"sess_{uuid.uuid4().hex[:16]}"
            bridge = SyncBridge(name=session_id, shutdown_timeout=self._shutdown_timeout)
            try:
                driver = bridge.run(
                    self._driver_factory.create,
                    browser=browser,
                    headless=headless,
                    window_size=window_size,
                    extra_capabilities=extra_capabilities,
                )
            except BaseException:
                bridge.close()
                raise

            session = BrowserSession(
                SeleniumProtocolClient(driver),
                bridge=bridge,
                poller=self._poller,
                session_id=session_id,
                browser=browser,
            )
            self._sessions[session_id] = session

        logger.info(f"Created session {session_id} with {browser}")
        return session

    def get_session(self, session_id: str) -> BrowserSession:
        """
        Get a session by ID.

        Raises:
            SessionNotFoundError: If session doesn't exist
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close_session(self, session_id: str) -> bool:
        """
        Quit a session and release its bridge.

        Returns:
            True if session was closed, False if not found
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        session.quit()
        logger.info(f"Closed session {session_id}")
        return True

    def list_sessions(self, browser: Optional[str] = None) -> list[dict]:
        """List active sessions, optionally only those of one browser type."""
        sessions = list(self._sessions.values())
        if browser:
            sessions = [s for s in sessions if (s.browser or "").lower() == browser.lower()]
        return [s.to_dict() for s in sessions]

    def close_all(self) -> int:
        """
        Close all sessions (for shutdown).

        Returns:
            Number of sessions closed
        """
        count = 0
        for session_id in list(self._sessions.keys()):
            if self.close_session(session_id):
                count += 1
        logger.info(f"Closed all sessions ({count})")
        return count

    def __enter__(self) -> SessionManager:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close_all()
