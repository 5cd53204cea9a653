"""Pytest fixtures for testing selenium-query."""

from unittest.mock import MagicMock, AsyncMock

import pytest
from selenium.webdriver.remote.webelement import WebElement

from selenium_query.core.bridge import SyncBridge
from selenium_query.core.driver_factory import DriverFactory
from selenium_query.core.session_manager import BrowserSession, SessionManager
from selenium_query.query import poller as poller_module
from selenium_query.query.poller import ElementPoller

from fakes import FakeClock, FakeProtocolClient


@pytest.fixture
def clock(monkeypatch):
    """Fake clock patched into the poller so waits run instantly."""
    fake = FakeClock()
    monkeypatch.setattr(poller_module, "time", fake)
    return fake


@pytest.fixture
def fake_client(clock):
    """Create an empty FakeProtocolClient on the fake clock."""
    return FakeProtocolClient(clock)


@pytest.fixture
def bridge():
    """Create a SyncBridge, closed after the test."""
    bridge = SyncBridge(name="test-bridge", shutdown_timeout=2.0)
    yield bridge
    bridge.close()


@pytest.fixture
def session(fake_client, bridge):
    """Create a BrowserSession over the fake client with a 2s/0.5s poller."""
    return BrowserSession(
        fake_client,
        bridge=bridge,
        poller=ElementPoller.timeout_with_interval(2.0, 0.5),
        session_id="test-session-123",
        browser="chrome",
    )


@pytest.fixture
def mock_webelement():
    """Create a mock WebElement."""
    element = MagicMock(spec=WebElement)
    element.id = "el-1"
    element.tag_name = "BUTTON"
    element.text = "Click Me"
    element.is_displayed.return_value = True
    element.is_enabled.return_value = True
    element.is_selected.return_value = False
    element.get_attribute.return_value = None
    element.get_property.return_value = None
    element.rect = {"x": 100, "y": 200, "width": 80, "height": 30}
    element.value_of_css_property.return_value = "pointer"
    element.find_elements.return_value = []
    return element


@pytest.fixture
def mock_webdriver(mock_webelement):
    """Create a mock WebDriver with common methods."""
    driver = MagicMock()

    # Find elements
    driver.find_elements = MagicMock(return_value=[mock_webelement])

    # Execute script (obscured check)
    driver.execute_script = MagicMock(return_value=False)

    # Timeouts
    driver.set_page_load_timeout = MagicMock()
    driver.set_script_timeout = MagicMock()
    driver.implicitly_wait = MagicMock()
    driver.set_window_size = MagicMock()

    # Session
    driver.session_id = "mock-session-id"
    driver.capabilities = {
        "browserName": "chrome",
        "browserVersion": "120.0",
        "platformName": "linux",
    }

    # Cleanup
    driver.quit = MagicMock()

    return driver


@pytest.fixture
def mock_driver_factory(mock_webdriver):
    """Create mock DriverFactory that returns mock WebDriver."""
    factory = MagicMock(spec=DriverFactory)
    factory.create = AsyncMock(return_value=mock_webdriver)
    factory.grid_url = "http://mock-grid:4444"
    return factory


@pytest.fixture
def session_manager(mock_driver_factory):
    """Create SessionManager with mocked driver factory; closes all sessions afterwards."""
    manager = SessionManager(
        driver_factory=mock_driver_factory,
        max_sessions=5,
        poller=ElementPoller.timeout_with_interval(1.0, 0.1),
        shutdown_timeout=2.0,
    )
    yield manager
    manager.close_all()
