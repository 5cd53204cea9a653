"""Fixtures for integration tests against a real Selenium Grid."""

import os

import pytest

from selenium_query.core.driver_factory import DriverFactory
from selenium_query.core.session_manager import SessionManager
from selenium_query.query.poller import ElementPoller

# Configuration
GRID_URL = os.environ.get("SELENIUM_QUERY_INTEGRATION_GRID_URL")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless a grid URL is configured."""
    if GRID_URL:
        return
    skip = pytest.mark.skip(reason="SELENIUM_QUERY_INTEGRATION_GRID_URL not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def grid_url():
    """Return the Selenium Grid URL."""
    return GRID_URL


@pytest.fixture
def manager(grid_url):
    """SessionManager pointed at the grid; all sessions closed afterwards."""
    manager = SessionManager(
        DriverFactory(grid_url),
        max_sessions=2,
        poller=ElementPoller.timeout_with_interval(5, 0.1),
    )
    yield manager
    manager.close_all()


@pytest.fixture
def browser_session(manager):
    """A headless Chrome session."""
    return manager.create_session(browser="chrome", headless=True)
