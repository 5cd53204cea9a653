"""Factory for RemoteWebDriver instances connected to a WebDriver endpoint."""

import logging
from typing import Optional

import anyio
from selenium import webdriver
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.common.exceptions import WebDriverException

from .exceptions import GridConnectionError

logger = logging.getLogger(__name__)

OPTIONS_MAP = {
    "chrome": webdriver.ChromeOptions,
    "firefox": webdriver.FirefoxOptions,
    "edge": webdriver.EdgeOptions,
}

# Arguments applied to every session of a browser, then the headless flag
STABILITY_ARGS = {
    "chrome": ["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"],
    "firefox": [],
    "edge": ["--no-sandbox", "--disable-dev-shm-usage"],
}
HEADLESS_ARG = {
    "chrome": "--headless=new",
    "firefox": "-headless",
    "edge": "--headless=new",
}


class DriverFactory:
    """
    Creates RemoteWebDriver instances for new sessions.

    Creation is a coroutine so that it can run on a session's SyncBridge; the
    blocking Selenium calls themselves go to a worker thread.
    """

    def __init__(
        self,
        grid_url: str,
        page_load_timeout: int = 30,
        script_timeout: int = 30,
        implicit_wait: int = 0,
    ):
        self.grid_url = grid_url
        self.page_load_timeout = page_load_timeout
        self.script_timeout = script_timeout
        self.implicit_wait = implicit_wait

    async def create(
        self,
        browser: str = "chrome",
        headless: bool = True,
        window_size: Optional[tuple[int, int]] = None,
        extra_capabilities: Optional[dict] = None,
    ) -> WebDriver:
        """
        Open a new remote browser session.

        Args:
            browser: Browser type (chrome, firefox, edge)
            headless: Run browser in headless mode
            window_size: Optional (width, height)
            extra_capabilities: Additional capabilities to pass to the browser

        Returns:
            Configured WebDriver instance

        Raises:
            GridConnectionError: If unable to reach the endpoint or start a session
            ValueError: If browser type is not supported
        """
        options = self.build_options(browser, headless, window_size, extra_capabilities)

        def connect() -> WebDriver:
            driver = webdriver.Remote(command_executor=self.grid_url, options=options)
            try:
                driver.set_page_load_timeout(self.page_load_timeout)
                driver.set_script_timeout(self.script_timeout)
                driver.implicitly_wait(self.implicit_wait)
                if window_size:
                    driver.set_window_size(*window_size)
            except BaseException:
                # Release the grid slot held by the half-configured session
                try:
                    driver.quit()
                except WebDriverException as e:
                    logger.warning(f"Error quitting half-configured session: {e}")
                raise
            return driver

        try:
            return await anyio.to_thread.run_sync(connect)
        except WebDriverException as e:
            raise GridConnectionError(self.grid_url, str(e)) from e

    def build_options(
        self,
        browser: str,
        headless: bool = True,
        window_size: Optional[tuple[int, int]] = None,
        extra_capabilities: Optional[dict] = None,
    ):
        """Build the browser-specific options object."""
        name = browser.lower()
        if name not in OPTIONS_MAP:
            raise ValueError(
                f"Unsupported browser: {browser}. "
                f"Supported browsers: {list(OPTIONS_MAP.keys())}"
            )

        options = OPTIONS_MAP[name]()
        for arg in STABILITY_ARGS[name]:
            options.add_argument(arg)
        if headless:
            options.add_argument(HEADLESS_ARG[name])
        if window_size and name == "chrome":
            options.add_argument(f"--window-size={window_size[0]},{window_size[1]}")

        for key, value in (extra_capabilities or {}).items():
            options.set_capability(key, value)

        return options
