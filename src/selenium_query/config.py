"""Configuration settings for selenium-query."""

import logging
from typing import Optional

from pydantic_settings import BaseSettings

from .query.poller import ElementPoller

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Library defaults from environment variables."""

    # Remote WebDriver endpoint
    selenium_grid_url: str = "http://localhost:4444"
    default_browser: str = "chrome"

    # Session management
    max_concurrent_sessions: int = 10
    bridge_shutdown_timeout_seconds: float = 5.0

    # Query / wait polling
    query_timeout_seconds: float = 20.0
    query_interval_seconds: float = 0.5

    # Driver timeouts
    page_load_timeout_seconds: int = 30
    script_timeout_seconds: int = 30
    implicit_wait_seconds: int = 0  # keep at 0: implicit waits stall every empty lookup

    # Logging
    log_level: str = "INFO"

    model_config = {"env_prefix": "SELENIUM_QUERY_"}

    @property
    def default_poller(self) -> ElementPoller:
        """Poller used by queries and waiters unless overridden."""
        return ElementPoller.timeout_with_interval(
            self.query_timeout_seconds, self.query_interval_seconds
        )


def configure_logging(level: Optional[str] = None) -> None:
    """Install a root handler; applications call this, the library never does."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# Global settings instance
settings = Settings()
