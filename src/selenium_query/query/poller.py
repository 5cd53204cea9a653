"""Polling schedules shared by ElementQuery and ElementWaiter."""

from __future__ import annotations

import logging
import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class ElementPoller(BaseModel):
    """
    How often, and for how long, to retry a lookup or condition.

    - no_wait(): a single attempt
    - timeout_with_interval(t, i): attempt every i seconds until t seconds elapsed
    - num_tries_with_interval(n, i): n attempts, i seconds apart
    - timeout_with_interval_and_min_tries(t, i, n): as above, but never fewer than n attempts

    Raises pydantic.ValidationError (a ValueError) if interval <= 0 or timeout < interval.
    """

    model_config = ConfigDict(frozen=True)

    timeout: Optional[float] = Field(default=None, ge=0)
    interval: Optional[float] = None
    min_tries: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_schedule(self) -> ElementPoller:
        if self.interval is not None and self.interval <= 0:
            raise ValueError(f"poll interval must be greater than zero, got {self.interval}")
        if self.timeout is not None:
            if self.interval is None:
                raise ValueError("a poll timeout requires a poll interval")
            if self.timeout < self.interval:
                raise ValueError(
                    f"poll timeout ({self.timeout}s) must be at least "
                    f"the poll interval ({self.interval}s)"
                )
        if self.min_tries > 0 and self.interval is None:
            raise ValueError("a minimum number of tries requires a poll interval")
        return self

    @classmethod
    def no_wait(cls) -> ElementPoller:
        return cls()

    @classmethod
    def timeout_with_interval(cls, timeout: float, interval: float) -> ElementPoller:
        return cls(timeout=timeout, interval=interval)

    @classmethod
    def num_tries_with_interval(cls, num_tries: int, interval: float) -> ElementPoller:
        return cls(interval=interval, min_tries=num_tries)

    @classmethod
    def timeout_with_interval_and_min_tries(
        cls, timeout: float, interval: float, num_tries: int
    ) -> ElementPoller:
        return cls(timeout=timeout, interval=interval, min_tries=num_tries)

    def start(self) -> PollerTicker:
        """Begin a polling run; the clock starts now."""
        return PollerTicker(self)

    def __str__(self) -> str:
        if self.timeout is None and self.min_tries == 0:
            return "no wait"
        parts = []
        if self.timeout is not None:
            parts.append(f"timeout {self.timeout}s")
        if self.min_tries:
            parts.append(f"at least {self.min_tries} tries")
        parts.append(f"every {self.interval}s")
        return ", ".join(parts)


class PollerTicker:
    """
    Paces one polling run.

    Call tick() after every attempt. It returns False when the run is over,
    otherwise it sleeps until the next attempt is due and returns True. Attempt
    n starts no earlier than n * interval after the first, so slow attempts do
    not push the schedule back.
    """

    def __init__(self, poller: ElementPoller):
        self._poller = poller
        self._start = time.monotonic()
        self._tries = 0

    @property
    def tries(self) -> int:
        return self._tries

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start

    def tick(self) -> bool:
        self._tries += 1
        timeout = self._poller.timeout
        out_of_time = timeout is None or self.elapsed >= timeout
        if out_of_time and self._tries >= self._poller.min_tries:
            return False

        interval = self._poller.interval
        if interval:
            remaining = interval * self._tries - self.elapsed
            if remaining > 0:
                time.sleep(remaining)
        logger.debug(f"Poll attempt {self._tries + 1} at {self.elapsed:.3f}s")
        return True
