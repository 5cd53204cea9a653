"""Blocking entry point that drives asynchronous protocol work to completion."""

from __future__ import annotations

import concurrent.futures
import functools
import inspect
import logging
import threading
from contextlib import ExitStack
from typing import Any, Awaitable, Callable, TypeVar, Union

from anyio.from_thread import BlockingPortal, start_blocking_portal

from .exceptions import SessionClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SyncBridge:
    """
    Runs coroutines for one browser session on a dedicated event loop thread.

    Blocking callers hand an async operation to ``run`` and get its result (or
    its exception, unchanged) back on their own thread. An internal lock keeps
    exactly one operation in flight per bridge, so a bridge may be shared by
    several threads; each waits its turn.

    Example:
        with SyncBridge() as bridge:
            handles = bridge.run(client.find_elements, Selector.css("a"))
    """

    def __init__(
        self,
        name: str = "session",
        shutdown_timeout: float = 5.0,
        backend: str = "asyncio",
    ):
        self.name = name
        self._shutdown_timeout = shutdown_timeout
        self._lock = threading.Lock()
        self._closed = False
        self._exit_stack = ExitStack()
        self._portal: BlockingPortal = self._exit_stack.enter_context(
            start_blocking_portal(backend)
        )
        self._loop_thread_id = self._portal.call(threading.get_ident)
        logger.debug(f"Bridge {name} started")

    @property
    def closed(self) -> bool:
        return self._closed

    def run(
        self,
        func: Union[Callable[..., Awaitable[T]], Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Block until an async operation completes on the bridge's event loop.

        Args:
            func: Coroutine function (called with args/kwargs) or coroutine object
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            The operation's result

        Raises:
            SessionClosedError: If the bridge is closed, or closes mid-operation
            RuntimeError: If called from the bridge's own event loop thread
        """
        if threading.get_ident() == self._loop_thread_id:
            if inspect.iscoroutine(func):
                func.close()
            raise RuntimeError(
                f"Bridge {self.name}: run() cannot be called from the bridge's own event loop"
            )

        awaitable = func if inspect.isawaitable(func) else None

        with self._lock:
            if self._closed:
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
                raise SessionClosedError(self.name)

            if awaitable is not None:

                async def operation() -> T:
                    return await awaitable

            else:
                operation = functools.partial(func, *args, **kwargs)

            try:
                return self._portal.call(operation)
            except concurrent.futures.CancelledError:
                raise SessionClosedError(self.name) from None
            except RuntimeError:
                if self._closed:
                    raise SessionClosedError(self.name) from None
                raise

    def close(self) -> None:
        """
        Tear the bridge down.

        In-flight work is cancelled and its caller gets SessionClosedError.
        Waits at most shutdown_timeout seconds for the event loop thread.
        """
        if self._closed:
            return
        self._closed = True

        closer = threading.Thread(
            target=self._teardown, name=f"{self.name}-bridge-close", daemon=True
        )
        closer.start()
        closer.join(self._shutdown_timeout)
        if closer.is_alive():
            logger.warning(
                f"Bridge {self.name} did not stop within {self._shutdown_timeout}s; abandoning it"
            )
        else:
            logger.debug(f"Bridge {self.name} closed")

    def _teardown(self) -> None:
        try:
            self._portal.call(self._portal.stop, True)
        except RuntimeError:
            pass  # portal already stopped
        self._exit_stack.close()

    def __enter__(self) -> SyncBridge:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

