"""A single selector strategy with its ordered filter chain."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from ..core.exceptions import SeleniumQueryError, StaleElementError
from ..core.protocol import ElementHandle, ProtocolClient
from .conditions import ElementPredicate
from .selectors import Selector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectorBranch:
    """
    One way of locating an element: a selector, filters, and an optional scope.

    A handle matches the branch iff every filter passes, evaluated in
    declaration order (later filters are skipped once one fails).
    """

    selector: Selector
    filters: tuple[ElementPredicate, ...] = ()
    scope: Optional[ElementHandle] = None

    def with_filter(self, predicate: ElementPredicate) -> SelectorBranch:
        return replace(self, filters=self.filters + (predicate,))

    @property
    def description(self) -> str:
        text = str(self.selector)
        if self.filters:
            text += " [" + ", ".join(f.description for f in self.filters) + "]"
        if self.scope is not None:
            text += f" within {self.scope}"
        return text

    async def resolve(
        self,
        client: ProtocolClient,
        scope: Optional[ElementHandle] = None,
        first_only: bool = False,
    ) -> list[ElementHandle]:
        """
        Run one lookup and filter the results.

        Args:
            client: Protocol client to query
            scope: Element to search beneath; defaults to the branch's own scope
            first_only: Stop filtering after the first accepted handle

        Returns:
            Accepted handles in remote lookup order. Empty if nothing matched, or
            if a filter failed this round (the failure is logged, not raised).

        Raises:
            ProtocolError: If the lookup itself fails, or a filter cannot be
                evaluated because of a transport/protocol failure
            SessionClosedError: If the session is gone
        """
        root = scope if scope is not None else self.scope
        handles = await client.find_elements(self.selector, root)
        if not self.filters:
            return handles[:1] if first_only else handles

        accepted: list[ElementHandle] = []
        try:
            for handle in handles:
                if await self._accepts(client, handle):
                    accepted.append(handle)
                    if first_only:
                        break
        except StaleElementError as e:
            logger.debug(f"{self.description}: element went stale while filtering ({e})")
            return []
        except SeleniumQueryError:
            raise
        except Exception as e:
            logger.debug(f"{self.description}: filter raised {e!r}; no match this round")
            return []
        return accepted

    async def _accepts(self, client: ProtocolClient, handle: ElementHandle) -> bool:
        for predicate in self.filters:
            if not await predicate(client, handle):
                return False
        return True

    def __str__(self) -> str:
        return self.description
