"""Element Resolution Engine: selectors, filters, queries and waits."""

from . import conditions
from .selectors import Selector, Strategy
from .matching import StringMatch
from .conditions import ElementPredicate
from .poller import ElementPoller
from .branch import SelectorBranch
from .element_query import ElementQuery
from .element_waiter import ElementWaiter, WaitState

__all__ = [
    "conditions",
    "Selector",
    "Strategy",
    "StringMatch",
    "ElementPredicate",
    "ElementPoller",
    "SelectorBranch",
    "ElementQuery",
    "ElementWaiter",
    "WaitState",
]
