"""
Element predicates used both as ElementQuery filters and ElementWaiter conditions.

Each predicate is an immutable value wrapping an async check over a
(client, handle) pair. A check that returns False means "not met yet"; a check
that raises a ProtocolError means "cannot evaluate" and propagates unless the
predicate was built with ignore_errors=True.

Example:
    from selenium_query.query import conditions

    session.wait_until(handle).conditions([
        conditions.element_is_displayed(),
        conditions.element_is_clickable(),
    ])
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from ..core.exceptions import ProtocolError, SessionClosedError
from ..core.protocol import ElementHandle, ProtocolClient
from .matching import MatchValue, StringMatch, as_matcher

logger = logging.getLogger(__name__)

CheckFn = Callable[[ProtocolClient, ElementHandle], Awaitable[bool]]
CustomFn = Callable[[ProtocolClient, ElementHandle], Union[bool, Awaitable[bool]]]


@dataclass(frozen=True)
class ElementPredicate:
    """
    A named boolean test over one element.

    ``negation`` names the inverted test; ``~predicate`` uses it and falls back
    to "not (<description>)" when none was given.
    """

    description: str
    check: CheckFn
    ignore_errors: bool = False
    negation: Optional[str] = None

    async def __call__(self, client: ProtocolClient, handle: ElementHandle) -> bool:
        try:
            return bool(await self.check(client, handle))
        except SessionClosedError:
            raise
        except ProtocolError as e:
            if not self.ignore_errors:
                raise
            logger.debug(f"Ignoring error while checking '{self.description}': {e}")
            return False

    def with_ignore_errors(self, ignore: bool = True) -> ElementPredicate:
        return replace(self, ignore_errors=ignore)

    def __invert__(self) -> ElementPredicate:
        check = self.check

        async def negated(client: ProtocolClient, handle: ElementHandle) -> bool:
            return not await check(client, handle)

        return ElementPredicate(
            self.negation or f"not ({self.description})",
            negated,
            self.ignore_errors,
            negation=self.description,
        )

    def __str__(self) -> str:
        return self.description


def custom(fn: CustomFn, description: Optional[str] = None) -> ElementPredicate:
    """
    Wrap a caller-supplied check.

    Args:
        fn: fn(client, handle) returning bool, or an awaitable of bool
        description: Name used in timeout messages (defaults to fn's name)
    """

    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        result = fn(client, handle)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    name = description or getattr(fn, "__name__", "custom condition")
    return ElementPredicate(name, check)


def _state(name: str, ignore_errors: bool) -> ElementPredicate:
    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        return await getattr(client, f"is_{name}")(handle)

    return ElementPredicate(
        f"element is {name}", check, ignore_errors, negation=f"element is not {name}"
    )


def element_is_displayed(ignore_errors: bool = False) -> ElementPredicate:
    return _state("displayed", ignore_errors)


def element_is_not_displayed(ignore_errors: bool = False) -> ElementPredicate:
    return ~element_is_displayed(ignore_errors)


def element_is_enabled(ignore_errors: bool = False) -> ElementPredicate:
    return _state("enabled", ignore_errors)


def element_is_not_enabled(ignore_errors: bool = False) -> ElementPredicate:
    return ~element_is_enabled(ignore_errors)


def element_is_selected(ignore_errors: bool = False) -> ElementPredicate:
    return _state("selected", ignore_errors)


def element_is_not_selected(ignore_errors: bool = False) -> ElementPredicate:
    return ~element_is_selected(ignore_errors)


def element_is_clickable(ignore_errors: bool = False) -> ElementPredicate:
    return _state("clickable", ignore_errors)


def element_is_not_clickable(ignore_errors: bool = False) -> ElementPredicate:
    return ~element_is_clickable(ignore_errors)


def element_is_present(ignore_errors: bool = False) -> ElementPredicate:
    return _state("present", ignore_errors)


def element_is_stale(ignore_errors: bool = False) -> ElementPredicate:
    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        return not await client.is_present(handle)

    return ElementPredicate(
        "element is stale", check, ignore_errors, negation="element is not stale"
    )


def element_has_text(text: MatchValue, ignore_errors: bool = False) -> ElementPredicate:
    matcher = as_matcher(text)

    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        return matcher.matches(await client.text(handle))

    return ElementPredicate(
        f"element has text {matcher}",
        check,
        ignore_errors,
        negation=f"element lacks text {matcher}",
    )


def element_lacks_text(text: MatchValue, ignore_errors: bool = False) -> ElementPredicate:
    return ~element_has_text(text, ignore_errors)


def element_has_id(element_id: MatchValue, ignore_errors: bool = False) -> ElementPredicate:
    return element_has_attribute("id", element_id, ignore_errors)


def element_has_tag(tag: MatchValue, ignore_errors: bool = False) -> ElementPredicate:
    """Tag names compare lowercase; string needles are lowered to match."""
    if isinstance(tag, str):
        tag = tag.lower()
    elif isinstance(tag, StringMatch):
        tag = replace(tag, needle=tag.needle.lower())
    matcher = as_matcher(tag)

    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        return matcher.matches(await client.tag_name(handle))

    return ElementPredicate(
        f"element has tag {matcher}",
        check,
        ignore_errors,
        negation=f"element lacks tag {matcher}",
    )


def element_has_class(class_name: MatchValue, ignore_errors: bool = False) -> ElementPredicate:
    """True when any single class name on the element matches."""
    matcher = as_matcher(class_name)

    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        classes = await client.class_list(handle)
        return any(matcher.matches(c) for c in classes)

    return ElementPredicate(
        f"element has class {matcher}",
        check,
        ignore_errors,
        negation=f"element lacks class {matcher}",
    )


def element_lacks_class(class_name: MatchValue, ignore_errors: bool = False) -> ElementPredicate:
    return ~element_has_class(class_name, ignore_errors)


def element_has_value(value: MatchValue, ignore_errors: bool = False) -> ElementPredicate:
    return element_has_property("value", value, ignore_errors)


def element_lacks_value(value: MatchValue, ignore_errors: bool = False) -> ElementPredicate:
    return ~element_has_value(value, ignore_errors)


def element_has_attribute(
    name: str, value: MatchValue, ignore_errors: bool = False
) -> ElementPredicate:
    matcher = as_matcher(value)

    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        return matcher.matches(await client.attribute(handle, name))

    return ElementPredicate(
        f"element has attribute {name}={matcher}",
        check,
        ignore_errors,
        negation=f"element lacks attribute {name}={matcher}",
    )


def element_lacks_attribute(
    name: str, value: MatchValue, ignore_errors: bool = False
) -> ElementPredicate:
    return ~element_has_attribute(name, value, ignore_errors)


def element_has_attributes(
    attributes: Mapping[str, MatchValue], ignore_errors: bool = False
) -> ElementPredicate:
    return _all_of(
        [element_has_attribute(k, v) for k, v in attributes.items()], ignore_errors
    )


def element_lacks_attributes(
    attributes: Mapping[str, MatchValue], ignore_errors: bool = False
) -> ElementPredicate:
    return _all_of(
        [element_lacks_attribute(k, v) for k, v in attributes.items()], ignore_errors
    )


def element_has_property(
    name: str, value: MatchValue, ignore_errors: bool = False
) -> ElementPredicate:
    matcher = as_matcher(value)

    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        return matcher.matches(_as_text(await client.dom_property(handle, name)))

    return ElementPredicate(
        f"element has property {name}={matcher}",
        check,
        ignore_errors,
        negation=f"element lacks property {name}={matcher}",
    )


def element_lacks_property(
    name: str, value: MatchValue, ignore_errors: bool = False
) -> ElementPredicate:
    return ~element_has_property(name, value, ignore_errors)


def element_has_properties(
    properties: Mapping[str, MatchValue], ignore_errors: bool = False
) -> ElementPredicate:
    return _all_of(
        [element_has_property(k, v) for k, v in properties.items()], ignore_errors
    )


def element_lacks_properties(
    properties: Mapping[str, MatchValue], ignore_errors: bool = False
) -> ElementPredicate:
    return _all_of(
        [element_lacks_property(k, v) for k, v in properties.items()], ignore_errors
    )


def element_has_css_property(
    name: str, value: MatchValue, ignore_errors: bool = False
) -> ElementPredicate:
    matcher = as_matcher(value)

    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        return matcher.matches(await client.css_value(handle, name))

    return ElementPredicate(
        f"element has css {name}={matcher}",
        check,
        ignore_errors,
        negation=f"element lacks css {name}={matcher}",
    )


def element_lacks_css_property(
    name: str, value: MatchValue, ignore_errors: bool = False
) -> ElementPredicate:
    return ~element_has_css_property(name, value, ignore_errors)


def element_has_css_properties(
    properties: Mapping[str, MatchValue], ignore_errors: bool = False
) -> ElementPredicate:
    return _all_of(
        [element_has_css_property(k, v) for k, v in properties.items()], ignore_errors
    )


def element_lacks_css_properties(
    properties: Mapping[str, MatchValue], ignore_errors: bool = False
) -> ElementPredicate:
    return _all_of(
        [element_lacks_css_property(k, v) for k, v in properties.items()], ignore_errors
    )


def _all_of(predicates: list[ElementPredicate], ignore_errors: bool) -> ElementPredicate:
    """Conjunction evaluated in order, stopping at the first failure."""

    async def check(client: ProtocolClient, handle: ElementHandle) -> bool:
        for predicate in predicates:
            if not await predicate.check(client, handle):
                return False
        return True

    description = " and ".join(p.description for p in predicates) or "always"
    return ElementPredicate(description, check, ignore_errors)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)
