"""Shared utilities for selenium-query."""

from .error_mapper import map_selenium_error

__all__ = [
    "map_selenium_error",
]
