"""
@file search.py
@brief Options passed to scope locators when searching for an element.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class Visibility(Enum):
    """Which elements a search considers."""
    VISIBLE = "visible"
    HIDDEN = "hidden"
    ANY = "any"


@dataclass(frozen=True)
class SearchOptions:
    """
    How a scope locator should search.

    is_safely: return None instead of failing when nothing is found
    timeout: seconds the locator may keep searching (0 means at once,
        None leaves it to the locator's default)
    retry_interval: polling interval used by awaiting locators
    visibility: visibility filter (None leaves it to the locator's default)
    """
    is_safely: bool = False
    timeout: Optional[float] = None
    retry_interval: Optional[float] = None
    visibility: Optional[Visibility] = None

    @property
    def is_at_once(self) -> bool:
        return self.timeout == 0

    @classmethod
    def safely_at_once(cls, visibility: Optional[Visibility] = None) -> SearchOptions:
        return cls(is_safely=True, timeout=0, visibility=visibility)

    @classmethod
    def unsafely_at_once(cls, visibility: Optional[Visibility] = None) -> SearchOptions:
        return cls(is_safely=False, timeout=0, visibility=visibility)

    @classmethod
    def within(
        cls,
        timeout: float,
        retry_interval: Optional[float] = None,
        safely: bool = False,
    ) -> SearchOptions:
        return cls(is_safely=safely, timeout=timeout, retry_interval=retry_interval)

    def with_visibility(self, visibility: Optional[Visibility]) -> SearchOptions:
        return replace(self, visibility=visibility)
