"""
@file data_provider.py
@brief Named, lazily evaluated and cached values bound to a component.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from .component import UIComponent

T = TypeVar("T")

_UNSET = object()


class DataProvider(Generic[T]):
    """
    Memoized accessor for a derived component value.

    The value is computed on first read and kept until refresh() is called;
    it never re-evaluates on its own.
    """

    def __init__(self, component: UIComponent, value_getter: Callable[[], T], provider_name: str):
        self.component = component
        self._value_getter = value_getter
        self.provider_name = provider_name
        self._value = _UNSET

    @property
    def is_computed(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T:
        if self._value is _UNSET:
            self._value = self._value_getter()
        return self._value

    def refresh(self) -> T:
        """Recompute the value and cache the result."""
        self._value = _UNSET
        return self.value

    def reset(self) -> None:
        self._value = _UNSET

    def __repr__(self) -> str:
        state = repr(self._value) if self.is_computed else "<not computed>"
        return f"DataProvider({self.provider_name!r} of {self.component.component_full_name}: {state})"
