"""
@file levels.py
@brief Attribute levels and the per-level attribute store.
"""

from __future__ import annotations

from enum import Flag
from typing import Iterable, List, Optional

from .attributes import Attribute


class AttributeLevels(Flag):
    """Precedence tiers at which attributes are attached, highest first."""
    NONE = 0
    DECLARED = 1
    PARENT_COMPONENT = 2
    ASSEMBLY = 4
    GLOBAL = 8
    COMPONENT = 16
    ALL = DECLARED | PARENT_COMPONENT | ASSEMBLY | GLOBAL | COMPONENT


LEVEL_ORDER = (
    AttributeLevels.DECLARED,
    AttributeLevels.PARENT_COMPONENT,
    AttributeLevels.ASSEMBLY,
    AttributeLevels.GLOBAL,
    AttributeLevels.COMPONENT,
)


class TargetFilterOptions(Flag):
    """Which target-aware attributes a store may contribute."""
    NONE = 0
    TARGETED = 1
    NON_TARGETED = 2
    ALL = TARGETED | NON_TARGETED


LEVEL_TARGET_FILTERS = {
    AttributeLevels.DECLARED: TargetFilterOptions.NON_TARGETED,
    AttributeLevels.PARENT_COMPONENT: TargetFilterOptions.TARGETED,
    AttributeLevels.ASSEMBLY: TargetFilterOptions.ALL,
    AttributeLevels.GLOBAL: TargetFilterOptions.ALL,
    AttributeLevels.COMPONENT: TargetFilterOptions.NON_TARGETED,
}


class AttributeStore:
    """Ordered attributes of one level. Pure data."""

    def __init__(self, level: AttributeLevels, attributes: Optional[Iterable[Attribute]] = None):
        self.level = level
        self.target_filter_options = LEVEL_TARGET_FILTERS[level]
        self.attributes: List[Attribute] = list(attributes or [])
        self._pushed_count = 0

    def push(self, attributes: Iterable[Attribute]) -> None:
        """
        Insert attributes ahead of the originally stored ones.

        Earlier pushed attributes stay ahead of later pushed ones.
        """
        items = list(attributes)
        self.attributes[self._pushed_count:self._pushed_count] = items
        self._pushed_count += len(items)

    def __iter__(self):
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def __repr__(self) -> str:
        return f"AttributeStore({self.level.name}, {len(self.attributes)} attributes)"
