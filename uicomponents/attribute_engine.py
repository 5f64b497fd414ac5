"""
@file attribute_engine.py
@brief Resolves attributes of a kind across leveled stores.

Resolution walks the stores in level order. For target-aware kinds each
store first narrows to the targeted/untargeted attributes it accepts, then
drops attributes whose target does not match the component and orders the
rest by target rank (stable, most specific first).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import (TYPE_CHECKING, Callable, Iterable, Iterator, List, Optional,
                    Sequence, Tuple, Type, TypeVar, Union)

from .attributes import Attribute, AttributeSettingsAttribute, MulticastAttribute
from .levels import LEVEL_ORDER, AttributeLevels, AttributeStore, TargetFilterOptions

if TYPE_CHECKING:
    from .component_meta import ComponentMetadata

A = TypeVar("A", bound=Attribute)
Predicate = Callable[[Attribute], bool]


@dataclass(frozen=True)
class AttributeFilter:
    """Query criteria for attribute resolution."""
    levels: AttributeLevels = AttributeLevels.ALL
    predicates: Tuple[Predicate, ...] = ()
    target_attribute: Optional[type] = None

    def at(self, levels: AttributeLevels) -> AttributeFilter:
        return replace(self, levels=levels)

    def where(self, *predicates: Predicate) -> AttributeFilter:
        return replace(self, predicates=self.predicates + tuple(p for p in predicates if p is not None))

    def for_attribute(self, attribute_type: Optional[type]) -> AttributeFilter:
        return replace(self, target_attribute=attribute_type)

    @classmethod
    def build(
        cls,
        base: Optional[AttributeFilter] = None,
        *,
        levels: Optional[AttributeLevels] = None,
        where: Union[Predicate, Sequence[Predicate], None] = None,
        target_attribute: Optional[type] = None,
    ) -> AttributeFilter:
        result = base or cls()
        if levels is not None:
            result = result.at(levels)
        if where is not None:
            result = result.where(*(where if isinstance(where, (list, tuple)) else (where,)))
        if target_attribute is not None:
            result = result.for_attribute(target_attribute)
        return result


class AttributeResolutionEngine:
    """Merges and ranks attributes of a ComponentMetadata's stores."""

    def __init__(self, metadata: ComponentMetadata):
        self._metadata = metadata

    def get(self, kind: Type[A], attribute_filter: Optional[AttributeFilter] = None) -> Optional[A]:
        """Get the first matching attribute or None."""
        return next(self.get_all(kind, attribute_filter), None)

    def get_all(self, kind: Type[A], attribute_filter: Optional[AttributeFilter] = None) -> Iterator[A]:
        """Lazily yield matching attributes in resolution order."""
        attribute_filter = attribute_filter or AttributeFilter()
        filter_by_target = issubclass(kind, MulticastAttribute)

        for store in self._select_stores(attribute_filter.levels):
            query: Iterable[Attribute] = (a for a in store if isinstance(a, kind))

            if filter_by_target:
                query = self._filter_and_order_by_target(kind, query, attribute_filter, store.target_filter_options)

            for predicate in attribute_filter.predicates:
                query = filter(predicate, query)

            yield from query

    def _select_stores(self, levels: AttributeLevels) -> Iterator[AttributeStore]:
        for level in LEVEL_ORDER:
            if levels & level:
                yield self._metadata.get_store(level)

    def _filter_and_order_by_target(
        self,
        kind: type,
        attributes: Iterable[Attribute],
        attribute_filter: AttributeFilter,
        target_filter_options: TargetFilterOptions,
    ) -> List[Attribute]:
        if target_filter_options == TargetFilterOptions.NONE:
            return []

        candidates = [a for a in attributes if isinstance(a, MulticastAttribute)]
        if target_filter_options == TargetFilterOptions.TARGETED:
            candidates = [a for a in candidates if a.is_target_specified]
        elif target_filter_options == TargetFilterOptions.NON_TARGETED:
            candidates = [a for a in candidates if not a.is_target_specified]

        ranked = []
        for attribute in candidates:
            rank = attribute.calculate_target_rank(self._metadata)
            if rank is not None:
                ranked.append((attribute, rank, 0))

        target_attribute = attribute_filter.target_attribute
        if target_attribute is not None and issubclass(kind, AttributeSettingsAttribute):
            with_attribute_rank = []
            for attribute, rank, _ in ranked:
                attribute_rank = attribute.calculate_target_attribute_rank(target_attribute)
                if attribute_rank is not None:
                    with_attribute_rank.append((attribute, rank, attribute_rank))
            ranked = with_attribute_rank

        ranked.sort(key=lambda item: (-item[1], -item[2]))
        return [attribute for attribute, _, _ in ranked]
