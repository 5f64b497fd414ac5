# uicomponents/component_meta.py
"""
@file component_meta.py
@brief Per-component metadata: name, type, and attributes at five levels.
"""

from __future__ import annotations

from itertools import chain
from typing import (Dict, Iterable, Iterator, List, Optional, Sequence, Type,
                    TypeVar, Union)

from .attribute_engine import AttributeFilter, AttributeResolutionEngine, Predicate
from .attributes import (Attribute, ComponentDefinitionAttribute,
                         ControlDefinitionAttribute, CultureAttribute,
                         FormatAttribute, PageObjectDefinitionAttribute,
                         TagAttribute)
from .context import ComponentContext
from .levels import LEVEL_ORDER, AttributeLevels, AttributeStore

A = TypeVar("A", bound=Attribute)

OWN_LEVELS = AttributeLevels.DECLARED | AttributeLevels.COMPONENT


class ComponentMetadata:
    """
    Metadata of one component.

    Holds one attribute store per level plus the context (name, component
    type, parent component type and name) that target ranking compares
    against. Stores are populated once during the init pass.
    """

    def __init__(
        self,
        name: Optional[str],
        component_type: type,
        parent_component_type: Optional[type] = None,
        parent_component_name: Optional[str] = None,
    ):
        self.name = name
        self.component_type = component_type
        self.parent_component_type = parent_component_type
        self.parent_component_name = parent_component_name
        self.context: Optional[ComponentContext] = None
        self._stores: Dict[AttributeLevels, AttributeStore] = {
            level: AttributeStore(level) for level in LEVEL_ORDER
        }
        self._engine = AttributeResolutionEngine(self)

    def get_store(self, level: AttributeLevels) -> AttributeStore:
        return self._stores[level]

    def set_attributes(self, level: AttributeLevels, attributes: Iterable[Attribute]) -> None:
        """Replace the attributes of a single level."""
        self._stores[level] = AttributeStore(level, attributes)

    @property
    def declared_attributes(self) -> List[Attribute]:
        return list(self._stores[AttributeLevels.DECLARED])

    @property
    def parent_component_attributes(self) -> List[Attribute]:
        return list(self._stores[AttributeLevels.PARENT_COMPONENT])

    @property
    def assembly_attributes(self) -> List[Attribute]:
        return list(self._stores[AttributeLevels.ASSEMBLY])

    @property
    def global_attributes(self) -> List[Attribute]:
        return list(self._stores[AttributeLevels.GLOBAL])

    @property
    def component_attributes(self) -> List[Attribute]:
        return list(self._stores[AttributeLevels.COMPONENT])

    @property
    def all_attributes(self) -> Iterator[Attribute]:
        """All attributes in level order, unfiltered."""
        return chain.from_iterable(self._stores[level] for level in LEVEL_ORDER)

    @property
    def tags(self) -> List[str]:
        """Tags of this component only; tags of the parent never apply."""
        return [
            tag
            for attribute in self.get_all(TagAttribute, levels=OWN_LEVELS)
            for tag in attribute.values
        ]

    @property
    def component_definition_attribute(self) -> Optional[ComponentDefinitionAttribute]:
        if self.parent_component_type is None:
            return self.get(PageObjectDefinitionAttribute, levels=AttributeLevels.COMPONENT)
        return self.get(ControlDefinitionAttribute, levels=AttributeLevels.COMPONENT)

    def get(
        self,
        kind: Type[A],
        attribute_filter: Optional[AttributeFilter] = None,
        *,
        levels: Optional[AttributeLevels] = None,
        where: Union[Predicate, Sequence[Predicate], None] = None,
        target_attribute: Optional[type] = None,
    ) -> Optional[A]:
        """
        Get the first attribute of kind or None if no such attribute is found.

        Keyword criteria refine attribute_filter when both are given.
        """
        return next(
            self.get_all(
                kind,
                attribute_filter,
                levels=levels,
                where=where,
                target_attribute=target_attribute,
            ),
            None,
        )

    def get_all(
        self,
        kind: Type[A],
        attribute_filter: Optional[AttributeFilter] = None,
        *,
        levels: Optional[AttributeLevels] = None,
        where: Union[Predicate, Sequence[Predicate], None] = None,
        target_attribute: Optional[type] = None,
    ) -> Iterator[A]:
        """Lazily yield attributes of kind in resolution order."""
        attribute_filter = AttributeFilter.build(
            attribute_filter,
            levels=levels,
            where=where,
            target_attribute=target_attribute,
        )
        return self._engine.get_all(kind, attribute_filter)

    def push(self, *attributes: Attribute) -> None:
        """
        Insert attributes at the beginning of the declared level.

        Attributes pushed by earlier calls stay ahead of these.
        """
        self._stores[AttributeLevels.DECLARED].push(a for a in attributes if a is not None)

    def get_culture(self) -> str:
        """Culture from CultureAttribute, or the culture of the context if not found."""
        attribute = self.get(CultureAttribute)
        if attribute is not None:
            return attribute.value
        return (self.context or ComponentContext.current()).culture

    def get_format(self) -> Optional[str]:
        """Format from FormatAttribute, or None if not found."""
        attribute = self.get(FormatAttribute)
        return attribute.value if attribute is not None else None

    def __repr__(self) -> str:
        return (
            f"ComponentMetadata(name={self.name!r}, "
            f"component_type={self.component_type.__name__})"
        )
