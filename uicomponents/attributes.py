"""
@file attributes.py
@brief Declarative facts attached to components at one of five levels.

Attributes are plain records. Target-aware attributes (MulticastAttribute)
can be declared once at a broad level (parent, assembly, global) and carry a
target filter restricting which components they apply to; the
resolution engine ranks them by how specifically that target matches.
"""

from __future__ import annotations

import inspect
from enum import Enum
from typing import (TYPE_CHECKING, Any, Callable, Iterable, List, Optional,
                    Sequence, Tuple, Type, Union)

if TYPE_CHECKING:
    from .component_meta import ComponentMetadata

TypeSpec = Union[type, str]

NAME_RANK = 10000
TAG_RANK = 5000
TYPE_RANK = 1000
TYPE_DEPTH_PENALTY = 10
PARENT_NAME_RANK = 500
PARENT_TYPE_RANK = 100
ATTRIBUTE_TYPE_RANK = 100


def _as_tuple(value: Any) -> Tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, type)):
        return (value,)
    return tuple(value)


def type_distance(klass: Optional[type], targets: Sequence[TypeSpec]) -> Optional[int]:
    """
    Distance from klass to the nearest of targets along its MRO.

    A target given as a string matches any class in the MRO with that name.
    Returns None when klass matches none of targets.
    """
    if klass is None or not targets:
        return None
    for index, base in enumerate(inspect.getmro(klass)):
        if any(base is target or (isinstance(target, str) and base.__name__ == target) for target in targets):
            return index
    return None


def _name_rank(targets: Sequence[str], values: Iterable[Optional[str]], rank: int) -> Optional[int]:
    if not targets:
        return 0
    return rank if any(v in targets for v in values if v is not None) else None


def _type_rank(targets: Sequence[TypeSpec], klass: Optional[type], rank: int, penalty: int) -> Optional[int]:
    if not targets:
        return 0
    distance = type_distance(klass, targets)
    if distance is None:
        return None
    return max(rank - distance * penalty, 1)


class Attribute:
    """Base class of declarative facts. Treat instances as immutable."""

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{key}={value!r}"
            for key, value in vars(self).items()
            if value is not None and value != ()
        )
        return f"{type(self).__name__}({fields})"


class MulticastAttribute(Attribute):
    """
    Attribute that can target specific components.

    Untargeted instances apply everywhere (rank 0). Targeted instances apply
    only when every specified criterion matches; the rank grows with how
    specific the match is: name > tag > type > parent name > parent type,
    with closer type matches along the MRO ranking higher.
    """

    def __init__(
        self,
        *,
        target_names: Optional[Iterable[str]] = None,
        target_types: Optional[Iterable[TypeSpec]] = None,
        target_tags: Optional[Iterable[str]] = None,
        target_parent_names: Optional[Iterable[str]] = None,
        target_parent_types: Optional[Iterable[TypeSpec]] = None,
        exclude_target_names: Optional[Iterable[str]] = None,
        exclude_target_types: Optional[Iterable[TypeSpec]] = None,
    ):
        self.target_names = _as_tuple(target_names)
        self.target_types = _as_tuple(target_types)
        self.target_tags = _as_tuple(target_tags)
        self.target_parent_names = _as_tuple(target_parent_names)
        self.target_parent_types = _as_tuple(target_parent_types)
        self.exclude_target_names = _as_tuple(exclude_target_names)
        self.exclude_target_types = _as_tuple(exclude_target_types)

    @property
    def is_target_specified(self) -> bool:
        return bool(
            self.target_names
            or self.target_types
            or self.target_tags
            or self.target_parent_names
            or self.target_parent_types
            or self.exclude_target_names
            or self.exclude_target_types
        )

    def calculate_target_rank(self, metadata: ComponentMetadata) -> Optional[int]:
        """
        Rank how specifically this attribute targets the component.

        @return 0 for untargeted attributes, a positive rank for a match,
                None when the target does not match the component
        """
        if not self.is_target_specified:
            return 0

        if metadata.name is not None and metadata.name in self.exclude_target_names:
            return None
        if type_distance(metadata.component_type, self.exclude_target_types) is not None:
            return None

        parts = (
            _name_rank(self.target_names, [metadata.name], NAME_RANK),
            _name_rank(self.target_tags, metadata.tags, TAG_RANK) if self.target_tags else 0,
            _type_rank(self.target_types, metadata.component_type, TYPE_RANK, TYPE_DEPTH_PENALTY),
            _name_rank(self.target_parent_names, [metadata.parent_component_name], PARENT_NAME_RANK),
            _type_rank(self.target_parent_types, metadata.parent_component_type, PARENT_TYPE_RANK, 1),
        )
        if any(part is None for part in parts):
            return None
        return sum(parts)


class AttributeSettingsAttribute(MulticastAttribute):
    """
    Target-aware attribute that configures other attribute kinds.

    target_attributes narrows which attribute kinds the settings apply to;
    without it the settings apply to every kind.
    """

    def __init__(
        self,
        *,
        target_attributes: Optional[Iterable[TypeSpec]] = None,
        exclude_target_attributes: Optional[Iterable[TypeSpec]] = None,
        **targets: Any,
    ):
        super().__init__(**targets)
        self.target_attributes = _as_tuple(target_attributes)
        self.exclude_target_attributes = _as_tuple(exclude_target_attributes)

    def calculate_target_attribute_rank(self, attribute_type: type) -> Optional[int]:
        if type_distance(attribute_type, self.exclude_target_attributes) is not None:
            return None
        return _type_rank(self.target_attributes, attribute_type, ATTRIBUTE_TYPE_RANK, 1)


class NameAttribute(Attribute):
    """Explicit component name, overriding the humanized declaration name."""

    def __init__(self, value: str):
        self.value = value


class TagAttribute(Attribute):
    """Free-form tags that target filters can match."""

    def __init__(self, *values: str):
        self.values = tuple(values)


class ComponentDefinitionAttribute(Attribute):
    """Built-in declaration describing a component type."""

    def __init__(self, component_type_name: Optional[str] = None):
        self.component_type_name = component_type_name


class ControlDefinitionAttribute(ComponentDefinitionAttribute):
    pass


class PageObjectDefinitionAttribute(ComponentDefinitionAttribute):
    pass


class CultureAttribute(MulticastAttribute):
    """Culture name (e.g. "en-US") used to format and parse values."""

    def __init__(self, value: str, **targets: Any):
        super().__init__(**targets)
        self.value = value


class FormatAttribute(MulticastAttribute):
    """Format string used to represent values."""

    def __init__(self, value: str, **targets: Any):
        super().__init__(**targets)
        self.value = value


class ContentSource(Enum):
    TEXT = "text"
    TEXT_CONTENT = "textContent"
    INNER_HTML = "innerHTML"
    VALUE = "value"


class ContentSourceAttribute(MulticastAttribute):
    """Strategy for reading a component's textual content from its element."""

    def __init__(self, source: Union[ContentSource, Callable[[Any], str]] = ContentSource.TEXT, **targets: Any):
        super().__init__(**targets)
        self.source = source

    def get_content(self, element: Any) -> str:
        if callable(self.source):
            return self.source(element)
        if self.source is ContentSource.TEXT:
            return element.text
        return element.get_attribute(self.source.value) or ""


class FindAttribute(MulticastAttribute):
    """
    Describes how a scope locator should find the component's element.

    The runtime only carries this record; interpreting it belongs to the
    scope locator implementation.
    """

    strategy: str = "custom"

    def __init__(self, value: str, **targets: Any):
        super().__init__(**targets)
        self.value = value


class FindByIdAttribute(FindAttribute):
    strategy = "id"


class FindByNameAttribute(FindAttribute):
    strategy = "name"


class FindByClassAttribute(FindAttribute):
    strategy = "class"


class FindByCssAttribute(FindAttribute):
    strategy = "css"


class FindByXPathAttribute(FindAttribute):
    strategy = "xpath"


class FindSettingsAttribute(AttributeSettingsAttribute):
    """Settings applied to find attributes, optionally per find kind."""

    def __init__(
        self,
        *,
        visibility: Optional[Any] = None,
        timeout: Optional[float] = None,
        retry_interval: Optional[float] = None,
        **targets: Any,
    ):
        super().__init__(**targets)
        self.visibility = visibility
        self.timeout = timeout
        self.retry_interval = retry_interval


def attributes(*items: Attribute) -> Callable[[type], type]:
    """
    Class decorator declaring component-level attributes of a component type.

        @attributes(ControlDefinitionAttribute("button"))
        class Button(Control):
            ...
    """
    def decorator(cls: type) -> type:
        existing = cls.__dict__.get("__attributes__", ())
        cls.__attributes__ = tuple(existing) + tuple(items)
        return cls

    return decorator


def class_attributes(component_class: Type[Any]) -> List[Attribute]:
    """Attributes declared on component_class and its bases, most derived first."""
    collected: List[Attribute] = []
    for klass in inspect.getmro(component_class):
        collected.extend(vars(klass).get("__attributes__", ()))
    return collected
