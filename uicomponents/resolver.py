# uicomponents/resolver.py
"""
@file resolver.py
@brief Builds component trees: metadata population, naming and triggers.
"""

from __future__ import annotations

import inspect
import re
from typing import (TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence,
                    Type, TypeVar)

from .attributes import Attribute, NameAttribute, class_attributes
from .component_meta import ComponentMetadata
from .context import ComponentContext
from .levels import AttributeLevels
from .triggers import TriggerAttribute

if TYPE_CHECKING:
    from .component import ControlDeclaration, PageObject, UIComponent

C = TypeVar("C", bound="UIComponent")

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def humanize(name: str) -> str:
    """
    Turn an identifier into words.

    "sign_in_button" -> "Sign In Button", "SignInButton" -> "Sign In Button"
    """
    words = _WORD_BOUNDARY.sub(" ", name).replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def page_name(page_class: type) -> str:
    """Humanized class name without a trailing "Page", e.g. LoginPage -> "Login"."""
    class_name = page_class.__name__
    if class_name.endswith("Page") and len(class_name) > len("Page"):
        class_name = class_name[:-len("Page")]
    return humanize(class_name)


def control_declarations(component_class: type) -> Dict[str, ControlDeclaration]:
    """
    Control declarations of component_class in declaration order.

    Base class declarations come first; a subclass may redeclare a control
    under the same attribute name.
    """
    from .component import ControlDeclaration

    declarations: Dict[str, ControlDeclaration] = {}
    for klass in reversed(inspect.getmro(component_class)):
        for attr_name, value in vars(klass).items():
            if isinstance(value, ControlDeclaration):
                declarations.pop(attr_name, None)
                declarations[attr_name] = value
    return declarations


class UIComponentResolver:
    """
    Resolves components of a page tree.

    Populates the five attribute levels of each component, resolves its
    name and type name, assigns a scope locator, adds trigger attributes
    from metadata and creates declared child controls.
    """

    @classmethod
    def resolve_page(cls, page: PageObject, context: ComponentContext) -> None:
        page.context = context
        page_class = type(page)

        metadata = ComponentMetadata(name=None, component_type=page_class)
        metadata.context = context
        metadata.set_attributes(AttributeLevels.ASSEMBLY, context.get_assembly_attributes(page_class))
        metadata.set_attributes(AttributeLevels.GLOBAL, context.global_attributes)
        metadata.set_attributes(AttributeLevels.COMPONENT, class_attributes(page_class))

        name_attribute = metadata.get(NameAttribute, levels=AttributeLevels.COMPONENT)
        metadata.name = name_attribute.value if name_attribute is not None else page_name(page_class)

        cls._init_component(page, metadata)
        cls._init_controls(page)

    @classmethod
    def create_control(
        cls,
        parent: UIComponent,
        control_class: Type[C],
        declared_attributes: Sequence[Attribute] = (),
        *,
        name: Optional[str] = None,
        attr_name: Optional[str] = None,
    ) -> C:
        """Create control_class under parent and resolve it (and its own controls)."""
        context = parent.context or ComponentContext.current()

        control = control_class()
        control._attach(parent)
        control.context = context

        metadata = ComponentMetadata(
            name=None,
            component_type=control_class,
            parent_component_type=type(parent),
            parent_component_name=parent.component_name,
        )
        metadata.context = context
        metadata.set_attributes(AttributeLevels.DECLARED, declared_attributes)
        if name is not None:
            metadata.push(NameAttribute(name))
        metadata.set_attributes(AttributeLevels.PARENT_COMPONENT, cls._get_parent_attributes(parent))
        metadata.set_attributes(AttributeLevels.ASSEMBLY, context.get_assembly_attributes(type(parent)))
        metadata.set_attributes(AttributeLevels.GLOBAL, context.global_attributes)
        metadata.set_attributes(AttributeLevels.COMPONENT, class_attributes(control_class))

        name_attribute = metadata.get(NameAttribute, levels=AttributeLevels.DECLARED)
        if name_attribute is not None:
            metadata.name = name_attribute.value
        else:
            metadata.name = humanize(attr_name or control_class.__name__)

        parent.controls.append(control)
        cls._init_component(control, metadata)
        cls._init_controls(control)
        return control

    @staticmethod
    def _get_parent_attributes(parent: UIComponent) -> List[Attribute]:
        return parent.metadata.declared_attributes + parent.metadata.component_attributes

    @classmethod
    def _init_component(cls, component: UIComponent, metadata: ComponentMetadata) -> None:
        component.metadata = metadata
        component.component_name = metadata.name
        component.component_type_name = cls._resolve_component_type_name(metadata)

        if component.scope_locator is None:
            component.scope_locator = component.context.create_scope_locator(component)

        component.triggers.add(*cls._get_triggers(metadata))

        log = component._get_log()
        if log is not None:
            log.log(
                event="init_component",
                message=f"Resolved {component.component_full_name}",
                metadata={"triggers": len(component.triggers)},
            )
        component.init_component()

    @staticmethod
    def _resolve_component_type_name(metadata: ComponentMetadata) -> str:
        definition = metadata.component_definition_attribute
        if definition is not None and definition.component_type_name:
            return definition.component_type_name
        return humanize(metadata.component_type.__name__).lower()

    @staticmethod
    def _get_triggers(metadata: ComponentMetadata) -> List[TriggerAttribute]:
        """Trigger attributes by priority; equal priorities keep resolution order."""
        triggers: Iterable[TriggerAttribute] = metadata.get_all(TriggerAttribute)
        return sorted(triggers, key=lambda trigger: trigger.priority.value)

    @classmethod
    def _init_controls(cls, component: UIComponent) -> None:
        for attr_name, declaration in control_declarations(type(component)).items():
            control = cls.create_control(
                component,
                declaration.control_class,
                declaration.attributes,
                name=declaration.name,
                attr_name=attr_name,
            )
            setattr(component, attr_name, control)
