# uicomponents/__init__.py
"""
UIComponents - Component tree runtime for UI test automation.

This package provides:
- Attributes: Declarative facts attached to components at five levels
- Metadata: Target-ranked attribute resolution per component
- Components: Page objects and controls with trigger-wrapped scope access
- Data providers: Lazily computed, cached component state
- Waits: Until conditions expanded into sequential wait units
- Repository: YAML attribute map loading and validation
- Interfaces: Abstract base classes for scope locators and log sinks
"""

from uicomponents.attributes import (
    Attribute,
    MulticastAttribute,
    AttributeSettingsAttribute,
    NameAttribute,
    TagAttribute,
    ComponentDefinitionAttribute,
    ControlDefinitionAttribute,
    PageObjectDefinitionAttribute,
    CultureAttribute,
    FormatAttribute,
    ContentSource,
    ContentSourceAttribute,
    FindAttribute,
    FindByIdAttribute,
    FindByNameAttribute,
    FindByClassAttribute,
    FindByCssAttribute,
    FindByXPathAttribute,
    FindSettingsAttribute,
    attributes,
)
from uicomponents.levels import AttributeLevels, AttributeStore
from uicomponents.attribute_engine import AttributeFilter, AttributeResolutionEngine
from uicomponents.component_meta import ComponentMetadata
from uicomponents.data_provider import DataProvider
from uicomponents.search import SearchOptions, Visibility
from uicomponents.until import Until, WaitOptions, WaitUnit
from uicomponents.triggers import (
    TriggerEvents,
    TriggerPriority,
    TriggerContext,
    TriggerAttribute,
    TriggerSet,
    InvokeTrigger,
    WaitForTrigger,
    VerifyExistsTrigger,
    VerifyMissingTrigger,
)
from uicomponents.component import UIComponent, PageObject, Control, control
from uicomponents.resolver import UIComponentResolver
from uicomponents.context import ComponentContext
from uicomponents.config import TimeConfig, TimeoutSettings
from uicomponents.repository import AttributeRepository
from uicomponents.sectionlogger import SECTION_LOGGER, SectionLogger
from uicomponents.waits import wait_until, wait_until_passes
from uicomponents.exceptions import (
    UIComponentError,
    ConfigError,
    TimeoutError,
    NotFoundError,
    StaleElementError,
)
from uicomponents.interfaces import IScopeLocator, ILogSink

__all__ = [
    "Attribute",
    "MulticastAttribute",
    "AttributeSettingsAttribute",
    "NameAttribute",
    "TagAttribute",
    "ComponentDefinitionAttribute",
    "ControlDefinitionAttribute",
    "PageObjectDefinitionAttribute",
    "CultureAttribute",
    "FormatAttribute",
    "ContentSource",
    "ContentSourceAttribute",
    "FindAttribute",
    "FindByIdAttribute",
    "FindByNameAttribute",
    "FindByClassAttribute",
    "FindByCssAttribute",
    "FindByXPathAttribute",
    "FindSettingsAttribute",
    "attributes",
    "AttributeLevels",
    "AttributeStore",
    "AttributeFilter",
    "AttributeResolutionEngine",
    "ComponentMetadata",
    "DataProvider",
    "SearchOptions",
    "Visibility",
    "Until",
    "WaitOptions",
    "WaitUnit",
    "TriggerEvents",
    "TriggerPriority",
    "TriggerContext",
    "TriggerAttribute",
    "TriggerSet",
    "InvokeTrigger",
    "WaitForTrigger",
    "VerifyExistsTrigger",
    "VerifyMissingTrigger",
    "UIComponent",
    "PageObject",
    "Control",
    "control",
    "UIComponentResolver",
    "ComponentContext",
    "TimeConfig",
    "TimeoutSettings",
    "AttributeRepository",
    "SECTION_LOGGER",
    "SectionLogger",
    "wait_until",
    "wait_until_passes",
    "UIComponentError",
    "ConfigError",
    "TimeoutError",
    "NotFoundError",
    "StaleElementError",
    "IScopeLocator",
    "ILogSink",
]

__version__ = "1.0.0"
