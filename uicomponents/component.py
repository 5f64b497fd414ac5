# uicomponents/component.py
"""
@file component.py
@brief Component tree nodes with trigger-wrapped scope access and waits.
"""

from __future__ import annotations

import weakref
from typing import (Any, Callable, Dict, Iterator, List, Optional, Type,
                    TypeVar)

from .attributes import (Attribute, ContentSourceAttribute,
                         ControlDefinitionAttribute, FindAttribute,
                         FindSettingsAttribute, PageObjectDefinitionAttribute,
                         attributes)
from .component_meta import ComponentMetadata
from .config import TimeConfig
from .context import ComponentContext
from .data_provider import DataProvider
from .exceptions import ConfigError, NotFoundError, TimeoutError
from .interfaces import ILogSink, IScopeLocator
from .search import SearchOptions, Visibility
from .sectionlogger import WaitForComponentLogSection
from .triggers import TriggerEvents, TriggerSet
from .until import Until, WaitMethod, WaitOptions, WaitUnit
from .waits import wait_until, wait_until_passes

T = TypeVar("T")
C = TypeVar("C", bound="UIComponent")


class UIComponent:
    """
    Node of a component tree.

    A component owns its child controls and keeps weak references to its
    parent and to the page that owns the tree. Access to the live element
    goes through get_scope(), which runs BEFORE_ACCESS and AFTER_ACCESS
    triggers around the scope locator.
    """

    def __init__(self) -> None:
        self._parent_ref: Optional[weakref.ref] = None
        self._owner_ref: Optional[weakref.ref] = None
        self.controls: List[UIComponent] = []
        self._metadata: Optional[ComponentMetadata] = None
        self.context: Optional[ComponentContext] = None
        self.triggers = TriggerSet(self)
        self.scope_locator: Optional[IScopeLocator] = None
        self.component_name: Optional[str] = None
        self.component_type_name: Optional[str] = None
        self._data_providers: Dict[str, DataProvider] = {}
        self._cleaned_up = False

    @property
    def metadata(self) -> ComponentMetadata:
        if self._metadata is None:
            raise ConfigError(
                f"{type(self).__name__} is not initialized; call init() on its page or create it with create_control()"
            )
        return self._metadata

    @metadata.setter
    def metadata(self, metadata: ComponentMetadata) -> None:
        self._metadata = metadata

    # --- Tree ---

    @property
    def parent(self) -> Optional[UIComponent]:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def owner(self) -> UIComponent:
        """Page owning the tree; a root component owns itself."""
        owner = self._owner_ref() if self._owner_ref is not None else None
        return owner if owner is not None else self

    def _attach(self, parent: UIComponent) -> None:
        self._parent_ref = weakref.ref(parent)
        self._owner_ref = weakref.ref(parent.owner)
        self.context = parent.context

    def _path(self) -> List[UIComponent]:
        path = []
        node: Optional[UIComponent] = self
        while node is not None:
            path.append(node)
            node = node.parent
        path.reverse()
        return path

    @property
    def component_full_name(self) -> str:
        """Path from the root, e.g. '"Login" page > "Sign In" button'."""
        return " > ".join(
            f'"{node.component_name}" {node.component_type_name}' for node in self._path()
        )

    def get_ancestor(self, component_class: Type[C]) -> Optional[C]:
        """Nearest ancestor that is an instance of component_class, or None."""
        node = self.parent
        while node is not None:
            if isinstance(node, component_class):
                return node
            node = node.parent
        return None

    def get_ancestor_or_self(self, component_class: Type[C]) -> Optional[C]:
        if isinstance(self, component_class):
            return self
        return self.get_ancestor(component_class)

    def walk(self) -> Iterator[UIComponent]:
        """This component and its descendants, depth-first, pre-order."""
        yield self
        for control in self.controls:
            yield from control.walk()

    # --- Lifecycle ---

    def init_component(self) -> None:
        """
        Called once this component's metadata, name and triggers are
        resolved and before its child controls are created.
        """
        pass

    def create_control(
        self,
        control_class: Type[C],
        *declared_attributes: Attribute,
        name: Optional[str] = None,
    ) -> C:
        """
        Create a child control at runtime.

        The control is resolved like a declared one and its INIT triggers
        run immediately.
        """
        from .resolver import UIComponentResolver

        control = UIComponentResolver.create_control(
            self, control_class, declared_attributes, name=name
        )
        control.execute_init_triggers()
        return control

    def execute_triggers(self, on: TriggerEvents) -> None:
        self.triggers.execute(on)

    def execute_init_triggers(self) -> None:
        """Run INIT triggers of this component, then of its descendants."""
        for component in self.walk():
            component.execute_triggers(TriggerEvents.INIT)

    def clean_up(self) -> None:
        """
        Tear down this component and its subtree.

        DE_INIT triggers run first, then children are cleaned up depth-first
        and detached from both parent and owner. Calling it again does
        nothing.
        """
        if self._cleaned_up:
            return
        self._cleaned_up = True

        self.execute_triggers(TriggerEvents.DE_INIT)
        for control in self.controls:
            control.clean_up()
            control._parent_ref = None
            control._owner_ref = None
        self.controls.clear()
        self._data_providers.clear()

    # --- Scope access ---

    def _get_scope_locator(self) -> IScopeLocator:
        if self.scope_locator is None:
            raise ConfigError(f"No scope locator is set for {self.component_full_name}")
        return self.scope_locator

    def _get_search_options(self) -> SearchOptions:
        """Awaiting search options from FindSettingsAttribute or TimeConfig."""
        setting = TimeConfig.current().element_search
        timeout, interval, visibility = setting.timeout, setting.interval, None

        find = self.metadata.get(FindAttribute)
        find_settings = self.metadata.get(
            FindSettingsAttribute,
            target_attribute=type(find) if find is not None else FindAttribute,
        )
        if find_settings is not None:
            if find_settings.timeout is not None:
                timeout = find_settings.timeout
            if find_settings.retry_interval is not None:
                interval = find_settings.retry_interval
            visibility = find_settings.visibility

        return SearchOptions(timeout=timeout, retry_interval=interval, visibility=visibility)

    def _get_at_once_options(self) -> SearchOptions:
        """Safely, at once, with this component's own visibility."""
        return SearchOptions.safely_at_once(self._get_search_options().visibility)

    def get_scope(self, options: Optional[SearchOptions] = None) -> Optional[Any]:
        """
        Locate the live element of this component.

        @param options Search options; awaiting and unsafe by default
        @return Element, or None when not found and options.is_safely
        @throws NotFoundError if not found and not options.is_safely
        """
        options = options or self._get_search_options()

        self.execute_triggers(TriggerEvents.BEFORE_ACCESS)

        element = self._get_scope_locator().get_element(options)
        if element is None and not options.is_safely:
            raise NotFoundError(self.component_full_name, search_options=options)

        self.execute_triggers(TriggerEvents.AFTER_ACCESS)
        return element

    @property
    def scope(self) -> Any:
        """Live element; raises NotFoundError if it does not appear in time."""
        return self.get_scope()

    def exists(self, options: Optional[SearchOptions] = None) -> bool:
        return self.get_scope(options or self._get_at_once_options()) is not None

    def missing(self, options: Optional[SearchOptions] = None) -> bool:
        options = options or self._get_at_once_options()

        self.execute_triggers(TriggerEvents.BEFORE_ACCESS)
        is_missing = self._get_scope_locator().is_missing(options)
        self.execute_triggers(TriggerEvents.AFTER_ACCESS)
        return is_missing

    # --- Data providers ---

    def get_or_create_data_provider(self, provider_name: str, value_getter: Callable[[], T]) -> DataProvider[T]:
        """Get the provider cached under provider_name, creating it on first use."""
        provider = self._data_providers.get(provider_name)
        if provider is None:
            provider = self.create_data_provider(provider_name, value_getter)
            self._data_providers[provider_name] = provider
        return provider

    def create_data_provider(self, provider_name: str, value_getter: Callable[[], T]) -> DataProvider[T]:
        """Create a provider that is not cached by this component."""
        return DataProvider(self, value_getter, provider_name)

    @property
    def is_present(self) -> DataProvider[bool]:
        return self.get_or_create_data_provider("presence state", self._get_is_present)

    @property
    def is_visible(self) -> DataProvider[bool]:
        return self.get_or_create_data_provider("visible state", self._get_is_visible)

    @property
    def content(self) -> DataProvider[str]:
        return self.get_or_create_data_provider("content", self._get_content)

    def _get_is_present(self) -> bool:
        return self._stale_safely(self.exists, "presence state")

    def _get_is_visible(self) -> bool:
        def read() -> bool:
            element = self.get_scope(SearchOptions.safely_at_once(Visibility.ANY))
            return element is not None and bool(element.is_displayed())

        return self._stale_safely(read, "visible state")

    def _get_content(self) -> str:
        def read() -> str:
            element = self.scope
            content_source = self.metadata.get(ContentSourceAttribute)
            if content_source is not None:
                return content_source.get_content(element)
            return element.text

        return self._stale_safely(read, "content")

    def _stale_safely(self, func: Callable[[], T], description: str) -> T:
        """Run func, retrying while the element reference goes stale."""
        setting = TimeConfig.current().staleness_retry
        return wait_until_passes(
            func,
            timeout=setting.timeout,
            interval=setting.interval,
            description=f"{description} of {self.component_full_name}",
            retry_count=setting.retry_count,
            log=self._get_log(),
        )

    # --- Waits ---

    def _get_log(self) -> Optional[ILogSink]:
        context = self.context or ComponentContext.current()
        return context.log

    def wait(self, until: Until, options: Optional[WaitOptions] = None) -> bool:
        """
        Wait until the component meets the condition.

        Wait units run in order and the first unmet unit stops the wait.

        @return True if every unit was met, False if a safely wait was not
        @throws TimeoutError if a unit was not met and the wait is not safely
        """
        log = self._get_log()

        for unit in until.get_wait_units(options):
            if log is not None:
                log.start_section(WaitForComponentLogSection(self, unit))

            status = "ok"
            try:
                if not self._on_wait(unit):
                    status = "failed"
                    return False
            except Exception:
                status = "error"
                raise
            finally:
                if log is not None:
                    log.end_section(status)

        return True

    def _on_wait(self, unit: WaitUnit) -> bool:
        search_options = unit.search_options
        if unit.method is WaitMethod.PRESENCE:
            check = lambda: self.exists(search_options)  # noqa: E731
        else:
            check = lambda: self.missing(search_options)  # noqa: E731

        try:
            wait_until(
                check,
                timeout=unit.timeout,
                interval=unit.retry_interval,
                description=f"{self.component_full_name} to be {unit.description}",
                log=self._get_log(),
            )
        except TimeoutError as e:
            if unit.is_safely:
                return False
            e.component_full_name = self.component_full_name
            raise
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.component_full_name}>"


@attributes(PageObjectDefinitionAttribute("page"))
class PageObject(UIComponent):
    """
    Root of a component tree.

    Controls are declared as class attributes with control():

        class LoginPage(PageObject):
            sign_in = control(Button, FindByIdAttribute("sign-in"))

    and are created by init().
    """

    def init(self, context: Optional[ComponentContext] = None) -> PageObject:
        """Build the component tree, then run on_init() and INIT triggers."""
        from .resolver import UIComponentResolver

        UIComponentResolver.resolve_page(self, context or ComponentContext.current())
        self.on_init()
        self.execute_init_triggers()
        return self

    def on_init(self) -> None:
        """Hook called after the tree is built and before INIT triggers run."""
        pass


@attributes(ControlDefinitionAttribute())
class Control(UIComponent):
    """Component nested under a page or another control."""


class ControlDeclaration:
    """
    Class-level declaration of a child control.

    Created by control(). The resolver replaces it with the created control
    on each component instance.
    """

    def __init__(self, control_class: Type[UIComponent], attributes: List[Attribute], name: Optional[str] = None):
        self.control_class = control_class
        self.attributes = attributes
        self.name = name
        self.attr_name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.attr_name = name

    def __get__(self, instance: Any, owner: type) -> Any:
        return self

    def __repr__(self) -> str:
        return f"ControlDeclaration({self.attr_name!r}, {self.control_class.__name__})"


def control(control_class: Type[C], *declared_attributes: Attribute, name: Optional[str] = None) -> C:
    """Declare a child control with its declared-level attributes."""
    return ControlDeclaration(control_class, list(declared_attributes), name=name)  # type: ignore[return-value]
