# uicomponents/context.py
"""
@file context.py
@brief Execution context holding global and assembly attributes.

Each test execution builds its own component tree under one context.
Contexts are stacked per thread, so parallel executions never share one.
"""

from __future__ import annotations

import locale
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import (TYPE_CHECKING, Any, Callable, ClassVar, Dict, Generator,
                    List, Optional)

from .attributes import Attribute
from .interfaces import ILogSink, IScopeLocator
from .sectionlogger import SECTION_LOGGER

if TYPE_CHECKING:
    from .repository import AttributeRepository


def default_culture() -> str:
    """Culture of the process locale, e.g. "en-US"."""
    name = locale.getlocale()[0]
    if not name or name in ("C", "POSIX"):
        return "en-US"
    return name.replace("_", "-")


@dataclass
class ComponentContext:
    """
    Ambient configuration for component trees.

    global_attributes: the GLOBAL attribute level of every component
    assembly_attributes: ASSEMBLY level attributes keyed by module or
        package name; a component gets the attributes registered for the
        module declaring it and for every enclosing package
    culture: ambient culture used when no CultureAttribute applies
    scope_locator_factory: builds a scope locator for a component
    log: section logging sink, or None to disable section logging
    """
    global_attributes: List[Attribute] = field(default_factory=list)
    assembly_attributes: Dict[str, List[Attribute]] = field(default_factory=dict)
    culture: str = field(default_factory=default_culture)
    scope_locator_factory: Optional[Callable[[Any], IScopeLocator]] = None
    log: Optional[ILogSink] = SECTION_LOGGER

    _local: ClassVar[threading.local] = threading.local()
    _default: ClassVar[Optional[ComponentContext]] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def add_global(self, *attributes: Attribute) -> ComponentContext:
        self.global_attributes.extend(attributes)
        return self

    def add_assembly(self, module_name: str, *attributes: Attribute) -> ComponentContext:
        self.assembly_attributes.setdefault(module_name, []).extend(attributes)
        return self

    def get_assembly_attributes(self, component_class: type) -> List[Attribute]:
        """Attributes for the module of component_class, most specific module first."""
        parts = component_class.__module__.split(".")
        result: List[Attribute] = []
        for end in range(len(parts), 0, -1):
            result.extend(self.assembly_attributes.get(".".join(parts[:end]), ()))
        return result

    def create_scope_locator(self, component: Any) -> Optional[IScopeLocator]:
        if self.scope_locator_factory is None:
            return None
        return self.scope_locator_factory(component)

    @classmethod
    def from_repository(cls, repository: AttributeRepository, **kwargs: Any) -> ComponentContext:
        """Build a context from a loaded attribute map."""
        context = cls(
            global_attributes=list(repository.global_attributes),
            assembly_attributes={k: list(v) for k, v in repository.assembly_attributes.items()},
            **kwargs,
        )
        if repository.settings.culture and "culture" not in kwargs:
            context.culture = repository.settings.culture
        return context

    @classmethod
    def _get_stack(cls) -> List[ComponentContext]:
        """Get the context stack for the current thread."""
        if not hasattr(cls._local, "stack"):
            cls._local.stack = []
        return cls._local.stack

    @classmethod
    def default(cls) -> ComponentContext:
        """Process default context used when none is installed."""
        if cls._default is None:
            with cls._lock:
                if cls._default is None:
                    cls._default = cls()
        return cls._default

    @classmethod
    def current(cls) -> ComponentContext:
        """Get the innermost context of this thread, or the process default."""
        stack = cls._get_stack()
        return stack[-1] if stack else cls.default()

    @classmethod
    def push(cls, context: ComponentContext) -> None:
        cls._get_stack().append(context)

    @classmethod
    def pop(cls) -> Optional[ComponentContext]:
        stack = cls._get_stack()
        return stack.pop() if stack else None

    @classmethod
    @contextmanager
    def use(cls, context: ComponentContext) -> Generator[ComponentContext, None, None]:
        """Make context current for the duration of the block."""
        cls.push(context)
        try:
            yield context
        finally:
            cls.pop()

    @classmethod
    def reset(cls) -> None:
        """Clear this thread's stack and the process default (useful for test cleanup)."""
        cls._local.stack = []
        with cls._lock:
            cls._default = None
