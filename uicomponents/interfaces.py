"""
@file interfaces.py
@brief Abstract base classes for collaborators of the component runtime.

The runtime never talks to a browser driver directly. Framework-specific
packages implement these interfaces and hand them to components through
the ComponentContext.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .search import SearchOptions


class IScopeLocator(ABC):
    """
    Locates the live element a component represents.

    Element handles are duck typed after Selenium's WebElement: the runtime
    uses ``text``, ``is_displayed()`` and ``get_attribute(name)``.
    A locator may raise StaleElementError when a handle detaches mid-search.
    """

    @abstractmethod
    def get_element(self, options: SearchOptions) -> Optional[Any]:
        """
        Find the element.

        Args:
            options: Search options (safely/unsafely, at once/await, visibility)

        Returns:
            Element handle or None when nothing matches
        """
        pass

    @abstractmethod
    def is_missing(self, options: SearchOptions) -> bool:
        """
        Check that the element is absent.

        Args:
            options: Search options (safely/unsafely, at once/await, visibility)

        Returns:
            True if no matching element exists
        """
        pass


class ILogSink(ABC):
    """
    Receives section notifications and events from the component runtime.

    SectionLogger is the default implementation; a context without a sink
    makes logging a no-op.
    """

    @abstractmethod
    def start_section(self, section: Any) -> None:
        pass

    @abstractmethod
    def end_section(self, status: str = "ok") -> Any:
        pass

    def log(
        self,
        *,
        event: str,
        message: Optional[str] = None,
        status: str = "info",
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record a single event. Sinks that only track sections ignore it."""
        pass
