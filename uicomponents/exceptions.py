# uicomponents/exceptions.py
"""
@file exceptions.py
@brief Custom exception classes for the UI component framework.
"""

from __future__ import annotations
from typing import Any, Optional


class UIComponentError(Exception):
    """Base exception for the framework."""
    pass


class ConfigError(UIComponentError):
    """Raised when an attribute map or component setup is invalid."""
    pass


class TimeoutError(UIComponentError):
    """
    Raised when a wait condition is not met in time.

    This exception preserves the original exception that was last swallowed
    while polling, making debugging significantly easier.

    Attributes:
        original_exception: The last transient exception raised before timeout
        description: Human-readable description of what was being waited for
        timeout: The timeout value in seconds
        attempt_count: Number of attempts made (if applicable)
        elapsed_time: Actual elapsed time in seconds (if applicable)
        component_full_name: Full path of the component that was waited on
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.timeout: Optional[float] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None
        self.component_full_name: Optional[str] = None

    def __str__(self) -> str:
        base_msg = super().__str__()

        details = []
        if self.original_exception is not None:
            details.append(f"Original exception: {type(self.original_exception).__name__}")
        if self.attempt_count is not None:
            details.append(f"Attempts: {self.attempt_count}")
        if self.elapsed_time is not None:
            details.append(f"Elapsed: {self.elapsed_time:.2f}s")

        if details:
            return f"{base_msg} [{', '.join(details)}]"
        return base_msg

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        @return The deepest original_exception in the chain, or None
        """
        current = self.original_exception
        while current is not None:
            if hasattr(current, 'original_exception') and current.original_exception is not None:
                current = current.original_exception
            else:
                return current
        return None

    def get_traceback_str(self) -> str:
        """
        Get a formatted traceback string from the original exception.

        @return Formatted traceback string or empty string if no original exception
        """
        if self.original_exception is None:
            return ""

        import traceback
        return "".join(traceback.format_exception(
            type(self.original_exception),
            self.original_exception,
            self.original_exception.__traceback__
        ))


class NotFoundError(UIComponentError):
    """
    Raised when scope access requires the element but it is absent.

    Carries the full hierarchical path of the component for diagnosis.
    """

    def __init__(
        self,
        component_full_name: str,
        search_options: Optional[Any] = None,
        details: Optional[str] = None,
    ):
        self.component_full_name = component_full_name
        self.search_options = search_options
        self.details = details
        super().__init__(self.__str__())

    def __str__(self) -> str:
        lines = [f"Unable to locate element: {self.component_full_name}"]
        if self.search_options is not None:
            lines.append(f"Search options: {self.search_options}")
        if self.details:
            lines.append(f"Details: {self.details}")
        return "\n".join(lines)


class StaleElementError(UIComponentError):
    """Raised when a located element reference is no longer attached."""

    def __init__(self, element_name: str, message: Optional[str] = None):
        self.element_name = element_name
        msg = f"Element '{element_name}' is stale (no longer attached to DOM)"
        if message:
            msg += f": {message}"
        super().__init__(msg)
