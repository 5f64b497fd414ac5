# tests/conftest.py
"""
Shared fixtures: an in-memory element registry and a scope locator over it.
"""

import pytest

from uicomponents.config import TimeConfig
from uicomponents.context import ComponentContext
from uicomponents.exceptions import StaleElementError
from uicomponents.interfaces import IScopeLocator
from uicomponents.search import Visibility


class FakeElement:
    """Selenium-shaped element handle."""

    def __init__(self, text="", displayed=True, attributes=None, stale_reads=0):
        self._text = text
        self.displayed = displayed
        self.attributes = dict(attributes or {})
        self.stale_reads = stale_reads

    @property
    def text(self):
        if self.stale_reads > 0:
            self.stale_reads -= 1
            raise StaleElementError("fake", "detached during read")
        return self._text

    def is_displayed(self):
        return self.displayed

    def get_attribute(self, name):
        return self.attributes.get(name)


class FakeDom:
    """Elements keyed by component name, plus a log of locator calls."""

    def __init__(self):
        self.elements = {}
        self.calls = []
        self.stale_lookups = 0

    def find(self, name, visibility):
        element = self.elements.get(name)
        if element is None:
            return None
        if visibility in (None, Visibility.VISIBLE) and not element.displayed:
            return None
        if visibility is Visibility.HIDDEN and element.displayed:
            return None
        return element


class FakeLocator(IScopeLocator):
    def __init__(self, dom, component):
        self.dom = dom
        self.component = component

    def get_element(self, options):
        self.dom.calls.append(("get_element", self.component.component_name, options))
        if self.dom.stale_lookups > 0:
            self.dom.stale_lookups -= 1
            raise StaleElementError(self.component.component_name)
        return self.dom.find(self.component.component_name, options.visibility)

    def is_missing(self, options):
        self.dom.calls.append(("is_missing", self.component.component_name, options))
        return self.dom.find(self.component.component_name, options.visibility) is None


@pytest.fixture(autouse=True)
def fast_timings():
    """Short timings so that waits in tests finish quickly."""
    fast = {"timeout": 0.5, "interval": 0.05}
    TimeConfig.install_run_config(TimeConfig.build_from(overrides={
        "presence_wait": fast,
        "absence_wait": fast,
        "element_search": fast,
        "staleness_retry": fast,
        "verification": fast,
    }))
    yield
    TimeConfig.reset_to_defaults()
    ComponentContext.reset()


@pytest.fixture
def dom():
    return FakeDom()


@pytest.fixture
def context(dom):
    return ComponentContext(
        culture="en-US",
        scope_locator_factory=lambda component: FakeLocator(dom, component),
    )
