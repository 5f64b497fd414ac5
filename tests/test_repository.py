# tests/test_repository.py
"""
Tests for loading attribute maps from YAML.
"""

import textwrap

import pytest

from uicomponents.attributes import (ContentSource, ContentSourceAttribute,
                                     CultureAttribute, FindByIdAttribute,
                                     FindSettingsAttribute, TagAttribute)
from uicomponents.component import Control, PageObject, control
from uicomponents.context import ComponentContext
from uicomponents.exceptions import ConfigError
from uicomponents.repository import AttributeRepository
from uicomponents.search import Visibility
from uicomponents.triggers import TriggerEvents, TriggerPriority, WaitForTrigger
from uicomponents.until import Until


class Button(Control):
    pass


class CheckoutPage(PageObject):
    pay = control(Button)


def write_map(tmp_path, content):
    path = tmp_path / "attributes.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return str(path)


class TestLoading:
    """Tests for parsing and validation."""

    def test_full_map(self, tmp_path):
        path = write_map(tmp_path, """
            settings:
              culture: en-GB
              default_timeout: 3
              polling_interval: 0.1
            global:
              - kind: wait_for
                until: visible_or_hidden
                on: [init, before_access]
                priority: high
                target_types: Button
              - kind: find_settings
                visibility: any
                timeout: 2
                target_attributes: [FindByIdAttribute]
            assemblies:
              shop.pages:
                - kind: culture
                  value: de-DE
                - kind: tag
                  values: [payment, primary]
                - kind: content_source
                  source: value
        """)

        repo = AttributeRepository(path)

        assert repo.settings.culture == "en-GB"
        assert repo.list_assemblies() == ["shop.pages"]

        wait_for, find_settings = repo.global_attributes
        assert isinstance(wait_for, WaitForTrigger)
        assert wait_for.until is Until.VISIBLE_OR_HIDDEN
        assert wait_for.on == TriggerEvents.INIT | TriggerEvents.BEFORE_ACCESS
        assert wait_for.priority is TriggerPriority.HIGH
        assert wait_for.target_types == ("Button",)

        assert isinstance(find_settings, FindSettingsAttribute)
        assert find_settings.visibility is Visibility.ANY
        assert find_settings.calculate_target_attribute_rank(FindByIdAttribute) == 100

        culture, tag, content_source = repo.assembly_attributes["shop.pages"]
        assert isinstance(culture, CultureAttribute) and culture.value == "de-DE"
        assert isinstance(tag, TagAttribute) and tag.values == ("payment", "primary")
        assert isinstance(content_source, ContentSourceAttribute)
        assert content_source.source is ContentSource.VALUE

    def test_trigger_events_key(self, tmp_path):
        """Should read a bare `on:` key as trigger events, not as a boolean."""
        path = write_map(tmp_path, """
            global:
              - kind: verify_exists
                on: before_access
            assemblies:
              shop.pages:
                - kind: wait_for
                  on: [init, before_access]
        """)

        repo = AttributeRepository(path)

        (verify,) = repo.global_attributes
        (wait_for,) = repo.assembly_attributes["shop.pages"]
        assert verify.on is TriggerEvents.BEFORE_ACCESS
        assert wait_for.on == TriggerEvents.INIT | TriggerEvents.BEFORE_ACCESS

    def test_empty_file(self, tmp_path):
        repo = AttributeRepository(write_map(tmp_path, ""))
        assert repo.global_attributes == []
        assert repo.assembly_attributes == {}
        assert repo.settings.culture is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            AttributeRepository(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            AttributeRepository(write_map(tmp_path, "global: [unclosed"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            AttributeRepository(write_map(tmp_path, "- kind: culture"))

    def test_schema_rejects_unknown_kind(self, tmp_path):
        path = write_map(tmp_path, """
            global:
              - kind: teleport
        """)
        with pytest.raises(ConfigError, match="schema validation failed"):
            AttributeRepository(path)

    def test_schema_rejects_unknown_section(self, tmp_path):
        with pytest.raises(ConfigError, match="schema validation failed"):
            AttributeRepository(write_map(tmp_path, "windows: {}"))

    def test_invalid_enum_value(self, tmp_path):
        path = write_map(tmp_path, """
            global:
              - kind: wait_for
                until: eventually
        """)
        with pytest.raises(ConfigError, match="wait_for"):
            AttributeRepository(path)

    def test_missing_required_parameter(self, tmp_path):
        path = write_map(tmp_path, """
            global:
              - kind: culture
        """)
        with pytest.raises(ConfigError, match=r"global\[0\]"):
            AttributeRepository(path)


class TestUsage:
    """Tests for feeding a loaded map into components and timing."""

    def test_context_from_repository(self, tmp_path):
        module_root = CheckoutPage.__module__.split(".")[0]
        path = write_map(tmp_path, f"""
            settings:
              culture: fr-FR
            global:
              - kind: find_by_id
                value: pay-button
                target_names: [Pay]
            assemblies:
              {module_root}:
                - kind: format
                  value: "{{:.2f}}"
                  target_parent_types: [CheckoutPage]
        """)

        context = ComponentContext.from_repository(AttributeRepository(path))
        page = CheckoutPage().init(context)

        assert context.culture == "fr-FR"
        assert page.pay.metadata.get(FindByIdAttribute).value == "pay-button"
        assert page.pay.metadata.get_format() == "{:.2f}"
        assert page.pay.metadata.get_culture() == "fr-FR"

    def test_explicit_culture_wins(self, tmp_path):
        path = write_map(tmp_path, """
            settings:
              culture: fr-FR
        """)
        context = ComponentContext.from_repository(AttributeRepository(path), culture="it-IT")
        assert context.culture == "it-IT"

    def test_build_time_config(self, tmp_path):
        path = write_map(tmp_path, """
            settings:
              default_timeout: 3
              polling_interval: 0.1
        """)
        config = AttributeRepository(path).build_time_config(overrides={"staleness_retry": {"retry_count": 7}})

        assert config.presence_wait.timeout == 3
        assert config.absence_wait.interval == 0.1
        assert config.element_search.timeout == 3
        assert config.verification.timeout == 3
        assert config.staleness_retry.retry_count == 7

    def test_timing_preset(self, tmp_path):
        path = write_map(tmp_path, """
            settings:
              timing_preset: slow
        """)
        config = AttributeRepository(path).build_time_config()
        assert config.presence_wait.timeout == 15.0
