# tests/test_attribute_engine.py
"""
Tests for attribute resolution: level order, targeting and ranking.
"""

from collections.abc import Iterator

import pytest

from uicomponents.attribute_engine import AttributeFilter
from uicomponents.attributes import (CultureAttribute, FindAttribute,
                                     FindByCssAttribute, FindByIdAttribute,
                                     FindSettingsAttribute, FormatAttribute,
                                     NameAttribute, TagAttribute)
from uicomponents.component import Control, PageObject
from uicomponents.component_meta import ComponentMetadata
from uicomponents.context import ComponentContext
from uicomponents.levels import AttributeLevels


class LoginPage(PageObject):
    pass


class Button(Control):
    pass


class SubmitButton(Button):
    pass


def make_metadata(component_type=Button, name="Sign In"):
    return ComponentMetadata(
        name,
        component_type,
        parent_component_type=LoginPage,
        parent_component_name="Login",
    )


def values(attributes):
    return [a.value for a in attributes]


class TestLevelOrder:
    """Tests for iteration across levels."""

    @pytest.fixture
    def metadata(self):
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.DECLARED, [NameAttribute("declared")])
        metadata.set_attributes(AttributeLevels.PARENT_COMPONENT, [NameAttribute("parent")])
        metadata.set_attributes(AttributeLevels.ASSEMBLY, [NameAttribute("assembly")])
        metadata.set_attributes(AttributeLevels.GLOBAL, [NameAttribute("global")])
        metadata.set_attributes(AttributeLevels.COMPONENT, [NameAttribute("component")])
        return metadata

    def test_iterates_levels_in_precedence_order(self, metadata):
        """Should yield declared, parent, assembly, global, component."""
        assert values(metadata.get_all(NameAttribute)) == [
            "declared", "parent", "assembly", "global", "component",
        ]

    def test_levels_narrow_the_query(self, metadata):
        """Should only visit the requested levels."""
        result = metadata.get_all(NameAttribute, levels=AttributeLevels.GLOBAL | AttributeLevels.COMPONENT)
        assert values(result) == ["global", "component"]

    def test_get_returns_first_match(self, metadata):
        """Should return the highest precedence attribute."""
        assert metadata.get(NameAttribute).value == "declared"

    def test_keeps_declared_order_within_level(self):
        """Should preserve order inside a single level."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.DECLARED, [NameAttribute("a"), NameAttribute("b")])
        assert values(metadata.get_all(NameAttribute)) == ["a", "b"]

    def test_absent_kind_is_not_an_error(self, metadata):
        """Should return None and an empty sequence when nothing matches."""
        assert metadata.get(CultureAttribute) is None
        assert list(metadata.get_all(CultureAttribute)) == []

    def test_get_all_is_lazy(self, metadata):
        """Should return an iterator rather than a list."""
        assert isinstance(metadata.get_all(NameAttribute), Iterator)


class TestTargetedFiltering:
    """Tests for per-level acceptance of targeted attributes."""

    def test_declared_level_ignores_targeted(self):
        """Should drop targeted attributes declared in place."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.DECLARED, [
            CultureAttribute("targeted", target_types=[Button]),
            CultureAttribute("untargeted"),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["untargeted"]

    def test_parent_level_ignores_untargeted(self):
        """Should only take targeted attributes from the parent."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.PARENT_COMPONENT, [
            CultureAttribute("untargeted"),
            CultureAttribute("targeted", target_types=[Button]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["targeted"]

    def test_component_level_ignores_targeted(self):
        """Should drop targeted attributes of the component type."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.COMPONENT, [
            CultureAttribute("targeted", target_names=["Sign In"]),
            CultureAttribute("untargeted"),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["untargeted"]

    def test_global_level_accepts_both(self):
        """Should accept targeted and untargeted attributes globally."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            CultureAttribute("untargeted"),
            CultureAttribute("targeted", target_types=[Button]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["targeted", "untargeted"]

    def test_drops_attributes_targeting_other_components(self):
        """Should never return an attribute whose target does not match."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.ASSEMBLY, [
            CultureAttribute("page only", target_types=[LoginPage]),
            CultureAttribute("other name", target_names=["Cancel"]),
            CultureAttribute("button", target_types=[Button]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["button"]


class TestTargetRank:
    """Tests for specificity ordering of targeted attributes."""

    def test_name_beats_type(self):
        """Should order name > exact type > base type."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            CultureAttribute("control", target_types=[Control]),
            CultureAttribute("button", target_types=[Button]),
            CultureAttribute("name", target_names=["Sign In"]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["name", "button", "control"]

    def test_closer_base_type_wins(self):
        """Should prefer the nearest class in the MRO."""
        metadata = make_metadata(SubmitButton)
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            CultureAttribute("control", target_types=[Control]),
            CultureAttribute("button", target_types=[Button]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["button", "control"]

    def test_type_given_by_name(self):
        """Should match a target type given as a class name."""
        metadata = make_metadata(SubmitButton)
        metadata.set_attributes(AttributeLevels.GLOBAL, [CultureAttribute("by name", target_types=["Button"])])
        assert metadata.get(CultureAttribute).value == "by name"

    def test_tag_beats_type(self):
        """Should rank tag matches above type matches."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.DECLARED, [TagAttribute("primary")])
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            CultureAttribute("type", target_types=[Button]),
            CultureAttribute("tag", target_tags=["primary"]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["tag", "type"]

    def test_parent_criteria(self):
        """Should rank parent name above parent type."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.PARENT_COMPONENT, [
            CultureAttribute("base parent", target_parent_types=[PageObject]),
            CultureAttribute("parent", target_parent_types=[LoginPage]),
            CultureAttribute("parent name", target_parent_names=["Login"]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["parent name", "parent", "base parent"]

    def test_every_criterion_must_match(self):
        """Should drop an attribute when any criterion fails."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            CultureAttribute("mismatch", target_names=["Sign In"], target_parent_names=["Checkout"]),
        ])
        assert metadata.get(CultureAttribute) is None

    def test_exclusions(self):
        """Should drop attributes excluding the component."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            CultureAttribute("excluded name", target_types=[Control], exclude_target_names=["Sign In"]),
            CultureAttribute("excluded type", target_types=[Control], exclude_target_types=[Button]),
            CultureAttribute("kept", target_types=[Control], exclude_target_names=["Cancel"]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["kept"]

    def test_ties_keep_declared_order(self):
        """Should keep relative order for equal ranks."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            CultureAttribute("first", target_types=[Button]),
            CultureAttribute("second", target_types=[Button]),
            CultureAttribute("third", target_types=[Button]),
        ])
        assert values(metadata.get_all(CultureAttribute)) == ["first", "second", "third"]

    def test_ranking_does_not_cross_levels(self):
        """Should rank within a level; level order still comes first."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.ASSEMBLY, [CultureAttribute("assembly", target_types=[Control])])
        metadata.set_attributes(AttributeLevels.GLOBAL, [CultureAttribute("global", target_names=["Sign In"])])
        assert values(metadata.get_all(CultureAttribute)) == ["assembly", "global"]


class TestAttributeTargetRank:
    """Tests for settings attributes targeting other attribute kinds."""

    @pytest.fixture
    def metadata(self):
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            FindSettingsAttribute(timeout=1),
            FindSettingsAttribute(timeout=2, target_attributes=[FindAttribute]),
            FindSettingsAttribute(timeout=3, target_attributes=[FindByIdAttribute]),
        ])
        return metadata

    def test_most_specific_attribute_kind_first(self, metadata):
        """Should order exact kind, then base kind, then untargeted."""
        result = metadata.get_all(FindSettingsAttribute, target_attribute=FindByIdAttribute)
        assert [a.timeout for a in result] == [3, 2, 1]

    def test_drops_settings_for_other_kinds(self, metadata):
        """Should drop settings targeting a different kind."""
        result = metadata.get_all(FindSettingsAttribute, target_attribute=FindByCssAttribute)
        assert [a.timeout for a in result] == [2, 1]

    def test_without_hint_keeps_target_order(self, metadata):
        """Should not rank by attribute kind without a hint."""
        assert [a.timeout for a in metadata.get_all(FindSettingsAttribute)] == [1, 2, 3]

    def test_excluded_attribute_kind(self):
        """Should drop settings excluding the queried kind."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            FindSettingsAttribute(timeout=5, exclude_target_attributes=[FindByIdAttribute]),
        ])
        assert metadata.get(FindSettingsAttribute, target_attribute=FindByIdAttribute) is None
        assert metadata.get(FindSettingsAttribute, target_attribute=FindByCssAttribute).timeout == 5


class TestPush:
    """Tests for pushing attributes into the declared level."""

    def test_pushed_attributes_come_first_in_push_order(self):
        """Should keep earlier pushes ahead of later ones and of declared."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.DECLARED, [NameAttribute("declared")])

        metadata.push(NameAttribute("p1"))
        metadata.push(NameAttribute("p2"), NameAttribute("p3"))

        assert values(metadata.get_all(NameAttribute)) == ["p1", "p2", "p3", "declared"]

    def test_push_only_touches_declared_level(self):
        """Should leave other levels unchanged."""
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [NameAttribute("global")])

        metadata.push(NameAttribute("pushed"))

        assert values(metadata.global_attributes) == ["global"]
        assert values(metadata.declared_attributes) == ["pushed"]

    def test_push_after_query(self):
        """Should be visible to queries made after the push."""
        metadata = make_metadata()
        assert metadata.get(FormatAttribute) is None

        metadata.push(FormatAttribute("{:.2f}"))

        assert metadata.get_format() == "{:.2f}"


class TestFiltersAndDeterminism:
    """Tests for predicates, filter objects and repeatability."""

    @pytest.fixture
    def metadata(self):
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.GLOBAL, [
            CultureAttribute("en-US"),
            CultureAttribute("de-DE", target_types=[Control]),
            CultureAttribute("fr-FR", target_names=["Sign In"]),
        ])
        return metadata

    def test_predicates_all_apply(self, metadata):
        """Should apply every predicate in sequence."""
        result = metadata.get_all(
            CultureAttribute,
            where=[lambda a: a.value != "fr-FR", lambda a: a.value.endswith("E")],
        )
        assert values(result) == ["de-DE"]

    def test_filter_object(self, metadata):
        """Should accept an AttributeFilter built fluently."""
        attribute_filter = AttributeFilter().at(AttributeLevels.GLOBAL).where(lambda a: a.is_target_specified)
        assert values(metadata.get_all(CultureAttribute, attribute_filter)) == ["fr-FR", "de-DE"]

    def test_keyword_criteria_refine_filter(self, metadata):
        """Should combine a filter with keyword criteria."""
        attribute_filter = AttributeFilter().where(lambda a: a.value != "fr-FR")
        result = metadata.get_all(CultureAttribute, attribute_filter, levels=AttributeLevels.DECLARED)
        assert list(result) == []

    def test_repeated_queries_are_stable(self, metadata):
        """Should return the same order every time."""
        first = list(metadata.get_all(CultureAttribute))
        for _ in range(5):
            assert list(metadata.get_all(CultureAttribute)) == first


class TestConvenienceLookups:
    """Tests for culture and format lookups."""

    def test_culture_from_attribute(self):
        metadata = make_metadata()
        metadata.set_attributes(AttributeLevels.DECLARED, [CultureAttribute("nl-NL")])
        assert metadata.get_culture() == "nl-NL"

    def test_culture_falls_back_to_context(self):
        """Should use the ambient culture when no attribute applies."""
        metadata = make_metadata()
        with ComponentContext.use(ComponentContext(culture="de-DE")):
            assert metadata.get_culture() == "de-DE"

    def test_format_absent(self):
        assert make_metadata().get_format() is None
