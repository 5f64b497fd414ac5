# uicomponents/repository.py
"""
@file repository.py
@brief Loads global and assembly attributes from a YAML attribute map.

Example attributes.yaml:

    settings:
      culture: en-GB
      default_timeout: 3
      polling_interval: 0.1
    global:
      - kind: wait_for
        until: VISIBLE
        target_types: [Button]
    assemblies:
      shop.pages:
        - kind: culture
          value: de-DE
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type

import yaml
from jsonschema import Draft202012Validator

from .attributes import (Attribute, ContentSource, ContentSourceAttribute,
                         CultureAttribute, FindByClassAttribute,
                         FindByCssAttribute, FindByIdAttribute,
                         FindByNameAttribute, FindByXPathAttribute,
                         FindSettingsAttribute, FormatAttribute, NameAttribute,
                         TagAttribute)
from .config import TimeConfig
from .exceptions import ConfigError
from .search import Visibility
from .triggers import (TriggerEvents, TriggerPriority, VerifyExistsTrigger,
                       VerifyMissingTrigger, WaitForTrigger)
from .until import Until

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas", "attributes.schema.json")

ATTRIBUTE_KINDS: Dict[str, Type[Attribute]] = {
    "culture": CultureAttribute,
    "format": FormatAttribute,
    "name": NameAttribute,
    "tag": TagAttribute,
    "content_source": ContentSourceAttribute,
    "find_by_id": FindByIdAttribute,
    "find_by_name": FindByNameAttribute,
    "find_by_class": FindByClassAttribute,
    "find_by_css": FindByCssAttribute,
    "find_by_xpath": FindByXPathAttribute,
    "find_settings": FindSettingsAttribute,
    "wait_for": WaitForTrigger,
    "verify_exists": VerifyExistsTrigger,
    "verify_missing": VerifyMissingTrigger,
}


def _parse_enum(enum_class: Type[Enum]) -> Callable[[Any], Enum]:
    """Parse a member by name (case-insensitive) or by value."""
    def parse(value: Any) -> Enum:
        if isinstance(value, enum_class):
            return value
        if isinstance(value, str) and value.upper() in enum_class.__members__:
            return enum_class[value.upper()]
        for member in enum_class:
            if member.value == value:
                return member
        raise ValueError(f"invalid {enum_class.__name__}: {value!r}")

    return parse


def _restore_on_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Give attribute entries back their "on" key.

    YAML 1.1 reads a bare `on:` key as the boolean True.
    """
    sections = [data.get("global")]
    assemblies = data.get("assemblies")
    if isinstance(assemblies, dict):
        sections.extend(assemblies.values())

    for entries in sections:
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if isinstance(entry, dict) and True in entry:
                entry["on"] = entry.pop(True)
    return data


def _parse_events(value: Any) -> TriggerEvents:
    names = [value] if isinstance(value, str) else value
    events = TriggerEvents.NONE
    for name in names:
        events |= _parse_enum(TriggerEvents)(name)
    return events


VALUE_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "on": _parse_events,
    "priority": _parse_enum(TriggerPriority),
    "until": _parse_enum(Until),
    "source": _parse_enum(ContentSource),
    "visibility": _parse_enum(Visibility),
}


@dataclass(frozen=True)
class RepositorySettings:
    culture: Optional[str] = None
    default_timeout: float = 5.0
    polling_interval: float = 0.5
    timing_preset: str = "default"


class AttributeRepository:
    """
    Loads attributes.yaml (attribute map). Provides settings, global
    attributes and assembly attributes.
    """

    def __init__(self, path: str, schema_path: str = SCHEMA_PATH):
        self.path = os.path.abspath(path)
        self._raw: Dict[str, Any] = self._load_yaml(self.path)
        self._validator = Draft202012Validator(self._load_schema(schema_path))
        self.validate(self._raw)

        self._settings = self._parse_settings(self._raw.get("settings") or {})
        self._global = self._build_attributes(self._raw.get("global") or [], "global")
        self._assemblies = {
            module_name: self._build_attributes(entries or [], f"assemblies.{module_name}")
            for module_name, entries in (self._raw.get("assemblies") or {}).items()
        }

    @staticmethod
    def _load_yaml(path: str) -> Dict[str, Any]:
        if not os.path.exists(path):
            raise ConfigError(f"Attribute map YAML not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError("Attribute map YAML must be a mapping at root.")
        return _restore_on_keys(data)

    @staticmethod
    def _load_schema(path: str) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def validate(self, data: Dict[str, Any]) -> None:
        """Validate the attribute map against the JSON schema."""
        errors = sorted(self._validator.iter_errors(data), key=lambda e: list(e.path))
        if errors:
            lines = ["Attribute map schema validation failed:"]
            for e in errors:
                lines.append(f"- {list(e.path)}: {e.message}")
            raise ConfigError("\n".join(lines))

    @staticmethod
    def _parse_settings(d: Dict[str, Any]) -> RepositorySettings:
        return RepositorySettings(
            culture=d.get("culture"),
            default_timeout=float(d.get("default_timeout", 5.0)),
            polling_interval=float(d.get("polling_interval", 0.5)),
            timing_preset=str(d.get("timing_preset", "default")),
        )

    @staticmethod
    def build_attribute(entry: Dict[str, Any], where: str = "attribute") -> Attribute:
        """Create an attribute from one map entry ({"kind": ..., **params})."""
        params = dict(entry)
        kind = params.pop("kind", None)
        attribute_class = ATTRIBUTE_KINDS.get(kind)
        if attribute_class is None:
            raise ConfigError(f"{where}: unknown attribute kind {kind!r}. Allowed: {sorted(ATTRIBUTE_KINDS)}")

        try:
            for key, parse in VALUE_PARSERS.items():
                if key in params:
                    params[key] = parse(params[key])
            if attribute_class is TagAttribute:
                return TagAttribute(*params.pop("values"), **params)
            return attribute_class(**params)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"{where}: cannot build {kind}: {e}") from e

    def _build_attributes(self, entries: List[Dict[str, Any]], where: str) -> List[Attribute]:
        return [self.build_attribute(entry, f"{where}[{i}]") for i, entry in enumerate(entries)]

    @property
    def settings(self) -> RepositorySettings:
        return self._settings

    @property
    def global_attributes(self) -> List[Attribute]:
        return list(self._global)

    @property
    def assembly_attributes(self) -> Dict[str, List[Attribute]]:
        return {name: list(attrs) for name, attrs in self._assemblies.items()}

    def list_assemblies(self) -> List[str]:
        return sorted(self._assemblies.keys())

    def build_time_config(self, overrides: Optional[Dict[str, Any]] = None) -> TimeConfig:
        """Build a run-scope timing snapshot from the map settings."""
        return TimeConfig.build_from(
            preset=self._settings.timing_preset,
            overrides=overrides or {},
            defaults={
                "default_timeout": self._settings.default_timeout,
                "polling_interval": self._settings.polling_interval,
            },
        )
