# uicomponents/timings.py
"""
@file timings.py
@brief Time configuration presets and defaults for component waits.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "presence_wait": {"timeout": 5.0, "interval": 0.5},
    "absence_wait": {"timeout": 5.0, "interval": 0.5},
    "element_search": {"timeout": 5.0, "interval": 0.5},
    "staleness_retry": {"timeout": 2.0, "interval": 0.2, "retry_count": 3},
    "verification": {"timeout": 5.0, "interval": 0.5},
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "presence_wait": {"timeout": 2.0, "interval": 0.1},
        "absence_wait": {"timeout": 2.0, "interval": 0.1},
        "element_search": {"timeout": 2.0, "interval": 0.1},
        "staleness_retry": {"timeout": 1.0, "interval": 0.1, "retry_count": 2},
        "verification": {"timeout": 2.0, "interval": 0.1},
    },
    "slow": {
        "presence_wait": {"timeout": 15.0, "interval": 0.5},
        "absence_wait": {"timeout": 15.0, "interval": 0.5},
        "element_search": {"timeout": 15.0, "interval": 0.5},
        "staleness_retry": {"timeout": 5.0, "interval": 0.3, "retry_count": 4},
        "verification": {"timeout": 15.0, "interval": 0.5},
    },
    "ci": {
        "presence_wait": {"timeout": 30.0, "interval": 1.0},
        "absence_wait": {"timeout": 30.0, "interval": 1.0},
        "element_search": {"timeout": 20.0, "interval": 0.5},
        "staleness_retry": {"timeout": 8.0, "interval": 0.4, "retry_count": 5},
        "verification": {"timeout": 20.0, "interval": 0.5},
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values: Dict[str, Any] = deepcopy(TIMEOUT_FIELDS)

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    for key, value in overrides.items():
        base = deepcopy(values[key])
        base.update(value)
        values[key] = base

    return values
