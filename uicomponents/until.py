"""
@file until.py
@brief Wait conditions and their expansion into sequential wait units.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .config import TimeConfig
from .search import SearchOptions, Visibility


class WaitMethod(Enum):
    PRESENCE = "presence"
    ABSENCE = "absence"


_P, _A = WaitMethod.PRESENCE, WaitMethod.ABSENCE
_VISIBLE, _HIDDEN, _ANY = Visibility.VISIBLE, Visibility.HIDDEN, Visibility.ANY


class Until(Enum):
    """
    Component wait conditions.

    Composite members ("X_THEN_Y") are met only when every step is met,
    evaluated in order.
    """
    MISSING = ((_A, _ANY),)
    HIDDEN = ((_P, _HIDDEN),)
    MISSING_OR_HIDDEN = ((_A, _VISIBLE),)
    VISIBLE = ((_P, _VISIBLE),)
    VISIBLE_OR_HIDDEN = ((_P, _ANY),)
    VISIBLE_THEN_HIDDEN = ((_P, _VISIBLE), (_P, _HIDDEN))
    VISIBLE_THEN_MISSING = ((_P, _VISIBLE), (_A, _ANY))
    HIDDEN_THEN_VISIBLE = ((_P, _HIDDEN), (_P, _VISIBLE))
    MISSING_THEN_VISIBLE = ((_A, _ANY), (_P, _VISIBLE))
    MISSING_OR_HIDDEN_THEN_VISIBLE = ((_A, _VISIBLE), (_P, _VISIBLE))
    VISIBLE_THEN_MISSING_OR_HIDDEN = ((_P, _VISIBLE), (_A, _VISIBLE))

    @property
    def steps(self) -> Tuple[Tuple[WaitMethod, Visibility], ...]:
        return self.value

    def get_wait_units(self, options: Optional[WaitOptions] = None) -> List[WaitUnit]:
        options = options or WaitOptions()
        config = TimeConfig.current()
        units = []
        for method, visibility in self.steps:
            if method is WaitMethod.PRESENCE:
                setting = config.presence_wait
                timeout = options.presence_timeout
            else:
                setting = config.absence_wait
                timeout = options.absence_timeout
            if timeout is None:
                timeout = options.timeout if options.timeout is not None else setting.timeout
            interval = options.retry_interval if options.retry_interval is not None else setting.interval
            units.append(WaitUnit(
                method=method,
                visibility=visibility,
                timeout=timeout,
                retry_interval=interval,
                is_safely=options.safely,
            ))
        return units


@dataclass(frozen=True)
class WaitOptions:
    """Overrides for a wait; unset values come from TimeConfig."""
    timeout: Optional[float] = None
    presence_timeout: Optional[float] = None
    absence_timeout: Optional[float] = None
    retry_interval: Optional[float] = None
    safely: bool = False


_DESCRIPTIONS = {
    (_P, _VISIBLE): "visible",
    (_P, _HIDDEN): "hidden",
    (_P, _ANY): "present",
    (_A, _ANY): "missing",
    (_A, _VISIBLE): "missing or hidden",
    (_A, _HIDDEN): "missing or visible",
}


@dataclass(frozen=True)
class WaitUnit:
    """One atomic condition of a (possibly composite) wait."""
    method: WaitMethod
    visibility: Visibility
    timeout: float
    retry_interval: float
    is_safely: bool = False

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[(self.method, self.visibility)]

    @property
    def search_options(self) -> SearchOptions:
        """Single-attempt options used for each poll."""
        return SearchOptions.safely_at_once(visibility=self.visibility)
