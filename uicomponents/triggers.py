"""
@file triggers.py
@brief Trigger attributes and the per-component trigger set.

Triggers are target-aware attributes carrying an event mask. A component
collects them from its metadata during init and runs the matching ones
around scope access and at lifecycle points.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, List, Optional

from .attributes import MulticastAttribute
from .config import TimeConfig
from .until import Until, WaitOptions

if TYPE_CHECKING:
    from .component import UIComponent


class TriggerEvents(Flag):
    NONE = 0
    INIT = 1
    DE_INIT = 2
    BEFORE_ACCESS = 4
    AFTER_ACCESS = 8


class TriggerPriority(Enum):
    HIGHEST = 0
    HIGHER = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4
    LOWER = 5
    LOWEST = 6


@dataclass
class TriggerContext:
    """What a trigger receives when it runs."""
    event: TriggerEvents
    component: UIComponent


class TriggerAttribute(MulticastAttribute):
    """Base class of triggers. Subclasses implement execute()."""

    default_on = TriggerEvents.NONE

    def __init__(
        self,
        on: Optional[TriggerEvents] = None,
        priority: TriggerPriority = TriggerPriority.MEDIUM,
        **targets: Any,
    ):
        super().__init__(**targets)
        self.on = self.default_on if on is None else on
        self.priority = priority

    def execute(self, context: TriggerContext) -> None:
        raise NotImplementedError


class InvokeTrigger(TriggerAttribute):
    """Runs an arbitrary callable with the trigger context."""

    def __init__(self, on: TriggerEvents, handler: Callable[[TriggerContext], Any], **kwargs: Any):
        super().__init__(on=on, **kwargs)
        self.handler = handler

    def execute(self, context: TriggerContext) -> None:
        self.handler(context)


class WaitForTrigger(TriggerAttribute):
    """Waits for the component to meet a condition."""

    default_on = TriggerEvents.INIT

    def __init__(
        self,
        until: Until = Until.VISIBLE,
        *,
        timeout: Optional[float] = None,
        retry_interval: Optional[float] = None,
        safely: bool = False,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.until = until
        self.timeout = timeout
        self.retry_interval = retry_interval
        self.safely = safely

    def execute(self, context: TriggerContext) -> None:
        context.component.wait(
            self.until,
            WaitOptions(timeout=self.timeout, retry_interval=self.retry_interval, safely=self.safely),
        )


class VerifyExistsTrigger(TriggerAttribute):
    """Fails unless the component becomes present within the verification timeout."""

    default_on = TriggerEvents.INIT

    def execute(self, context: TriggerContext) -> None:
        setting = TimeConfig.current().verification
        context.component.wait(
            Until.VISIBLE_OR_HIDDEN,
            WaitOptions(timeout=setting.timeout, retry_interval=setting.interval),
        )


class VerifyMissingTrigger(TriggerAttribute):
    """Fails unless the component becomes missing within the verification timeout."""

    default_on = TriggerEvents.INIT

    def execute(self, context: TriggerContext) -> None:
        setting = TimeConfig.current().verification
        context.component.wait(
            Until.MISSING,
            WaitOptions(timeout=setting.timeout, retry_interval=setting.interval),
        )


class TriggerSet:
    """
    Ordered, mutable triggers of one component.

    Execution follows insertion order filtered by event mask. Triggers
    fired while this set is already executing are skipped, so a trigger
    that accesses the component scope does not re-trigger itself.
    """

    def __init__(self, component: UIComponent, triggers: Optional[Iterable[TriggerAttribute]] = None):
        self._component = component
        self._triggers: List[TriggerAttribute] = list(triggers or [])
        self._is_executing = False

    def add(self, *triggers: TriggerAttribute) -> None:
        self._triggers.extend(triggers)

    def remove(self, *triggers: TriggerAttribute) -> bool:
        """Remove triggers; returns True if any was present."""
        removed = False
        for trigger in triggers:
            if trigger in self._triggers:
                self._triggers.remove(trigger)
                removed = True
        return removed

    def clear(self) -> None:
        self._triggers.clear()

    def matching(self, on: TriggerEvents) -> List[TriggerAttribute]:
        return [t for t in self._triggers if t.on & on]

    def execute(self, on: TriggerEvents) -> None:
        if self._is_executing or not self._triggers:
            return

        triggers = self.matching(on)
        if not triggers:
            return

        log = self._component._get_log()
        self._is_executing = True
        try:
            for trigger in triggers:
                if log is not None:
                    log.log(
                        event="trigger",
                        message=f"Execute {type(trigger).__name__} on {self._component.component_full_name}",
                        metadata={"on": on.name},
                    )
                trigger.execute(TriggerContext(event=on, component=self._component))
        finally:
            self._is_executing = False

    def __iter__(self) -> Iterator[TriggerAttribute]:
        return iter(list(self._triggers))

    def __len__(self) -> int:
        return len(self._triggers)

    def __contains__(self, trigger: object) -> bool:
        return trigger in self._triggers
