"""Status conditions and the living condition set that derives readiness from them."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

CONDITION_READY = "Ready"
"""The happy condition of a living condition set."""


class ConditionStatus(str, Enum):
    """The status of a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ConditionSeverity(str, Enum):
    """How much a condition matters; error severity conditions decide readiness."""

    ERROR = ""
    WARNING = "Warning"
    INFO = "Info"


def _type_name(condition_type: Any) -> str:
    if isinstance(condition_type, Enum):
        return str(condition_type.value)
    return str(condition_type)


def _format(message_format: str, args: tuple[Any, ...]) -> str:
    return message_format % args if args else message_format


@dataclass
class Condition:
    """One observed aspect of a resource's state."""

    type: str
    status: ConditionStatus = ConditionStatus.UNKNOWN
    severity: ConditionSeverity = ConditionSeverity.ERROR
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""

    def __post_init__(self) -> None:
        self.type = _type_name(self.type)
        self.status = ConditionStatus(self.status)
        self.severity = ConditionSeverity(self.severity)

    def is_true(self) -> bool:
        return self.status is ConditionStatus.TRUE

    def is_false(self) -> bool:
        return self.status is ConditionStatus.FALSE

    def is_unknown(self) -> bool:
        return self.status is ConditionStatus.UNKNOWN


@dataclass
class Status:
    """The common status block holding conditions."""

    observed_generation: int = 0
    conditions: list[Condition] = field(default_factory=list)
    annotations: dict[str, str] = field(default_factory=dict)


class ConditionSet:
    """A happy condition whose state follows a set of dependent conditions."""

    def __init__(self, *dependents: Any, happy: Any = CONDITION_READY) -> None:
        self.happy = _type_name(happy)
        deps: list[str] = []
        for dep in dependents:
            name = _type_name(dep)
            if name != self.happy and name not in deps:
                deps.append(name)
        self.dependents: tuple[str, ...] = tuple(deps)

    def manage(self, status: Status) -> ConditionManager:
        """Return a manager that updates the conditions of the given status."""
        return ConditionManager(self, status)


class ConditionManager:
    """Updates the conditions of one status according to a condition set."""

    def __init__(self, condition_set: ConditionSet, status: Status) -> None:
        self.condition_set = condition_set
        self.status = status

    @property
    def _happy(self) -> str:
        return self.condition_set.happy

    def _is_terminal(self, name: str) -> bool:
        return name == self._happy or name in self.condition_set.dependents

    def _severity(self, name: str) -> ConditionSeverity:
        return ConditionSeverity.ERROR if self._is_terminal(name) else ConditionSeverity.INFO

    def get_condition(self, condition_type: Any) -> Condition | None:
        """Return a copy of the condition of the given type, or None."""
        name = _type_name(condition_type)
        for cond in self.status.conditions:
            if cond.type == name:
                return dataclasses.replace(cond)
        return None

    def _set_condition(self, cond: Condition) -> None:
        kept: list[Condition] = []
        for existing in self.status.conditions:
            if existing.type != cond.type:
                kept.append(existing)
                continue
            same = dataclasses.replace(cond, last_transition_time=existing.last_transition_time)
            if same == existing:
                return
        cond = dataclasses.replace(cond, last_transition_time=datetime.now(timezone.utc))
        kept.append(cond)
        kept.sort(key=lambda c: c.type)
        self.status.conditions = kept

    def initialize_conditions(self) -> None:
        """Add the happy and dependent conditions that are not yet present."""
        happy = self.get_condition(self._happy)
        if happy is None:
            happy = Condition(self._happy, ConditionStatus.UNKNOWN, ConditionSeverity.ERROR)
            self._set_condition(happy)
        status = ConditionStatus.TRUE if happy.is_true() else ConditionStatus.UNKNOWN
        for name in self.condition_set.dependents:
            if self.get_condition(name) is None:
                self._set_condition(Condition(name, status, ConditionSeverity.ERROR))

    def is_happy(self) -> bool:
        """Whether the happy condition is true."""
        happy = self.get_condition(self._happy)
        return happy is not None and happy.is_true()

    def _find_unhappy_dependent(self) -> Condition | None:
        if not self.condition_set.dependents:
            return None
        relevant = [
            dataclasses.replace(c)
            for c in self.status.conditions
            if c.severity is ConditionSeverity.ERROR and c.type != self._happy
        ]
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        relevant.sort(key=lambda c: c.last_transition_time or oldest, reverse=True)
        for cond in relevant:
            if cond.is_false():
                return cond
        for cond in relevant:
            if cond.is_unknown():
                return cond
        if len(self.condition_set.dependents) > len(relevant):
            return Condition(self._happy, ConditionStatus.UNKNOWN)
        return None

    def mark_true(self, condition_type: Any) -> None:
        """Set a condition true and make the happy condition follow the dependents."""
        name = _type_name(condition_type)
        self._set_condition(Condition(name, ConditionStatus.TRUE, self._severity(name)))
        unhappy = self._find_unhappy_dependent()
        if unhappy is not None:
            self._set_condition(
                Condition(
                    self._happy,
                    unhappy.status,
                    self._severity(self._happy),
                    reason=unhappy.reason,
                    message=unhappy.message,
                )
            )
        elif name != self._happy:
            self._set_condition(
                Condition(self._happy, ConditionStatus.TRUE, self._severity(self._happy))
            )

    def mark_false(
        self, condition_type: Any, reason: str, message_format: str, *args: Any
    ) -> None:
        """Set a condition false; a terminal condition takes the happy one with it."""
        name = _type_name(condition_type)
        message = _format(message_format, args)
        names = [name]
        if self._is_terminal(name) and name != self._happy:
            names.append(self._happy)
        for target in names:
            self._set_condition(
                Condition(
                    target,
                    ConditionStatus.FALSE,
                    self._severity(target),
                    reason=reason,
                    message=message,
                )
            )

    def mark_unknown(
        self, condition_type: Any, reason: str, message_format: str, *args: Any
    ) -> None:
        """Set a condition unknown; a failed dependent keeps the happy condition false."""
        name = _type_name(condition_type)
        message = _format(message_format, args)
        self._set_condition(
            Condition(
                name,
                ConditionStatus.UNKNOWN,
                self._severity(name),
                reason=reason,
                message=message,
            )
        )
        is_dependent = False
        for dep in self.condition_set.dependents:
            cond = self.get_condition(dep)
            if cond is not None and cond.is_false():
                happy = self.get_condition(self._happy)
                if happy is None or not happy.is_false():
                    self.mark_false(self._happy, reason, message_format, *args)
                return
            if dep == name:
                is_dependent = True
        if is_dependent:
            self._set_condition(
                Condition(
                    self._happy,
                    ConditionStatus.UNKNOWN,
                    self._severity(self._happy),
                    reason=reason,
                    message=message,
                )
            )