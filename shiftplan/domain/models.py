"""Immutable records consumed and produced by the scheduling engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple


class ShiftType(str, Enum):
    """Classification of a shift."""

    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"
    CUSTOM = "custom"

    @classmethod
    def from_start_hour(cls, hour: int) -> "ShiftType":
        """Classify a shift by the hour it starts (06-13 morning, 14-21 evening, 22-05 night)."""
        if 6 <= hour < 14:
            return cls.MORNING
        if 14 <= hour < 22:
            return cls.EVENING
        return cls.NIGHT


class Severity(str, Enum):
    HARD = "hard"
    SOFT = "soft"


@dataclass(frozen=True)
class TimeBlock:
    """A window of time an employee cannot be scheduled in."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError(f"Time block end {self.end} must be after start {self.start}")

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and start < self.end


@dataclass(frozen=True)
class Employee:
    """Employee with hard caps, hard availability and soft preferences."""

    id: str
    name: str
    max_daily_hours: float
    max_consecutive_days: int

    # Soft preferences
    preferred_shift_types: FrozenSet[ShiftType] = frozenset()
    avoid_shift_types: FrozenSet[ShiftType] = frozenset()
    preferred_dates: FrozenSet[date] = frozenset()
    avoid_dates: FrozenSet[date] = frozenset()

    # Hard availability
    vacation_dates: FrozenSet[date] = frozenset()
    unavailable_time_blocks: Tuple[TimeBlock, ...] = ()

    def __post_init__(self):
        if not self.id:
            raise ValueError("Employee id must be a non-empty string")
        if self.max_daily_hours <= 0:
            raise ValueError(f"Employee {self.id}: max_daily_hours must be positive, got {self.max_daily_hours}")
        if int(self.max_consecutive_days) != self.max_consecutive_days or self.max_consecutive_days < 1:
            raise ValueError(
                f"Employee {self.id}: max_consecutive_days must be a positive integer, got {self.max_consecutive_days}"
            )
        # Normalise iterables passed by callers into the frozen shapes
        object.__setattr__(self, "preferred_shift_types", frozenset(ShiftType(t) for t in self.preferred_shift_types))
        object.__setattr__(self, "avoid_shift_types", frozenset(ShiftType(t) for t in self.avoid_shift_types))
        object.__setattr__(self, "preferred_dates", frozenset(self.preferred_dates))
        object.__setattr__(self, "avoid_dates", frozenset(self.avoid_dates))
        object.__setattr__(self, "vacation_dates", frozenset(self.vacation_dates))
        object.__setattr__(self, "unavailable_time_blocks", tuple(self.unavailable_time_blocks))

    def is_on_vacation(self, check_date: date) -> bool:
        return check_date in self.vacation_dates

    def is_blocked(self, start: datetime, end: datetime) -> bool:
        """True if any unavailable block intersects [start, end)."""
        return any(block.overlaps(start, end) for block in self.unavailable_time_blocks)

    def __repr__(self) -> str:
        return f"<Employee(id='{self.id}', name='{self.name}')>"


@dataclass(frozen=True)
class Shift:
    """A time-bounded shift that needs staffing."""

    id: str
    date: date
    start_time: datetime
    end_time: datetime
    type: ShiftType
    min_required_employees: int = 1
    max_allowed_employees: Optional[int] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Shift id must be a non-empty string")
        if self.end_time <= self.start_time:
            raise ValueError(f"Shift {self.id}: end {self.end_time} must be after start {self.start_time}")
        if (self.end_time.date() - self.start_time.date()) > timedelta(days=1):
            raise ValueError(f"Shift {self.id}: must end on the same or the next calendar day")
        if self.min_required_employees < 1:
            raise ValueError(f"Shift {self.id}: min_required_employees must be >= 1")
        if self.max_allowed_employees is not None and self.max_allowed_employees < self.min_required_employees:
            raise ValueError(
                f"Shift {self.id}: max_allowed_employees ({self.max_allowed_employees}) "
                f"< min_required_employees ({self.min_required_employees})"
            )
        object.__setattr__(self, "type", ShiftType(self.type))

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600.0

    def __repr__(self) -> str:
        return f"<Shift(id='{self.id}', date={self.date}, type={self.type.value})>"


# Shift id -> employee ids assigned to that shift
Schedule = Dict[str, List[str]]


def empty_schedule(shifts: Iterable[Shift]) -> Schedule:
    """One empty entry per shift, in input order."""
    return {shift.id: [] for shift in shifts}


def clone_schedule(schedule: Schedule) -> Schedule:
    return {shift_id: list(emp_ids) for shift_id, emp_ids in schedule.items()}


def assignment_count(schedule: Schedule) -> int:
    return sum(len(emp_ids) for emp_ids in schedule.values())


@dataclass(frozen=True)
class ConstraintViolation:
    """A single broken rule, hard or soft."""

    rule_code: str
    severity: Severity
    message: str
    employee_ids: Tuple[str, ...] = ()
    shift_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "severity", Severity(self.severity))
        object.__setattr__(self, "employee_ids", tuple(self.employee_ids))
        object.__setattr__(self, "shift_ids", tuple(self.shift_ids))

    def to_dict(self) -> dict:
        return {
            "ruleCode": self.rule_code,
            "type": self.severity.value,
            "message": self.message,
            "employeeIds": list(self.employee_ids),
            "shiftIds": list(self.shift_ids),
        }


@dataclass(frozen=True)
class Evaluation:
    """Scored result of a search: the engine's only output."""

    schedule: Schedule
    is_valid: bool
    penalty_score: float
    constraint_violations: List[ConstraintViolation] = field(default_factory=list)

    @property
    def hard_violations(self) -> List[ConstraintViolation]:
        return [v for v in self.constraint_violations if v.severity is Severity.HARD]

    @property
    def soft_violations(self) -> List[ConstraintViolation]:
        return [v for v in self.constraint_violations if v.severity is Severity.SOFT]

    def to_dict(self) -> dict:
        return {
            "schedule": clone_schedule(self.schedule),
            "isValid": self.is_valid,
            "penaltyScore": self.penalty_score,
            "constraintViolations": [v.to_dict() for v in self.constraint_violations],
        }
