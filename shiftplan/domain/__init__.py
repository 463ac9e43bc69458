"""Domain models for the scheduling engine."""

from .models import (
    ConstraintViolation,
    Employee,
    Evaluation,
    Schedule,
    Severity,
    Shift,
    ShiftType,
    TimeBlock,
    assignment_count,
    clone_schedule,
    empty_schedule,
)

__all__ = [
    "ConstraintViolation",
    "Employee",
    "Evaluation",
    "Schedule",
    "Severity",
    "Shift",
    "ShiftType",
    "TimeBlock",
    "assignment_count",
    "clone_schedule",
    "empty_schedule",
]
