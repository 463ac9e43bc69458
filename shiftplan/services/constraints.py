"""Hard constraint validation for schedules."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from shiftplan.config import RuleSettings
from shiftplan.domain.models import ConstraintViolation, Employee, Schedule, Severity, Shift

from .timeplan import group_shifts_by_employee, hours_per_date, index_shifts, longest_consecutive_run, rest_hours_between

VACATION_VIOLATION = "VACATION_VIOLATION"
UNAVAILABLE_TIME_BLOCK = "UNAVAILABLE_TIME_BLOCK"
OVERLAPPING_SHIFTS = "OVERLAPPING_SHIFTS"
MINIMUM_REST_VIOLATION = "MINIMUM_REST_VIOLATION"
MAX_DAILY_HOURS_EXCEEDED = "MAX_DAILY_HOURS_EXCEEDED"
MAX_CONSECUTIVE_DAYS_EXCEEDED = "MAX_CONSECUTIVE_DAYS_EXCEEDED"


def _hard(rule_code: str, message: str, employee_id: str, shift_ids: Sequence[str]) -> ConstraintViolation:
    return ConstraintViolation(
        rule_code=rule_code,
        severity=Severity.HARD,
        message=message,
        employee_ids=(employee_id,),
        shift_ids=tuple(shift_ids),
    )


def _check_availability(employee: Employee, assigned: List[Shift]) -> Optional[ConstraintViolation]:
    # 1. Vacation days
    for shift in assigned:
        if employee.is_on_vacation(shift.date):
            return _hard(
                VACATION_VIOLATION,
                f"Employee {employee.id} is on vacation on {shift.date} but assigned to shift {shift.id}.",
                employee.id,
                [shift.id],
            )

    # 2. Unavailable time blocks
    for shift in assigned:
        if employee.is_blocked(shift.start_time, shift.end_time):
            return _hard(
                UNAVAILABLE_TIME_BLOCK,
                f"Employee {employee.id} is unavailable during shift {shift.id} "
                f"({shift.start_time:%Y-%m-%d %H:%M} - {shift.end_time:%Y-%m-%d %H:%M}).",
                employee.id,
                [shift.id],
            )
    return None


def _check_sequence(employee_id: str, assigned: List[Shift], min_rest_hours: float) -> Optional[ConstraintViolation]:
    # 3. Overlap and 4. minimum rest, per consecutive pair in start order
    for current, nxt in zip(assigned, assigned[1:]):
        if nxt.start_time < current.end_time:
            return _hard(
                OVERLAPPING_SHIFTS,
                f"Employee {employee_id} is assigned to overlapping shifts {current.id} and {nxt.id}.",
                employee_id,
                [current.id, nxt.id],
            )

        gap = rest_hours_between(current, nxt)
        if gap < min_rest_hours:
            return _hard(
                MINIMUM_REST_VIOLATION,
                f"Employee {employee_id} does not have {min_rest_hours:g} hours of rest between shifts "
                f"{current.id} and {nxt.id}. Only {gap:.2f} hours given.",
                employee_id,
                [current.id, nxt.id],
            )
    return None


def _check_caps(employee: Employee, assigned: List[Shift]) -> Optional[ConstraintViolation]:
    # 5. Max daily hours
    for day, hours in sorted(hours_per_date(assigned).items()):
        if hours > employee.max_daily_hours + 1e-9:
            return _hard(
                MAX_DAILY_HOURS_EXCEEDED,
                f"Employee {employee.id} works {hours:.1f}h on {day}, exceeding the daily cap of "
                f"{employee.max_daily_hours:g}h.",
                employee.id,
                [s.id for s in assigned if s.date == day],
            )

    # 6. Max consecutive days
    run = longest_consecutive_run(s.date for s in assigned)
    if run > employee.max_consecutive_days:
        return _hard(
            MAX_CONSECUTIVE_DAYS_EXCEEDED,
            f"Employee {employee.id} works {run} consecutive days, exceeding the cap of "
            f"{employee.max_consecutive_days}.",
            employee.id,
            [s.id for s in assigned],
        )
    return None


def validate_hard_constraints(
    schedule: Schedule,
    employees: Sequence[Employee],
    shifts: Sequence[Shift],
    rules: RuleSettings | None = None,
) -> List[ConstraintViolation]:
    """
    Validate a schedule against the hard rules.

    Stops at the first broken rule: one hard violation already makes the
    schedule illegal. Employees are visited in the order they first appear
    in the schedule. Each is checked for vacation, unavailable blocks,
    overlaps and minimum rest, then daily hours and consecutive days.

    Args:
        schedule: Shift id -> assigned employee ids
        employees: All employees of the problem
        shifts: All shifts of the problem
        rules: Rule parameters (minimum rest hours)

    Returns:
        Empty list if no implemented hard rule is broken, otherwise a list
        holding the single violation found
    """
    rules = rules or RuleSettings()
    emp_lookup: Dict[str, Employee] = {emp.id: emp for emp in employees}
    employee_shifts = group_shifts_by_employee(schedule, index_shifts(shifts))

    for emp_id, assigned in employee_shifts.items():
        employee = emp_lookup.get(emp_id)
        if employee is None:
            continue

        violation = (
            _check_availability(employee, assigned)
            or _check_sequence(emp_id, assigned, rules.min_rest_hours)
            or _check_caps(employee, assigned)
        )
        if violation is not None:
            return [violation]

    return []
