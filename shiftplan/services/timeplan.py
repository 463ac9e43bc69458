"""Time helpers shared by the validator and the scorer."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Mapping

from shiftplan.domain.models import Schedule, Shift


def index_shifts(shifts: Iterable[Shift]) -> Dict[str, Shift]:
    return {shift.id: shift for shift in shifts}


def group_shifts_by_employee(
    schedule: Schedule,
    shift_lookup: Mapping[str, Shift],
) -> Dict[str, List[Shift]]:
    """
    Collect the shifts each employee is assigned to, sorted by start time.

    Shift ids missing from ``shift_lookup`` are skipped. Employees appear in
    the order they are first met while walking the schedule.
    """
    by_employee: Dict[str, List[Shift]] = defaultdict(list)
    for shift_id, emp_ids in schedule.items():
        shift = shift_lookup.get(shift_id)
        if shift is None:
            continue
        for emp_id in emp_ids:
            by_employee[emp_id].append(shift)

    for assigned in by_employee.values():
        assigned.sort(key=lambda s: (s.start_time, s.id))
    return dict(by_employee)


def rest_hours_between(first: Shift, second: Shift) -> float:
    """Hours from the end of ``first`` to the start of ``second`` (negative if they overlap)."""
    return (second.start_time - first.end_time).total_seconds() / 3600.0


def hours_per_date(assigned: Iterable[Shift]) -> Dict[date, float]:
    """Worked hours per shift date (a night shift counts towards the date it belongs to)."""
    hours: Dict[date, float] = defaultdict(float)
    for shift in assigned:
        hours[shift.date] += shift.duration_hours
    return dict(hours)


def longest_consecutive_run(dates: Iterable[date]) -> int:
    """Length of the longest run of consecutive calendar days."""
    ordinals = sorted({d.toordinal() for d in dates})
    if not ordinals:
        return 0
    longest = current = 1
    for prev, nxt in zip(ordinals, ordinals[1:]):
        if nxt == prev + 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5
