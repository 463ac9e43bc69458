"""Soft penalty scoring for fairness and preferences."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from shiftplan.config import ScoringWeights
from shiftplan.domain.models import ConstraintViolation, Employee, Schedule, Severity, Shift, ShiftType

from .timeplan import group_shifts_by_employee, index_shifts, is_weekend

UNEVEN_NIGHT_SHIFTS = "UNEVEN_NIGHT_SHIFTS"
UNEVEN_WEEKEND_SHIFTS = "UNEVEN_WEEKEND_SHIFTS"
UNEVEN_HOURS = "UNEVEN_HOURS"
AVOIDED_SHIFT_TYPE = "AVOIDED_SHIFT_TYPE"
NON_PREFERRED_SHIFT_TYPE = "NON_PREFERRED_SHIFT_TYPE"
AVOIDED_DATE = "AVOIDED_DATE"
PREFERRED_DATE_UNUSED = "PREFERRED_DATE_UNUSED"

# Shift classification whose load should be spread evenly
PROBLEMATIC_SHIFT_TYPE = ShiftType.NIGHT


def _soft(rule_code: str, message: str, employee_id: str, shift_ids=()) -> ConstraintViolation:
    return ConstraintViolation(
        rule_code=rule_code,
        severity=Severity.SOFT,
        message=message,
        employee_ids=(employee_id,),
        shift_ids=tuple(shift_ids),
    )


def calculate_distribution_penalty(
    amounts: Dict[str, float],
    weight: float,
    threshold: float,
    rule_code: str,
    label: str,
) -> Tuple[float, List[ConstraintViolation]]:
    """
    Quadratic penalty for employees far from the team average.

    Every employee whose ``|amount - mean|`` exceeds ``threshold`` adds
    ``deviation ** 2 * weight``. Large imbalances therefore cost much more
    than several small ones. Nothing is scored when the total is zero.

    Args:
        amounts: Employee id -> amount (night shifts, hours, ...), zeros included
        weight: Penalty multiplier
        threshold: Deviation tolerated without penalty
        rule_code: Code of the emitted violations
        label: Human readable name of the amount for messages

    Returns:
        (penalty, violations), one violation per penalised employee
    """
    total = sum(amounts.values())
    if not amounts or total == 0 or weight == 0:
        return 0.0, []

    average = total / len(amounts)
    score = 0.0
    violations: List[ConstraintViolation] = []
    for emp_id, amount in amounts.items():
        deviation = abs(amount - average)
        if deviation > threshold:
            penalty = (deviation ** 2) * weight
            score += penalty
            violations.append(
                _soft(
                    rule_code,
                    f"Employee {emp_id} has an unfair share of {label} ({amount:g} vs average "
                    f"{average:.1f}). Added penalty: {penalty:.1f}",
                    emp_id,
                )
            )
    return score, violations


def calculate_preference_penalty(
    employees: Sequence[Employee],
    employee_shifts: Dict[str, List[Shift]],
    shifts: Sequence[Shift],
    weights: ScoringWeights,
) -> Tuple[float, List[ConstraintViolation]]:
    """Penalties for assignments that go against an employee's stated preferences."""
    score = 0.0
    violations: List[ConstraintViolation] = []
    scheduled_dates = {shift.date for shift in shifts}

    for emp in employees:
        assigned = employee_shifts.get(emp.id, [])

        if weights.avoided_shift_type:
            for shift in assigned:
                if shift.type in emp.avoid_shift_types:
                    score += weights.avoided_shift_type
                    violations.append(_soft(
                        AVOIDED_SHIFT_TYPE,
                        f"Employee {emp.id} wants to avoid {shift.type.value} shifts but is assigned to {shift.id}.",
                        emp.id, [shift.id],
                    ))

        if weights.non_preferred_shift_type and emp.preferred_shift_types:
            for shift in assigned:
                if shift.type not in emp.preferred_shift_types:
                    score += weights.non_preferred_shift_type
                    violations.append(_soft(
                        NON_PREFERRED_SHIFT_TYPE,
                        f"Employee {emp.id} is assigned to {shift.type.value} shift {shift.id} outside their "
                        f"preferred shift types.",
                        emp.id, [shift.id],
                    ))

        if weights.avoided_date:
            for shift in assigned:
                if shift.date in emp.avoid_dates:
                    score += weights.avoided_date
                    violations.append(_soft(
                        AVOIDED_DATE,
                        f"Employee {emp.id} asked not to work on {shift.date} but is assigned to {shift.id}.",
                        emp.id, [shift.id],
                    ))

        if weights.preferred_date_unused:
            worked = {shift.date for shift in assigned}
            for day in sorted(emp.preferred_dates & scheduled_dates):
                if day not in worked:
                    score += weights.preferred_date_unused
                    violations.append(_soft(
                        PREFERRED_DATE_UNUSED,
                        f"Employee {emp.id} prefers to work on {day} but has no shift that day.",
                        emp.id,
                    ))

    return score, violations


def calculate_penalty_score(
    schedule: Schedule,
    employees: Sequence[Employee],
    shifts: Sequence[Shift],
    weights: ScoringWeights | None = None,
) -> Tuple[float, List[ConstraintViolation]]:
    """
    Score the soft constraints of a schedule. Lower is better, 0 is perfect.

    Args:
        schedule: Shift id -> assigned employee ids
        employees: All employees of the problem
        shifts: All shifts of the problem
        weights: Penalty weights; night fairness only by default

    Returns:
        (score, soft violations)
    """
    weights = weights or ScoringWeights()
    employee_shifts = group_shifts_by_employee(schedule, index_shifts(shifts))

    # Unknown employee ids in the schedule do not count towards any average
    known = [emp.id for emp in employees]

    def per_employee(measure) -> Dict[str, float]:
        return {emp_id: measure(employee_shifts.get(emp_id, [])) for emp_id in known}

    total = 0.0
    violations: List[ConstraintViolation] = []

    # 1. Even distribution of night shifts
    score, found = calculate_distribution_penalty(
        per_employee(lambda assigned: sum(1 for s in assigned if s.type is PROBLEMATIC_SHIFT_TYPE)),
        weights.night_fairness,
        1.0,
        UNEVEN_NIGHT_SHIFTS,
        "night shifts",
    )
    total += score
    violations.extend(found)

    # 2. Even distribution of weekend shifts
    score, found = calculate_distribution_penalty(
        per_employee(lambda assigned: sum(1 for s in assigned if is_weekend(s.date))),
        weights.weekend_fairness,
        1.0,
        UNEVEN_WEEKEND_SHIFTS,
        "weekend shifts",
    )
    total += score
    violations.extend(found)

    # 3. Balanced working hours
    score, found = calculate_distribution_penalty(
        per_employee(lambda assigned: sum(s.duration_hours for s in assigned)),
        weights.hours_fairness,
        weights.hours_deviation_threshold,
        UNEVEN_HOURS,
        "working hours",
    )
    total += score
    violations.extend(found)

    # 4. Individual preferences
    score, found = calculate_preference_penalty(employees, employee_shifts, shifts, weights)
    total += score
    violations.extend(found)

    return total, violations
