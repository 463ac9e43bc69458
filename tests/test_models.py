"""Tests for domain records."""

from datetime import date, datetime

import pytest

from shiftplan.domain.models import (
    ConstraintViolation,
    Employee,
    Evaluation,
    Severity,
    Shift,
    ShiftType,
    TimeBlock,
    assignment_count,
    clone_schedule,
    empty_schedule,
)

from conftest import make_employee, make_shift


def test_shift_type_from_start_hour():
    assert ShiftType.from_start_hour(6) is ShiftType.MORNING
    assert ShiftType.from_start_hour(13) is ShiftType.MORNING
    assert ShiftType.from_start_hour(14) is ShiftType.EVENING
    assert ShiftType.from_start_hour(21) is ShiftType.EVENING
    assert ShiftType.from_start_hour(22) is ShiftType.NIGHT
    assert ShiftType.from_start_hour(3) is ShiftType.NIGHT


def test_shift_rejects_end_before_start():
    with pytest.raises(ValueError):
        Shift(
            id="s1",
            date=date(2025, 3, 3),
            start_time=datetime(2025, 3, 3, 14),
            end_time=datetime(2025, 3, 3, 6),
            type=ShiftType.MORNING,
        )


def test_shift_must_end_by_next_day():
    with pytest.raises(ValueError):
        Shift(
            id="s1",
            date=date(2025, 3, 3),
            start_time=datetime(2025, 3, 3, 22),
            end_time=datetime(2025, 3, 5, 6),
            type=ShiftType.NIGHT,
        )


def test_shift_staffing_bounds():
    with pytest.raises(ValueError):
        make_shift("s1", date(2025, 3, 3), 6, min_required=0)
    with pytest.raises(ValueError):
        make_shift("s1", date(2025, 3, 3), 6, min_required=3, max_allowed=2)


def test_night_shift_duration_spans_midnight():
    shift = make_shift("n1", date(2025, 3, 3), 22)
    assert shift.type is ShiftType.NIGHT
    assert shift.end_time.date() == date(2025, 3, 4)
    assert shift.duration_hours == 8.0


def test_employee_caps_must_be_positive():
    with pytest.raises(ValueError):
        make_employee("a", max_daily_hours=0)
    with pytest.raises(ValueError):
        make_employee("a", max_consecutive_days=0)


def test_employee_normalises_preferences():
    emp = make_employee(
        "a",
        preferred_shift_types=["morning"],
        vacation_dates=[date(2025, 3, 4)],
        unavailable_time_blocks=[TimeBlock(datetime(2025, 3, 5, 8), datetime(2025, 3, 5, 12))],
    )
    assert emp.preferred_shift_types == frozenset({ShiftType.MORNING})
    assert emp.is_on_vacation(date(2025, 3, 4))
    assert emp.is_blocked(datetime(2025, 3, 5, 11), datetime(2025, 3, 5, 19))
    assert not emp.is_blocked(datetime(2025, 3, 5, 12), datetime(2025, 3, 5, 20))


def test_employee_is_immutable():
    emp = make_employee("a")
    with pytest.raises(AttributeError):
        emp.name = "changed"


def test_schedule_helpers(week_shifts):
    schedule = empty_schedule(week_shifts)
    assert list(schedule) == [s.id for s in week_shifts]
    assert assignment_count(schedule) == 0

    schedule["d0-morning"].append("alice")
    cloned = clone_schedule(schedule)
    cloned["d0-morning"].append("bob")
    assert schedule["d0-morning"] == ["alice"]
    assert assignment_count(cloned) == 2


def test_evaluation_splits_violations():
    hard = ConstraintViolation("MINIMUM_REST_VIOLATION", Severity.HARD, "rest", ["a"], ["s1", "s2"])
    soft = ConstraintViolation("UNEVEN_NIGHT_SHIFTS", "soft", "nights", ["b"])
    evaluation = Evaluation({"s1": ["a"]}, False, 12.5, [hard, soft])

    assert evaluation.hard_violations == [hard]
    assert evaluation.soft_violations == [soft]
    assert soft.severity is Severity.SOFT

    payload = evaluation.to_dict()
    assert payload["isValid"] is False
    assert payload["penaltyScore"] == 12.5
    assert payload["constraintViolations"][0] == {
        "ruleCode": "MINIMUM_REST_VIOLATION",
        "type": "hard",
        "message": "rest",
        "employeeIds": ["a"],
        "shiftIds": ["s1", "s2"],
    }
