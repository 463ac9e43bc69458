"""Tests for soft penalty scoring."""

from datetime import date, timedelta

import pytest

from shiftplan.config import ScoringWeights
from shiftplan.domain.models import Severity, ShiftType
from shiftplan.services.scoring import (
    AVOIDED_DATE,
    AVOIDED_SHIFT_TYPE,
    NON_PREFERRED_SHIFT_TYPE,
    PREFERRED_DATE_UNUSED,
    UNEVEN_HOURS,
    UNEVEN_NIGHT_SHIFTS,
    UNEVEN_WEEKEND_SHIFTS,
    calculate_distribution_penalty,
    calculate_penalty_score,
)

from conftest import make_employee, make_shift

DAY = date(2025, 3, 3)  # Monday


@pytest.fixture
def three_employees():
    return [make_employee(emp_id) for emp_id in ("a", "b", "c")]


@pytest.fixture
def three_nights():
    return [make_shift(f"n{i}", DAY + timedelta(days=i), 22) for i in range(3)]


def test_empty_schedule_scores_zero(three_employees):
    assert calculate_penalty_score({}, three_employees, []) == (0.0, [])
    assert calculate_penalty_score({}, [], []) == (0.0, [])


def test_all_nights_on_one_employee(three_employees, three_nights):
    # Counts a=3, b=0, c=0 -> mean 1; a deviates by 2 -> 2^2 * 10
    schedule = {s.id: ["a"] for s in three_nights}
    score, violations = calculate_penalty_score(schedule, three_employees, three_nights)

    assert score == 40.0
    assert len(violations) == 1
    assert violations[0].rule_code == UNEVEN_NIGHT_SHIFTS
    assert violations[0].severity is Severity.SOFT
    assert violations[0].employee_ids == ("a",)
    assert violations[0].shift_ids == ()


def test_deviation_of_one_is_tolerated(three_employees, three_nights):
    # Counts 2, 1, 0 -> mean 1, max deviation 1
    schedule = {"n0": ["a"], "n1": ["a"], "n2": ["b"]}
    assert calculate_penalty_score(schedule, three_employees, three_nights) == (0.0, [])


def test_no_nights_no_penalty(three_employees):
    mornings = [make_shift(f"m{i}", DAY + timedelta(days=i), 6) for i in range(3)]
    schedule = {s.id: ["a"] for s in mornings}
    assert calculate_penalty_score(schedule, three_employees, mornings) == (0.0, [])


def test_unknown_employees_do_not_count(three_employees, three_nights):
    schedule = {s.id: ["ghost"] for s in three_nights}
    assert calculate_penalty_score(schedule, three_employees, three_nights) == (0.0, [])


def test_night_weight_is_configurable(three_employees, three_nights):
    schedule = {s.id: ["a"] for s in three_nights}
    score, _ = calculate_penalty_score(schedule, three_employees, three_nights, ScoringWeights(night_fairness=1.5))
    assert score == pytest.approx(6.0)


def test_distribution_penalty_is_quadratic():
    small, _ = calculate_distribution_penalty({"a": 3, "b": 1, "c": 1, "d": 1}, 10, 1, "X", "things")
    large, found = calculate_distribution_penalty({"a": 6, "b": 0, "c": 0}, 10, 1, "X", "things")
    # mean 1.5, a deviates 1.5 -> 22.5; mean 2, a deviates 4 and b, c deviate 2 -> 160 + 40 + 40
    assert small == pytest.approx(22.5)
    assert large == pytest.approx(240.0)
    assert [v.employee_ids for v in found] == [("a",), ("b",), ("c",)]


def test_extension_dimensions_disabled_by_default():
    emp = make_employee(
        "a",
        avoid_shift_types=[ShiftType.MORNING],
        preferred_shift_types=[ShiftType.EVENING],
        avoid_dates=[DAY],
        preferred_dates=[DAY + timedelta(days=1)],
    )
    shifts = [make_shift("m0", DAY, 6), make_shift("m1", DAY + timedelta(days=1), 14)]
    assert calculate_penalty_score({"m0": ["a"], "m1": []}, [emp], shifts) == (0.0, [])


def test_preference_penalties():
    emp = make_employee(
        "a",
        avoid_shift_types=[ShiftType.MORNING],
        preferred_shift_types=[ShiftType.EVENING],
        avoid_dates=[DAY],
        preferred_dates=[DAY + timedelta(days=1), date(2030, 1, 1)],
    )
    shifts = [make_shift("m0", DAY, 6), make_shift("e1", DAY + timedelta(days=1), 14)]
    weights = ScoringWeights(
        avoided_shift_type=5, non_preferred_shift_type=3, avoided_date=7, preferred_date_unused=2
    )

    score, violations = calculate_penalty_score({"m0": ["a"], "e1": []}, [emp], shifts, weights)

    # Dates without any shift in the problem are not counted as unused
    assert score == 5 + 3 + 7 + 2
    assert sorted(v.rule_code for v in violations) == sorted(
        [AVOIDED_SHIFT_TYPE, NON_PREFERRED_SHIFT_TYPE, AVOIDED_DATE, PREFERRED_DATE_UNUSED]
    )


def test_weekend_fairness():
    employees = [make_employee("a"), make_employee("b"), make_employee("c")]
    saturday = date(2025, 3, 8)
    shifts = [make_shift(f"w{i}", saturday + timedelta(days=7 * i), 10) for i in range(3)]
    schedule = {s.id: ["a"] for s in shifts}

    score, violations = calculate_penalty_score(schedule, employees, shifts, ScoringWeights(weekend_fairness=10))

    assert score == 40.0
    assert [v.rule_code for v in violations] == [UNEVEN_WEEKEND_SHIFTS]


def test_hours_fairness_threshold():
    employees = [make_employee("a"), make_employee("b")]
    shifts = [make_shift("s0", DAY, 6), make_shift("s1", DAY + timedelta(days=1), 6)]
    weights = ScoringWeights(hours_fairness=1, hours_deviation_threshold=4)

    # 16h vs 0h -> mean 8, both deviate 8h
    score, violations = calculate_penalty_score({"s0": ["a"], "s1": ["a"]}, employees, shifts, weights)
    assert score == 128.0
    assert [v.rule_code for v in violations] == [UNEVEN_HOURS, UNEVEN_HOURS]

    # 8h each -> balanced
    assert calculate_penalty_score({"s0": ["a"], "s1": ["b"]}, employees, shifts, weights) == (0.0, [])
