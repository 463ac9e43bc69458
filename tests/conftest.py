"""Pytest configuration and shared fixtures."""

from datetime import date, datetime, timedelta

import pytest

from shiftplan.domain.models import Employee, Shift, ShiftType


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def make_employee(emp_id, **kwargs):
    params = {"name": f"Employee {emp_id}", "max_daily_hours": 12, "max_consecutive_days": 6}
    params.update(kwargs)
    return Employee(id=emp_id, **params)


def make_shift(shift_id, day, start_hour, hours=8, shift_type=None, min_required=1, max_allowed=None):
    """Shift on ``day`` starting at ``start_hour`` lasting ``hours``."""
    start = datetime.combine(day, datetime.min.time()) + timedelta(hours=start_hour)
    return Shift(
        id=shift_id,
        date=day,
        start_time=start,
        end_time=start + timedelta(hours=hours),
        type=shift_type or ShiftType.from_start_hour(start.hour),
        min_required_employees=min_required,
        max_allowed_employees=max_allowed,
    )


@pytest.fixture
def week_start():
    # A Monday
    return date(2025, 3, 3)


@pytest.fixture
def team():
    return [make_employee(emp_id) for emp_id in ("alice", "bob", "carol", "dave")]


@pytest.fixture
def week_shifts(week_start):
    """Morning, evening and night shift for five weekdays, one person each."""
    shifts = []
    for offset in range(5):
        day = week_start + timedelta(days=offset)
        shifts.append(make_shift(f"d{offset}-morning", day, 6))
        shifts.append(make_shift(f"d{offset}-evening", day, 14))
        shifts.append(make_shift(f"d{offset}-night", day, 22))
    return shifts
