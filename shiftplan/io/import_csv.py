"""CSV loaders turning tabular exports into engine records."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pandas as pd

from shiftplan.domain.models import Employee, Schedule, Shift, ShiftType, TimeBlock

LIST_SEPARATOR = ";"


def _read(csv_path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    return df


def _split(value) -> List[str]:
    if value is None or pd.isna(value):
        return []
    return [part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip()]


def _dates(value) -> List:
    return [pd.Timestamp(part).date() for part in _split(value)]


def _time_blocks(value) -> List[TimeBlock]:
    # Each block is "start/end" in ISO format
    blocks = []
    for part in _split(value):
        start, _, end = part.partition("/")
        if not end:
            raise ValueError(f"Unavailable time block '{part}' must look like 'start/end'")
        blocks.append(TimeBlock(pd.Timestamp(start).to_pydatetime(), pd.Timestamp(end).to_pydatetime()))
    return blocks


def _cell(row: pd.Series, column: str) -> Optional[str]:
    value = row.get(column)
    if value is None or str(value).strip() == "":
        return None
    return str(value).strip()


def read_employees_csv(csv_path: str | Path) -> List[Employee]:
    """
    Load employees from CSV.

    Required columns: ``id``, ``name``, ``max_daily_hours``,
    ``max_consecutive_days``. Optional list columns (``;``-separated):
    ``preferred_shift_types``, ``avoid_shift_types``, ``preferred_dates``,
    ``avoid_dates``, ``vacation_dates``, ``unavailable_time_blocks``.

    Args:
        csv_path: Path to employees CSV

    Returns:
        List of Employee records in file order
    """
    df = _read(csv_path)
    missing = {"id", "name", "max_daily_hours", "max_consecutive_days"} - set(df.columns)
    if missing:
        raise ValueError(f"Employees CSV {csv_path} is missing columns: {sorted(missing)}")

    employees = []
    for _, row in df.iterrows():
        employees.append(
            Employee(
                id=str(row["id"]).strip(),
                name=str(row["name"]).strip(),
                max_daily_hours=float(row["max_daily_hours"]),
                max_consecutive_days=int(row["max_consecutive_days"]),
                preferred_shift_types=[ShiftType(t.lower()) for t in _split(row.get("preferred_shift_types"))],
                avoid_shift_types=[ShiftType(t.lower()) for t in _split(row.get("avoid_shift_types"))],
                preferred_dates=_dates(row.get("preferred_dates")),
                avoid_dates=_dates(row.get("avoid_dates")),
                vacation_dates=_dates(row.get("vacation_dates")),
                unavailable_time_blocks=_time_blocks(row.get("unavailable_time_blocks")),
            )
        )

    print(f"[INFO] Loaded {len(employees)} employees from {csv_path}")
    return employees


def read_shifts_csv(csv_path: str | Path) -> List[Shift]:
    """
    Load shifts from CSV.

    Required columns: ``id``, ``start_time``, ``end_time``. ``date`` defaults
    to the start date, ``type`` to the classification of the start hour,
    ``min_required_employees`` to 1 and ``max_allowed_employees`` to none.

    Args:
        csv_path: Path to shifts CSV

    Returns:
        List of Shift records in file order
    """
    df = _read(csv_path)
    missing = {"id", "start_time", "end_time"} - set(df.columns)
    if missing:
        raise ValueError(f"Shifts CSV {csv_path} is missing columns: {sorted(missing)}")

    shifts = []
    for _, row in df.iterrows():
        start = pd.Timestamp(row["start_time"]).to_pydatetime()
        end = pd.Timestamp(row["end_time"]).to_pydatetime()
        day = _cell(row, "date")
        shift_type = _cell(row, "type")
        max_allowed = _cell(row, "max_allowed_employees")
        shifts.append(
            Shift(
                id=str(row["id"]).strip(),
                date=pd.Timestamp(day).date() if day else start.date(),
                start_time=start,
                end_time=end,
                type=ShiftType(shift_type.lower()) if shift_type else ShiftType.from_start_hour(start.hour),
                min_required_employees=int(_cell(row, "min_required_employees") or 1),
                max_allowed_employees=int(max_allowed) if max_allowed else None,
            )
        )

    print(f"[INFO] Loaded {len(shifts)} shifts from {csv_path}")
    return shifts


def read_assignments_csv(csv_path: str | Path, shifts: List[Shift]) -> Schedule:
    """
    Load an existing assignment (``shift_id``, ``employee_id`` rows) into a schedule.

    Every shift gets an entry; duplicate rows are collapsed and rows for
    unknown shift ids are skipped.
    """
    df = _read(csv_path)
    missing = {"shift_id", "employee_id"} - set(df.columns)
    if missing:
        raise ValueError(f"Assignments CSV {csv_path} is missing columns: {sorted(missing)}")

    schedule: Schedule = {shift.id: [] for shift in shifts}
    unknown = set()
    for _, row in df.iterrows():
        shift_id = str(row["shift_id"]).strip()
        emp_id = str(row["employee_id"]).strip()
        if shift_id not in schedule:
            unknown.add(shift_id)
            continue
        if emp_id not in schedule[shift_id]:
            schedule[shift_id].append(emp_id)

    if unknown:
        print(f"[WARN] Skipped assignments for unknown shifts: {sorted(unknown)}")
    return schedule
