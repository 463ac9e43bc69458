from __future__ import annotations

from typing import Sequence

import pandas as pd

from .domain.models import Employee, Evaluation, Shift, ShiftType, assignment_count
from .services.timeplan import group_shifts_by_employee, index_shifts, is_weekend


def employee_load_table(evaluation: Evaluation, employees: Sequence[Employee], shifts: Sequence[Shift]) -> pd.DataFrame:
    """One row per employee: shift count, hours, night and weekend shifts."""
    employee_shifts = group_shifts_by_employee(evaluation.schedule, index_shifts(shifts))
    rows = []
    for emp in employees:
        assigned = employee_shifts.get(emp.id, [])
        rows.append(
            {
                "employee_id": emp.id,
                "name": emp.name,
                "shifts": len(assigned),
                "hours": round(sum(s.duration_hours for s in assigned), 2),
                "nights": sum(1 for s in assigned if s.type is ShiftType.NIGHT),
                "weekend": sum(1 for s in assigned if is_weekend(s.date)),
            }
        )
    return pd.DataFrame(rows, columns=["employee_id", "name", "shifts", "hours", "nights", "weekend"])


def summarize_evaluation(evaluation: Evaluation, employees: Sequence[Employee], shifts: Sequence[Shift]) -> str:
    status = "VALID" if evaluation.is_valid else "INVALID"
    lines = [
        f"Status: {status}",
        f"Penalty score: {evaluation.penalty_score:.1f}",
        f"Assignments: {assignment_count(evaluation.schedule)} across {len(shifts)} shifts",
        "",
    ]

    table = employee_load_table(evaluation, employees, shifts)
    if table.empty:
        lines.append("No employees.")
    else:
        lines.append("Load per employee:")
        lines.append(table.set_index("employee_id").to_string())

    if evaluation.constraint_violations:
        lines.append("")
        lines.append(f"Violations ({len(evaluation.constraint_violations)}):")
        for v in evaluation.constraint_violations:
            lines.append(f"  [{v.severity.value}] {v.rule_code}: {v.message}")
    return "\n".join(lines)
