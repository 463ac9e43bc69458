"""Services for validating and scoring schedules."""

from .constraints import validate_hard_constraints
from .scoring import calculate_distribution_penalty, calculate_penalty_score
from .timeplan import group_shifts_by_employee, index_shifts

__all__ = [
    "validate_hard_constraints",
    "calculate_distribution_penalty",
    "calculate_penalty_score",
    "group_shifts_by_employee",
    "index_shifts",
]
