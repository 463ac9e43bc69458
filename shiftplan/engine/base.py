"""Base scheduler interface that all search strategies must implement."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from shiftplan.domain.models import Employee, Evaluation, Shift


class BaseScheduler(ABC):
    """
    Abstract base class for schedule search strategies.

    A scheduler turns read-only employees and shifts into a scored
    assignment. It never mutates its inputs.
    """

    name: str = "UNKNOWN"  # Override in subclasses

    @abstractmethod
    def solve(
        self,
        employees: Sequence[Employee],
        shifts: Sequence[Shift],
    ) -> Evaluation:
        """
        Search for the best schedule.

        Args:
            employees: Employees available for assignment
            shifts: Shifts to staff

        Returns:
            Evaluation of the best schedule found. An infeasible problem is
            not an error: the evaluation is returned with ``is_valid=False``.
        """
        pass

    def get_name(self) -> str:
        return self.name
