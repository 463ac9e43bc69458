"""Schedule search engine and its execution boundary."""

from .annealing import (
    HARD_VIOLATION_WEIGHT,
    AnnealingState,
    SimulatedAnnealingScheduler,
    accept,
    energy,
    initial_schedule,
    mutate_schedule,
)
from .base import BaseScheduler
from .runner import ScheduleRequest, ScheduleRunner, run_schedule_request

__all__ = [
    "HARD_VIOLATION_WEIGHT",
    "AnnealingState",
    "BaseScheduler",
    "SimulatedAnnealingScheduler",
    "ScheduleRequest",
    "ScheduleRunner",
    "accept",
    "energy",
    "initial_schedule",
    "mutate_schedule",
    "run_schedule_request",
]
