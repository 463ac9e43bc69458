"""Simulated annealing search over shift assignments.

One run owns all of its mutable state: the current schedule, the best
schedule seen so far and a single ``random.Random`` stream that drives
seeding, mutation and acceptance. With a fixed seed two runs over the same
input produce identical evaluations.

The loop is exposed as ``start()`` + ``step()`` so a caller can interleave
its own checks (cancellation, progress) between iterations; ``solve()`` is
the plain run-to-completion driver.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from shiftplan.config import RuleSettings, SchedulerConfig, ScoringWeights, SearchOptions
from shiftplan.domain.models import (
    ConstraintViolation,
    Employee,
    Evaluation,
    Schedule,
    Shift,
    clone_schedule,
    empty_schedule,
)
from shiftplan.services.constraints import validate_hard_constraints
from shiftplan.services.scoring import calculate_penalty_score

from .base import BaseScheduler

# Must dominate any realistic soft score so every valid schedule beats every invalid one
HARD_VIOLATION_WEIGHT = 10_000

REASSIGN_PROBABILITY = 0.5


def energy(hard_count: int, soft_score: float) -> float:
    return hard_count * HARD_VIOLATION_WEIGHT + soft_score


def initial_schedule(employees: Sequence[Employee], shifts: Sequence[Shift], rng: random.Random) -> Schedule:
    """
    Seed schedule: each shift gets ``min_required_employees`` distinct random
    employees (fewer if the pool runs out). Hard rules are not considered.
    """
    schedule = empty_schedule(shifts)
    for shift in shifts:
        available = [emp.id for emp in employees]
        assigned = schedule[shift.id]
        for _ in range(shift.min_required_employees):
            if not available:
                break
            assigned.append(available.pop(rng.randrange(len(available))))
    return schedule


def mutate_schedule(
    schedule: Schedule,
    employees: Sequence[Employee],
    shifts: Sequence[Shift],
    rng: random.Random,
) -> Schedule:
    """
    Return a neighbour of ``schedule``; the input is left untouched.

    Reassignment (probability 0.5, needs an assignee): replace one assignee
    of a random shift with an employee not yet on it. Swap: exchange one
    assignee between two different shifts unless that would put an employee
    twice on one shift. When neither move applies the copy is unchanged.
    Shift sizes never change.
    """
    mutated = clone_schedule(schedule)
    if not shifts or not employees:
        return mutated

    shift = shifts[rng.randrange(len(shifts))]
    assigned = mutated.setdefault(shift.id, [])

    if rng.random() < REASSIGN_PROBABILITY and assigned:
        replace_idx = rng.randrange(len(assigned))
        on_shift = set(assigned)
        candidates = [emp.id for emp in employees if emp.id not in on_shift]
        if candidates:
            assigned[replace_idx] = candidates[rng.randrange(len(candidates))]
        return mutated

    other = shifts[rng.randrange(len(shifts))]
    if other.id == shift.id:
        return mutated
    other_assigned = mutated.setdefault(other.id, [])
    if not assigned or not other_assigned:
        return mutated

    idx_a = rng.randrange(len(assigned))
    idx_b = rng.randrange(len(other_assigned))
    emp_a, emp_b = assigned[idx_a], other_assigned[idx_b]
    if emp_b not in assigned and emp_a not in other_assigned:
        assigned[idx_a], other_assigned[idx_b] = emp_b, emp_a
    return mutated


def accept(current_energy: float, neighbour_energy: float, temperature: float, rng: random.Random) -> bool:
    """Metropolis criterion: always take improvements, sometimes take worse moves."""
    if neighbour_energy < current_energy:
        return True
    return rng.random() < math.exp((current_energy - neighbour_energy) / temperature)


@dataclass
class Candidate:
    """A schedule together with its hard and soft results."""

    schedule: Schedule
    hard_violations: List[ConstraintViolation]
    soft_score: float
    soft_violations: List[ConstraintViolation]

    @property
    def energy(self) -> float:
        return energy(len(self.hard_violations), self.soft_score)


@dataclass
class AnnealingState:
    """Mutable state of one annealing run."""

    employees: Sequence[Employee]
    shifts: Sequence[Shift]
    rng: random.Random
    current: Candidate
    best: Candidate
    temperature: float
    iteration: int = 0
    finished: bool = False
    best_energy_trace: List[float] = field(default_factory=list)

    @property
    def current_energy(self) -> float:
        return self.current.energy

    @property
    def best_energy(self) -> float:
        return self.best.energy


class SimulatedAnnealingScheduler(BaseScheduler):
    """Simulated annealing with reassignment/swap neighbourhoods and geometric cooling."""

    name = "simulated_annealing"

    def __init__(
        self,
        options: SearchOptions | None = None,
        rules: RuleSettings | None = None,
        weights: ScoringWeights | None = None,
        record_trace: bool = False,
    ):
        """
        Args:
            options: Iteration cap, temperature schedule and seed
            rules: Hard rule parameters passed to the validator
            weights: Soft penalty weights passed to the scorer
            record_trace: Keep the best energy after every iteration
        """
        self.options = options or SearchOptions()
        self.rules = rules or RuleSettings()
        self.weights = weights or ScoringWeights()
        self.record_trace = record_trace

    @classmethod
    def from_config(cls, cfg: SchedulerConfig, **kwargs) -> "SimulatedAnnealingScheduler":
        return cls(options=cfg.search, rules=cfg.rules, weights=cfg.weights, **kwargs)

    # ------------------------------------------------------------------
    def evaluate(self, schedule: Schedule, employees: Sequence[Employee], shifts: Sequence[Shift]) -> Candidate:
        hard = validate_hard_constraints(schedule, employees, shifts, self.rules)
        soft_score, soft = calculate_penalty_score(schedule, employees, shifts, self.weights)
        return Candidate(schedule, hard, soft_score, soft)

    def start(
        self,
        employees: Sequence[Employee],
        shifts: Sequence[Shift],
        rng: Optional[random.Random] = None,
    ) -> AnnealingState:
        """Seed a run. The state is already finished if the seed schedule is perfect."""
        employees = list(employees)
        shifts = list(shifts)
        rng = rng or random.Random(self.options.seed)

        current = self.evaluate(initial_schedule(employees, shifts, rng), employees, shifts)
        best = Candidate(clone_schedule(current.schedule), current.hard_violations, current.soft_score,
                         current.soft_violations)
        state = AnnealingState(
            employees=employees,
            shifts=shifts,
            rng=rng,
            current=current,
            best=best,
            temperature=self.options.start_temperature,
        )
        state.finished = best.energy == 0 or self.options.max_iterations == 0
        return state

    def step(self, state: AnnealingState) -> AnnealingState:
        """Run a single iteration: mutate, evaluate, accept/reject, track best, cool."""
        if state.finished:
            return state

        neighbour_schedule = mutate_schedule(state.current.schedule, state.employees, state.shifts, state.rng)
        neighbour = self.evaluate(neighbour_schedule, state.employees, state.shifts)

        if accept(state.current.energy, neighbour.energy, state.temperature, state.rng):
            state.current = neighbour
            if neighbour.energy < state.best.energy:
                state.best = Candidate(clone_schedule(neighbour.schedule), neighbour.hard_violations,
                                       neighbour.soft_score, neighbour.soft_violations)

        state.temperature = max(state.temperature * self.options.cooling_rate, self.options.min_temperature)
        state.iteration += 1
        if self.record_trace:
            state.best_energy_trace.append(state.best.energy)

        if state.best.energy == 0:
            if self.options.verbose:
                print(f"[INFO] Perfect schedule found at iteration {state.iteration}")
            state.finished = True
        elif state.iteration >= self.options.max_iterations:
            state.finished = True
        return state

    def solve(
        self,
        employees: Sequence[Employee],
        shifts: Sequence[Shift],
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> Evaluation:
        """
        Run the search to completion.

        Args:
            employees: Employees available for assignment
            shifts: Shifts to staff
            should_stop: Optional callable polled between iterations; returning
                True ends the run early with the best schedule so far

        Returns:
            Evaluation of the best schedule found
        """
        state = self.start(employees, shifts)
        while not state.finished:
            if should_stop is not None and should_stop():
                if self.options.verbose:
                    print(f"[WARN] Search stopped by caller at iteration {state.iteration}")
                break
            self.step(state)

        if self.options.verbose:
            print(
                f"[OK] {self.get_name()} finished after {state.iteration} iterations: "
                f"best energy {state.best_energy:.1f}, temperature {state.temperature:.4f}"
            )
        return self.to_evaluation(state.best)

    @staticmethod
    def to_evaluation(candidate: Candidate) -> Evaluation:
        return Evaluation(
            schedule=clone_schedule(candidate.schedule),
            is_valid=not candidate.hard_violations,
            penalty_score=candidate.soft_score,
            constraint_violations=list(candidate.hard_violations) + list(candidate.soft_violations),
        )
