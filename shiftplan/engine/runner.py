"""Execution boundary: runs a search in an isolated worker process.

A request goes in, one Evaluation comes out. Nothing else crosses the
boundary: the request is pickled into the worker and the result pickled
back. A runner handles one search at a time and rejects a second request
while the first is in flight; there is no way to cancel a running search
other than discarding the runner.
"""

from __future__ import annotations

import threading
from concurrent.futures import BrokenExecutor, Executor, Future, ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

from shiftplan.config import RuleSettings, ScoringWeights, SearchOptions
from shiftplan.domain.models import Employee, Evaluation, Shift
from shiftplan.exceptions import ScheduleExecutionError, SchedulerBusyError

from .annealing import SimulatedAnnealingScheduler


@dataclass(frozen=True)
class ScheduleRequest:
    """Everything a worker needs to run one search."""

    employees: List[Employee]
    shifts: List[Shift]
    options: SearchOptions = field(default_factory=SearchOptions)
    rules: RuleSettings = field(default_factory=RuleSettings)
    weights: ScoringWeights = field(default_factory=ScoringWeights)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], **kwargs) -> "ScheduleRequest":
        """Build a request from the ``{employees, shifts, options?}`` message shape."""
        return cls(
            employees=list(payload.get("employees") or []),
            shifts=list(payload.get("shifts") or []),
            options=SearchOptions.from_mapping(payload.get("options")),
            **kwargs,
        )


def run_schedule_request(request: ScheduleRequest) -> Evaluation:
    """Worker entry point; also usable in-process."""
    scheduler = SimulatedAnnealingScheduler(options=request.options, rules=request.rules, weights=request.weights)
    return scheduler.solve(request.employees, request.shifts)


def _single_process_executor() -> Executor:
    return ProcessPoolExecutor(max_workers=1)


class ScheduleRunner:
    """
    Runs schedule searches off the caller's thread.

    Args:
        executor_factory: Creates the executor the search runs in; defaults
            to a single-worker process pool
    """

    def __init__(self, executor_factory: Optional[Callable[[], Executor]] = None):
        self._executor_factory = executor_factory or _single_process_executor
        self._executor: Optional[Executor] = None
        self._lock = threading.Lock()
        self._in_flight: Optional[Future] = None

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._in_flight is not None

    def submit(self, request: ScheduleRequest) -> Future:
        """
        Start a search and return a future resolving to its Evaluation.

        Raises:
            SchedulerBusyError: If a search is already running on this runner
        """
        with self._lock:
            if self._in_flight is not None:
                raise SchedulerBusyError("Already generating a schedule.")
            if self._executor is None:
                self._executor = self._executor_factory()

            print(
                f"[INFO] Starting schedule search for {len(request.employees)} employees "
                f"and {len(request.shifts)} shifts"
            )
            future = self._executor.submit(run_schedule_request, request)
            self._in_flight = future
        future.add_done_callback(self._release)
        return future

    def _release(self, future: Future) -> None:
        with self._lock:
            if self._in_flight is future:
                self._in_flight = None

    def run(self, request: ScheduleRequest, timeout: Optional[float] = None) -> Evaluation:
        """
        Run a search and wait for its Evaluation.

        Raises:
            SchedulerBusyError: If a search is already running on this runner
            ScheduleExecutionError: If the worker fails for any reason
        """
        future = self.submit(request)
        try:
            evaluation = future.result(timeout=timeout)
        except Exception as e:
            print(f"[ERROR] Schedule search failed: {e!r}")
            if isinstance(e, BrokenExecutor):
                # The worker died; the next request gets a fresh one
                self.shutdown(wait=False)
            raise ScheduleExecutionError("Schedule search failed in the worker") from e
        finally:
            # Done-callbacks may still be pending when result() returns
            if future.done():
                self._release(future)

        status = "valid" if evaluation.is_valid else "INVALID"
        print(f"[OK] Schedule search finished: {status}, penalty {evaluation.penalty_score:.1f}")
        return evaluation

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
            self._in_flight = None
        if executor is not None:
            executor.shutdown(wait=wait)

    def __enter__(self) -> "ScheduleRunner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
