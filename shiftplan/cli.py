from __future__ import annotations

import argparse

from .config import load_config
from .engine.annealing import SimulatedAnnealingScheduler
from .engine.runner import ScheduleRequest, ScheduleRunner
from .io.import_csv import read_assignments_csv, read_employees_csv, read_shifts_csv
from .summary import summarize_evaluation


def _cmd_generate(args: argparse.Namespace) -> None:
    cfg = load_config(args.config).with_search(
        max_iterations=args.iterations,
        seed=args.seed,
        verbose=True,
    )
    employees = read_employees_csv(args.employees)
    shifts = read_shifts_csv(args.shifts)
    if not shifts:
        print("[WARN] No shifts to schedule")

    request = ScheduleRequest(employees, shifts, options=cfg.search, rules=cfg.rules, weights=cfg.weights)
    with ScheduleRunner() as runner:
        try:
            evaluation = runner.run(request)
        except Exception as e:
            print(f"[ERROR] Generation failed: {e}")
            raise

    print(summarize_evaluation(evaluation, employees, shifts))


def _cmd_evaluate(args: argparse.Namespace) -> None:
    cfg = load_config(args.config)
    employees = read_employees_csv(args.employees)
    shifts = read_shifts_csv(args.shifts)
    schedule = read_assignments_csv(args.assignments, shifts)

    scheduler = SimulatedAnnealingScheduler.from_config(cfg)
    evaluation = scheduler.to_evaluation(scheduler.evaluate(schedule, employees, shifts))
    print(summarize_evaluation(evaluation, employees, shifts))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="shiftplan", description="Shift assignment by simulated annealing")
    sub = parser.add_subparsers(dest="command", required=True)

    g = sub.add_parser("generate", help="Search for a schedule")
    g.add_argument("--employees", required=True, help="Path to employees CSV")
    g.add_argument("--shifts", required=True, help="Path to shifts CSV")
    g.add_argument("--config", help="Path to config JSON/YAML")
    g.add_argument("--iterations", type=int, help="Override search.max_iterations")
    g.add_argument("--seed", type=int, help="Random seed for a reproducible run")
    g.set_defaults(func=_cmd_generate)

    e = sub.add_parser("evaluate", help="Validate and score an existing assignment")
    e.add_argument("--employees", required=True, help="Path to employees CSV")
    e.add_argument("--shifts", required=True, help="Path to shifts CSV")
    e.add_argument("--assignments", required=True, help="Path to assignments CSV (shift_id, employee_id)")
    e.add_argument("--config", help="Path to config JSON/YAML")
    e.set_defaults(func=_cmd_evaluate)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
