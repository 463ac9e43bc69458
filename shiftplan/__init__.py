"""Shift assignment engine: hard-rule validation, soft penalties and simulated annealing.

Modules:
- config: search options, rule settings and scoring weights (JSON or YAML)
- domain: immutable employee/shift records, schedules and evaluations
- services.constraints: hard constraint validator
- services.scoring: soft penalty scorer
- engine.annealing: simulated annealing search
- engine.runner: runs a search in an isolated worker process
- io: CSV loaders
- summary: text report of an evaluation
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "domain",
    "services",
    "engine",
    "io",
    "summary",
    "cli",
]
