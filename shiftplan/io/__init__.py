"""I/O utilities for CSV import."""

from .import_csv import read_assignments_csv, read_employees_csv, read_shifts_csv

__all__ = [
    "read_assignments_csv",
    "read_employees_csv",
    "read_shifts_csv",
]
