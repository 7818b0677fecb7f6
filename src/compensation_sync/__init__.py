"""Compensation history reconciliation for HR payroll slips."""

__version__ = "0.1.0"
