"""ORM models."""

from compensation_sync.models.base import Base, TimestampMixin
from compensation_sync.models.document import Document
from compensation_sync.models.employee import Employee, EmployeeCompensation
from compensation_sync.models.payroll import SalarySlip, SalaryStructure

__all__ = [
    "Base",
    "TimestampMixin",
    "Document",
    "Employee",
    "EmployeeCompensation",
    "SalarySlip",
    "SalaryStructure",
]
