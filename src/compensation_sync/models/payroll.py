"""Salary slip and salary structure models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from compensation_sync.models.base import Base, TimestampMixin


def _money(nullable: bool = False) -> Mapped[Decimal]:
    return mapped_column(Numeric(12, 2), nullable=nullable, default=Decimal("0"))


class SalarySlip(Base, TimestampMixin):
    """Monthly salary slip.

    Derived data: every amount column is recomputed from the compensation
    history and overwritten wholesale on each reconciliation.
    """

    __tablename__ = "salary_slips"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Business identifier plus denormalized display fields
    employee_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    employee_email: Mapped[str] = mapped_column(String, nullable=False)
    department: Mapped[str] = mapped_column(String, nullable=False, default="")
    position: Mapped[str] = mapped_column(String, nullable=False, default="")

    # Pay period
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    pay_period_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    pay_period_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    working_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    present_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Earnings
    basic_salary: Mapped[Decimal] = _money()
    hra: Mapped[Decimal] = _money()
    transport_allowance: Mapped[Decimal] = _money()
    medical_allowance: Mapped[Decimal] = _money()
    special_allowance: Mapped[Decimal] = _money()
    performance_bonus: Mapped[Decimal] = _money()
    overtime_hours: Mapped[Decimal] = _money()
    overtime_rate: Mapped[Decimal] = _money()
    overtime_amount: Mapped[Decimal] = _money()
    other_allowances: Mapped[Decimal] = _money()
    gross_earnings: Mapped[Decimal] = _money()

    # Deductions
    pf_employee: Mapped[Decimal] = _money()
    esi_employee: Mapped[Decimal] = _money()
    professional_tax: Mapped[Decimal] = _money()
    income_tax: Mapped[Decimal] = _money()
    loan_deduction: Mapped[Decimal] = _money()
    advance_deduction: Mapped[Decimal] = _money()
    late_deduction: Mapped[Decimal] = _money()
    other_deductions: Mapped[Decimal] = _money()
    total_deductions: Mapped[Decimal] = _money()
    net_salary: Mapped[Decimal] = _money()

    # Employer contributions
    pf_employer: Mapped[Decimal] = _money()
    esi_employer: Mapped[Decimal] = _money()

    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    generated_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    paid_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="salary_slip_employee_period_unique"),
        CheckConstraint(
            "status IN ('draft', 'processed', 'paid', 'cancelled')",
            name="salary_slip_status_check",
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="salary_slip_month_check"),
    )


class SalaryStructure(Base, TimestampMixin):
    """Standing salary structure for an employee."""

    __tablename__ = "salary_structures"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    employee_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    employee_email: Mapped[str] = mapped_column(String, nullable=False)
    department: Mapped[str] = mapped_column(String, nullable=False, default="")
    position: Mapped[str] = mapped_column(String, nullable=False, default="")

    basic_salary: Mapped[Decimal] = _money()
    hra: Mapped[Decimal] = _money()
    transport_allowance: Mapped[Decimal] = _money()
    medical_allowance: Mapped[Decimal] = _money()
    special_allowance: Mapped[Decimal] = _money()
    performance_bonus: Mapped[Decimal] = _money()
    overtime_amount: Mapped[Decimal] = _money()
    other_allowances: Mapped[Decimal] = _money()

    pf_employee: Mapped[Decimal] = _money()
    pf_employer: Mapped[Decimal] = _money()
    esi_employee: Mapped[Decimal] = _money()
    esi_employer: Mapped[Decimal] = _money()
    professional_tax: Mapped[Decimal] = _money()
    income_tax: Mapped[Decimal] = _money()
    loan_deduction: Mapped[Decimal] = _money()
    other_deductions: Mapped[Decimal] = _money()

    gross_salary: Mapped[Decimal] = _money()
    total_deductions: Mapped[Decimal] = _money()
    net_salary: Mapped[Decimal] = _money()

    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'pending')",
            name="salary_structure_status_check",
        ),
    )
