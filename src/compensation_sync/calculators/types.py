"""Type definitions for the compensation pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID


@dataclass(frozen=True, order=True)
class PeriodKey:
    """One payroll cycle, identified by (year, month)."""

    year: int
    month: int

    @classmethod
    def from_date(cls, value: date) -> PeriodKey:
        """Derive the key from an effective date (day is ignored)."""
        return cls(year=value.year, month=value.month)

    def __str__(self) -> str:
        return f"{self.year}-{self.month:02d}"


@dataclass(frozen=True)
class CompensationRecord:
    """A yearly CTC figure effective from a given date."""

    ctc_yearly: Decimal
    effective_date: date
    employee_internal_id: UUID | None = None

    @property
    def period(self) -> PeriodKey:
        return PeriodKey.from_date(self.effective_date)


@dataclass(frozen=True)
class DisplayFields:
    """Denormalized employee fields stamped onto dependent records."""

    full_name: str
    email: str
    department: str = ""
    position: str = ""

    @classmethod
    def from_names(
        cls,
        first_name: str,
        last_name: str,
        email: str,
        department: str | None = None,
        position: str | None = None,
    ) -> DisplayFields:
        """Build display fields the way the employee form stamps them."""
        return cls(
            full_name=f"{first_name} {last_name}",
            email=email,
            department=department or "",
            position=position or "",
        )

    def slip_values(self) -> dict[str, str]:
        """Column values for slip and structure rows."""
        return {
            "employee_name": self.full_name,
            "employee_email": self.email,
            "department": self.department,
            "position": self.position,
        }


@dataclass(frozen=True)
class PayBreakdown:
    """Monthly pay breakdown derived from one compensation record."""

    year: int
    month: int
    ctc_yearly: Decimal
    gross_yearly: Decimal
    gross_monthly: Decimal

    # Earnings
    basic_salary: Decimal
    hra: Decimal
    special_allowance: Decimal
    gross_earnings: Decimal

    # Deductions
    pf_employee: Decimal
    professional_tax: Decimal
    income_tax: Decimal
    total_deductions: Decimal
    net_salary: Decimal

    # Employer contributions
    pf_employer: Decimal

    # Pay period
    pay_period_start: datetime
    pay_period_end: datetime
    working_days: int
    present_days: int

    # Components the formula always leaves at zero
    transport_allowance: Decimal = Decimal("0")
    medical_allowance: Decimal = Decimal("0")
    performance_bonus: Decimal = Decimal("0")
    other_allowances: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    overtime_amount: Decimal = Decimal("0")
    esi_employee: Decimal = Decimal("0")
    esi_employer: Decimal = Decimal("0")
    loan_deduction: Decimal = Decimal("0")
    advance_deduction: Decimal = Decimal("0")
    late_deduction: Decimal = Decimal("0")
    other_deductions: Decimal = Decimal("0")

    @property
    def period(self) -> PeriodKey:
        return PeriodKey(year=self.year, month=self.month)

    def to_slip_values(self) -> dict[str, Any]:
        """Return the derived columns written to a salary slip row."""
        values = asdict(self)
        # CTC inputs are not slip columns
        for key in ("ctc_yearly", "gross_yearly", "gross_monthly"):
            values.pop(key)
        return values


@dataclass
class PeriodDiff:
    """Set difference between a stored and a new compensation history."""

    to_delete: frozenset[PeriodKey]
    to_upsert: frozenset[PeriodKey]
    retained: frozenset[PeriodKey] = frozenset()  # in both histories, still recomputed
    targets: dict[PeriodKey, CompensationRecord] = field(default_factory=dict)

    @property
    def added(self) -> frozenset[PeriodKey]:
        """Keys new in this history."""
        return self.to_upsert - self.retained
