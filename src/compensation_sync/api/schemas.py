"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from compensation_sync.calculators.types import CompensationRecord, DisplayFields


# ============================================================================
# Compensation schemas
# ============================================================================


class CompensationRecordIn(BaseModel):
    """One CTC entry of a compensation history."""

    ctc: Decimal
    effective_date: date

    def to_record(self, employee_internal_id: UUID | None = None) -> CompensationRecord:
        return CompensationRecord(
            ctc_yearly=self.ctc,
            effective_date=self.effective_date,
            employee_internal_id=employee_internal_id,
        )


class CompensationPreviewRequest(BaseModel):
    """Schema for previewing the slips a history would produce."""

    records: list[CompensationRecordIn]


class CompensationUpdateRequest(BaseModel):
    """Schema for saving an employee's details and compensation history."""

    employee_code: str = Field(min_length=1)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    department: str | None = None
    position: str | None = None
    records: list[CompensationRecordIn]

    def display_fields(self) -> DisplayFields:
        return DisplayFields.from_names(
            self.first_name,
            self.last_name,
            self.email,
            self.department,
            self.position,
        )


class PayBreakdownResponse(BaseModel):
    """Schema for a computed monthly breakdown."""

    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    ctc_yearly: Decimal
    gross_yearly: Decimal
    gross_monthly: Decimal
    basic_salary: Decimal
    hra: Decimal
    special_allowance: Decimal
    gross_earnings: Decimal
    pf_employee: Decimal
    professional_tax: Decimal
    income_tax: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    pf_employer: Decimal
    pay_period_start: datetime
    pay_period_end: datetime
    working_days: int
    present_days: int


class SyncOutcomeResponse(BaseModel):
    """Schema for the outcome of a compensation update."""

    status: str
    employee_business_id: str
    history_saved: bool
    renamed_rows: int = 0
    deleted: int = 0
    updated: int = 0
    inserted: int = 0
    failed_periods: list[str] = []
    warnings: list[str] = []
    reason: str | None = None


# ============================================================================
# Salary slip schemas
# ============================================================================


class SalarySlipResponse(BaseModel):
    """Schema for salary slip response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: str
    employee_name: str
    employee_email: str
    department: str
    position: str
    month: int
    year: int
    pay_period_start: datetime
    pay_period_end: datetime
    working_days: int
    present_days: int
    basic_salary: Decimal
    hra: Decimal
    special_allowance: Decimal
    gross_earnings: Decimal
    pf_employee: Decimal
    professional_tax: Decimal
    income_tax: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    pf_employer: Decimal
    status: str
    generated_date: datetime


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
