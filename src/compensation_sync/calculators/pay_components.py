"""Monthly pay component calculator."""

from __future__ import annotations

import calendar
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from compensation_sync.calculators.policy import DEFAULT_POLICY, PayPolicy
from compensation_sync.calculators.types import PayBreakdown
from compensation_sync.errors import InvalidCompensationInput


class PayComponentCalculator:
    """Derives a full monthly pay breakdown from a yearly CTC.

    Formula (constants from PayPolicy):
    - gross_yearly = CTC - employer PF (yearly)
    - gross_monthly = round(gross_yearly / 12)
    - basic = round(gross_monthly * basic_ratio)
    - hra = round(basic * hra_ratio)
    - special_allowance = gross_monthly - (basic + hra)
    - net = gross - (employee PF + professional tax + income tax)

    Rounding:
    - Whole units, halves rounded up
    - Special allowance is the residual, so basic + HRA + special == gross exactly
    """

    UNIT = Decimal("1")

    def __init__(self, policy: PayPolicy | None = None):
        self.policy = policy or DEFAULT_POLICY

    @staticmethod
    def round_whole(amount: Decimal) -> Decimal:
        """Round to the nearest whole unit, halves up."""
        return amount.quantize(PayComponentCalculator.UNIT, rounding=ROUND_HALF_UP)

    @staticmethod
    def to_decimal(value: Any) -> Decimal:
        """Coerce a CTC value to Decimal (floats go through str)."""
        if isinstance(value, Decimal):
            return value
        if isinstance(value, bool):
            raise InvalidCompensationInput(value, "CTC must be numeric")
        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise InvalidCompensationInput(value, "CTC must be numeric") from e

    def validate_ctc(self, ctc_yearly: Any) -> Decimal:
        """Validate a yearly CTC and return it as Decimal.

        Raises:
            InvalidCompensationInput: non-numeric, non-finite, non-positive,
                or not above the yearly employer PF (would give negative gross)
        """
        ctc = self.to_decimal(ctc_yearly)
        if not ctc.is_finite():
            raise InvalidCompensationInput(ctc_yearly, "CTC must be finite")
        if ctc <= 0:
            raise InvalidCompensationInput(ctc_yearly, "CTC must be positive")
        if ctc <= self.policy.employer_pf_yearly:
            raise InvalidCompensationInput(
                ctc_yearly,
                f"CTC must exceed yearly employer PF of {self.policy.employer_pf_yearly}",
            )
        return ctc

    @staticmethod
    def pay_period_bounds(year: int, month: int) -> tuple[datetime, datetime]:
        """First and last instant of a calendar month."""
        if not 1 <= month <= 12:
            raise InvalidCompensationInput(month, "month must be between 1 and 12")
        last_day = calendar.monthrange(year, month)[1]
        start = datetime(year, month, 1, 0, 0, 0)
        end = datetime(year, month, last_day, 23, 59, 59)
        return start, end

    def compute(self, ctc_yearly: Any, year: int, month: int) -> PayBreakdown:
        """Compute the monthly breakdown for one period."""
        policy = self.policy
        ctc = self.validate_ctc(ctc_yearly)
        period_start, period_end = self.pay_period_bounds(year, month)

        gross_yearly = ctc - policy.employer_pf_yearly
        gross_monthly = self.round_whole(gross_yearly / 12)

        basic = self.round_whole(gross_monthly * policy.basic_ratio)
        hra = self.round_whole(basic * policy.hra_ratio)
        special_allowance = gross_monthly - (basic + hra)

        gross_earnings = gross_monthly
        total_deductions = policy.fixed_deductions_monthly
        net_salary = gross_earnings - total_deductions

        return PayBreakdown(
            year=year,
            month=month,
            ctc_yearly=ctc,
            gross_yearly=gross_yearly,
            gross_monthly=gross_monthly,
            basic_salary=basic,
            hra=hra,
            special_allowance=special_allowance,
            gross_earnings=gross_earnings,
            pf_employee=policy.employee_pf_monthly,
            professional_tax=policy.professional_tax_monthly,
            income_tax=policy.income_tax_monthly,
            total_deductions=total_deductions,
            net_salary=net_salary,
            pf_employer=policy.employer_pf_monthly,
            pay_period_start=period_start,
            pay_period_end=period_end,
            working_days=policy.working_days,
            present_days=policy.working_days,
        )

    @staticmethod
    def validate_breakdown(breakdown: PayBreakdown) -> list[str]:
        """Check the arithmetic invariants of a breakdown.

        Returns list of error messages (empty if valid).
        """
        errors: list[str] = []
        components = breakdown.basic_salary + breakdown.hra + breakdown.special_allowance
        if components != breakdown.gross_monthly:
            errors.append(
                f"basic + hra + special ({components}) != gross monthly ({breakdown.gross_monthly})"
            )
        if breakdown.net_salary != breakdown.gross_earnings - breakdown.total_deductions:
            errors.append(
                f"net {breakdown.net_salary} != gross {breakdown.gross_earnings} "
                f"- deductions {breakdown.total_deductions}"
            )
        return errors
