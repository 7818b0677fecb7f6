"""Pay formula policy.

The monthly breakdown is driven by a handful of fixed business constants.
They live here, not in the calculator, so a formula change is a config change:

    policy = PayPolicy(professional_tax_monthly=Decimal("150"))
    calculator = PayComponentCalculator(policy)

Rules:
    1. Immutable after creation (frozen dataclass).
    2. Amounts are whole currency units per month unless named otherwise.
    3. Ratios are applied in order: basic from gross, HRA from basic.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PayPolicy:
    """
    Constants used to derive a monthly breakdown from a yearly CTC.

    Attributes:
        employer_pf_monthly: Employer provident fund contribution. It is part
            of CTC but not of gross. Default 1800.
        employee_pf_monthly: Employee provident fund deduction. Default 1800.
        professional_tax_monthly: Professional tax deduction. Default 200.
        income_tax_monthly: Income tax deduction. Default 0 ("as applicable").
        basic_ratio: Basic salary as a share of gross monthly. Default 0.5.
        hra_ratio: HRA as a share of basic. Default 0.4.
        working_days: Placeholder working/present days stamped on every slip.
            Default 22.
    """

    employer_pf_monthly: Decimal = Decimal("1800")
    employee_pf_monthly: Decimal = Decimal("1800")
    professional_tax_monthly: Decimal = Decimal("200")
    income_tax_monthly: Decimal = Decimal("0")
    basic_ratio: Decimal = Decimal("0.5")
    hra_ratio: Decimal = Decimal("0.4")
    working_days: int = 22

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in (
            "employer_pf_monthly",
            "employee_pf_monthly",
            "professional_tax_monthly",
            "income_tax_monthly",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")
        if not (Decimal("0") < self.basic_ratio <= Decimal("1")):
            raise ValueError("basic_ratio must be in (0, 1]")
        if not (Decimal("0") <= self.hra_ratio <= Decimal("1")):
            raise ValueError("hra_ratio must be in [0, 1]")
        if self.working_days < 1 or self.working_days > 31:
            raise ValueError("working_days must be between 1 and 31")

    @property
    def employer_pf_yearly(self) -> Decimal:
        """Employer PF over twelve months (21600 by default)."""
        return self.employer_pf_monthly * 12

    @property
    def fixed_deductions_monthly(self) -> Decimal:
        """Sum of the flat monthly deductions."""
        return (
            self.employee_pf_monthly
            + self.professional_tax_monthly
            + self.income_tax_monthly
        )


DEFAULT_POLICY = PayPolicy()
