"""Pay component derivation and period indexing."""

from compensation_sync.calculators.pay_components import PayComponentCalculator
from compensation_sync.calculators.period_index import PeriodKeyIndexer
from compensation_sync.calculators.policy import DEFAULT_POLICY, PayPolicy
from compensation_sync.calculators.types import (
    CompensationRecord,
    DisplayFields,
    PayBreakdown,
    PeriodDiff,
    PeriodKey,
)

__all__ = [
    "PayComponentCalculator",
    "PeriodKeyIndexer",
    "PayPolicy",
    "DEFAULT_POLICY",
    "CompensationRecord",
    "DisplayFields",
    "PayBreakdown",
    "PeriodDiff",
    "PeriodKey",
]
