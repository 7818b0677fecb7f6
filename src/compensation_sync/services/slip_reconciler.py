"""Salary slip reconciliation.

Makes the persisted slips of one employee match the slips derived from the
employee's current compensation history:
1. Deletes slips for periods dropped from the history
2. Recomputes every period still in the history
3. Overwrites existing slips in place, inserts missing ones

Each store operation is independent. A failure is recorded against its
period and the remaining periods are still processed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from compensation_sync.calculators.pay_components import PayComponentCalculator
from compensation_sync.calculators.period_index import PeriodKeyIndexer
from compensation_sync.calculators.types import (
    CompensationRecord,
    DisplayFields,
    PayBreakdown,
    PeriodKey,
)
from compensation_sync.errors import PartialReconciliationFailure, StoreUnavailable
from compensation_sync.services.record_store import RecordStore

logger = logging.getLogger(__name__)

PROCESSED_STATUS = "processed"


@dataclass(frozen=True)
class SlipFailure:
    """A single slip operation that did not complete."""

    period: PeriodKey
    operation: str  # delete, upsert
    message: str


@dataclass
class ReconciliationResult:
    """Result of reconciling one employee's slips."""

    employee_business_id: str
    deleted: int = 0
    missing_on_delete: int = 0  # delete found no slip; not an error
    updated: int = 0
    inserted: int = 0
    failures: list[SlipFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Whether every slip operation completed."""
        return len(self.failures) == 0

    @property
    def failed_keys(self) -> list[PeriodKey]:
        """Periods with at least one failed operation, in order."""
        return sorted({f.period for f in self.failures})

    def raise_for_failures(self) -> None:
        """Raise PartialReconciliationFailure if any operation failed."""
        if self.failures:
            raise PartialReconciliationFailure(self.employee_business_id, self.failed_keys)


class SlipReconciler:
    """Reconciles salary slips against a compensation history."""

    def __init__(
        self,
        store: RecordStore,
        calculator: PayComponentCalculator | None = None,
        indexer: PeriodKeyIndexer | None = None,
    ):
        self.store = store
        self.calculator = calculator or PayComponentCalculator()
        self.indexer = indexer or PeriodKeyIndexer()

    def compute_targets(
        self, records: Sequence[CompensationRecord]
    ) -> dict[PeriodKey, PayBreakdown]:
        """Compute the breakdown for every period in a history.

        Pure: raises InvalidCompensationInput before anything is written.
        """
        targets = self.indexer.index(records)
        return {
            key: self.calculator.compute(record.ctc_yearly, key.year, key.month)
            for key, record in sorted(targets.items())
        }

    def reconcile(
        self,
        employee_business_id: str,
        display: DisplayFields,
        old_records: Sequence[CompensationRecord],
        new_records: Sequence[CompensationRecord],
    ) -> ReconciliationResult:
        """Reconcile slips for one employee.

        Args:
            employee_business_id: Business identifier the slips are keyed by
            display: Name/contact fields stamped on every written slip
            old_records: Previously stored compensation history
            new_records: Full, authoritative current history

        Returns:
            ReconciliationResult with counts and per-period failures
        """
        # Validate and compute first so bad input never reaches the store
        breakdowns = self.compute_targets(new_records)
        period_diff = self.indexer.diff(old_records, new_records)

        result = ReconciliationResult(employee_business_id=employee_business_id)

        for key in sorted(period_diff.to_delete):
            try:
                removed = self.store.delete_slip(employee_business_id, key.year, key.month)
            except StoreUnavailable as e:
                logger.exception(
                    "Failed to delete slip %s for %s", key, employee_business_id
                )
                result.failures.append(SlipFailure(key, "delete", str(e)))
                continue
            if removed:
                result.deleted += removed
            else:
                result.missing_on_delete += 1

        generated_at = datetime.now(timezone.utc)
        for key in sorted(period_diff.to_upsert):
            values = self._slip_values(employee_business_id, display, breakdowns[key], generated_at)
            try:
                existing = self.store.find_slip(employee_business_id, key.year, key.month)
                if existing is not None:
                    self.store.update_slip(existing, values)
                    result.updated += 1
                else:
                    self.store.insert_slip(values)
                    result.inserted += 1
            except StoreUnavailable as e:
                logger.exception(
                    "Failed to upsert slip %s for %s", key, employee_business_id
                )
                result.failures.append(SlipFailure(key, "upsert", str(e)))

        if result.failures:
            logger.warning(
                "Slip sync for %s incomplete: %d failed period(s) %s",
                employee_business_id,
                len(result.failed_keys),
                ", ".join(str(k) for k in result.failed_keys),
            )
        else:
            logger.info(
                "Slip sync for %s: %d deleted, %d updated, %d inserted",
                employee_business_id,
                result.deleted,
                result.updated,
                result.inserted,
            )
        return result

    @staticmethod
    def _slip_values(
        employee_business_id: str,
        display: DisplayFields,
        breakdown: PayBreakdown,
        generated_at: datetime,
    ) -> dict[str, Any]:
        """Full column set for a slip. Replaces derived fields wholesale."""
        values: dict[str, Any] = {
            "employee_id": employee_business_id,
            **display.slip_values(),
            **breakdown.to_slip_values(),
            "status": PROCESSED_STATUS,
            "generated_date": generated_at,
            "paid_date": None,
        }
        return values
