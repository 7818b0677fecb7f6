"""Employee compensation update workflow.

Single entry point used by the employee-edit flow:
1. Validate the new compensation history (no writes on bad input)
2. Cascade a changed business identifier to dependent records
3. Replace the stored compensation history
4. Reconcile salary slips against the new history

The steps are separate store operations, not one transaction. Outcomes are
reported as SUCCESS, PARTIAL (employee saved, payroll sync incomplete) or
ABORTED (cascade incomplete, reconciliation not attempted).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from sqlalchemy.orm import Session

from compensation_sync.calculators.pay_components import PayComponentCalculator
from compensation_sync.calculators.period_index import PeriodKeyIndexer
from compensation_sync.calculators.types import (
    CompensationRecord,
    DisplayFields,
    PayBreakdown,
    PeriodKey,
)
from compensation_sync.errors import StoreUnavailable
from compensation_sync.services.identifier_cascade import CascadeResult, IdentifierCascade
from compensation_sync.services.locking_service import EmployeeLockRegistry, LockingService
from compensation_sync.services.record_store import RecordStore, SqlAlchemyRecordStore
from compensation_sync.services.slip_reconciler import ReconciliationResult, SlipReconciler

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    """Result of update_employee_compensation."""

    SUCCESS = "success"  # History saved, slips fully synchronized
    PARTIAL = "partial"  # History saved or attempted, some writes failed
    ABORTED = "aborted"  # Identifier cascade incomplete, slips untouched


@dataclass(frozen=True)
class CompensationUpdate:
    """Everything the employee-edit flow hands over for one employee."""

    employee_internal_id: UUID
    old_business_id: str
    new_business_id: str
    display: DisplayFields
    records: tuple[CompensationRecord, ...]

    @property
    def business_id_changed(self) -> bool:
        return self.old_business_id != self.new_business_id


@dataclass
class SyncOutcome:
    """Outcome of one compensation update workflow."""

    status: SyncStatus
    employee_business_id: str
    cascade: CascadeResult | None = None
    reconciliation: ReconciliationResult | None = None
    history_saved: bool = False
    failed_keys: list[PeriodKey] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    reason: str | None = None

    @property
    def employee_saved(self) -> bool:
        """Whether the core employee update should be reported as saved."""
        return self.status != SyncStatus.ABORTED


class CompensationService:
    """Runs the compensation update workflow for one employee at a time."""

    HISTORY_WARNING = "Employee updated but compensation history may not be saved completely."
    SLIP_WARNING = "Employee updated but salary slip synchronization is incomplete."

    def __init__(
        self,
        session: Session,
        store: RecordStore | None = None,
        calculator: PayComponentCalculator | None = None,
        lock_registry: EmployeeLockRegistry | None = None,
    ):
        self.session = session
        self.store = store or SqlAlchemyRecordStore(session)
        self.calculator = calculator or PayComponentCalculator()
        self.reconciler = SlipReconciler(self.store, self.calculator)
        self.cascade = IdentifierCascade(self.store)
        self.locking = LockingService(session, lock_registry)

    def preview_breakdowns(self, records: Sequence[CompensationRecord]) -> list[PayBreakdown]:
        """Compute the slips a history would produce, without writing."""
        return list(self.reconciler.compute_targets(records).values())

    def validate(self, records: Sequence[CompensationRecord]) -> None:
        """Validate every record. Raises InvalidCompensationInput."""
        for record in records:
            self.calculator.validate_ctc(record.ctc_yearly)
            self.calculator.pay_period_bounds(record.effective_date.year, record.effective_date.month)

    def update_employee_compensation(self, update: CompensationUpdate) -> SyncOutcome:
        """Run the full workflow for one employee.

        Raises:
            InvalidCompensationInput: before any write, on a bad record
            StoreUnavailable: if the stored history cannot be read
        """
        self.validate(update.records)

        with self.locking.employee_lock(
            update.employee_internal_id, update.old_business_id, update.new_business_id
        ):
            return self._run(update)

    def _run(self, update: CompensationUpdate) -> SyncOutcome:
        business_id = update.new_business_id
        outcome = SyncOutcome(status=SyncStatus.SUCCESS, employee_business_id=business_id)

        old_records = self.store.load_compensation(update.employee_internal_id)

        # Cascade must finish before slips are looked up under the new key
        if update.business_id_changed:
            cascade = self.cascade.rename(
                update.employee_internal_id,
                update.old_business_id,
                update.new_business_id,
                update.display,
            )
            outcome.cascade = cascade
            if not cascade.success:
                names = ", ".join(sorted(cascade.failed_collections))
                logger.warning(
                    "Aborting compensation sync for %s: cascade incomplete (%s)",
                    business_id,
                    names,
                )
                outcome.status = SyncStatus.ABORTED
                outcome.reason = (
                    f"Employee ID changed but related records were not all updated: {names}"
                )
                return outcome

        try:
            self._save_history(update)
        except StoreUnavailable:
            logger.exception("Failed to save compensation history for %s", business_id)
            outcome.status = SyncStatus.PARTIAL
            outcome.warnings.append(self.HISTORY_WARNING)
            return outcome
        outcome.history_saved = True

        reconciliation = self.reconciler.reconcile(
            business_id, update.display, old_records, update.records
        )
        outcome.reconciliation = reconciliation
        if not reconciliation.success:
            outcome.status = SyncStatus.PARTIAL
            outcome.failed_keys = reconciliation.failed_keys
            outcome.warnings.append(self.SLIP_WARNING)

        return outcome

    def _save_history(self, update: CompensationUpdate) -> None:
        """Replace the stored history and mirror the latest CTC on the employee."""
        self.store.replace_compensation(update.employee_internal_id, update.records)

        latest = PeriodKeyIndexer.index(update.records)
        if latest:
            record = latest[max(latest)]
            self.store.update_employee_ctc(
                update.employee_internal_id, record.ctc_yearly, record.effective_date
            )
        else:
            self.store.update_employee_ctc(update.employee_internal_id, None, None)
