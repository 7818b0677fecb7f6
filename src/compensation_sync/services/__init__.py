"""Compensation sync services."""

from compensation_sync.services.compensation_service import (
    CompensationService,
    CompensationUpdate,
    SyncOutcome,
    SyncStatus,
)
from compensation_sync.services.identifier_cascade import CascadeResult, IdentifierCascade
from compensation_sync.services.locking_service import EmployeeLockRegistry, LockingService
from compensation_sync.services.record_store import RecordStore, SqlAlchemyRecordStore
from compensation_sync.services.slip_reconciler import (
    ReconciliationResult,
    SlipFailure,
    SlipReconciler,
)

__all__ = [
    # Workflow
    "CompensationService",
    "CompensationUpdate",
    "SyncOutcome",
    "SyncStatus",
    # Cascade
    "IdentifierCascade",
    "CascadeResult",
    # Reconciliation
    "SlipReconciler",
    "ReconciliationResult",
    "SlipFailure",
    # Store and locking
    "RecordStore",
    "SqlAlchemyRecordStore",
    "EmployeeLockRegistry",
    "LockingService",
]
