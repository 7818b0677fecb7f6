"""Error types raised by the compensation sync core."""

from __future__ import annotations

from typing import Any


class CompensationSyncError(Exception):
    """Base class for compensation sync errors."""


class InvalidCompensationInput(CompensationSyncError):
    """Raised when a CTC figure or period cannot produce a valid breakdown.

    Raised before any write is issued.
    """

    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid compensation input {value!r}: {reason}")


class StoreUnavailable(CompensationSyncError):
    """Raised when a single operation against the record store fails."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Record store unavailable during {operation}: {detail}")


class PartialReconciliationFailure(CompensationSyncError):
    """Raised on demand when some slip operations failed after others succeeded."""

    def __init__(self, employee_business_id: str, failed_keys: list[Any]):
        self.employee_business_id = employee_business_id
        self.failed_keys = failed_keys
        super().__init__(
            f"Slip synchronization for {employee_business_id} incomplete: "
            f"{len(failed_keys)} period(s) failed"
        )


class CascadeIncomplete(CompensationSyncError):
    """Raised when an identifier rename did not reach every dependent collection."""

    def __init__(
        self,
        old_business_id: str,
        new_business_id: str,
        failed_collections: dict[str, str],
    ):
        self.old_business_id = old_business_id
        self.new_business_id = new_business_id
        self.failed_collections = failed_collections
        names = ", ".join(sorted(failed_collections))
        super().__init__(
            f"Rename {old_business_id!r} -> {new_business_id!r} incomplete; "
            f"failed collections: {names}"
        )
