"""Business identifier cascade.

Slips, salary structures and documents are keyed by the employee's business
identifier, not the internal id. When the identifier changes, every
dependent row must be rewritten, otherwise historical slips are orphaned
and the next reconciliation creates duplicates under the new key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from uuid import UUID

from compensation_sync.calculators.types import DisplayFields
from compensation_sync.errors import CascadeIncomplete, StoreUnavailable
from compensation_sync.services.record_store import DEPENDENT_COLLECTIONS, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    """Result of renaming a business identifier across collections."""

    employee_internal_id: UUID
    old_business_id: str
    new_business_id: str
    updated: dict[str, int] = field(default_factory=dict)  # collection -> rows
    failed_collections: dict[str, str] = field(default_factory=dict)  # collection -> error

    @property
    def success(self) -> bool:
        """Whether every collection was rewritten."""
        return len(self.failed_collections) == 0

    @property
    def renamed(self) -> bool:
        """Whether a rename was actually requested."""
        return self.old_business_id != self.new_business_id

    @property
    def total_updated(self) -> int:
        return sum(self.updated.values())

    def raise_for_failures(self) -> None:
        """Raise CascadeIncomplete if any collection failed."""
        if self.failed_collections:
            raise CascadeIncomplete(
                self.old_business_id, self.new_business_id, dict(self.failed_collections)
            )


class IdentifierCascade:
    """Rewrites a business identifier on every dependent record family.

    Idempotent: once no rows carry the old identifier, a rerun matches
    nothing and changes nothing.
    """

    def __init__(self, store: RecordStore, collections: tuple[str, ...] | None = None):
        self.store = store
        self.collections = collections or tuple(DEPENDENT_COLLECTIONS)

    def rename(
        self,
        internal_id: UUID,
        old_business_id: str,
        new_business_id: str,
        display: DisplayFields,
    ) -> CascadeResult:
        """Rename old_business_id to new_business_id everywhere.

        Every collection is attempted even if an earlier one fails. After the
        updates, each collection is checked for leftover references to the
        old identifier.
        """
        result = CascadeResult(
            employee_internal_id=internal_id,
            old_business_id=old_business_id,
            new_business_id=new_business_id,
        )
        if not result.renamed:
            return result

        values = display.slip_values()

        for collection in self.collections:
            try:
                rows = self.store.rename_business_id(
                    collection, old_business_id, new_business_id, values
                )
                remaining = self.store.count_references(collection, old_business_id)
            except StoreUnavailable as e:
                logger.exception(
                    "Failed to rename %s -> %s in %s",
                    old_business_id,
                    new_business_id,
                    collection,
                )
                result.failed_collections[collection] = str(e)
                continue

            if remaining:
                result.failed_collections[collection] = (
                    f"{remaining} row(s) still reference {old_business_id!r}"
                )
                logger.warning(
                    "%d row(s) in %s still reference %s after rename",
                    remaining,
                    collection,
                    old_business_id,
                )
            result.updated[collection] = rows

        if result.success:
            logger.info(
                "Renamed employee %s from %s to %s (%d rows)",
                internal_id,
                old_business_id,
                new_business_id,
                result.total_updated,
            )
        return result
