"""Period key indexing and history diffing."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from compensation_sync.calculators.types import CompensationRecord, PeriodDiff, PeriodKey

logger = logging.getLogger(__name__)


class PeriodKeyIndexer:
    """Maps compensation records to (year, month) keys.

    Only year and month of an effective date matter. Two records in the same
    month collide; the last one encountered in the list wins.
    """

    @staticmethod
    def index(records: Iterable[CompensationRecord]) -> dict[PeriodKey, CompensationRecord]:
        """Index records by period key, last record winning on collision."""
        indexed: dict[PeriodKey, CompensationRecord] = {}
        for record in records:
            key = record.period
            if key in indexed:
                logger.warning(
                    "Duplicate compensation period %s: CTC %s replaces %s",
                    key,
                    record.ctc_yearly,
                    indexed[key].ctc_yearly,
                )
            indexed[key] = record
        return indexed

    @classmethod
    def diff(
        cls,
        old_records: Iterable[CompensationRecord],
        new_records: Iterable[CompensationRecord],
    ) -> PeriodDiff:
        """Compute which periods to delete and which to upsert.

        - to_delete: keys in the old history but not the new one
        - to_upsert: every key in the new history, unchanged ones included
        """
        old_keys = frozenset(PeriodKey.from_date(r.effective_date) for r in old_records)
        targets = cls.index(new_records)
        new_keys = frozenset(targets)

        return PeriodDiff(
            to_delete=old_keys - new_keys,
            to_upsert=new_keys,
            retained=old_keys & new_keys,
            targets=targets,
        )
