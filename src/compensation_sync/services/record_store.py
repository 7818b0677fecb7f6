"""Record store protocol and SQLAlchemy implementation.

The reconciler and the identifier cascade only talk to the store through
the RecordStore protocol: insert/update/delete/select by key. Any failure of
a single operation surfaces as StoreUnavailable so callers can record it per
key and move on.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from compensation_sync.calculators.types import CompensationRecord
from compensation_sync.errors import StoreUnavailable
from compensation_sync.models import (
    Document,
    Employee,
    EmployeeCompensation,
    SalarySlip,
    SalaryStructure,
)

# Dependent record families keyed by the business identifier, in cascade order
DEPENDENT_COLLECTIONS: dict[str, type[SalarySlip] | type[SalaryStructure] | type[Document]] = {
    "salary_slips": SalarySlip,
    "salary_structures": SalaryStructure,
    "documents": Document,
}


class RecordStore(Protocol):
    """Protocol for the relational record store behind the engine."""

    def find_slip(self, employee_id: str, year: int, month: int) -> SalarySlip | None:
        """Return the slip for (employee, month, year), or None."""
        ...

    def list_slips(self, employee_id: str) -> list[SalarySlip]:
        """Return all slips for an employee ordered by period."""
        ...

    def insert_slip(self, values: dict[str, Any]) -> SalarySlip:
        """Insert a new slip row."""
        ...

    def update_slip(self, slip: SalarySlip, values: dict[str, Any]) -> None:
        """Overwrite the given columns of an existing slip."""
        ...

    def delete_slip(self, employee_id: str, year: int, month: int) -> int:
        """Delete the slip for (employee, month, year). Returns rows deleted."""
        ...

    def rename_business_id(
        self, collection: str, old_id: str, new_id: str, values: dict[str, Any]
    ) -> int:
        """Rewrite employee_id (and stamp values) on one collection. Returns rows updated."""
        ...

    def count_references(self, collection: str, employee_id: str) -> int:
        """Count rows in a collection still keyed by employee_id."""
        ...

    def load_compensation(self, employee_internal_id: UUID) -> list[CompensationRecord]:
        """Return the stored compensation history for an employee."""
        ...

    def replace_compensation(
        self, employee_internal_id: UUID, records: Sequence[CompensationRecord]
    ) -> None:
        """Replace the stored compensation history wholesale."""
        ...

    def update_employee_ctc(
        self,
        employee_internal_id: UUID,
        ctc: Decimal | None,
        effective_date: date | None,
    ) -> None:
        """Mirror the latest CTC onto the employee row."""
        ...


class SqlAlchemyRecordStore:
    """RecordStore over a synchronous SQLAlchemy session.

    Each operation flushes immediately so failures are attributed to the
    operation that caused them. Every operation runs inside a savepoint, so
    one failed statement does not poison the rest of the unit of work. On
    SQLite the engine must come from `database.get_engine` or have
    `enable_sqlite_savepoints` applied. The caller owns the commit.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """Run one store operation, translating database errors."""
        try:
            with self.session.begin_nested():
                yield
        except SQLAlchemyError as e:
            raise StoreUnavailable(name, str(e)) from e

    # ----- Salary slips -----

    def find_slip(self, employee_id: str, year: int, month: int) -> SalarySlip | None:
        with self._operation("find_slip"):
            return self.session.scalars(
                select(SalarySlip).where(
                    SalarySlip.employee_id == employee_id,
                    SalarySlip.month == month,
                    SalarySlip.year == year,
                )
            ).first()

    def list_slips(self, employee_id: str) -> list[SalarySlip]:
        with self._operation("list_slips"):
            result = self.session.scalars(
                select(SalarySlip)
                .where(SalarySlip.employee_id == employee_id)
                .order_by(SalarySlip.year, SalarySlip.month)
            )
            return list(result.all())

    def insert_slip(self, values: dict[str, Any]) -> SalarySlip:
        with self._operation("insert_slip"):
            slip = SalarySlip(**values)
            self.session.add(slip)
            self.session.flush()
            return slip

    def update_slip(self, slip: SalarySlip, values: dict[str, Any]) -> None:
        with self._operation("update_slip"):
            for key, value in values.items():
                setattr(slip, key, value)
            self.session.flush()

    def delete_slip(self, employee_id: str, year: int, month: int) -> int:
        with self._operation("delete_slip"):
            result = self.session.execute(
                delete(SalarySlip).where(
                    SalarySlip.employee_id == employee_id,
                    SalarySlip.month == month,
                    SalarySlip.year == year,
                )
            )
            return result.rowcount or 0

    # ----- Identifier cascade -----

    def rename_business_id(
        self, collection: str, old_id: str, new_id: str, values: dict[str, Any]
    ) -> int:
        model = DEPENDENT_COLLECTIONS.get(collection)
        if model is None:
            raise ValueError(f"Unknown collection '{collection}'")

        # Documents only carry a subset of the display columns
        columns = model.__table__.columns
        stamped = {k: v for k, v in values.items() if k in columns}
        stamped["employee_id"] = new_id

        with self._operation(f"rename {collection}"):
            result = self.session.execute(
                update(model)
                .where(model.employee_id == old_id)
                .values(**stamped)
                .execution_options(synchronize_session="evaluate")
            )
            return result.rowcount or 0

    def count_references(self, collection: str, employee_id: str) -> int:
        """Count rows in a collection still keyed by employee_id."""
        model = DEPENDENT_COLLECTIONS[collection]
        with self._operation(f"count {collection}"):
            rows = self.session.scalars(
                select(model.id).where(model.employee_id == employee_id)
            ).all()
            return len(rows)

    # ----- Compensation history -----

    def load_compensation(self, employee_internal_id: UUID) -> list[CompensationRecord]:
        with self._operation("load_compensation"):
            rows = self.session.scalars(
                select(EmployeeCompensation)
                .where(EmployeeCompensation.employee_id == employee_internal_id)
                .order_by(EmployeeCompensation.effective_date)
            ).all()
            return [
                CompensationRecord(
                    ctc_yearly=row.ctc,
                    effective_date=row.effective_date,
                    employee_internal_id=row.employee_id,
                )
                for row in rows
            ]

    def replace_compensation(
        self, employee_internal_id: UUID, records: Sequence[CompensationRecord]
    ) -> None:
        with self._operation("replace_compensation"):
            self.session.execute(
                delete(EmployeeCompensation)
                .where(EmployeeCompensation.employee_id == employee_internal_id)
                .execution_options(synchronize_session="evaluate")
            )
            self.session.add_all(
                EmployeeCompensation(
                    employee_id=employee_internal_id,
                    ctc=record.ctc_yearly,
                    effective_date=record.effective_date,
                )
                for record in records
            )
            self.session.flush()

    def update_employee_ctc(
        self,
        employee_internal_id: UUID,
        ctc: Decimal | None,
        effective_date: date | None,
    ) -> None:
        with self._operation("update_employee_ctc"):
            self.session.execute(
                update(Employee)
                .where(Employee.id == employee_internal_id)
                .values(current_ctc=ctc, ctc_effective_date=effective_date)
                .execution_options(synchronize_session="evaluate")
            )
