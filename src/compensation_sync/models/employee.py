"""Employee and compensation history models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from compensation_sync.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """Employee record.

    ``id`` is the immutable internal key used for joins. ``employee_code`` is
    the human-assigned business identifier that dependent records (slips,
    structures, documents) store in their ``employee_id`` column.
    """

    __tablename__ = "employee"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_code: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Latest CTC, mirrored from the compensation history
    current_ctc: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    ctc_effective_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    compensation: Mapped[list[EmployeeCompensation]] = relationship(
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="EmployeeCompensation.effective_date",
    )

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"


class EmployeeCompensation(Base, TimestampMixin):
    """One entry of an employee's CTC history."""

    __tablename__ = "employee_compensation"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employee.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ctc: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint("ctc > 0", name="employee_compensation_ctc_positive"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="compensation")
