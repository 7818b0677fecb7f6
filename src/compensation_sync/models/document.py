"""Employee document model."""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from compensation_sync.models.base import Base, TimestampMixin


class Document(Base, TimestampMixin):
    """Document metadata, optionally associated with one employee.

    File contents live in external storage; only the business identifier and
    display name are kept here for association.
    """

    __tablename__ = "documents"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String, nullable=False)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, default="other")
    is_confidential: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    employee_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    employee_name: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "category IN ('personal', 'employment', 'payroll', 'benefits', 'compliance', "
            "'training', 'policies', 'forms', 'certificates', 'other')",
            name="document_category_check",
        ),
    )
