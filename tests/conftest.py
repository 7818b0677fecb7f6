"""Pytest fixtures for compensation sync tests."""

from __future__ import annotations

from collections.abc import Generator, Iterable
from datetime import date
from typing import Any
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from compensation_sync.calculators.types import DisplayFields
from compensation_sync.database import create_all, enable_sqlite_savepoints
from compensation_sync.errors import StoreUnavailable
from compensation_sync.models import Employee, SalarySlip
from compensation_sync.services.record_store import SqlAlchemyRecordStore

# Use in-memory SQLite for tests; one fresh database per test
TEST_DATABASE_URL = "sqlite://"


class FlakyRecordStore(SqlAlchemyRecordStore):
    """Record store that fails selected operations, for best-effort tests."""

    def __init__(
        self,
        session: Session,
        fail_periods: Iterable[tuple[int, int]] = (),
        fail_collections: Iterable[str] = (),
        fail_history: bool = False,
    ):
        super().__init__(session)
        self.fail_periods = set(fail_periods)
        self.fail_collections = set(fail_collections)
        self.fail_history = fail_history
        self.calls: list[str] = []

    def find_slip(self, employee_id: str, year: int, month: int) -> SalarySlip | None:
        self.calls.append(f"find {year}-{month}")
        if (year, month) in self.fail_periods:
            raise StoreUnavailable("find_slip", "connection reset by peer")
        return super().find_slip(employee_id, year, month)

    def delete_slip(self, employee_id: str, year: int, month: int) -> int:
        self.calls.append(f"delete {year}-{month}")
        if (year, month) in self.fail_periods:
            raise StoreUnavailable("delete_slip", "connection reset by peer")
        return super().delete_slip(employee_id, year, month)

    def rename_business_id(
        self, collection: str, old_id: str, new_id: str, values: dict[str, Any]
    ) -> int:
        self.calls.append(f"rename {collection}")
        if collection in self.fail_collections:
            raise StoreUnavailable(f"rename {collection}", "statement timeout")
        return super().rename_business_id(collection, old_id, new_id, values)

    def replace_compensation(self, employee_internal_id, records) -> None:
        self.calls.append("replace_compensation")
        if self.fail_history:
            raise StoreUnavailable("replace_compensation", "statement timeout")
        super().replace_compensation(employee_internal_id, records)


@pytest.fixture
def engine():
    """Create test database engine with all tables."""
    engine = create_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker[Session]:
    return sessionmaker(engine, class_=Session, expire_on_commit=False, autoflush=False)


@pytest.fixture
def session(session_factory) -> Generator[Session, None, None]:
    """Create a database session for each test."""
    with session_factory() as session:
        yield session
        session.rollback()


@pytest.fixture
def store(session: Session) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(session)


@pytest.fixture
def flaky_store(session: Session):
    """Factory for a record store that fails selected operations."""

    def factory(**kwargs: Any) -> FlakyRecordStore:
        return FlakyRecordStore(session, **kwargs)

    return factory


@pytest.fixture
def employee(session: Session) -> Employee:
    """Create a test employee."""
    emp = Employee(
        id=uuid4(),
        employee_code="EMP-001",
        first_name="Asha",
        last_name="Rao",
        email="asha.rao@test.com",
        department="Engineering",
        position="Developer",
        hire_date=date(2023, 1, 9),
    )
    session.add(emp)
    session.flush()
    return emp


@pytest.fixture
def display() -> DisplayFields:
    return DisplayFields.from_names(
        "Asha", "Rao", "asha.rao@test.com", "Engineering", "Developer"
    )
