"""Integration test fixtures bound to the per-test SQLite database."""

from collections.abc import Generator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from compensation_sync.api.app import create_app
from compensation_sync.api.dependencies import get_db_session
from compensation_sync.models import Employee


def build_client(session_factory) -> TestClient:
    """App whose request sessions come from session_factory."""

    def override_session() -> Generator[Session, None, None]:
        with session_factory() as session:
            yield session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_session
    return TestClient(app)


@pytest.fixture
def client_factory():
    """Build a test client over any session factory."""
    return build_client


@pytest.fixture
def client(session_factory) -> TestClient:
    """Test client bound to the per-test SQLite database."""
    return build_client(session_factory)


@pytest.fixture
def saved_employee(session_factory) -> Employee:
    """A committed employee visible to request sessions."""
    with session_factory() as session:
        emp = Employee(
            id=uuid4(),
            employee_code="EMP-001",
            first_name="Asha",
            last_name="Rao",
            email="asha.rao@test.com",
            department="Engineering",
            position="Developer",
        )
        session.add(emp)
        session.commit()
        return emp
