"""Concurrent compensation updates for one employee.

Drives the update route function directly from two threads so the
interleaving can be pinned down with the shared lock registry.
"""

import threading
import time
from datetime import date

from sqlalchemy import select

from compensation_sync.api.routes.employees import update_compensation
from compensation_sync.api.schemas import CompensationUpdateRequest
from compensation_sync.calculators import PayComponentCalculator
from compensation_sync.models import Employee, SalarySlip
from compensation_sync.services.locking_service import LockingService, default_registry


def _request(code: str, ctc: str = "500000") -> CompensationUpdateRequest:
    return CompensationUpdateRequest(
        employee_code=code,
        first_name="Asha",
        last_name="Rao",
        email="asha.rao@test.com",
        department="Engineering",
        position="Developer",
        records=[{"ctc": ctc, "effective_date": date(2024, 4, 1)}],
    )


def _submit(session_factory, employee_id, request: CompensationUpdateRequest):
    with session_factory() as db:
        return update_compensation(
            db=db,
            calculator=PayComponentCalculator(),
            employee_id=employee_id,
            payload=request,
        )


class TestConcurrentRename:
    """An edit queued behind a rename must see the renamed identifier."""

    def test_queued_edit_reads_identifier_after_rename(self, session_factory, saved_employee):
        _submit(session_factory, saved_employee.id, _request("EMP-001"))
        outcomes = {}

        def queued_edit():
            # Form still shows the old code; it was loaded before the rename
            outcomes["edit"] = _submit(
                session_factory, saved_employee.id, _request("EMP-001", "550000")
            )

        with default_registry.hold(LockingService.keys_for(saved_employee.id)):
            thread = threading.Thread(target=queued_edit)
            thread.start()
            time.sleep(0.1)
            assert thread.is_alive()

            # Same thread already holds the employee key; the lock is reentrant
            outcomes["rename"] = _submit(session_factory, saved_employee.id, _request("EMP-777"))

        thread.join(timeout=5)
        assert not thread.is_alive()

        assert outcomes["rename"].status == "success"
        assert outcomes["rename"].renamed_rows == 1
        assert outcomes["edit"].status == "success"
        assert outcomes["edit"].renamed_rows == 1
        assert outcomes["edit"].updated == 1
        assert outcomes["edit"].inserted == 0

        with session_factory() as session:
            slips = session.scalars(select(SalarySlip)).all()
            assert [(s.employee_id, s.year, s.month) for s in slips] == [("EMP-001", 2024, 4)]
            assert session.get(Employee, saved_employee.id).employee_code == "EMP-001"

        assert len(default_registry) == 0

    def test_updates_for_same_employee_do_not_interleave(self, session_factory, saved_employee):
        _submit(session_factory, saved_employee.id, _request("EMP-001"))
        errors = []

        def edit(code: str):
            try:
                _submit(session_factory, saved_employee.id, _request(code))
            except Exception as e:  # surfaced through the assertion below
                errors.append(e)

        threads = [
            threading.Thread(target=edit, args=(code,))
            for code in ("EMP-777", "EMP-001", "EMP-888", "EMP-001")
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert errors == []
        with session_factory() as session:
            employee = session.get(Employee, saved_employee.id)
            slips = session.scalars(select(SalarySlip)).all()
            assert [(s.employee_id, s.year, s.month) for s in slips] == [
                (employee.employee_code, 2024, 4)
            ]
