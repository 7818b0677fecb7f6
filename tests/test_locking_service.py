"""Tests for per-employee serialization."""

import threading
import time
from uuid import uuid4

from compensation_sync.services.locking_service import EmployeeLockRegistry, LockingService


class TestEmployeeLockRegistry:
    """Tests for the in-process lock registry."""

    def test_same_employee_runs_one_at_a_time(self):
        registry = EmployeeLockRegistry()
        guard = threading.Lock()
        active = 0
        max_active = 0

        def worker():
            nonlocal active, max_active
            with registry.hold(["code:EMP-001"]):
                with guard:
                    active += 1
                    max_active = max(max_active, active)
                time.sleep(0.01)
                with guard:
                    active -= 1

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert max_active == 1
        assert active == 0

    def test_different_employees_do_not_block(self):
        registry = EmployeeLockRegistry()
        other_entered = threading.Event()

        def other():
            with registry.hold(["code:EMP-002"]):
                other_entered.set()

        with registry.hold(["code:EMP-001"]):
            thread = threading.Thread(target=other)
            thread.start()
            assert other_entered.wait(timeout=2)
        thread.join(timeout=2)

    def test_rename_and_update_do_not_deadlock(self):
        """Overlapping key sets are taken in sorted order."""
        registry = EmployeeLockRegistry()
        done = []

        def rename():
            for _ in range(50):
                with registry.hold(["code:EMP-777", "code:EMP-001"]):
                    pass
            done.append("rename")

        def update():
            for _ in range(50):
                with registry.hold(["code:EMP-001", "code:EMP-777"]):
                    pass
            done.append("update")

        threads = [threading.Thread(target=rename), threading.Thread(target=update)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert sorted(done) == ["rename", "update"]

    def test_entries_evicted_after_release(self):
        registry = EmployeeLockRegistry()
        with registry.hold(["a", "b"]):
            assert len(registry) == 2
        assert len(registry) == 0

        for i in range(100):
            with registry.hold([f"code:EMP-{i:03d}"]):
                pass
        assert len(registry) == 0

    def test_entry_kept_while_another_thread_waits(self):
        registry = EmployeeLockRegistry()
        waiting = threading.Event()
        entered = threading.Event()

        def waiter():
            waiting.set()
            with registry.hold(["code:EMP-001"]):
                entered.set()

        with registry.hold(["code:EMP-001"]):
            thread = threading.Thread(target=waiter)
            thread.start()
            waiting.wait(timeout=2)
            assert not entered.wait(timeout=0.1)

        assert entered.wait(timeout=2)
        thread.join(timeout=2)
        assert len(registry) == 0

    def test_same_thread_can_reenter(self):
        registry = EmployeeLockRegistry()
        with registry.hold(["employee:1"]):
            with registry.hold(["employee:1", "code:EMP-001"]):
                assert len(registry) == 2
            assert len(registry) == 1
        assert len(registry) == 0

    def test_employee_keys_ordered_first(self):
        order = EmployeeLockRegistry.lock_order(
            ["code:EMP-001", "employee:b", "code:A", "employee:a", "code:EMP-001"]
        )
        assert order == ["employee:a", "employee:b", "code:A", "code:EMP-001"]


class TestLockingService:
    """Tests for LockingService."""

    def test_keys_for(self):
        internal_id = uuid4()
        keys = LockingService.keys_for(internal_id, "EMP-001", "EMP-777", "EMP-001", "")
        assert keys == [f"employee:{internal_id}", "code:EMP-001", "code:EMP-777"]

    def test_keeps_explicit_empty_registry(self, session):
        registry = EmployeeLockRegistry()
        assert LockingService(session, registry).registry is registry

    def test_employee_lock_holds_registry_keys(self, session):
        registry = EmployeeLockRegistry()
        service = LockingService(session, registry)
        internal_id = uuid4()
        blocked = threading.Event()
        acquired = threading.Event()

        def contender():
            blocked.set()
            with registry.hold([f"employee:{internal_id}"]):
                acquired.set()

        with service.employee_lock(internal_id, "EMP-001"):
            thread = threading.Thread(target=contender)
            thread.start()
            blocked.wait(timeout=2)
            assert not acquired.wait(timeout=0.1)

        assert acquired.wait(timeout=2)
        thread.join(timeout=2)
