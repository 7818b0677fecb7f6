"""Per-employee serialization for compensation updates."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager

from sqlalchemy.orm import Session

from compensation_sync.database import acquire_advisory_xact_lock

EMPLOYEE_KEY_PREFIX = "employee:"
BUSINESS_KEY_PREFIX = "code:"


class _KeyLock:
    """Reentrant lock plus the number of threads holding or waiting on it."""

    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users = 0


class EmployeeLockRegistry:
    """In-process registry of one mutex per employee key.

    Workflows for different employees never contend. Two workflows for the
    same employee run one after the other. Internal-id keys are always taken
    before business-id keys, each group in sorted order, so a rename (which
    holds the old and the new key) cannot deadlock against a plain update.

    Locks are reentrant, so a caller already holding the employee's key can
    run the workflow, which takes it again. An entry is dropped once no
    thread holds or waits on it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _KeyLock] = {}

    @contextmanager
    def _held(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[key]

    @staticmethod
    def lock_order(keys: Iterable[str]) -> list[str]:
        """Deduplicate keys into acquisition order."""
        return sorted(set(keys), key=lambda k: (not k.startswith(EMPLOYEE_KEY_PREFIX), k))

    @contextmanager
    def hold(self, keys: Iterable[str]) -> Iterator[None]:
        """Hold the locks for all keys for the duration of the block."""
        with ExitStack() as stack:
            for key in self.lock_order(keys):
                stack.enter_context(self._held(key))
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# Shared by every service instance in this process
default_registry = EmployeeLockRegistry()


class LockingService:
    """Serializes compensation workflows per employee.

    Holds the in-process lock for each key and, on PostgreSQL, a
    transaction-scoped advisory lock so workers in other processes serialize
    too. Advisory locks are released when the caller's transaction ends.
    """

    def __init__(self, session: Session, registry: EmployeeLockRegistry | None = None):
        self.session = session
        self.registry = registry if registry is not None else default_registry

    @staticmethod
    def keys_for(internal_id: object, *business_ids: str) -> list[str]:
        """Lock keys covering an employee's internal id and business ids."""
        keys = [f"{EMPLOYEE_KEY_PREFIX}{internal_id}"]
        keys.extend(f"{BUSINESS_KEY_PREFIX}{bid}" for bid in business_ids if bid)
        return EmployeeLockRegistry.lock_order(keys)

    @contextmanager
    def employee_lock(self, internal_id: object, *business_ids: str) -> Iterator[None]:
        """Hold every lock covering one employee."""
        keys = self.keys_for(internal_id, *business_ids)
        with self.registry.hold(keys):
            if self.session.get_bind().dialect.name == "postgresql":
                for key in keys:
                    acquire_advisory_xact_lock(self.session, key)
            yield
