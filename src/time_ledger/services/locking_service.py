"""Per-(user, date) serialization of work day recomputation."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID
from weakref import WeakValueDictionary

from sqlalchemy.ext.asyncio import AsyncSession

from time_ledger.database import acquire_advisory_xact_lock


def recompute_lock_key(user_id: UUID, day: date) -> str:
    """Stable lock key for a user's day."""
    return f"work_day:{user_id}:{day.isoformat()}"


class RecomputeLocks:
    """Serializes recomputations of the same (user, date).

    Two layers:
    1. An in-process asyncio.Lock per key, so coroutines in this worker
       never interleave a read-aggregate-write cycle
    2. A PostgreSQL transaction advisory lock on the same key, so other
       workers serialize too; released when the session's transaction ends

    Different users never contend.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, session: AsyncSession, user_id: UUID, day: date) -> AsyncIterator[None]:
        """Hold the lock for a user's day for the duration of the block."""
        key = recompute_lock_key(user_id, day)
        lock = self._lock_for(key)
        async with lock:
            await acquire_advisory_xact_lock(session, key)
            yield


# Shared by every WorkDayService in the process
recompute_locks = RecomputeLocks()
