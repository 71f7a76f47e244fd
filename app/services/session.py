"""Per-session serialisation of conversation turns.

Turn state travels with each request, but two requests for the same session
can still arrive together.  The merge policy is order-sensitive, so turns of
one session run one at a time.  Locks are held weakly and vanish once no turn
for that session is in flight.
"""

import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator

_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(session_id: str) -> asyncio.Lock:
    lock = _locks.get(session_id)
    if lock is None:
        lock = asyncio.Lock()
        _locks[session_id] = lock
    return lock


@asynccontextmanager
async def session_lock(session_id: str) -> AsyncIterator[None]:
    """Hold the lock of *session_id* for the duration of the block."""
    lock = _lock_for(session_id)
    async with lock:
        yield
