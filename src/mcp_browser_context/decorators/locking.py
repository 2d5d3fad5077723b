# mcp_browser_context/decorators/locking.py

"""
Tools run on one event loop but each awaits Selenium calls in worker threads.
Two tools interleaving there would interleave their commands on the session and
the tracker would observe them mixed. serialize_only runs tool bodies one at a time.
"""

import functools


__all__ = [
    "serialize_only",
]


def serialize_only(fn):
    """
    Serialize calls to ``fn`` on the session context's intra-process asyncio lock.

    get_intra_process_lock() returns a shared asyncio.Lock instance that all
    decorated functions use, so decorated tools execute sequentially rather
    than interfering with each other.
    """
    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        # Lazy import to avoid import-time cycles
        from ..context import get_context
        lock = get_context().get_intra_process_lock()
        async with lock:
            return await fn(*args, **kwargs)
    return wrapper
