"""
Context tool implementations.

Switches are performed through Selenium as usual; the session's tracker learns
about them from the command/result events those calls emit, so every tool reads
the current context back from the tracker instead of computing it here.
"""

import json
import asyncio

from ..context import get_context
from ..constants import SWITCH_CONTEXT, GET_CONTEXT


def _session():
    ctx = get_context()
    # The tracker must be subscribed before any command it should observe.
    ctx.tracker()
    return ctx.session


async def _context_payload(**extra) -> str:
    ctx = get_context()
    session = ctx.session
    tracker = ctx.tracker()
    current = await tracker.get_current_context()
    payload = {
        "ok": True,
        "current_context": current,
        "native_context": session.is_native_context,
        "mobile_context": tracker.mobile_context,
        "tracking_enabled": tracker.enabled,
    }
    payload.update(extra)
    return json.dumps(payload)


async def get_current_context():
    """Return the tracked current context, resolving it lazily on first use."""
    return await _context_payload()


async def switch_to_window(handle: str):
    driver = _session().driver
    await asyncio.to_thread(driver.switch_to.window, handle)
    return await _context_payload(action="switch_to_window")


async def switch_to_parent_frame():
    driver = _session().driver
    await asyncio.to_thread(driver.switch_to.parent_frame)
    return await _context_payload(action="switch_to_parent_frame")


async def refresh():
    driver = _session().driver
    await asyncio.to_thread(driver.refresh)
    return await _context_payload(action="refresh")


async def switch_context(name: str):
    """Switch a mobile session between NATIVE_APP and its web views."""
    session = _session()
    if not session.supports_mobile_context:
        return json.dumps({
            "ok": False,
            "error": "mobile_context_unsupported",
            "message": "The session is not a mobile session; use switch_to_window instead.",
        })
    await asyncio.to_thread(session.execute, SWITCH_CONTEXT, {"name": name})
    return await _context_payload(action="switch_context")


async def query_context():
    """Ask a mobile session which context it is in; the answer also updates the tracker."""
    session = _session()
    if not session.supports_mobile_context:
        return json.dumps({
            "ok": False,
            "error": "mobile_context_unsupported",
            "message": "The session is not a mobile session.",
        })
    response = await asyncio.to_thread(session.execute, GET_CONTEXT)
    reported = response.get("value") if isinstance(response, dict) else None
    return await _context_payload(action="query_context", reported_context=reported)


async def list_windows():
    driver = _session().driver
    handles = await asyncio.to_thread(lambda: list(driver.window_handles))
    return await _context_payload(window_handles=handles)


__all__ = [
    "get_current_context",
    "switch_to_window",
    "switch_to_parent_frame",
    "refresh",
    "switch_context",
    "query_context",
    "list_windows",
]
