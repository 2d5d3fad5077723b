"""Session lifecycle tool implementations."""

import json
import asyncio

from ..context import get_context
from ..config import get_env_config
from ..browser.driver import start_session as _start_session
from ..utils.diagnostics import collect_diagnostics

import logging
logger = logging.getLogger(__name__)


async def start_session():
    """
    Start a browser session, or report the one already running.

    Returns:
        JSON string with session info and the resolved current context
    """
    ctx = get_context()

    if ctx.session is None:
        # Re-read so configuration errors surface here rather than at import.
        ctx.config = get_env_config()
        try:
            ctx.session = await asyncio.to_thread(_start_session, ctx.config)
        except Exception as e:
            return json.dumps({
                "ok": False,
                "error": "session_start_failed",
                "message": str(e),
                "diagnostics": collect_diagnostics(None, e, ctx.config),
            })
        already_running = False
    else:
        already_running = True

    session = ctx.session
    tracker = ctx.tracker()
    current = await tracker.get_current_context()

    return json.dumps({
        "ok": True,
        "session_id": session.session_id,
        "already_running": already_running,
        "context_protocol": session.supports_context_protocol,
        "mobile": session.supports_mobile_context,
        "tracking_enabled": tracker.enabled,
        "current_context": current,
        "native_context": session.is_native_context,
        "message": f"Session {session.session_id} ready.",
    })


async def close_session():
    """Quit the driver and release the session's tracker."""
    ctx = get_context()
    session = ctx.session

    if session is None:
        return json.dumps({"ok": True, "closed": False, "message": "No session to close."})

    session_id = session.session_id
    errors = []
    try:
        await asyncio.to_thread(session.quit)
    except Exception as e:
        logger.warning(f"Error quitting driver for session {session_id}: {e}")
        errors.append(str(e))
    finally:
        ctx.end_session()

    return json.dumps({
        "ok": not errors,
        "closed": True,
        "session_id": session_id,
        "errors": errors,
    })


__all__ = [
    "start_session",
    "close_session",
]
