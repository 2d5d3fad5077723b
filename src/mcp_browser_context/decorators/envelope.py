# mcp_browser_context/decorators/envelope.py

import json
import asyncio
import inspect
import datetime
import functools
import traceback
from typing import Any, Callable, Optional

from selenium.common.exceptions import WebDriverException

import logging
logger = logging.getLogger(__name__)


__all__ = [
    "tool_envelope",
]


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=repr)


def _describe_error(err: Exception) -> dict:
    """Type and message of ``err``; WebDriver errors also report the remote side."""
    if isinstance(err, WebDriverException):
        # str() of a WebDriverException folds in the remote stacktrace.
        message = err.msg or err.__class__.__name__
        return {
            "type": err.__class__.__name__,
            "message": message,
            "webdriver": {
                "has_screenshot": bool(err.screen),
                "remote_stacktrace": list(err.stacktrace or []),
            },
        }
    return {"type": err.__class__.__name__, "message": str(err)}


def _session_snapshot() -> Optional[dict]:
    """Tracked context of the active session at the time of the failure, if any.

    Reads the registry without creating a tracker: a failing tool must not
    subscribe a new one.
    """
    from ..context import get_context

    ctx = get_context()
    session = ctx.session
    if session is None:
        return None
    tracker = ctx.trackers.get(session)
    return {
        "session_id": getattr(session, "session_id", None),
        "native_context": getattr(session, "is_native_context", None),
        "tracking_enabled": tracker.enabled if tracker else False,
        "current_context": tracker.current_context if tracker else None,
        "mobile_context": tracker.mobile_context if tracker else None,
    }


def tool_envelope(func: Callable):
    """
    Decorator for MCP tool functions:
      - Works with both async and sync callables.
      - On success: the return value as a string (JSON for non-strings, "" for None).
      - On error: a JSON payload with the error, the active session's tracked
        context, and optionally the traceback.
    Environment:
      - Set MBC_TOOL_ERRORS_TRACEBACK=0 to suppress traceback in error payloads.
    """
    from ..constants import TOOL_ERRORS_TRACEBACK

    def _error_payload(err: Exception) -> str:
        error = _describe_error(err)
        logger.warning("Tool %s failed: %s: %s", func.__name__, error["type"], error["message"])
        payload = {
            "ok": False,
            "tool": func.__name__,
            "summary": f"{error['type']}: {error['message']}",
            "error": error,
            "session": _session_snapshot(),
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }
        if TOOL_ERRORS_TRACEBACK:
            payload["error"]["traceback"] = traceback.format_exc()
        return json.dumps(payload, ensure_ascii=False, default=repr)

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                return _error_payload(e)
            return _to_text(result)
        return wrapper

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            return _error_payload(e)
        return _to_text(result)
    return sync_wrapper
