# mcp_browser_context/decorators/ensure.py
import json
import inspect
import functools


def _not_started_payload(include_diagnostics: bool) -> str:
    from ..utils.diagnostics import collect_diagnostics

    payload = {
        "ok": False,
        "error": "session_not_started",
        "message": "Browser session not started. Please call 'start_session' first.",
    }
    if include_diagnostics:
        payload["diagnostics"] = collect_diagnostics()
    return json.dumps(payload)


def ensure_session_ready(_func=None, *, include_diagnostics=False):
    """Return a 'session_not_started' error instead of running the tool when no session is active."""
    def decorator(fn):
        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def wrapper(*args, **kwargs):
                from ..context import get_context

                # Check if a session is running, but don't auto-start one
                if not get_context().is_session_started():
                    return _not_started_payload(include_diagnostics)
                return await fn(*args, **kwargs)
            return wrapper
        else:
            @functools.wraps(fn)
            def wrapper(*args, **kwargs):
                from ..context import get_context

                if not get_context().is_session_started():
                    return _not_started_payload(include_diagnostics)
                return fn(*args, **kwargs)
            return wrapper
    return decorator if _func is None else decorator(_func)
