"""Diagnostics and debugging information utility functions."""

import sys
import platform
from typing import Optional
import selenium

from ..context import get_context


def collect_diagnostics(
    session=None,
    exc: Optional[Exception] = None,
    config: Optional[dict] = None
) -> str:
    """
    Collect diagnostic information about the session and environment.

    Args:
        session: TrackedSession (if None, will try to get from context)
        exc: Exception that occurred (can be None)
        config: Configuration dictionary (if None, will get from context)

    Returns:
        str: Formatted diagnostic information
    """
    ctx = get_context()

    if session is None:
        session = ctx.session

    if config is None:
        config = ctx.config

    parts = [
        f"OS                : {platform.system()} {platform.release()}",
        f"Python            : {sys.version.split()[0]}",
        f"Selenium          : {getattr(selenium, '__version__', '?')}",
        f"Browser           : {config.get('browser') or '<unset>'}",
        f"Remote URL        : {config.get('remote_url') or '<local>'}",
        f"BiDi requested    : {bool(config.get('enable_bidi'))}",
        f"Session started   : {session is not None}",
    ]

    if session is not None:
        parts += [
            f"Session ID        : {getattr(session, 'session_id', None) or '<unknown>'}",
            f"Context protocol  : {getattr(session, 'supports_context_protocol', False)}",
            f"Mobile context    : {getattr(session, 'supports_mobile_context', False)}",
            f"Native context    : {getattr(session, 'is_native_context', False)}",
        ]
        tracker = ctx.trackers.get(session)
        if tracker is not None:
            parts += [
                f"Tracking enabled  : {tracker.enabled}",
                f"Current context   : {tracker.current_context or '<unresolved>'}",
                f"Mobile context    : {tracker.mobile_context or '<none>'}",
            ]

    if exc:
        parts += [
            "---- ERROR ----",
            f"Error type        : {type(exc).__name__}",
            f"Error message     : {exc}",
        ]

    return "\n".join(parts)


__all__ = ['collect_diagnostics']
