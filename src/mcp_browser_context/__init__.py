"""
Browsing-context tracking for Selenium and Appium sessions.

A session changes the browsing context it targets as a side effect of ordinary
commands. ContextTracker observes a session's command and result events and keeps
one reconciled "current context": a window handle, a BiDi context id, or
NATIVE_APP for mobile sessions driving the native layer.

    from mcp_browser_context import TrackedSession, get_context_tracker

    session = TrackedSession(driver)
    tracker = get_context_tracker(session)
    context = await tracker.get_current_context()
"""

from .constants import NATIVE_APP
from .tracker import ContextTracker
from .registry import ContextTrackerRegistry, get_context_tracker
from .browser.session import TrackedSession

__all__ = [
    "NATIVE_APP",
    "ContextTracker",
    "ContextTrackerRegistry",
    "get_context_tracker",
    "TrackedSession",
]
