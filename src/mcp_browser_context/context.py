"""
Centralized session state management.

Holds the process-level state of the server: the active browser session,
its configuration, and the registry that maps sessions to context trackers.

Thread Safety:
    The SessionContext itself is NOT thread-safe. Tool bodies are serialized
    with the serialize_only decorator; the tracker registry has its own lock.

Usage:
    from mcp_browser_context.context import get_context

    ctx = get_context()
    if ctx.session is None:
        ctx.session = start_session(ctx.config)
"""

from typing import Optional
from dataclasses import dataclass, field
import asyncio

from .registry import ContextTrackerRegistry

import logging
logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """
    Encapsulates all session state.

    Attributes:
        session: Active TrackedSession, or None before start_session
        config: Environment configuration dictionary
        trackers: Session -> ContextTracker registry
        intra_process_lock: Asyncio lock for serializing tools within this process
    """

    session: Optional[object] = None

    # Configuration (should be immutable after initialization)
    config: dict = field(default_factory=dict)

    trackers: ContextTrackerRegistry = field(default_factory=ContextTrackerRegistry)

    intra_process_lock: Optional[asyncio.Lock] = None

    def is_session_started(self) -> bool:
        return self.session is not None

    def tracker(self):
        """Tracker of the active session, or None when no session is running."""
        if self.session is None:
            return None
        return self.trackers.get_or_create(self.session)

    def end_session(self) -> None:
        """Forget the active session and release its tracker."""
        if self.session is not None:
            self.trackers.discard(self.session)
        self.session = None

    def get_intra_process_lock(self) -> asyncio.Lock:
        """Get or create the intra-process asyncio lock."""
        if self.intra_process_lock is None:
            self.intra_process_lock = asyncio.Lock()
        return self.intra_process_lock


# ============================================================================
# Global Context Management
# ============================================================================

_global_context: Optional[SessionContext] = None


def get_context() -> SessionContext:
    """
    Get or create the global session context.

    This is a singleton pattern - all calls return the same context instance.
    Use reset_context() to clear the singleton (mainly for testing).
    """
    global _global_context

    if _global_context is None:
        from .config.environment import get_env_config

        try:
            config = get_env_config()
        except EnvironmentError as e:
            # Raised again when a session is started.
            logger.warning(f"Invalid configuration: {e}")
            config = {}
        _global_context = SessionContext(config=config)

    return _global_context


def reset_context() -> None:
    """
    Reset the global context.

    ⚠️  WARNING: This is primarily for testing. In production code,
    use close_session() instead of directly resetting context.
    """
    global _global_context
    _global_context = None


__all__ = [
    "SessionContext",
    "get_context",
    "reset_context",
]
