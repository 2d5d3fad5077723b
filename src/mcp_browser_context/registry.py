"""Registry mapping sessions to their context trackers."""

import threading
from typing import Dict, Optional, Tuple

from .tracker import ContextTracker

import logging
logger = logging.getLogger(__name__)


class ContextTrackerRegistry:
    """
    One ContextTracker per session, keyed by session identity.

    Sessions are compared by ``id()``, never by equality. The registry holds a
    reference to each session, so an id cannot be reused while its entry exists;
    whoever ends a session calls ``discard()`` to release it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[int, Tuple[object, ContextTracker]] = {}

    def get_or_create(self, session) -> ContextTracker:
        with self._lock:
            entry = self._entries.get(id(session))
            if entry is not None:
                return entry[1]

            tracker = ContextTracker(session)
            self._entries[id(session)] = (session, tracker)
            logger.debug("Created context tracker for session %r (enabled=%s)", session, tracker.enabled)
            return tracker

    def get(self, session) -> Optional[ContextTracker]:
        with self._lock:
            entry = self._entries.get(id(session))
            return entry[1] if entry is not None else None

    def discard(self, session) -> None:
        with self._lock:
            self._entries.pop(id(session), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, session) -> bool:
        return self.get(session) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def get_context_tracker(session) -> ContextTracker:
    """Return the tracker for ``session`` from the process-wide registry, creating it on first use."""
    from .context import get_context

    return get_context().trackers.get_or_create(session)


__all__ = [
    "ContextTrackerRegistry",
    "get_context_tracker",
]
