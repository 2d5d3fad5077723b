"""
Tracks the browsing context a session currently targets.

Many context-addressed (BiDi) and mobile commands must run against a specific
context, but the protocol only reveals context changes as side effects of other
commands. The tracker watches the session's ``command`` and ``result`` events,
folds them into a ``ContextState`` and exposes the reconciled current context.

Session interface consumed:
    supports_context_protocol: bool
    supports_mobile_context: bool
    is_native_context: bool (read and written)
    async get_window_handle() -> str
    on(event_name, callback)

Usage:
    tracker = ContextTracker(session)
    context = await tracker.get_current_context()
"""

from dataclasses import replace
from typing import Optional

from .config import is_unit_test_mode
from .constants import NATIVE_APP, COMMAND_EVENT, RESULT_EVENT
from .events import decode_command, decode_result
from .state import (
    ContextState,
    Transition,
    set_current_context,
    on_command,
    on_result,
)

import logging
logger = logging.getLogger(__name__)


class ContextTracker:
    def __init__(self, session):
        self._session = session
        self._state = ContextState()
        self._enabled = self._is_enabled()

        if not self._enabled:
            logger.info("Context tracking disabled for session %r", session)
            return

        session.on(COMMAND_EVENT, self._on_command)
        session.on(RESULT_EVENT, self._on_result)

    def _is_enabled(self) -> bool:
        """Only track when the session is context-aware and we're not in unit tests."""
        if is_unit_test_mode():
            return False
        return bool(
            getattr(self._session, "supports_context_protocol", False)
            or getattr(self._session, "supports_mobile_context", False)
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def current_context(self) -> Optional[str]:
        return self._state.current_context

    @property
    def mobile_context(self) -> Optional[str]:
        return self._state.mobile_context

    # ------------------------------------------------------------------
    # Event callbacks (invoked inline by the session)
    # ------------------------------------------------------------------

    def _on_command(self, record) -> None:
        event = decode_command(record)
        self._apply(on_command(self._state, event), event)

    def _on_result(self, record) -> None:
        event = decode_result(record)
        self._apply(on_result(self._state, event), event)

    def _apply(self, transition: Transition, event) -> None:
        if transition.state != self._state:
            logger.debug("Context %r -> %r after %r", self._state.current_context, transition.state.current_context, event)
        self._state = transition.state
        if transition.native_context is not None:
            self._session.is_native_context = transition.native_context

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def initialize(self) -> str:
        """
        Resolve the context at the start of a session.

        Returns '' without touching state when tracking is disabled. Errors from
        fetching the window handle propagate and leave the context unset.
        """
        if not self._enabled:
            return ""

        if self._session.is_native_context:
            context = NATIVE_APP
        else:
            context = await self._session.get_window_handle()

        self._state = replace(self._state, current_context=context)
        return context

    def set_current_context(self, context: Optional[str]) -> None:
        if not self._enabled:
            return
        self._apply(set_current_context(self._state, context), "set_current_context")

    async def get_current_context(self) -> str:
        if not self._state.current_context:
            return await self.initialize()
        return self._state.current_context


__all__ = ["ContextTracker"]
