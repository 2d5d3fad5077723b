"""
Pure context-tracking transitions.

``ContextState`` is an immutable record; every function here maps
``(state, event)`` to a ``Transition`` holding the next state and the value the
session's native-app flag should take (``None`` leaves the flag unchanged).
The tracker applies transitions; nothing in this module touches a session.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .constants import NATIVE_APP
from .events import (
    CommandEvent,
    ResultEvent,
    SwitchToWindow,
    SwitchToParentFrame,
    Refresh,
    SwitchContext,
    GetContextResult,
    SwitchContextResult,
)


@dataclass(frozen=True)
class ContextState:
    """
    Attributes:
        current_context: Last resolved context (window handle, context id, or NATIVE_APP)
        mobile_context: Name passed to the last mobile ``switchContext`` command
    """

    current_context: Optional[str] = None
    mobile_context: Optional[str] = None


@dataclass(frozen=True)
class Transition:
    state: ContextState
    native_context: Optional[bool] = None


def set_current_context(state: ContextState, context: Optional[str]) -> Transition:
    """
    Store ``context`` unconditionally.

    The native flag follows a non-empty context (true only for NATIVE_APP);
    an empty context leaves the flag as it is.
    """
    native = (context == NATIVE_APP) if context else None
    return Transition(replace(state, current_context=context), native)


def _chain(first: Transition, second: Transition) -> Transition:
    native = second.native_context if second.native_context is not None else first.native_context
    return Transition(second.state, native)


def on_command(state: ContextState, event: CommandEvent) -> Transition:
    """Apply an outgoing command to the state."""
    transition = Transition(state)

    if isinstance(event, SwitchToWindow):
        transition = set_current_context(state, event.handle)

    # Both reset whatever context was known before. The handle is re-applied
    # afterwards; these commands normally carry none, so that write is empty.
    if isinstance(event, (SwitchToParentFrame, Refresh)):
        cleared = replace(transition.state, current_context=None)
        transition = _chain(transition, set_current_context(cleared, event.handle))

    if isinstance(event, SwitchContext):
        transition = Transition(
            replace(transition.state, mobile_context=event.name),
            transition.native_context,
        )

    return transition


def on_result(state: ContextState, event: ResultEvent) -> Transition:
    """Apply a completed command's result to the state."""
    transition = Transition(state)

    if isinstance(event, GetContextResult):
        transition = set_current_context(state, event.value)

    # Some backends acknowledge a context switch with a null value instead of
    # echoing the new context; fall back to the name we saw requested.
    if (
        isinstance(event, SwitchContextResult)
        and not event.failed
        and event.value is None
        and transition.state.mobile_context
    ):
        transition = _chain(
            transition,
            set_current_context(transition.state, transition.state.mobile_context),
        )

    return transition


__all__ = [
    "ContextState",
    "Transition",
    "set_current_context",
    "on_command",
    "on_result",
]
