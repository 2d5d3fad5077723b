"""
Typed views of the session's ``command`` and ``result`` event records.

The session emits plain dicts:

    command: {"command": "switchToWindow", "body": {"handle": "CDwindow-1"}}
    result:  {"command": "getContext", "result": {"value": "NATIVE_APP"}}

A command that raised produces ``{"result": {"error": "..."}}`` instead of a value.

Records are decoded once at the subscription boundary. Only the command kinds the
tracker acts on get their own type; everything else decodes to ``OtherCommand`` /
``OtherResult``. Missing or malformed fields decode to ``None``, never raise.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from .constants import (
    SWITCH_TO_WINDOW,
    SWITCH_TO_PARENT_FRAME,
    REFRESH,
    SWITCH_CONTEXT,
    GET_CONTEXT,
)


# ============================================================================
# Command events
# ============================================================================

@dataclass(frozen=True)
class SwitchToWindow:
    handle: Optional[str] = None


@dataclass(frozen=True)
class SwitchToParentFrame:
    handle: Optional[str] = None


@dataclass(frozen=True)
class Refresh:
    handle: Optional[str] = None


@dataclass(frozen=True)
class SwitchContext:
    name: Optional[str] = None


@dataclass(frozen=True)
class OtherCommand:
    command: Optional[str] = None


CommandEvent = Union[SwitchToWindow, SwitchToParentFrame, Refresh, SwitchContext, OtherCommand]


# ============================================================================
# Result events
# ============================================================================

@dataclass(frozen=True)
class GetContextResult:
    value: Optional[str] = None


@dataclass(frozen=True)
class SwitchContextResult:
    value: Any = None
    failed: bool = False


@dataclass(frozen=True)
class OtherResult:
    command: Optional[str] = None


ResultEvent = Union[GetContextResult, SwitchContextResult, OtherResult]


# ============================================================================
# Decoding
# ============================================================================

def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def decode_command(record: Any) -> CommandEvent:
    """Decode a raw ``command`` event record."""
    record = _mapping(record)
    command = _text(record.get("command"))
    body = _mapping(record.get("body"))

    if command == SWITCH_TO_WINDOW:
        return SwitchToWindow(handle=_text(body.get("handle")))
    if command == SWITCH_TO_PARENT_FRAME:
        return SwitchToParentFrame(handle=_text(body.get("handle")))
    if command == REFRESH:
        return Refresh(handle=_text(body.get("handle")))
    if command == SWITCH_CONTEXT:
        return SwitchContext(name=_text(body.get("name")))
    return OtherCommand(command=command)


def decode_result(record: Any) -> ResultEvent:
    """Decode a raw ``result`` event record."""
    record = _mapping(record)
    command = _text(record.get("command"))
    result = _mapping(record.get("result"))
    failed = "error" in result

    if command == GET_CONTEXT:
        if failed:
            return OtherResult(command=command)
        return GetContextResult(value=_text(result.get("value")))
    if command == SWITCH_CONTEXT:
        # Only an explicit null counts as an empty acknowledgement; a record
        # without a value is malformed.
        if not failed and "value" not in result:
            return OtherResult(command=command)
        return SwitchContextResult(value=result.get("value"), failed=failed)
    return OtherResult(command=command)


__all__ = [
    "SwitchToWindow",
    "SwitchToParentFrame",
    "Refresh",
    "SwitchContext",
    "OtherCommand",
    "CommandEvent",
    "GetContextResult",
    "SwitchContextResult",
    "OtherResult",
    "ResultEvent",
    "decode_command",
    "decode_result",
]
