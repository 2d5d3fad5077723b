"""
Global constants and configuration defaults.
No dependencies - safe to import from anywhere.
"""

import os

# ============================================================================
# Context Values
# ============================================================================

NATIVE_APP = "NATIVE_APP"
"""Context value meaning the session drives the native app layer, not a web view."""


# ============================================================================
# Command Names
# ============================================================================

# Selenium uses the same names for the classic commands.
SWITCH_TO_WINDOW = "switchToWindow"
SWITCH_TO_PARENT_FRAME = "switchToParentFrame"
REFRESH = "refresh"

# Mobile (Appium-style) context commands.
SWITCH_CONTEXT = "switchContext"
GET_CONTEXT = "getContext"

COMMAND_EVENT = "command"
RESULT_EVENT = "result"


# ============================================================================
# Environment
# ============================================================================

UNIT_TESTS_ENV = "MBC_UNIT_TESTS"
"""When set to a non-empty value, context trackers are created disabled."""

TOOL_ERRORS_TRACEBACK = os.getenv("MBC_TOOL_ERRORS_TRACEBACK", "1") not in ("0", "false", "False")
"""Include tracebacks in tool error payloads."""


__all__ = [
    "NATIVE_APP",
    "SWITCH_TO_WINDOW",
    "SWITCH_TO_PARENT_FRAME",
    "REFRESH",
    "SWITCH_CONTEXT",
    "GET_CONTEXT",
    "COMMAND_EVENT",
    "RESULT_EVENT",
    "UNIT_TESTS_ENV",
    "TOOL_ERRORS_TRACEBACK",
]
