# mcp_browser_context/tools/__init__.py
"""
MCP tool implementations - async functions that return JSON responses.

Each tool drives the Selenium session and reports the context the session's
ContextTracker has resolved afterwards.
"""

from .session_management import (
    start_session,
    close_session,
)

from .contexts import (
    get_current_context,
    switch_to_window,
    switch_to_parent_frame,
    refresh,
    switch_context,
    query_context,
    list_windows,
)

__all__ = [
    # Session management
    'start_session',
    'close_session',
    # Contexts
    'get_current_context',
    'switch_to_window',
    'switch_to_parent_frame',
    'refresh',
    'switch_context',
    'query_context',
    'list_windows',
]
