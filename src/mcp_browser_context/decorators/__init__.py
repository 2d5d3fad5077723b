# mcp_browser_context/decorators/__init__.py
#
# Re-exports decorators from their respective modules.

from .ensure import ensure_session_ready
from .locking import serialize_only
from .envelope import tool_envelope

__all__ = [
    "ensure_session_ready",
    "serialize_only",
    "tool_envelope",
]
