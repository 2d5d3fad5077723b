#region Overview
"""
## Browsing Context Tracking

Context-addressed (WebDriver BiDi) and mobile commands must name the browsing
context they run in, but the automation protocol only reveals context changes as
side effects of other commands: switching windows, leaving a frame, reloading,
switching between the native app and a web view. This server keeps one
authoritative "current context" per session by observing those commands as they
happen.

Each session gets one ContextTracker. The tracker is only active when the session
negotiated a BiDi socket or is a mobile (Android/iOS) session; for plain classic
sessions every context read answers with an empty string.

## Configuration

Environment variables (a `.env` file in the working directory is loaded too):

* `MBC_WEBDRIVER_URL` - Remote WebDriver or Appium endpoint. Local driver when unset.
* `MBC_BROWSER` - chrome, firefox or edge.
* `MBC_HEADLESS` - 1 for headless.
* `MBC_ENABLE_BIDI` - 0 to skip negotiating BiDi.
* `MBC_CAPABILITIES` - JSON object of extra capabilities (Appium `platformName`, `appium:app`, ...).
"""
#endregion

#region Required Tools
"""
```
start_session
```
> Starts a session (or reports the running one) and resolves its current context.

```
get_current_context
```
> Returns the tracked context: a window handle, a BiDi context id, or NATIVE_APP.

```
switch_to_window / switch_to_parent_frame / refresh
```
> Classic navigation between windows and frames. The tracker follows along.

```
switch_context / query_context
```
> Mobile only. Switch between NATIVE_APP and WEBVIEW_* contexts, or ask the device.

```
close_session
```
> Quit the driver. Destructive; only on explicit request.
"""
#endregion

#region Imports
import logging
from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP
#endregion

#region Import from your package __init__.py
load_dotenv()

import mcp_browser_context as MBC
from mcp_browser_context.decorators import (
    tool_envelope,
    serialize_only,
    ensure_session_ready,
)
from mcp_browser_context.tools import session_management, contexts
#endregion

#region Logger
logger = logging.getLogger(__name__)
#endregion

#region Logging
logger.warning(f"mcp_browser_context from: {getattr(MBC, '__file__', '<namespace>')}")
#endregion

#region FastMCP Initialization
mcp = FastMCP("mcp_browser_context")
#endregion

#region Tools -- Session management
@mcp.tool()
@tool_envelope
@serialize_only
async def mcp_browser_context__start_session() -> str:
    """
    Start a browser session, or report the one that is already running.

    Returns:
        JSON with session id, capability flags and the resolved current context
    """
    return await session_management.start_session()

@mcp.tool()
@tool_envelope
@serialize_only
async def mcp_browser_context__close_session() -> str:
    """
    This is a destructive action and should not be done without explicit request from the user!

    Quits the driver and releases the session's context tracker.
    """
    return await session_management.close_session()
#endregion

#region Tools -- Contexts
@mcp.tool()
@tool_envelope
@serialize_only
@ensure_session_ready
async def mcp_browser_context__get_current_context() -> str:
    """
    Return the browsing context the session currently targets.

    Returns:
        JSON with current_context ('' when tracking is not enabled for the session),
        native_context and mobile_context
    """
    return await contexts.get_current_context()

@mcp.tool()
@tool_envelope
@serialize_only
@ensure_session_ready
async def mcp_browser_context__switch_to_window(handle: str) -> str:
    """
    Switch to another window or tab.

    Args:
        handle: Window handle (see list_windows)
    """
    return await contexts.switch_to_window(handle)

@mcp.tool()
@tool_envelope
@serialize_only
@ensure_session_ready
async def mcp_browser_context__switch_to_parent_frame() -> str:
    """Leave the current frame for its parent. The tracked context is re-resolved."""
    return await contexts.switch_to_parent_frame()

@mcp.tool()
@tool_envelope
@serialize_only
@ensure_session_ready
async def mcp_browser_context__refresh() -> str:
    """Reload the page. The tracked context is re-resolved."""
    return await contexts.refresh()

@mcp.tool()
@tool_envelope
@serialize_only
@ensure_session_ready
async def mcp_browser_context__switch_context(name: str) -> str:
    """
    Switch a mobile session's context.

    Args:
        name: 'NATIVE_APP' or a web view name such as 'WEBVIEW_1'
    """
    return await contexts.switch_context(name)

@mcp.tool()
@tool_envelope
@serialize_only
@ensure_session_ready
async def mcp_browser_context__query_context() -> str:
    """Ask a mobile session which context it is in."""
    return await contexts.query_context()

@mcp.tool()
@tool_envelope
@serialize_only
@ensure_session_ready(include_diagnostics=True)
async def mcp_browser_context__list_windows() -> str:
    """List the session's window handles together with the current context."""
    return await contexts.list_windows()
#endregion


if __name__ == "__main__":
    mcp.run()
