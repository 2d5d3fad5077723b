"""
Selenium session wrapper that publishes command and result events.

Every call Selenium makes goes through ``WebDriver.execute``. TrackedSession
replaces that method on the driver instance, so commands issued through the
driver's own API (``driver.switch_to.window(...)``, ``driver.refresh()``) are
observed as well as commands sent through ``TrackedSession.execute``.

Events are emitted inline, before the triggering call returns:

    command: {"command": name, "body": params}
    result:  {"command": name, "result": {"value": value}}
             {"command": name, "result": {"error": message}}   (command raised)
"""

import asyncio
from typing import Callable, Dict, List, Optional

from selenium.webdriver.remote.webdriver import WebDriver

from ..constants import (
    COMMAND_EVENT,
    RESULT_EVENT,
    GET_CONTEXT,
    SWITCH_CONTEXT,
)

import logging
logger = logging.getLogger(__name__)


MOBILE_PLATFORMS = ("android", "ios")

# Mobile JSON Wire context endpoints, served by Appium.
MOBILE_COMMANDS = {
    GET_CONTEXT: ("GET", "/session/$sessionId/context"),
    SWITCH_CONTEXT: ("POST", "/session/$sessionId/context"),
}


def _register_mobile_commands(driver: WebDriver) -> None:
    executor = getattr(driver, "command_executor", None)
    if executor is None:
        return
    add_command = getattr(executor, "add_command", None)
    for name, (method, url) in MOBILE_COMMANDS.items():
        if callable(add_command):
            add_command(name, method, url)
            continue
        commands = getattr(executor, "_commands", None)
        if isinstance(commands, dict):
            commands.setdefault(name, (method, url))


class TrackedSession:
    """
    One automation connection: a Selenium driver plus its event stream.

    Attributes:
        driver: The instrumented Selenium WebDriver
        is_native_context: True while a mobile session drives the native app layer;
            kept up to date by the session's ContextTracker
    """

    def __init__(self, driver: WebDriver):
        self.driver = driver
        self._listeners: Dict[str, List[Callable]] = {COMMAND_EVENT: [], RESULT_EVENT: []}

        capabilities = getattr(driver, "capabilities", None) or {}
        self.is_native_context = bool(
            self.supports_mobile_context
            and not capabilities.get("browserName")
            and not capabilities.get("appium:autoWebview")
        )

        if self.supports_mobile_context:
            _register_mobile_commands(driver)

        self._driver_execute = driver.execute
        driver.execute = self._execute

    def __repr__(self):
        return f"<TrackedSession {self.session_id or '<no session>'}>"

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    @property
    def capabilities(self) -> dict:
        return getattr(self.driver, "capabilities", None) or {}

    @property
    def session_id(self) -> Optional[str]:
        return getattr(self.driver, "session_id", None)

    @property
    def supports_context_protocol(self) -> bool:
        """A BiDi socket was negotiated for this session."""
        return isinstance(self.capabilities.get("webSocketUrl"), str)

    @property
    def supports_mobile_context(self) -> bool:
        platform = self.capabilities.get("platformName") or ""
        return str(platform).lower() in MOBILE_PLATFORMS

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown session event: {event!r}")
        self._listeners[event].append(callback)

    def off(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown session event: {event!r}")
        try:
            self._listeners[event].remove(callback)
        except ValueError:
            pass

    def emit(self, event: str, payload: dict) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown session event: {event!r}")
        for callback in list(self._listeners[event]):
            callback(payload)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _execute(self, driver_command: str, params: Optional[dict] = None):
        self.emit(COMMAND_EVENT, {"command": driver_command, "body": dict(params or {})})
        try:
            response = self._driver_execute(driver_command, params)
        except Exception as e:
            self.emit(RESULT_EVENT, {"command": driver_command, "result": {"error": str(e)}})
            raise
        value = response.get("value") if isinstance(response, dict) else None
        self.emit(RESULT_EVENT, {"command": driver_command, "result": {"value": value}})
        return response

    def execute(self, driver_command: str, params: Optional[dict] = None):
        """Run a WebDriver command through the instrumented driver."""
        return self.driver.execute(driver_command, params)

    async def get_window_handle(self) -> str:
        """Fetch the active window handle without blocking the event loop."""
        return await asyncio.to_thread(lambda: self.driver.current_window_handle)

    def quit(self) -> None:
        self.driver.quit()


__all__ = [
    "TrackedSession",
    "MOBILE_PLATFORMS",
    "MOBILE_COMMANDS",
]
