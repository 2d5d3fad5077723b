"""WebDriver creation and session startup."""

from typing import Optional

from selenium import webdriver

from .session import TrackedSession
from ..config import describe_config

import logging
logger = logging.getLogger(__name__)


def _build_options(config: dict):
    browser = config.get("browser") or "chrome"

    if browser == "firefox":
        from selenium.webdriver.firefox.options import Options
        options = Options()
        if config.get("headless"):
            options.add_argument("-headless")
    elif browser == "edge":
        from selenium.webdriver.edge.options import Options
        options = Options()
        if config.get("headless"):
            options.add_argument("--headless=new")
    else:
        from selenium.webdriver.chrome.options import Options
        options = Options()
        if config.get("headless"):
            options.add_argument("--headless=new")

    # Asking for a socket URL is how a BiDi session is negotiated.
    if config.get("enable_bidi"):
        options.set_capability("webSocketUrl", True)

    for name, value in (config.get("capabilities") or {}).items():
        options.set_capability(name, value)

    return options


def create_webdriver(config: dict) -> webdriver.Remote:
    """
    Create a Selenium driver from the environment configuration.

    A configured remote URL (Selenium Grid, Appium) takes precedence; otherwise a
    local driver is started and Selenium Manager resolves the driver binary.
    """
    logger.info(f"Creating driver for {describe_config(config)}")
    options = _build_options(config)
    remote_url = config.get("remote_url")

    if remote_url:
        logger.info(f"Connecting to remote WebDriver at {remote_url}")
        return webdriver.Remote(command_executor=remote_url, options=options)

    browser = config.get("browser") or "chrome"
    logger.info(f"Starting local {browser} driver")
    if browser == "firefox":
        return webdriver.Firefox(options=options)
    if browser == "edge":
        return webdriver.Edge(options=options)
    return webdriver.Chrome(options=options)


def start_session(config: dict, driver: Optional[webdriver.Remote] = None) -> TrackedSession:
    """Create (or adopt) a driver and wrap it in a TrackedSession."""
    if driver is None:
        driver = create_webdriver(config)
    session = TrackedSession(driver)
    logger.info(
        f"Session {session.session_id} started "
        f"(context_protocol={session.supports_context_protocol}, mobile={session.supports_mobile_context})"
    )
    return session


__all__ = [
    "create_webdriver",
    "start_session",
]
