"""Environment configuration and validation."""

import os
import json
from typing import Optional

from ..constants import UNIT_TESTS_ENV

import logging
logger = logging.getLogger(__name__)


SUPPORTED_BROWSERS = ("chrome", "firefox", "edge")


def _flag(name: str, default: str = "0") -> bool:
    return (os.getenv(name) or default).strip().lower() in ("1", "true", "yes", "on")


def get_env_config() -> dict:
    """
    Read environment variables and validate them.

    Optional:   MBC_WEBDRIVER_URL   Remote WebDriver / Appium endpoint. Without it a local
                                    driver is started through Selenium Manager.
                MBC_BROWSER         chrome | firefox | edge (default 'chrome')
                MBC_HEADLESS        1 to run headless (default 0)
                MBC_ENABLE_BIDI     0 to skip negotiating a BiDi socket (default 1)
                MBC_CAPABILITIES    JSON object merged into the session capabilities,
                                    e.g. '{"platformName": "Android", "appium:app": "/tmp/app.apk"}'

    Raises:
        EnvironmentError: If a value is present but invalid
    """
    remote_url = (os.getenv("MBC_WEBDRIVER_URL") or "").strip() or None

    browser = (os.getenv("MBC_BROWSER") or "chrome").strip().lower() or "chrome"
    if browser not in SUPPORTED_BROWSERS:
        raise EnvironmentError(
            f"MBC_BROWSER must be one of {', '.join(SUPPORTED_BROWSERS)}, got {browser!r}."
        )

    raw_caps = (os.getenv("MBC_CAPABILITIES") or "").strip()
    capabilities = {}
    if raw_caps:
        try:
            capabilities = json.loads(raw_caps)
        except ValueError as e:
            raise EnvironmentError(f"MBC_CAPABILITIES is not valid JSON: {e}") from e
        if not isinstance(capabilities, dict):
            raise EnvironmentError("MBC_CAPABILITIES must be a JSON object.")

    return {
        "remote_url": remote_url,
        "browser": browser,
        "headless": _flag("MBC_HEADLESS"),
        "enable_bidi": _flag("MBC_ENABLE_BIDI", default="1"),
        "capabilities": capabilities,
    }


def is_unit_test_mode() -> bool:
    """True when the process runs under the unit-test flag; trackers are disabled then."""
    return bool((os.getenv(UNIT_TESTS_ENV) or "").strip())


def describe_config(config: Optional[dict] = None) -> str:
    """Short one-line description of the configured endpoint, for logs and diagnostics."""
    if config is None:
        config = get_env_config()
    target = config.get("remote_url") or "local"
    return f"{config.get('browser', 'chrome')}@{target} (bidi={'on' if config.get('enable_bidi') else 'off'})"
