"""Configuration management for browser sessions."""

from .environment import (
    get_env_config,
    is_unit_test_mode,
    describe_config,
    SUPPORTED_BROWSERS,
)

__all__ = [
    "get_env_config",
    "is_unit_test_mode",
    "describe_config",
    "SUPPORTED_BROWSERS",
]
