"""
Configuration infrastructure.

This module provides the configuration records and the loader for
ambient client settings.
"""

from .models import (
    ClientSettings,
    ConnectionConfig,
    LoggingConfig,
    TimeoutConfig,
    DEFAULT_HANDSHAKE_TIMEOUT,
)
from .loader import ConfigLoader

__all__ = [
    "ClientSettings",
    "ConnectionConfig",
    "LoggingConfig",
    "TimeoutConfig",
    "DEFAULT_HANDSHAKE_TIMEOUT",
    "ConfigLoader",
]
