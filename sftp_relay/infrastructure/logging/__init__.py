"""
Logging infrastructure for the library.
"""

from .setup import setup_logging

__all__ = [
    "setup_logging",
]
