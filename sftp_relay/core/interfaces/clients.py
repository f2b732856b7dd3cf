"""
Client interfaces.

This module defines the contract for the proxied SFTP client.
"""

from abc import abstractmethod
from enum import Enum
from typing import Any, Optional

from .lifecycle import IClosable, IHealthCheckable


class ClientStatus(Enum):
    """Client connection status."""
    CONNECTED = "connected"
    CLOSING = "closing"
    CLOSED = "closed"
    ERROR = "error"


class ISftpClient(IClosable, IHealthCheckable):
    """Interface for a client owning an SSH session and its SFTP session."""

    @property
    @abstractmethod
    def ssh(self) -> Optional[Any]:
        """The SSH connection, or None once released."""
        pass

    @property
    @abstractmethod
    def sftp(self) -> Optional[Any]:
        """The SFTP session, or None once released."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if both sessions are held and open."""
        pass

    @abstractmethod
    def get_status(self) -> ClientStatus:
        """Get current client status."""
        pass
