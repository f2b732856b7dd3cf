"""
Host identity verification interface.

The SSH establisher asks an IdentityVerifier how the server host key
should be checked. Implementations live in
``sftp_relay.infrastructure.clients.ssh.identity``.
"""

from abc import ABC, abstractmethod
from typing import Any


class IdentityVerifier(ABC):
    """Strategy deciding whether a server host key is trusted."""

    #: True for strategies that accept keys without checking them
    insecure: bool = False

    @abstractmethod
    def known_hosts(self) -> Any:
        """
        Value passed to asyncssh as ``known_hosts``.

        ``None`` disables host key checking entirely; anything else is a
        known_hosts source, with keys not found there handed to verify().
        """
        pass

    @abstractmethod
    def verify(self, host: str, port: int, key: Any) -> bool:
        """
        Decide on a host key not already trusted by known_hosts().

        Args:
            host: Claimed host name of the server
            port: Claimed port of the server
            key: The server's public key (asyncssh.SSHKey)

        Returns:
            True to accept the key
        """
        pass
