"""
SSH session configuration.

This module provides the settings used to upgrade a proxied tunnel to an
authenticated SSH connection, and their conversion to asyncssh options.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ....core.exceptions import InvalidConfig
from ....core.interfaces.identity import IdentityVerifier
from ...config.models import DEFAULT_HANDSHAKE_TIMEOUT, ConnectionConfig
from .identity import AcceptAnyIdentity


@dataclass
class SSHSessionConfig:
    """SSH session settings for password-only login."""

    host: str
    port: int
    username: str
    password: str = field(repr=False)
    identity_verifier: IdentityVerifier = field(default_factory=AcceptAnyIdentity)
    handshake_timeout: float = DEFAULT_HANDSHAKE_TIMEOUT
    client_version: str = "SftpRelay_1.0"

    def __post_init__(self) -> None:
        """Post-initialization validation."""
        if not self.username:
            raise InvalidConfig("Username is required for SSH login")

        if self.password is None:
            raise InvalidConfig("Password is required for SSH login")

        if self.handshake_timeout is None or self.handshake_timeout <= 0:
            raise InvalidConfig(f"Handshake timeout must be positive, got {self.handshake_timeout}")

    @classmethod
    def from_connection_config(cls, config: ConnectionConfig) -> 'SSHSessionConfig':
        """Derive session settings from a connection configuration."""
        return cls(
            host=config.host,
            port=config.port,
            username=config.user,
            password=config.password,
            identity_verifier=config.identity_verifier or AcceptAnyIdentity(),
            handshake_timeout=config.timeouts.handshake,
            client_version=config.client_version,
        )

    def to_asyncssh_kwargs(self, client_factory: Optional[Any] = None) -> Dict[str, Any]:
        """Convert to asyncssh connection kwargs, excluding the socket."""
        kwargs: Dict[str, Any] = {
            'host': self.host,
            'port': self.port,
            'username': self.username,
            'password': self.password,
            'client_version': self.client_version,
            'known_hosts': self.identity_verifier.known_hosts(),
            # Password is the only authentication method offered
            'preferred_auth': 'password',
            'client_keys': None,
            'agent_path': None,
        }

        if client_factory is not None:
            kwargs['client_factory'] = client_factory

        return kwargs
