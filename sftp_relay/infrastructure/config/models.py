"""
Configuration models and data structures.

This module defines the configuration records used by the client,
providing type safety and validation for configuration values.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from ...core.exceptions import InvalidConfig
from ...core.interfaces.identity import IdentityVerifier


DEFAULT_HANDSHAKE_TIMEOUT = 10.0


@dataclass(frozen=True)
class TimeoutConfig:
    """
    Per-stage timeouts in seconds.

    The SSH handshake is always bounded. ``None`` leaves proxy_dial or
    sftp_init bounded only by the operating system.
    """
    handshake: float = DEFAULT_HANDSHAKE_TIMEOUT
    proxy_dial: Optional[float] = None
    sftp_init: Optional[float] = None

    def __post_init__(self) -> None:
        timeouts = [
            ("Handshake timeout", self.handshake),
            ("Proxy dial timeout", self.proxy_dial),
            ("SFTP init timeout", self.sftp_init),
        ]

        if self.handshake is None:
            raise InvalidConfig("Handshake timeout is required")

        for name, timeout in timeouts:
            if timeout is None:
                continue

            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise InvalidConfig(f"{name} must be a number of seconds, got {timeout!r}")

            if timeout <= 0:
                raise InvalidConfig(f"{name} must be positive, got {timeout}")


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_directory: str = "logs"
    max_file_size: str = "10MB"
    backup_count: int = 5
    console_enabled: bool = True
    file_enabled: bool = False


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Everything needed to open an SFTP session through a SOCKS5 proxy.

    Immutable once created. The proxy URL is checked by the proxy
    resolver, not here, so that a malformed URL is reported as
    InvalidProxyDescriptor.
    """
    host: str
    user: str
    password: str = field(repr=False)
    proxy_url: str
    port: int = 22
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    identity_verifier: Optional[IdentityVerifier] = field(default=None, compare=False)
    client_version: str = "SftpRelay_1.0"

    def __post_init__(self) -> None:
        """Post-initialization validation."""
        if not self.host:
            raise InvalidConfig("Target host is required")

        if not self.user:
            raise InvalidConfig("Username is required for SSH login")

        if self.password is None:
            raise InvalidConfig("Password is required for SSH login")

        if not isinstance(self.port, int) or not (1 <= self.port <= 65535):
            raise InvalidConfig(f"Target port must be between 1 and 65535, got {self.port}")

        if not isinstance(self.timeouts, TimeoutConfig):
            raise InvalidConfig("timeouts must be a TimeoutConfig")

        if self.identity_verifier is not None and not isinstance(self.identity_verifier, IdentityVerifier):
            raise InvalidConfig("identity_verifier must implement IdentityVerifier")

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        settings: Optional['ClientSettings'] = None
    ) -> 'ConnectionConfig':
        """
        Create configuration from dictionary.

        Args:
            data: Connection fields; ``proxyURL`` is accepted for ``proxy_url``
            settings: Loaded settings whose timeouts are the defaults that
                ``data["timeouts"]`` overrides field by field
        """
        if data is None:
            raise InvalidConfig("Configuration is missing")

        try:
            base_timeouts = asdict(settings.timeouts) if settings is not None else {}
            timeouts = TimeoutConfig(**{**base_timeouts, **data.get('timeouts', {})})
            return cls(
                host=data['host'],
                port=data.get('port', 22),
                user=data['user'],
                password=data['password'],
                proxy_url=data.get('proxy_url', data.get('proxyURL')),
                timeouts=timeouts,
                identity_verifier=data.get('identity_verifier'),
                client_version=data.get('client_version', "SftpRelay_1.0"),
            )
        except KeyError as e:
            raise InvalidConfig(f"Missing configuration field: {e.args[0]}") from e
        except TypeError as e:
            raise InvalidConfig(f"Invalid configuration: {e}") from e


@dataclass
class ClientSettings:
    """Ambient settings shared by every connection: logging and timeouts."""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            'logging': asdict(self.logging),
            'timeouts': asdict(self.timeouts),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClientSettings':
        """Create settings from dictionary."""
        try:
            return cls(
                logging=LoggingConfig(**data.get('logging', {})),
                timeouts=TimeoutConfig(**data.get('timeouts', {})),
            )
        except TypeError as e:
            raise InvalidConfig(f"Invalid settings: {e}") from e
