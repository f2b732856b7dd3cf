"""
SFTP Relay - SFTP sessions to remote hosts through a SOCKS5 proxy.

This package composes a SOCKS5 handshake, an SSH session tunneled through
the proxied connection, and an SFTP session on that SSH connection, and
hands back a single client owning both sessions.
"""

__version__ = "0.1.0"

# Public API exports
from .core.exceptions import (
    ErrorCode,
    Stage,
    SftpRelayError,
    InvalidConfig,
    InvalidProxyDescriptor,
    ProxyDialFailure,
    ProxyHandshakeFailure,
    HandshakeTimeout,
    HandshakeFailure,
    AuthenticationFailure,
    HostIdentityRejected,
    SubsystemUnavailable,
    ChannelOpenFailure,
    TeardownFailure,
)
from .core.domain.endpoints import ProxyCredentials, ProxyEndpoint
from .core.interfaces import ClientStatus, IdentityVerifier, ISftpClient
from .infrastructure.config import ClientSettings, ConfigLoader, ConnectionConfig, LoggingConfig, TimeoutConfig
from .infrastructure.logging import setup_logging
from .infrastructure.proxy import ProxyTunnel, Socks5Dialer, resolve_proxy_url
from .infrastructure.clients import (
    AcceptAnyIdentity,
    FixedFingerprint,
    KnownHostsStore,
    ProxiedSftpClient,
    open_client,
)

__all__ = [
    "ErrorCode",
    "Stage",
    "SftpRelayError",
    "InvalidConfig",
    "InvalidProxyDescriptor",
    "ProxyDialFailure",
    "ProxyHandshakeFailure",
    "HandshakeTimeout",
    "HandshakeFailure",
    "AuthenticationFailure",
    "HostIdentityRejected",
    "SubsystemUnavailable",
    "ChannelOpenFailure",
    "TeardownFailure",
    "ProxyCredentials",
    "ProxyEndpoint",
    "ClientStatus",
    "IdentityVerifier",
    "ISftpClient",
    "ClientSettings",
    "ConfigLoader",
    "ConnectionConfig",
    "LoggingConfig",
    "TimeoutConfig",
    "setup_logging",
    "ProxyTunnel",
    "Socks5Dialer",
    "resolve_proxy_url",
    "AcceptAnyIdentity",
    "FixedFingerprint",
    "KnownHostsStore",
    "ProxiedSftpClient",
    "open_client",
]
