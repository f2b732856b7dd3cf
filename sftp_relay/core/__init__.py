"""
Core layer: domain types, interfaces and the error taxonomy.

Nothing in this package performs I/O.
"""

from .exceptions import (
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
]
