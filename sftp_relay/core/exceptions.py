"""
Error taxonomy for the sftp-relay library.

Every stage of client construction raises a subclass of SftpRelayError
carrying the failing stage and an error code, with the underlying
exception chained as ``__cause__``.
"""

from enum import Enum
from typing import Any, List, Optional, Sequence


class ErrorCode(Enum):
    """Error codes for each failure kind."""
    INVALID_CONFIG = 20001
    INVALID_PROXY_DESCRIPTOR = 20002
    PROXY_DIAL_FAILURE = 20003
    PROXY_HANDSHAKE_FAILURE = 20004
    HANDSHAKE_TIMEOUT = 20005
    HANDSHAKE_FAILURE = 20006
    AUTHENTICATION_FAILURE = 20007
    HOST_IDENTITY_REJECTED = 20008
    SUBSYSTEM_UNAVAILABLE = 20009
    CHANNEL_OPEN_FAILURE = 20010
    TEARDOWN_FAILURE = 20011


class Stage(Enum):
    """Construction and teardown stages."""
    CONFIG = "config"
    PROXY_RESOLVE = "proxy_resolve"
    PROXY_DIAL = "proxy_dial"
    PROXY_HANDSHAKE = "proxy_handshake"
    SSH_HANDSHAKE = "ssh_handshake"
    SFTP_INIT = "sftp_init"
    TEARDOWN = "teardown"


class SftpRelayError(Exception):
    """Base class for all sftp-relay errors."""

    code: ErrorCode = ErrorCode.INVALID_CONFIG
    stage: Stage = Stage.CONFIG

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.stage.value}] {self.message}"


class InvalidConfig(SftpRelayError, ValueError):
    """Configuration is missing or invalid"""
    code = ErrorCode.INVALID_CONFIG
    stage = Stage.CONFIG


class InvalidProxyDescriptor(SftpRelayError, ValueError):
    """Proxy URL cannot be parsed as a structured endpoint"""
    code = ErrorCode.INVALID_PROXY_DESCRIPTOR
    stage = Stage.PROXY_RESOLVE


class ProxyDialFailure(SftpRelayError):
    """TCP connection to the proxy could not be made"""
    code = ErrorCode.PROXY_DIAL_FAILURE
    stage = Stage.PROXY_DIAL


class ProxyHandshakeFailure(SftpRelayError):
    """Proxy rejected the SOCKS5 negotiation or cannot reach the target"""
    code = ErrorCode.PROXY_HANDSHAKE_FAILURE
    stage = Stage.PROXY_HANDSHAKE

    def __init__(self, message: str, reply_code: Optional[int] = None, details: Optional[Any] = None):
        self.reply_code = reply_code
        super().__init__(message, details)


class HandshakeTimeout(SftpRelayError):
    """SSH negotiation exceeded the configured timeout"""
    code = ErrorCode.HANDSHAKE_TIMEOUT
    stage = Stage.SSH_HANDSHAKE


class HandshakeFailure(SftpRelayError):
    """SSH negotiation failed for a reason other than auth or timeout"""
    code = ErrorCode.HANDSHAKE_FAILURE
    stage = Stage.SSH_HANDSHAKE


class AuthenticationFailure(SftpRelayError):
    """Server rejected the password"""
    code = ErrorCode.AUTHENTICATION_FAILURE
    stage = Stage.SSH_HANDSHAKE


class HostIdentityRejected(SftpRelayError):
    """Identity verifier refused the server host key"""
    code = ErrorCode.HOST_IDENTITY_REJECTED
    stage = Stage.SSH_HANDSHAKE


class SubsystemUnavailable(SftpRelayError):
    """Remote does not provide a working SFTP subsystem"""
    code = ErrorCode.SUBSYSTEM_UNAVAILABLE
    stage = Stage.SFTP_INIT


class ChannelOpenFailure(SftpRelayError):
    """SSH session could not allocate the SFTP channel"""
    code = ErrorCode.CHANNEL_OPEN_FAILURE
    stage = Stage.SFTP_INIT


class TeardownFailure(SftpRelayError):
    """
    One or more sessions failed to release cleanly.

    All causes are kept in ``errors``; the first one is also chained
    as ``__cause__``.
    """
    code = ErrorCode.TEARDOWN_FAILURE
    stage = Stage.TEARDOWN

    def __init__(self, errors: Sequence[BaseException]):
        self.errors: List[BaseException] = list(errors)
        message = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(f"Failed to release {len(self.errors)} resource(s): {message}")
