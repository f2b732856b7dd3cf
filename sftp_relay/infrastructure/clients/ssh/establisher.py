"""
SSH session establishment over a proxied tunnel.

The tunnel socket is released into asyncssh, which becomes its only
owner. If the upgrade fails, the socket is closed before the error
reaches the caller.
"""

import asyncio
import socket
from typing import Any, Dict

import asyncssh
from loguru import logger

from ....core.exceptions import (
    AuthenticationFailure,
    HandshakeFailure,
    HandshakeTimeout,
    HostIdentityRejected,
)
from ...proxy.socks5 import ProxyTunnel
from .config import SSHSessionConfig
from .identity import VerifyingSSHClient


async def establish_ssh_session(
    tunnel: ProxyTunnel,
    settings: SSHSessionConfig
) -> asyncssh.SSHClientConnection:
    """
    Upgrade a proxied tunnel to an authenticated SSH connection.

    Args:
        tunnel: Tunnel to the target; its socket is consumed
        settings: SSH session settings

    Returns:
        The authenticated connection, able to open further channels

    Raises:
        HandshakeTimeout: If negotiation exceeds the handshake timeout.
        AuthenticationFailure: If the server rejects the password.
        HostIdentityRejected: If the verifier refuses the host key.
        HandshakeFailure: For any other negotiation failure.
    """
    target = tunnel.target_address
    verifier = settings.identity_verifier

    if verifier.insecure:
        logger.warning(f"Host identity of {target} will not be verified ({verifier!r})")

    kwargs = settings.to_asyncssh_kwargs(
        client_factory=lambda: VerifyingSSHClient(verifier, settings.host, settings.port)
    )

    sock = tunnel.release()
    try:
        connection = await _connect(sock, kwargs, settings.handshake_timeout, target)
    except BaseException:
        sock.close()
        raise

    logger.info(f"SSH session established to {target} as '{settings.username}'")
    return connection


async def _connect(
    sock: socket.socket,
    kwargs: Dict[str, Any],
    timeout: float,
    target: str
) -> asyncssh.SSHClientConnection:
    """Run the asyncssh handshake and map its failures."""
    try:
        return await asyncio.wait_for(asyncssh.connect(sock=sock, **kwargs), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise HandshakeTimeout(f"SSH handshake with {target} exceeded {timeout}s") from e
    except asyncssh.PermissionDenied as e:
        raise AuthenticationFailure(
            f"SSH server {target} rejected the password for '{kwargs['username']}'"
        ) from e
    except asyncssh.HostKeyNotVerifiable as e:
        raise HostIdentityRejected(f"Host key of {target} was not accepted: {e}") from e
    except (asyncssh.Error, OSError) as e:
        raise HandshakeFailure(f"SSH handshake with {target} failed: {e}") from e
