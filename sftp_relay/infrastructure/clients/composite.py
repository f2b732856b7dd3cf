"""
Proxied SFTP client.

This module provides the client that owns an SSH connection reached
through a SOCKS5 proxy together with the SFTP session layered on it.
Construction is all-or-nothing; teardown releases both sessions.
"""

import time
from contextlib import AsyncExitStack
from typing import Any, Callable, Dict, List, Optional

import asyncssh
from loguru import logger

from ...core.domain.endpoints import ProxyEndpoint, format_address
from ...core.exceptions import InvalidConfig, SftpRelayError, TeardownFailure
from ...core.interfaces.clients import ClientStatus, ISftpClient
from ..config.models import ConnectionConfig
from ..proxy.resolver import resolve_proxy_url
from ..proxy.socks5 import Socks5Dialer
from .sftp.establisher import establish_sftp_session
from .ssh.config import SSHSessionConfig
from .ssh.establisher import establish_ssh_session

DialerFactory = Callable[[ProxyEndpoint, Optional[float]], Socks5Dialer]


class ProxiedSftpClient(ISftpClient):
    """
    SFTP client whose SSH transport runs through a SOCKS5 proxy.

    Instances are normally created with :meth:`connect`. The SFTP session
    exposes the file operations (``get``, ``put``, ``listdir``, ``rename``,
    ``remove`` ...) unchanged; the SSH connection stays reachable for
    opening further channels.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        ssh: Optional[asyncssh.SSHClientConnection],
        sftp: Optional[asyncssh.SFTPClient],
        name: Optional[str] = None
    ):
        """
        Initialize the client around already established sessions.

        Args:
            config: Configuration the sessions were opened with
            ssh: SSH connection, owned by this client from now on
            sftp: SFTP session on ``ssh``, owned by this client from now on
            name: Client name for identification
        """
        self._config = config
        self._ssh = ssh
        self._sftp = sftp
        self._name = name or f"{config.user}@{format_address(config.host, config.port)}"
        self._status = ClientStatus.CONNECTED if ssh is not None else ClientStatus.CLOSED
        self._closed = False
        self._connected_at = time.time()

    @classmethod
    async def connect(
        cls,
        config: Optional[ConnectionConfig],
        *,
        dialer_factory: DialerFactory = Socks5Dialer,
        name: Optional[str] = None
    ) -> 'ProxiedSftpClient':
        """
        Resolve the proxy, dial the target, log in over SSH and start SFTP.

        Either every stage succeeds and a usable client is returned, or the
        stage error is raised after everything opened so far was released.

        Args:
            config: Connection configuration
            dialer_factory: Builds the dialer from the endpoint and dial timeout
            name: Client name for identification

        Raises:
            SftpRelayError: The subclass names the failing stage.
        """
        if config is None:
            raise InvalidConfig("Connection configuration is missing")

        if not isinstance(config, ConnectionConfig):
            raise InvalidConfig(f"Expected ConnectionConfig, got {type(config).__name__}")

        target = format_address(config.host, config.port)

        try:
            endpoint = resolve_proxy_url(config.proxy_url)
            session_settings = SSHSessionConfig.from_connection_config(config)
            dialer = dialer_factory(endpoint, config.timeouts.proxy_dial)

            async with AsyncExitStack() as stack:
                tunnel = await dialer.dial(config.host, config.port)
                stack.callback(tunnel.close)

                ssh = await establish_ssh_session(tunnel, session_settings)
                stack.push_async_callback(_release_after_failure, "SSH connection", _close_ssh, ssh)

                sftp = await establish_sftp_session(ssh, config.timeouts.sftp_init)
                stack.push_async_callback(_release_after_failure, "SFTP session", _close_sftp, sftp)

                client = cls(config, ssh, sftp, name=name)
                stack.pop_all()

        except SftpRelayError as e:
            logger.error(f"Failed to open SFTP client for {target}: {e}")
            raise

        logger.info(f"SFTP client {client.name} ready via proxy {endpoint.address}")
        return client

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def ssh(self) -> Optional[asyncssh.SSHClientConnection]:
        return self._ssh

    @property
    def sftp(self) -> Optional[asyncssh.SFTPClient]:
        return self._sftp

    @property
    def status(self) -> ClientStatus:
        return self._status

    def get_status(self) -> ClientStatus:
        """Get current client status."""
        return self._status

    def is_connected(self) -> bool:
        """Check if both sessions are held and the SSH connection is alive."""
        return (
            self._status == ClientStatus.CONNECTED
            and self._sftp is not None
            and self._ssh_alive()
        )

    async def close(self) -> None:
        """
        Close the SFTP session, then the SSH connection.

        Both are attempted even if the first fails. Calling close() again
        is a no-op.

        Raises:
            TeardownFailure: With every release error that occurred.
        """
        if self._closed:
            return

        self._closed = True
        self._update_status(ClientStatus.CLOSING)

        sftp, self._sftp = self._sftp, None
        ssh, self._ssh = self._ssh, None
        errors: List[BaseException] = []

        if sftp is not None and ssh is not None and ssh.is_closed():
            # The SFTP channel ended with its connection
            logger.debug(f"SSH connection of {self._name} already closed, skipping SFTP exit")
        elif sftp is not None:
            try:
                await _close_sftp(sftp)
            except Exception as e:
                logger.error(f"Failed to close SFTP session of {self._name}: {e}")
                errors.append(e)

        if ssh is not None:
            try:
                await _close_ssh(ssh)
            except Exception as e:
                logger.error(f"Failed to close SSH connection of {self._name}: {e}")
                errors.append(e)

        if errors:
            self._update_status(ClientStatus.ERROR)
            raise TeardownFailure(errors) from errors[0]

        self._update_status(ClientStatus.CLOSED)
        logger.info(f"SFTP client {self._name} closed")

    async def check_health(self) -> Dict[str, Any]:
        """Perform health check."""
        if self._status == ClientStatus.CONNECTED and self._ssh is not None and not self._ssh_alive():
            logger.warning(f"SSH connection of {self._name} was closed by the remote side")
            self._update_status(ClientStatus.ERROR)

        return {
            "healthy": self.is_connected(),
            "status": self._status.value,
            "details": {
                "name": self._name,
                "target": format_address(self._config.host, self._config.port),
                "user": self._config.user,
                "ssh_open": self._ssh_alive(),
                "sftp_open": self._sftp is not None,
                "uptime": time.time() - self._connected_at,
            }
        }

    async def __aenter__(self) -> 'ProxiedSftpClient':
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _ssh_alive(self) -> bool:
        return self._ssh is not None and not self._ssh.is_closed()

    def _update_status(self, status: ClientStatus) -> None:
        """Update client status."""
        old_status = self._status
        self._status = status

        if old_status != status:
            logger.debug(f"Client {self._name} status changed: {old_status.value} -> {status.value}")

    def __repr__(self) -> str:
        return f"<ProxiedSftpClient {self._name} ({self._status.value})>"


async def open_client(
    config: Optional[ConnectionConfig],
    *,
    dialer_factory: DialerFactory = Socks5Dialer,
    name: Optional[str] = None
) -> ProxiedSftpClient:
    """Open a proxied SFTP client; see :meth:`ProxiedSftpClient.connect`."""
    return await ProxiedSftpClient.connect(config, dialer_factory=dialer_factory, name=name)


async def _close_sftp(sftp: asyncssh.SFTPClient) -> None:
    sftp.exit()
    await sftp.wait_closed()


async def _close_ssh(ssh: asyncssh.SSHClientConnection) -> None:
    ssh.close()
    await ssh.wait_closed()


async def _release_after_failure(
    what: str,
    release: Callable[[Any], Any],
    resource: Any
) -> None:
    """Release a resource while a construction error is propagating."""
    try:
        await release(resource)
    except Exception as e:
        # The construction error is the one reported to the caller
        logger.warning(f"Failed to release {what} after construction error: {e}")
