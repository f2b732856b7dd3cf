"""
SOCKS5 tunnel dialer.

Opens a CONNECT tunnel with PySocks, which implements RFC 1928 and
RFC 1929 username/password authentication, and hands the resulting
socket over as a ProxyTunnel whose far end is the requested target.
"""

import asyncio
import ipaddress
import re
import socket
from typing import Any, Optional

import socks
from loguru import logger

from ...core.domain.endpoints import ProxyEndpoint, format_address
from ...core.exceptions import ProxyDialFailure, ProxyHandshakeFailure, SftpRelayError

# PySocks writes length octets with chr().encode(), which only yields a
# single byte up to 127
MAX_FIELD_LENGTH = 127

REPLY_MESSAGES = {
    0x01: "general SOCKS server failure",
    0x02: "connection not allowed by ruleset",
    0x03: "network unreachable",
    0x04: "host unreachable",
    0x05: "connection refused",
    0x06: "TTL expired",
    0x07: "command not supported",
    0x08: "address type not supported",
}

_REPLY_CODE = re.compile(r"^0x([0-9a-fA-F]{2})\b")


class ProxyTunnel:
    """
    Raw byte stream to a target host, relayed by a SOCKS5 proxy.

    The tunnel holds its socket until release() hands it to a single new
    owner. close() only affects a socket that has not been released.
    """

    def __init__(self, sock: socket.socket, target_host: str, target_port: int, proxy_address: str):
        self._sock: Optional[socket.socket] = sock
        self.target_host = target_host
        self.target_port = target_port
        self.proxy_address = proxy_address

    @property
    def target_address(self) -> str:
        return format_address(self.target_host, self.target_port)

    @property
    def is_held(self) -> bool:
        """True while the tunnel still owns its socket."""
        return self._sock is not None

    def release(self) -> socket.socket:
        """Hand the socket to a new owner; the tunnel forgets it."""
        if self._sock is None:
            raise RuntimeError("Tunnel socket was already released or closed")

        sock, self._sock = self._sock, None
        return sock

    def close(self) -> None:
        """Close the socket if the tunnel still owns it."""
        if self._sock is not None:
            sock, self._sock = self._sock, None
            sock.close()
            logger.debug(f"Closed tunnel to {self.target_address} via {self.proxy_address}")

    async def __aenter__(self) -> "ProxyTunnel":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "held" if self.is_held else "released"
        return f"<ProxyTunnel {self.target_address} via {self.proxy_address} ({state})>"


class Socks5Dialer:
    """
    Opens connections to targets through a SOCKS5 proxy.

    Each dial() is a single attempt. Target names are resolved by the
    proxy. With a timeout set, the TCP connect to the proxy and every
    read during the SOCKS5 negotiation are each bounded by it.
    """

    def __init__(self, endpoint: ProxyEndpoint, timeout: Optional[float] = None):
        """
        Initialize the dialer.

        Args:
            endpoint: Resolved proxy endpoint
            timeout: Per-operation socket timeout in seconds, None for no bound
        """
        self._endpoint = endpoint
        self._timeout = timeout

    @property
    def endpoint(self) -> ProxyEndpoint:
        return self._endpoint

    async def dial(self, host: str, port: int) -> ProxyTunnel:
        """
        Connect to ``host:port`` through the proxy.

        Raises:
            ProxyDialFailure: If the proxy cannot be reached.
            ProxyHandshakeFailure: If the proxy rejects the negotiation or
                cannot reach the target.
        """
        target = format_address(host, port)
        _check_target_host(host)
        _check_credentials(self._endpoint)
        logger.debug(f"Dialing {target} via SOCKS5 proxy {self._endpoint.address}")

        sock = self._create_socket()
        loop = asyncio.get_running_loop()
        try:
            # PySocks negotiates with blocking socket calls
            await loop.run_in_executor(None, sock.connect, (host, port))
        except OSError as e:
            sock.close()
            raise self._translate(e, target) from e
        except BaseException:
            _abort(sock)
            raise

        logger.info(f"SOCKS5 tunnel established to {target} via {self._endpoint.address}")
        return ProxyTunnel(_detach(sock), host, port, self._endpoint.address)

    def _create_socket(self) -> socks.socksocket:
        """Create a PySocks socket configured for this proxy."""
        host = self._endpoint.host
        family = socket.AF_INET6 if _is_ipv6_literal(host) else socket.AF_INET

        try:
            sock = socks.socksocket(family, socket.SOCK_STREAM)
        except OSError as e:
            raise ProxyDialFailure(f"Cannot create socket for proxy {self._endpoint.address}: {e}") from e

        credentials = self._endpoint.credentials
        sock.set_proxy(
            socks.SOCKS5,
            host,
            self._endpoint.port,
            rdns=True,
            username=credentials.username if credentials else None,
            password=credentials.password if credentials else None,
        )
        sock.settimeout(self._timeout)
        return sock

    def _translate(self, error: OSError, target: str) -> SftpRelayError:
        """Map a PySocks or socket error to the failing stage."""
        address = self._endpoint.address

        if isinstance(error, socks.ProxyConnectionError):
            if isinstance(error.socket_err, socket.timeout):
                return ProxyDialFailure(f"Timed out connecting to proxy {address}")
            return ProxyDialFailure(f"Cannot connect to proxy {address}: {error.socket_err or error}")

        if not isinstance(error, socks.ProxyError):
            return ProxyDialFailure(f"Cannot connect to proxy {address}: {error}")

        cause = _innermost(error)

        if isinstance(cause, socks.SOCKS5AuthError):
            return ProxyHandshakeFailure(f"Proxy {address} refused authentication: {cause}")

        if isinstance(cause, socks.SOCKS5Error):
            reply_code = _reply_code(str(cause))
            reason = REPLY_MESSAGES.get(reply_code, str(cause)) if reply_code is not None else str(cause)
            return ProxyHandshakeFailure(
                f"Proxy could not connect to {target}: {reason}",
                reply_code=reply_code
            )

        if isinstance(cause, socket.timeout):
            return ProxyHandshakeFailure(f"Timed out negotiating SOCKS5 with {address}")

        return ProxyHandshakeFailure(f"SOCKS5 negotiation with {address} failed: {cause}")


def _innermost(error: BaseException) -> BaseException:
    """Follow the ``socket_err`` chain PySocks wraps negotiation errors in."""
    while isinstance(error, socks.ProxyError) and error.socket_err is not None:
        error = error.socket_err
    return error


def _reply_code(message: str) -> Optional[int]:
    match = _REPLY_CODE.match(message)
    return int(match.group(1), 16) if match else None


def _check_target_host(host: str) -> None:
    """Reject target names that cannot be carried in a CONNECT request."""
    if _is_ip_literal(host):
        return

    try:
        name = host.encode("idna")
    except UnicodeError as e:
        raise ProxyHandshakeFailure(f"Target host name cannot be sent to the proxy: {host!r}") from e

    if not name or len(name) > MAX_FIELD_LENGTH:
        raise ProxyHandshakeFailure(f"Target host name cannot be sent to the proxy: {host!r}")


def _check_credentials(endpoint: ProxyEndpoint) -> None:
    credentials = endpoint.credentials
    if credentials is None:
        return

    for value in (credentials.username, credentials.password):
        if len(value.encode("utf-8")) > MAX_FIELD_LENGTH:
            raise ProxyHandshakeFailure(
                f"Credentials for proxy {endpoint.address} exceed {MAX_FIELD_LENGTH} bytes"
            )


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _is_ipv6_literal(host: str) -> bool:
    return _is_ip_literal(host) and ipaddress.ip_address(host).version == 6


def _detach(sock: socks.socksocket) -> socket.socket:
    """Move the connected descriptor into a plain non-blocking socket."""
    raw = socket.socket(sock.family, sock.type, sock.proto, fileno=sock.detach())
    raw.setblocking(False)
    return raw


def _abort(sock: socks.socksocket) -> None:
    """Wake a negotiation blocked in the executor and drop the socket."""
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Not connected yet
        pass
    sock.close()
