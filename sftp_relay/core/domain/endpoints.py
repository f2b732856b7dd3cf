"""
Value types describing where the client connects.

These are immutable records passed between the connection stages.
"""

import ipaddress
from dataclasses import dataclass, field
from typing import Optional


def format_address(host: str, port: int) -> str:
    """Render ``host:port``, bracketing IPv6 literals."""
    try:
        if ipaddress.ip_address(host).version == 6:
            return f"[{host}]:{port}"
    except ValueError:
        pass
    return f"{host}:{port}"


@dataclass(frozen=True)
class ProxyCredentials:
    """Username/password pair embedded in a proxy URL."""
    username: str
    password: str = field(default="", repr=False)


@dataclass(frozen=True)
class ProxyEndpoint:
    """Resolved proxy address plus optional credentials."""
    scheme: str
    host: str
    port: int
    credentials: Optional[ProxyCredentials] = None

    @property
    def address(self) -> str:
        return format_address(self.host, self.port)

    @property
    def anonymous(self) -> bool:
        return self.credentials is None
