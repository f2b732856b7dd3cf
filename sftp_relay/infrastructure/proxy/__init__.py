"""
SOCKS5 proxy support: URL resolution and tunnel dialing.
"""

from .resolver import resolve_proxy_url
from .socks5 import ProxyTunnel, Socks5Dialer

__all__ = [
    "resolve_proxy_url",
    "ProxyTunnel",
    "Socks5Dialer",
]
