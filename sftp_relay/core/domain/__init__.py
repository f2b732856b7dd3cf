"""
Domain value types shared by the connection stages.
"""

from .endpoints import ProxyCredentials, ProxyEndpoint, format_address

__all__ = [
    "ProxyCredentials",
    "ProxyEndpoint",
    "format_address",
]
