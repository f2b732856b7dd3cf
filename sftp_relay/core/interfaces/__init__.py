"""
Core interfaces defining the contracts between library components.
"""

from .lifecycle import IClosable, IHealthCheckable
from .clients import ClientStatus, ISftpClient
from .identity import IdentityVerifier

__all__ = [
    "IClosable",
    "IHealthCheckable",
    "ClientStatus",
    "ISftpClient",
    "IdentityVerifier",
]
