"""
SSH session layer: settings, host identity strategies and establishment.
"""

from .config import SSHSessionConfig
from .identity import AcceptAnyIdentity, FixedFingerprint, KnownHostsStore, VerifyingSSHClient
from .establisher import establish_ssh_session

__all__ = [
    "SSHSessionConfig",
    "AcceptAnyIdentity",
    "FixedFingerprint",
    "KnownHostsStore",
    "VerifyingSSHClient",
    "establish_ssh_session",
]
