"""
Client implementations: SSH and SFTP session layers and the composite
proxied SFTP client.
"""

from .composite import ProxiedSftpClient, open_client
from .ssh import (
    AcceptAnyIdentity,
    FixedFingerprint,
    KnownHostsStore,
    SSHSessionConfig,
    establish_ssh_session,
)
from .sftp import establish_sftp_session

__all__ = [
    "ProxiedSftpClient",
    "open_client",
    "AcceptAnyIdentity",
    "FixedFingerprint",
    "KnownHostsStore",
    "SSHSessionConfig",
    "establish_ssh_session",
    "establish_sftp_session",
]
