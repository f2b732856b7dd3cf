"""
SFTP session layer.
"""

from .establisher import establish_sftp_session

__all__ = [
    "establish_sftp_session",
]
