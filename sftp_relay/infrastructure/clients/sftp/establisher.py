"""
SFTP session establishment on an authenticated SSH connection.
"""

import asyncio
from typing import Optional

import asyncssh
from loguru import logger

from ....core.exceptions import ChannelOpenFailure, SubsystemUnavailable

# RFC 4254 section 5.1 channel open failure reason codes. asyncssh uses
# other codes when the session or subsystem request itself is refused.
CHANNEL_OPEN_FAILURE_CODES = frozenset({1, 2, 3, 4})


async def establish_sftp_session(
    connection: asyncssh.SSHClientConnection,
    timeout: Optional[float] = None
) -> asyncssh.SFTPClient:
    """
    Open the sftp subsystem channel and run the SFTP version exchange.

    Args:
        connection: Authenticated SSH connection
        timeout: Seconds allowed for channel open plus version exchange

    Returns:
        An SFTP client bound to a dedicated channel of ``connection``

    Raises:
        SubsystemUnavailable: If the remote does not provide SFTP.
        ChannelOpenFailure: If the SSH session cannot allocate the channel.
    """
    try:
        if timeout is None:
            sftp = await connection.start_sftp_client()
        else:
            sftp = await asyncio.wait_for(connection.start_sftp_client(), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise SubsystemUnavailable(f"SFTP initialization did not finish within {timeout}s") from e
    except asyncssh.ChannelOpenError as e:
        if e.code in CHANNEL_OPEN_FAILURE_CODES:
            raise ChannelOpenFailure(f"SSH server refused the SFTP channel: {e.reason}") from e
        raise SubsystemUnavailable(f"SFTP subsystem request was refused: {e.reason}") from e
    except asyncssh.SFTPError as e:
        raise SubsystemUnavailable(f"SFTP version exchange failed: {e}") from e
    except (asyncssh.Error, OSError) as e:
        raise ChannelOpenFailure(f"Cannot open SFTP channel: {e}") from e

    logger.info(f"SFTP session started (protocol version {getattr(sftp, 'version', 'unknown')})")
    return sftp
