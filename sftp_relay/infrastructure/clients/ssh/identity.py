"""
Host identity verification strategies.

AcceptAnyIdentity keeps host key checking disabled and is the default
when no verifier is configured. FixedFingerprint pins a single key and
KnownHostsStore checks an OpenSSH known_hosts file.
"""

from pathlib import Path
from typing import Any, Union

import asyncssh
from loguru import logger

from ....core.exceptions import InvalidConfig
from ....core.interfaces.identity import IdentityVerifier


class AcceptAnyIdentity(IdentityVerifier):
    """Accept every server host key. Insecure: no man-in-the-middle protection."""

    insecure = True

    def known_hosts(self) -> Any:
        return None

    def verify(self, host: str, port: int, key: Any) -> bool:
        return True

    def __repr__(self) -> str:
        return "AcceptAnyIdentity()"


class FixedFingerprint(IdentityVerifier):
    """Accept only the host key with the given fingerprint."""

    def __init__(self, fingerprint: str):
        """
        Args:
            fingerprint: ``SHA256:<base64>`` as printed by ssh-keygen -l,
                or ``MD5:<hex pairs>``. A bare value is taken as SHA256.
        """
        if not fingerprint:
            raise InvalidConfig("Host key fingerprint is empty")

        algorithm, sep, digest = fingerprint.partition(":")
        if sep and algorithm.upper() in ("SHA256", "MD5"):
            self._hash_name = algorithm.lower()
            self._fingerprint = f"{algorithm.upper()}:{digest}"
        else:
            self._hash_name = "sha256"
            self._fingerprint = f"SHA256:{fingerprint}"

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def known_hosts(self) -> Any:
        # No pre-trusted keys: every key goes through verify()
        return ([], [], [])

    def verify(self, host: str, port: int, key: Any) -> bool:
        actual = key.get_fingerprint(self._hash_name)
        if actual != self._fingerprint:
            logger.warning(f"Host key for {host}:{port} has fingerprint {actual}, expected {self._fingerprint}")
            return False
        return True

    def __repr__(self) -> str:
        return f"FixedFingerprint({self._fingerprint!r})"


class KnownHostsStore(IdentityVerifier):
    """Accept host keys listed in an OpenSSH known_hosts file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()
        if not self._path.is_file():
            raise InvalidConfig(f"Known hosts file not found: {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def known_hosts(self) -> Any:
        return str(self._path)

    def verify(self, host: str, port: int, key: Any) -> bool:
        logger.warning(f"Host key for {host}:{port} is not in {self._path}")
        return False

    def __repr__(self) -> str:
        return f"KnownHostsStore({str(self._path)!r})"


class VerifyingSSHClient(asyncssh.SSHClient):
    """asyncssh client callbacks that defer host key decisions to a verifier."""

    def __init__(self, verifier: IdentityVerifier, host: str, port: int):
        self._verifier = verifier
        self._host = host
        self._port = port

    def validate_host_public_key(self, host: str, addr: str, port: int, key: Any) -> bool:
        return self._verifier.verify(self._host, self._port, key)

    def auth_completed(self) -> None:
        logger.debug(f"SSH authentication to {self._host}:{self._port} completed")

    def connection_lost(self, exc: Any) -> None:
        if exc:
            logger.debug(f"SSH connection to {self._host}:{self._port} lost: {exc}")
