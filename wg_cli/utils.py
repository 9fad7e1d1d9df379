"""Utility functions for wg-cli."""

import ipaddress
import logging
import os
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, List, Optional

from .exceptions import InvalidAddressError

logger = logging.getLogger(__name__)


def run(
    cmd: List[str],
    check: bool = True,
    capture: bool = True,
    timeout: int = 30,
    input_text: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """Run a command without a shell."""
    try:
        return subprocess.run(
            cmd,
            input=input_text,
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=check,
        )
    except subprocess.CalledProcessError as e:
        if check:
            logger.debug(f"Command failed: {' '.join(cmd)}")
            if e.stderr:
                logger.debug(f"Error: {e.stderr.strip()}")
        raise
    except subprocess.TimeoutExpired:
        logger.debug(f"Command timed out: {' '.join(cmd)}")
        raise


def host_address(address_cidr: str) -> str:
    """
    Strip the CIDR suffix from an address.

    Args:
        address_cidr: Address such as "192.168.2.10/32"

    Returns:
        Host part, e.g. "192.168.2.10"

    Raises:
        InvalidAddressError: If the address is not valid CIDR notation
    """
    address_cidr = address_cidr.strip()
    host, sep, prefix = address_cidr.partition('/')
    if not sep or not prefix.isdigit():
        raise InvalidAddressError(
            f"Invalid address \"{address_cidr}\": expected <address>/<prefix length>"
        )
    try:
        ipaddress.ip_interface(address_cidr)
    except ValueError as e:
        raise InvalidAddressError(f"Invalid address \"{address_cidr}\": {e}") from e
    return host


def host_allowed_ip(host: str) -> str:
    """Single-host AllowedIPs entry for a host address."""
    prefix = 32 if ipaddress.ip_address(host).version == 4 else 128
    return f"{host}/{prefix}"


@contextmanager
def atomic_replace(path: Path) -> Iterator[IO[str]]:
    """
    Write a replacement for ``path`` and move it into place atomically.

    Yields a text stream on a temporary file in the same directory. The
    stream is opened with newline translation disabled so line endings
    written by the caller reach the disk unchanged. When the block exits
    normally the temporary file is flushed, fsynced and renamed over
    ``path`` with a single ``os.replace``, then the directory is synced so
    the rename survives a crash. On any exception the temporary file is
    removed and ``path`` is left untouched.
    """
    temp_fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.stem}.",
        suffix=".conf.tmp",
    )
    try:
        with os.fdopen(temp_fd, 'w', encoding="utf-8", newline='') as f:
            yield f
            f.flush()
            os.fsync(f.fileno())

        # Keep the replaced file's permission bits
        if path.exists():
            shutil.copymode(path, temp_path)

        os.replace(temp_path, path)
        logger.debug(f"Replaced {path}")
    except BaseException:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        raise

    _fsync_dir(path.parent)


def _fsync_dir(directory: Path) -> None:
    """Flush a directory entry change to disk; failures are only logged."""
    try:
        dir_fd = os.open(directory, os.O_RDONLY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except OSError as e:
        logger.warning(f"Could not sync directory {directory}: {e}")
