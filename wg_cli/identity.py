"""File naming for interfaces and peers.

An interface ``wg0`` lives in ``<wg_dir>/wg0.conf``; its peer ``phone``
lives in ``<peers_dir>/wg0-phone.conf``. The peer filename is the only
link from a peer back to its interface, so names that would make the
filename ambiguous are rejected before anything is written.
"""

import re
from pathlib import Path
from typing import Optional, Tuple

from .config import Settings
from .exceptions import InvalidNameError

CONF_SUFFIX = ".conf"
SEPARATOR = "-"

_NAME_RE = re.compile(r'[a-zA-Z0-9_]+')


def validate_name(name: str, kind: str = "Peer") -> str:
    """
    Check that a name is safe to embed in a peer filename.

    Args:
        name: Interface or peer name
        kind: Label used in the error message

    Returns:
        The name unchanged

    Raises:
        InvalidNameError: If the name is empty or contains "-", "." or
            any other non-alphanumeric character except '_'
    """
    if not name or not _NAME_RE.fullmatch(name):
        raise InvalidNameError(
            f"{kind} name \"{name}\" must be non-empty and may only contain "
            f"letters, digits and '_' (no '-' or '.')"
        )
    return name


def interface_file_path(settings: Settings, interface: str) -> Path:
    """Get path to interface config file."""
    return settings.wg_dir / f"{interface}{CONF_SUFFIX}"


def peer_file_name(interface: str, peer: str) -> str:
    return f"{interface}{SEPARATOR}{peer}{CONF_SUFFIX}"


def peer_file_path(settings: Settings, interface: str, peer: str) -> Path:
    """Get path to a peer's config file."""
    return settings.peers_dir / peer_file_name(interface, peer)


def parse_peer_filename(filename: str) -> Optional[Tuple[str, str]]:
    """
    Split a peer filename back into (interface, peer).

    The name is split on the first "-" after removing the trailing
    ".conf". Names that could not have been produced by
    :func:`peer_file_name` for valid names yield None.
    """
    if not filename.endswith(CONF_SUFFIX):
        return None
    stem = filename[:-len(CONF_SUFFIX)]
    interface, sep, peer = stem.partition(SEPARATOR)
    if not sep or not _NAME_RE.fullmatch(interface) or not _NAME_RE.fullmatch(peer):
        return None
    return interface, peer
