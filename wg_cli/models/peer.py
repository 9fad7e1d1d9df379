"""Peer data models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..exceptions import PeerFileCleanupFailedError


@dataclass
class PeerRecord:
    """A provisioned peer: its file plus the block appended to the interface."""

    interface: str
    name: str
    path: Path
    address: str
    public_key: str
    allowed_ips: str


@dataclass
class PeerListing:
    """A peer file found while enumerating an interface."""

    interface: str
    name: str
    allowed_ips: str
    path: Path


@dataclass
class RemovedPeer:
    """Outcome of a removal whose interface update has been committed."""

    interface: str
    name: str
    public_key: str
    cleanup_error: Optional[PeerFileCleanupFailedError] = None

    @property
    def peer_file_removed(self) -> bool:
        return self.cleanup_error is None
