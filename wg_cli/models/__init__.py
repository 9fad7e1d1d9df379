"""Data models package."""

from .peer import PeerListing, PeerRecord, RemovedPeer

__all__ = ['PeerRecord', 'PeerListing', 'RemovedPeer']
