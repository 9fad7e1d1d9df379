"""Peer management modules."""

from .create import create_peer
from .remove import remove_peer, excise_peer_block
from .list import list_peers, list_interfaces
from .qrcode import render_qr
