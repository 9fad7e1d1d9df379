"""List WireGuard interfaces and their peers."""

import logging
from typing import Iterator, Optional

from ..config import Settings
from ..exceptions import InterfaceNotFoundError
from ..identity import CONF_SUFFIX, interface_file_path, parse_peer_filename
from ..models import PeerListing
from ..records import extract_field

logger = logging.getLogger(__name__)


def list_interfaces(settings: Settings) -> Iterator[str]:
    """Yield the name of every ``<name>.conf`` file in the interface directory."""
    if not settings.wg_dir.is_dir():
        logger.debug(f"Interface directory {settings.wg_dir} does not exist")
        return

    for conf_file in sorted(settings.wg_dir.glob(f"*{CONF_SUFFIX}")):
        if conf_file.is_file() and conf_file.stem:
            yield conf_file.stem


def list_peers(settings: Settings, interface: Optional[str] = None) -> Iterator[PeerListing]:
    """
    List peers for one interface, or for every interface.

    Peers are discovered from ``<interface>-<peer>.conf`` files in the
    peers directory; AllowedIPs is read from each peer file. A peer file
    that cannot be read is logged and skipped. Each call returns a fresh
    generator.

    Args:
        settings: Runtime settings
        interface: Interface name, or None for all interfaces

    Raises:
        InterfaceNotFoundError: The named interface has no configuration file
    """
    if interface is None:
        for name in list_interfaces(settings):
            yield from list_peers(settings, name)
        return

    if not interface_file_path(settings, interface).is_file():
        raise InterfaceNotFoundError(interface)

    if not settings.peers_dir.is_dir():
        logger.debug(f"Peers directory {settings.peers_dir} does not exist")
        return

    for peer_file in sorted(settings.peers_dir.iterdir()):
        parsed = parse_peer_filename(peer_file.name)
        if parsed is None or parsed[0] != interface or not peer_file.is_file():
            continue

        try:
            content = peer_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error opening peer configuration file {peer_file}: {e}")
            continue

        yield PeerListing(
            interface=interface,
            name=parsed[1],
            allowed_ips=extract_field(content, "AllowedIPs") or "",
            path=peer_file,
        )
