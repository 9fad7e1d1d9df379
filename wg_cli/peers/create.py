"""Create WireGuard peers."""

import logging
import os
from pathlib import Path

from ..config import Settings
from ..exceptions import (
    InterfaceNotFoundError, InterfaceUpdateError, KeyProviderError,
    PeerAlreadyExistsError,
)
from ..identity import interface_file_path, peer_file_path, validate_name
from ..keys import KeyProvider
from ..models import PeerRecord
from ..records import format_peer_block, render_block
from ..utils import host_address, host_allowed_ip

logger = logging.getLogger(__name__)


def create_peer(
    settings: Settings,
    keys: KeyProvider,
    interface: str,
    name: str,
    address: str,
) -> PeerRecord:
    """
    Create a peer file from the template and add the peer to its interface.

    Args:
        settings: Runtime settings (directories, template, verbosity)
        keys: Key provider used to generate and derive keys
        interface: WireGuard interface name, e.g. "wg0"
        name: Peer name, e.g. "phone"
        address: Peer address in CIDR notation, e.g. "192.168.2.10/32"

    Returns:
        PeerRecord describing the new peer

    Raises:
        InvalidNameError, InvalidAddressError: Bad arguments (nothing written)
        InterfaceNotFoundError: No configuration file for the interface
        PeerAlreadyExistsError: The peer file already exists
        TemplateUnreadableError: Template could not be opened (nothing written)
        KeyProviderError: Key generation or derivation failed
        InterfaceUpdateError: Appending to the interface file failed; the
            peer file is left behind without a matching block
    """
    validate_name(interface, "Interface")
    validate_name(name, "Peer")
    host = host_address(address)

    config_path = interface_file_path(settings, interface)
    if not config_path.is_file():
        raise InterfaceNotFoundError(interface)

    peer_file = peer_file_path(settings, interface, name)
    if peer_file.exists():
        raise PeerAlreadyExistsError(interface, name)

    settings.peers_dir.mkdir(mode=0o700, parents=True, exist_ok=True)

    # Generate keys
    private_key = keys.generate_private_key()
    if settings.verbose:
        logger.info(f"Private Key = {private_key}")

    # Nothing is written if the template is unreadable
    content = render_block(settings.template_path, {
        "PrivateKey": private_key,
        "Address": address.strip(),
    })
    _write_peer_file(peer_file, content, interface, name)

    try:
        public_key = keys.derive_public_key(private_key)
    except KeyProviderError:
        peer_file.unlink()
        logger.debug(f"Removed {peer_file} after key derivation failed")
        raise

    if settings.verbose:
        logger.info(f"Public Key = {public_key}")
        logger.info(f"Created new peer file in: {peer_file}")

    allowed_ips = host_allowed_ip(host)
    try:
        with open(config_path, 'a', encoding="utf-8") as f:
            f.write(format_peer_block(public_key, allowed_ips))
    except OSError as e:
        logger.error(f"Peer file {peer_file} has no matching entry in {config_path}")
        raise InterfaceUpdateError(f"Unable to update interface \"{interface}\": {e.strerror}") from e

    logger.debug(f"Added peer {name} ({allowed_ips}) to {config_path}")

    return PeerRecord(
        interface=interface,
        name=name,
        path=peer_file,
        address=address.strip(),
        public_key=public_key,
        allowed_ips=allowed_ips,
    )


def _write_peer_file(peer_file: Path, content: str, interface: str, name: str) -> None:
    """Write a new peer file readable by its owner only."""
    try:
        fd = os.open(peer_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except FileExistsError:
        raise PeerAlreadyExistsError(interface, name) from None

    try:
        with os.fdopen(fd, 'w', encoding="utf-8", newline='') as f:
            f.write(content)
    except BaseException:
        peer_file.unlink()
        raise
