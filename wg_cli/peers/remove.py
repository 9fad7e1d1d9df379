"""Remove WireGuard peers."""

import logging
from typing import IO, Iterable, Optional

from ..config import Settings
from ..exceptions import (
    InterfaceNotFoundError, InterfaceUpdateError, MalformedPeerRecordError,
    PeerBlockNotFoundError, PeerFileCleanupFailedError, PeerNotFoundError,
)
from ..identity import interface_file_path, peer_file_path, validate_name
from ..keys import KeyProvider
from ..models import RemovedPeer
from ..records import PeerBlock, extract_field, scan_blocks
from ..utils import atomic_replace

logger = logging.getLogger(__name__)


def excise_peer_block(lines: Iterable[str], public_key: str, out: IO[str]) -> Optional[PeerBlock]:
    """
    Copy interface file lines to ``out``, leaving out one peer block.

    The first ``[Peer]`` block whose own ``PublicKey`` equals
    ``public_key`` is dropped together with a single blank line directly
    before it. Every other line is written unchanged.

    A dropped block at the end of input that directly follows a non-blank
    line was appended to a file without a final newline; that line's
    ending is dropped too.

    Returns:
        The dropped block, or None if no block matched
    """
    removed = None
    held = None

    for item in scan_blocks(lines):
        text = item.text if isinstance(item, PeerBlock) else item

        if removed is None and isinstance(item, PeerBlock) and item.public_key == public_key:
            removed = item
            if held is not None and not held.strip():
                held = None
            continue

        if held is not None:
            out.write(held)
            held = None

        # Until the match, every item waits one step
        if removed is None:
            held = text
        else:
            out.write(text)

    if held is not None:
        if removed is not None:
            held = held.rstrip('\r\n')
        out.write(held)

    return removed


def remove_peer(settings: Settings, keys: KeyProvider, interface: str, name: str) -> RemovedPeer:
    """
    Remove a peer from its interface and delete the peer file.

    The peer's block is located by the public key derived from the
    PrivateKey in its peer file, never by position or name. The interface
    file is rewritten through a temporary file and a single atomic rename;
    only after that succeeds is the peer file deleted.

    No locking is done: concurrent runs against the same interface can
    interleave and lose updates.

    Args:
        settings: Runtime settings (directories, verbosity)
        keys: Key provider used to derive the public key
        interface: WireGuard interface name
        name: Peer name

    Returns:
        RemovedPeer; ``cleanup_error`` is set if the peer file could not be
        deleted after the interface was updated

    Raises:
        InvalidNameError: Bad interface or peer name
        InterfaceNotFoundError: No configuration file for the interface
        PeerNotFoundError: No peer file
        MalformedPeerRecordError: The peer file has no PrivateKey or is not
            valid UTF-8
        KeyProviderError: Public key derivation failed
        PeerBlockNotFoundError: No block in the interface matches the key
            (interface file untouched)
        InterfaceUpdateError: The interface file could not be rewritten
            (interface file untouched, peer file kept)
    """
    validate_name(interface, "Interface")
    validate_name(name, "Peer")

    config_path = interface_file_path(settings, interface)
    if not config_path.is_file():
        raise InterfaceNotFoundError(interface)

    peer_file = peer_file_path(settings, interface, name)
    if not peer_file.is_file():
        raise PeerNotFoundError(interface, name)

    try:
        content = peer_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedPeerRecordError(f"Peer configuration file {peer_file} is not valid UTF-8: {e}") from e

    private_key = extract_field(content, "PrivateKey")
    if not private_key:
        raise MalformedPeerRecordError(f"No PrivateKey in peer configuration file {peer_file}")
    if settings.verbose:
        logger.info(f"Private key = {private_key}")

    public_key = keys.derive_public_key(private_key)
    if settings.verbose:
        logger.info(f"Public key = {public_key}")

    try:
        with open(config_path, 'r', encoding="utf-8", newline='') as src, \
                atomic_replace(config_path) as dst:
            removed = excise_peer_block(src, public_key, dst)
            if removed is None:
                raise PeerBlockNotFoundError(interface, name)
    except (OSError, UnicodeDecodeError) as e:
        raise InterfaceUpdateError(f"Unable to update interface \"{interface}\": {e}") from e

    if settings.verbose:
        logger.info(f"Found peer in interface: PublicKey = {removed.public_key}, "
                    f"AllowedIPs = {removed.allowed_ips}")
    logger.debug(f"Interface {interface} updated")

    result = RemovedPeer(interface=interface, name=name, public_key=public_key)
    try:
        peer_file.unlink()
    except OSError as e:
        result.cleanup_error = PeerFileCleanupFailedError(
            f"Unable to delete peer configuration file {peer_file}: {e.strerror}"
        )
        logger.warning(str(result.cleanup_error))

    return result
