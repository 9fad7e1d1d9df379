"""QR code rendering for WireGuard peer files."""

import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional, TextIO

import qrcode
from qrcode.exceptions import DataOverflowError

from ..utils import run

logger = logging.getLogger(__name__)


def render_qr(peer_file: Path, out: Optional[TextIO] = None, timeout: int = 30) -> bool:
    """
    Print a peer configuration as a QR code for mobile clients.

    Uses ``qrencode`` when available and falls back to the qrcode library's
    ASCII renderer. Failures are logged and never raised.

    Args:
        peer_file: Peer configuration file
        out: Stream to print to (stdout if None)
        timeout: Seconds to wait for qrencode

    Returns:
        True if a QR code was printed
    """
    out = out or sys.stdout

    try:
        config = peer_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Cannot render QR code for {peer_file}: {e.strerror}")
        return False

    # Try qrencode first (native terminal)
    try:
        result = run(["qrencode", "-t", "ansiutf8"], check=False,
                     timeout=timeout, input_text=config)
        if result.returncode == 0 and result.stdout:
            out.write(result.stdout)
            return True
        logger.debug(f"qrencode exited with status {result.returncode}")
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"qrencode unavailable: {e}")

    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=1,
            border=2,
        )
        qr.add_data(config)
        qr.make(fit=True)
        qr.print_ascii(out=out, invert=True)
        return True
    except (ValueError, DataOverflowError) as e:
        logger.warning(f"Cannot render QR code for {peer_file}: {e}")
        return False
