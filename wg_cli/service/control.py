"""WireGuard service control."""

import logging
import subprocess

from ..config import Settings
from ..utils import run

logger = logging.getLogger(__name__)


def restart(settings: Settings, interface: str) -> bool:
    """
    Restart the WireGuard service for an interface.

    Best effort: failures are logged, never raised.

    Args:
        settings: Runtime settings (service unit template, timeout)
        interface: Interface name (e.g., "wg0")

    Returns:
        True if successful
    """
    unit = settings.unit_for(interface)
    try:
        run(["systemctl", "restart", unit], timeout=settings.command_timeout)
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        logger.warning(f"Failed to restart {unit}: {detail}")
        return False
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"Failed to restart {unit}: {e}")
        return False

    logger.debug(f"Restarted {unit}")
    return True
