"""wg-cli - manage WireGuard peers through flat configuration files."""

from pathlib import Path

# Try to read version from VERSION file
try:
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        __version__ = version_file.read_text().strip()
    else:
        __version__ = "1.0.0"
except OSError:
    __version__ = "1.0.0"

# Import main entry point
from .cli import main

__all__ = ["main", "__version__"]
