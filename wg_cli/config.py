"""Configuration and constants for wg-cli."""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError

# Paths
WIREGUARD_DIR = Path("/etc/wireguard")
PEERS_DIR = WIREGUARD_DIR / "peers"
APP_DIR = Path("/etc/wg-cli")
TEMPLATE_FILE = APP_DIR / "template.conf"
CONFIG_FILE = APP_DIR / "config.yaml"

# System
SYSTEMD_SERVICE = "wg-quick@{interface}"

# Settings file key -> Settings attribute
_FILE_KEYS = {
    "wg_dir": "wg_dir",
    "peers_dir": "peers_dir",
    "template": "template_path",
    "show_qr": "show_qr",
    "restart_service": "restart_service",
    "service_unit": "service_unit",
    "command_timeout": "command_timeout",
}
_PATH_KEYS = ("wg_dir", "peers_dir", "template_path")


@dataclass
class Settings:
    """Runtime settings passed explicitly into every peer operation."""
    wg_dir: Path = WIREGUARD_DIR
    peers_dir: Path = PEERS_DIR
    template_path: Path = TEMPLATE_FILE
    quiet: bool = False
    verbose: bool = False
    show_qr: bool = True
    restart_service: bool = True
    service_unit: str = SYSTEMD_SERVICE
    command_timeout: int = 30

    def unit_for(self, interface: str) -> str:
        """Get the service unit name for an interface."""
        return self.service_unit.format(interface=interface)


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read a settings mapping from a YAML file."""
    try:
        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid settings file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e.strerror}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return data


def load_settings(path: Optional[Path] = None, **overrides: Any) -> Settings:
    """
    Load settings from a YAML file and apply overrides.

    Args:
        path: Settings file. The default file is optional; an explicit
            path must exist.
        **overrides: Settings attributes that win over the file
            (None values are ignored)

    Returns:
        Settings instance
    """
    explicit = path is not None
    path = Path(path) if explicit else CONFIG_FILE

    values: Dict[str, Any] = {}
    if explicit or path.exists():
        data = _read_yaml(path)
        unknown = sorted(set(data) - set(_FILE_KEYS))
        if unknown:
            raise ConfigError(f"Unknown settings in {path}: {', '.join(unknown)}")
        for key, value in data.items():
            values[_FILE_KEYS[key]] = value

    values.update({k: v for k, v in overrides.items() if v is not None})

    # Peers live under the interface directory unless placed elsewhere
    if "wg_dir" in values and "peers_dir" not in values:
        values["peers_dir"] = Path(values["wg_dir"]) / "peers"

    for key in _PATH_KEYS:
        if key in values:
            values[key] = Path(values[key]).expanduser()

    if "command_timeout" in values:
        try:
            values["command_timeout"] = int(values["command_timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"command_timeout must be an integer: {values['command_timeout']!r}") from e

    try:
        return replace(Settings(), **values)
    except TypeError as e:
        raise ConfigError(str(e)) from e
