"""WireGuard service management."""

from .control import restart

__all__ = ['restart']
