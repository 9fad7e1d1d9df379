"""WireGuard key generation."""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from .exceptions import KeyProviderError
from .utils import run

logger = logging.getLogger(__name__)


class KeyProvider(ABC):
    """Generates private keys and derives public keys from them."""

    @abstractmethod
    def generate_private_key(self) -> str:
        """Return a new base64 private key."""

    @abstractmethod
    def derive_public_key(self, private_key: str) -> str:
        """Return the base64 public key for a private key."""


class WgKeyProvider(KeyProvider):
    """Key provider backed by the ``wg`` command line tool."""

    def __init__(self, wg_binary: str = "wg", timeout: int = 30):
        self.wg_binary = wg_binary
        self.timeout = timeout

    def _key_from(self, args: List[str], input_text: Optional[str] = None) -> str:
        cmd = [self.wg_binary] + args
        try:
            result = run(cmd, timeout=self.timeout, input_text=input_text)
        except FileNotFoundError as e:
            raise KeyProviderError(f"{self.wg_binary} not found; is WireGuard installed?") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise KeyProviderError(f"{' '.join(cmd)} failed: {detail}") from e
        except subprocess.TimeoutExpired as e:
            raise KeyProviderError(f"{' '.join(cmd)} timed out") from e

        key = result.stdout.strip()
        if not key:
            raise KeyProviderError(f"{' '.join(cmd)} produced no key")
        return key

    def generate_private_key(self) -> str:
        """Generate a WireGuard private key (``wg genkey``)."""
        return self._key_from(["genkey"])

    def derive_public_key(self, private_key: str) -> str:
        """Derive the public key for a private key (``wg pubkey``)."""
        return self._key_from(["pubkey"], input_text=f"{private_key}\n")
