"""
Pytest configuration and shared fixtures
"""

import base64
import hashlib

import pytest

from wg_cli.config import Settings
from wg_cli.exceptions import KeyProviderError
from wg_cli.keys import KeyProvider

INTERFACE_PREAMBLE = (
    "[Interface]\n"
    "PrivateKey = SERVERPRIVATEKEYSERVERPRIVATEKEYSERVERPRIV=\n"
    "Address = 192.168.2.1/24\n"
    "ListenPort = 51820\n"
)

TEMPLATE = (
    "[Interface]\n"
    "PrivateKey = \n"
    "Address = \n"
    "DNS = 1.1.1.1\n"
    "\n"
    "[Peer]\n"
    "PublicKey = SERVERPUBLICKEYSERVERPUBLICKEYSERVERPUBLI=\n"
    "Endpoint = vpn.example.com:51820\n"
    "AllowedIPs = 0.0.0.0/0\n"
)


def _b64(data: bytes) -> str:
    return base64.b64encode(hashlib.sha256(data).digest()).decode()


class FakeKeyProvider(KeyProvider):
    """Deterministic key provider: no subprocesses."""

    def __init__(self):
        self.generated = 0
        self.fail_derive = False

    def generate_private_key(self) -> str:
        self.generated += 1
        return _b64(f"private-{self.generated}".encode())

    def derive_public_key(self, private_key: str) -> str:
        if self.fail_derive:
            raise KeyProviderError("wg pubkey failed: exit status 1")
        return _b64(b"public-" + private_key.encode())


@pytest.fixture
def keys():
    """Deterministic key provider"""
    return FakeKeyProvider()


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary directory"""
    wg_dir = tmp_path / "wireguard"
    wg_dir.mkdir()
    template = tmp_path / "template.conf"
    template.write_text(TEMPLATE)
    return Settings(
        wg_dir=wg_dir,
        peers_dir=wg_dir / "peers",
        template_path=template,
        show_qr=False,
        restart_service=False,
    )


@pytest.fixture
def interface_file(settings):
    """Interface wg0 with only an [Interface] section"""
    path = settings.wg_dir / "wg0.conf"
    path.write_text(INTERFACE_PREAMBLE)
    return path
