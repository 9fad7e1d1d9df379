"""
Tests for interface and peer enumeration
"""

import pytest

from wg_cli.exceptions import InterfaceNotFoundError
from wg_cli.peers.create import create_peer
from wg_cli.peers.list import list_interfaces, list_peers


class TestListInterfaces:
    """Test list_interfaces"""

    def test_lists_conf_files_only(self, settings, interface_file):
        (settings.wg_dir / "wg1.conf").write_text("[Interface]\n")
        (settings.wg_dir / "notes.txt").write_text("")
        (settings.wg_dir / ".wg0.abc.conf.tmp").write_text("")
        (settings.wg_dir / "dir.conf").mkdir()

        assert list(list_interfaces(settings)) == ["wg0", "wg1"]

    def test_missing_directory(self, settings, tmp_path):
        settings.wg_dir = tmp_path / "absent"

        assert list(list_interfaces(settings)) == []


class TestListPeers:
    """Test list_peers"""

    def test_lists_created_peers(self, settings, keys, interface_file):
        """
        GIVEN peers a, b and c provisioned on wg0
        WHEN listing wg0
        THEN exactly a, b and c are returned with their peer-file AllowedIPs
        """
        for name, address in [("a", "10.0.0.2/32"), ("b", "10.0.0.3/32"), ("c", "10.0.0.4/32")]:
            create_peer(settings, keys, "wg0", name, address)

        peers = list(list_peers(settings, "wg0"))

        assert {p.name for p in peers} == {"a", "b", "c"}
        # AllowedIPs comes from each peer file (the template's route), not the interface
        assert {p.allowed_ips for p in peers} == {"0.0.0.0/0"}
        assert all(p.interface == "wg0" for p in peers)

    def test_allowed_ips_read_from_peer_file(self, settings, interface_file):
        settings.peers_dir.mkdir()
        (settings.peers_dir / "wg0-phone.conf").write_text(
            "[Interface]\nPrivateKey = x\n\n[Peer]\nAllowedIPs = 10.0.0.0/24, 192.168.1.0/24\n"
        )
        (settings.peers_dir / "wg0-bare.conf").write_text("[Interface]\nPrivateKey = y\n")

        peers = {p.name: p.allowed_ips for p in list_peers(settings, "wg0")}

        assert peers == {"phone": "10.0.0.0/24, 192.168.1.0/24", "bare": ""}

    def test_other_interfaces_and_stray_files_ignored(self, settings, interface_file):
        (settings.wg_dir / "wg1.conf").write_text("[Interface]\n")
        settings.peers_dir.mkdir()
        for filename in ["wg0-a.conf", "wg1-b.conf", "wg00-c.conf", "wg0-d.conf.bak", "wg0.conf"]:
            (settings.peers_dir / filename).write_text("AllowedIPs = 10.0.0.9/32\n")

        assert [p.name for p in list_peers(settings, "wg0")] == ["a"]
        assert [p.name for p in list_peers(settings, "wg1")] == ["b"]

    def test_all_interfaces(self, settings, keys, interface_file):
        (settings.wg_dir / "wg1.conf").write_text("[Interface]\n")
        create_peer(settings, keys, "wg0", "a", "10.0.0.2/32")
        create_peer(settings, keys, "wg1", "b", "10.1.0.2/32")

        peers = [(p.interface, p.name) for p in list_peers(settings)]

        assert peers == [("wg0", "a"), ("wg1", "b")]

    def test_listing_is_restartable(self, settings, keys, interface_file):
        create_peer(settings, keys, "wg0", "a", "10.0.0.2/32")

        first = list(list_peers(settings, "wg0"))
        second = list(list_peers(settings, "wg0"))

        assert first == second

    def test_missing_interface(self, settings):
        with pytest.raises(InterfaceNotFoundError):
            list(list_peers(settings, "ghost"))

    def test_missing_peers_directory(self, settings, interface_file):
        assert list(list_peers(settings, "wg0")) == []

    def test_unreadable_file_skipped(self, settings, interface_file, caplog):
        """
        GIVEN one peer file that cannot be decoded
        WHEN listing
        THEN it is reported and the other peers are still listed
        """
        settings.peers_dir.mkdir()
        (settings.peers_dir / "wg0-good.conf").write_text("AllowedIPs = 10.0.0.2/32\n")
        (settings.peers_dir / "wg0-bad.conf").write_bytes(b"\xff\xfe\x00AllowedIPs")

        peers = [p.name for p in list_peers(settings, "wg0")]

        assert peers == ["good"]
        assert "wg0-bad.conf" in caplog.text
