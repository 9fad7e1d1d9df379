"""
Tests for the best-effort side effects: QR rendering and service restart
"""

import io
import subprocess

from wg_cli.config import Settings
from wg_cli.peers import qrcode as qr_module
from wg_cli.peers.qrcode import render_qr
from wg_cli.service import control


class TestRenderQr:
    """Test render_qr"""

    def test_uses_qrencode_output(self, tmp_path, monkeypatch):
        peer_file = tmp_path / "wg0-phone.conf"
        peer_file.write_text("[Interface]\nPrivateKey = x\n")
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return subprocess.CompletedProcess(cmd, 0, stdout="QR-ART\n", stderr="")

        monkeypatch.setattr(qr_module, "run", fake_run)
        out = io.StringIO()

        assert render_qr(peer_file, out=out) is True
        assert out.getvalue() == "QR-ART\n"
        assert calls[0][0] == ["qrencode", "-t", "ansiutf8"]
        assert calls[0][1]["input_text"] == "[Interface]\nPrivateKey = x\n"

    def test_falls_back_to_qrcode_library(self, tmp_path, monkeypatch):
        peer_file = tmp_path / "wg0-phone.conf"
        peer_file.write_text("[Interface]\nPrivateKey = x\n")

        def missing(cmd, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        monkeypatch.setattr(qr_module, "run", missing)
        out = io.StringIO()

        assert render_qr(peer_file, out=out) is True
        assert len(out.getvalue().splitlines()) > 10

    def test_missing_file_is_not_fatal(self, tmp_path, caplog):
        assert render_qr(tmp_path / "absent.conf", out=io.StringIO()) is False
        assert "Cannot render QR code" in caplog.text


class TestRestart:
    """Test service restart"""

    def test_restarts_unit(self, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        monkeypatch.setattr(control, "run", fake_run)

        assert control.restart(Settings(), "wg0") is True
        assert calls == [["systemctl", "restart", "wg-quick@wg0"]]

    def test_failure_is_logged_not_raised(self, monkeypatch, caplog):
        def fake_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(5, cmd, stderr="Unit not found.")

        monkeypatch.setattr(control, "run", fake_run)

        assert control.restart(Settings(service_unit="wg@{interface}"), "wg0") is False
        assert "Failed to restart wg@wg0: Unit not found." in caplog.text

    def test_missing_systemctl(self, monkeypatch, caplog):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        monkeypatch.setattr(control, "run", fake_run)

        assert control.restart(Settings(), "wg0") is False
