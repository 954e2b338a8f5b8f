"""CLI tests for the ``decode``, ``scan`` and ``to-xlsx`` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from click.testing import CliRunner

from edidparse.__version__ import __version__
from edidparse.cli import cli


def _invoke(monkeypatch: Any, args: list[str]):
    monkeypatch.setenv("EDIDPARSE_LOG_FILE", "")
    runner = CliRunner()
    return runner.invoke(cli, args)


def test_cli_version(monkeypatch: Any) -> None:
    result = _invoke(monkeypatch, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_decode_prints_summary(
    tmp_path: Path, monkeypatch: Any, syncmaster_edid: bytes
) -> None:
    path = tmp_path / "edid.bin"
    path.write_bytes(syncmaster_edid)

    result = _invoke(monkeypatch, ["decode", str(path), "--check-checksum"])

    assert result.exit_code == 0, result.output
    assert "vendor SAM, product 596" in result.output
    assert "1680x1050" in result.output
    assert "product_name: 'SyncMaster'" in result.output
    assert "serial_number: 'HS3P701105'" in result.output
    assert "checksum OK" in result.output


def test_cli_decode_hex_dump(
    tmp_path: Path, monkeypatch: Any, sharp_panel_edid: bytes
) -> None:
    path = tmp_path / "edid.txt"
    path.write_text(sharp_panel_edid.hex(" "), encoding="utf-8")

    result = _invoke(monkeypatch, ["decode", "--hex", str(path)])

    assert result.exit_code == 0, result.output
    assert "vendor SHP" in result.output
    assert "unknown tag 0x00: 02 41 03 28" in result.output
    assert "dummy" in result.output


def test_cli_decode_bad_checksum_exits_2(
    tmp_path: Path, monkeypatch: Any, syncmaster_edid: bytes
) -> None:
    path = tmp_path / "edid.bin"
    path.write_bytes(syncmaster_edid[:127] + b"\x00")

    result = _invoke(monkeypatch, ["decode", str(path), "--check-checksum"])

    assert result.exit_code == 2
    assert "checksum mismatch" in result.output


def test_cli_decode_invalid_block(tmp_path: Path, monkeypatch: Any) -> None:
    path = tmp_path / "edid.bin"
    path.write_bytes(b"\x00\xff\xff\xff")

    result = _invoke(monkeypatch, ["decode", str(path)])

    assert result.exit_code == 1
    assert "Invalid EDID" in result.output


def test_cli_scan_reports_connectors(
    tmp_path: Path, monkeypatch: Any, drm_root: Path
) -> None:
    broken = drm_root / "card1-DP-1"
    broken.mkdir()
    (broken / "edid").write_bytes(b"\x12" * 128)

    result = _invoke(monkeypatch, ["scan", str(drm_root)])

    assert result.exit_code == 0, result.output
    assert "card0-VGA-1" in result.output
    assert "card0-HDMI-A-1" not in result.output
    assert "Done. Decoded 1 connector(s), 1 failed." in result.output


def test_cli_to_xlsx_from_drm_root(
    tmp_path: Path, monkeypatch: Any, drm_root: Path
) -> None:
    out = tmp_path / "out.xlsx"

    result = _invoke(
        monkeypatch, ["to-xlsx", str(drm_root), "--xlsx", str(out)]
    )

    assert result.exit_code == 0, result.output
    assert "Done. Exported 1 EDID(s)" in result.output
    assert out.exists()


def test_cli_to_xlsx_single_file(
    tmp_path: Path, monkeypatch: Any, sharp_panel_edid: bytes
) -> None:
    dump = tmp_path / "panel.bin"
    dump.write_bytes(sharp_panel_edid)
    out = tmp_path / "panel.xlsx"

    result = _invoke(monkeypatch, ["to-xlsx", str(dump), "--xlsx", str(out)])

    assert result.exit_code == 0, result.output
    assert out.exists()


def test_cli_to_xlsx_nothing_found(tmp_path: Path, monkeypatch: Any) -> None:
    out = tmp_path / "none.xlsx"

    result = _invoke(
        monkeypatch, ["to-xlsx", str(tmp_path), "--xlsx", str(out)]
    )

    assert result.exit_code == 0
    assert "No EDID found." in result.output
    assert not out.exists()
