"""Tests for the subdelay command-line interface."""

import argparse
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from subdelay.cli import main
from subdelay.utils import signed_ms


SRT_TEXT = "1\n00:00:10,500 --> 00:00:12,000\nHello\n"
ASS_TEXT = "Dialogue: 0,0:01:30.00,0:01:35.00,Default,,0,0,0,,Hello, world\n"


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every CLI test without rich output and without user config files."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    with patch("subdelay.processor.HAS_RICH", False):
        yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _run(argv) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main([str(arg) for arg in argv])
    return exc_info.value.code


class TestSignedMs:
    @pytest.mark.parametrize("value, expected", [
        ("2000", 2000), ("-1500", -1500), ("+250", 250), ("0", 0),
    ])
    def test_valid(self, value: str, expected: int) -> None:
        assert signed_ms(value) == expected

    @pytest.mark.parametrize("value", ["abc", "1.5", "12ms", ""])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            signed_ms(value)


class TestMain:
    def test_shifts_srt_in_place(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        sub = tmp_path / "movie.srt"
        sub.write_text(SRT_TEXT)
        assert _run([sub, "2000"]) == 0
        assert "00:00:12,500 --> 00:00:14,000" in sub.read_text()
        out = capsys.readouterr().out
        assert f"Successfully shifted subtitles in '{sub}' by 2000 ms" in out

    def test_success_line_printed_when_quiet(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        sub = tmp_path / "movie.srt"
        sub.write_text(SRT_TEXT)
        assert _run([sub, "500", "-q"]) == 0
        captured = capsys.readouterr()
        assert "Successfully shifted subtitles" in captured.out
        assert "Successfully" not in captured.err

    def test_negative_delay(self, tmp_path: Path) -> None:
        sub = tmp_path / "movie.ass"
        sub.write_text(ASS_TEXT)
        assert _run([sub, "-1500"]) == 0
        assert sub.read_text().startswith("Dialogue: 0,0:01:28.50,0:01:33.50,")

    def test_multiple_files(self, tmp_path: Path) -> None:
        a = tmp_path / "a.srt"
        b = tmp_path / "b.ass"
        a.write_text(SRT_TEXT)
        b.write_text(ASS_TEXT)
        assert _run([a, b, "1000"]) == 0
        assert "00:00:11,500" in a.read_text()
        assert "0:01:31.00" in b.read_text()

    def test_output_option(self, tmp_path: Path) -> None:
        sub = tmp_path / "movie.srt"
        sub.write_text(SRT_TEXT)
        out = tmp_path / "fixed.srt"
        assert _run([sub, "1000", "--output", out]) == 0
        assert sub.read_text() == SRT_TEXT
        assert "00:00:11,500" in out.read_text()

    def test_output_with_many_files_rejected(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        a = tmp_path / "a.srt"
        b = tmp_path / "b.srt"
        a.write_text(SRT_TEXT)
        b.write_text(SRT_TEXT)
        assert _run([a, b, "1000", "-o", tmp_path / "o.srt"]) == 1
        assert "--output" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        assert _run([tmp_path / "nope.srt", "1000"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_unsupported_extension(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        sub = tmp_path / "movie.vtt"
        sub.write_text("WEBVTT\n")
        assert _run([sub, "1000"]) == 1
        assert "Unsupported file format '.vtt'" in capsys.readouterr().err

    def test_non_numeric_delay_is_usage_error(self, tmp_path: Path) -> None:
        sub = tmp_path / "movie.srt"
        sub.write_text(SRT_TEXT)
        assert _run([sub, "soon"]) == 2
        assert sub.read_text() == SRT_TEXT

    def test_dry_run(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        sub = tmp_path / "movie.srt"
        sub.write_text(SRT_TEXT)
        assert _run([sub, "1000", "--dry-run"]) == 0
        assert sub.read_text() == SRT_TEXT
        assert "[DRY-RUN] Would shift 1 timestamp(s)" in capsys.readouterr().out

    def test_config_backup(self, tmp_path: Path) -> None:
        pytest.importorskip("yaml")
        (tmp_path / ".subdelay.yaml").write_text("backup: true\n")
        sub = tmp_path / "movie.srt"
        sub.write_text(SRT_TEXT)
        assert _run([sub, "1000"]) == 0
        assert (tmp_path / "movie.srt.bak").read_text() == SRT_TEXT

    def test_read_failure_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        sub = tmp_path / "movie.srt"
        sub.write_bytes(b"\xff\xfe\xfa")
        assert _run([sub, "1000"]) == 1
        assert "movie.srt" in capsys.readouterr().err
