"""
Unit tests for the CLI.

ffmpeg calls are replaced with mocks.
"""

import json

import pytest
from click.testing import CliRunner

from timelapse import __version__
from timelapse.cli.main import cli
from timelapse.encoder.base import ProbeResult
from timelapse.encoder.ffmpeg import FfmpegEncoder


@pytest.fixture
def runner():
    return CliRunner()


class TestInfoCommands:

    def test_version(self, runner):
        """The version command prints the package version."""
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert f"timelapse version {__version__}" in result.output

    def test_help_without_command(self, runner):
        """Without a command the group prints its help."""
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "record" in result.output
        assert "finalize" in result.output

    def test_platform_info(self, runner):
        """platform-info describes the detected platform."""
        result = runner.invoke(cli, ["platform-info"])

        assert result.exit_code == 0
        assert "Platform Information:" in result.output


class TestConfigCommand:

    def test_flags_override_file(self, runner, tmp_path):
        """Command-line flags take precedence over the settings file."""
        settings_file = tmp_path / "settings.json"
        settings_file.write_text(json.dumps({"finalFps": 24, "sourceFps": 2}))

        result = runner.invoke(cli, [
            "config", "--settings", str(settings_file), "--final-fps", "30",
        ])

        assert result.exit_code == 0
        assert "Final fps:      30" in result.output
        assert "Source fps:     2" in result.output

    def test_invalid_settings(self, runner, tmp_path):
        """Bad settings exit with code 1."""
        settings_file = tmp_path / "settings.json"
        settings_file.write_text(json.dumps({"finalFps": "fast"}))

        result = runner.invoke(cli, ["config", "--settings", str(settings_file)])

        assert result.exit_code == 1


class TestProbeCommand:

    @pytest.mark.parametrize("probe, exit_code", [
        (ProbeResult.INSTALLED, 0),
        (ProbeResult.PROBE_FAILED, 0),
        (ProbeResult.NOT_INSTALLED, 1),
    ])
    def test_probe(self, runner, monkeypatch, probe, exit_code):
        """Only a missing ffmpeg fails the probe command."""
        monkeypatch.setattr(FfmpegEncoder, "probe_available", lambda self: probe)

        result = runner.invoke(cli, ["probe"])

        assert result.exit_code == exit_code


class TestFinalizeCommand:

    def _fake_finalize(self, monkeypatch, exit_code):
        calls = []

        def run_finalize(self, time_scale, source, destination):
            calls.append((time_scale, source, destination))
            if exit_code == 0:
                with open(destination, "wb") as f:
                    f.write(b"timelapse")
            return ("", exit_code)

        monkeypatch.setattr(FfmpegEncoder, "run_finalize", run_finalize)
        return calls

    def test_finalize_to_destination(self, runner, tmp_path, monkeypatch):
        """A capture is remuxed into the given destination."""
        calls = self._fake_finalize(monkeypatch, 0)
        capture = tmp_path / "timelapse-temp-1.mp4"
        capture.write_bytes(b"frames")
        destination = tmp_path / "out.mp4"

        result = runner.invoke(cli, [
            "finalize", str(capture), str(destination),
            "--final-fps", "30", "--settings", str(tmp_path / "none.json"),
        ])

        assert result.exit_code == 0
        assert "Saved timelapse" in result.output
        assert calls[0][0] == 1 / 30
        assert destination.exists()
        assert not capture.exists()

    def test_finalize_default_destination(self, runner, tmp_path, monkeypatch):
        """Without a destination a new file in the save directory is used."""
        self._fake_finalize(monkeypatch, 0)
        capture = tmp_path / "timelapse-temp-1.mp4"
        capture.write_bytes(b"frames")
        save_dir = tmp_path / "saves"

        result = runner.invoke(cli, [
            "finalize", str(capture), "--save-dir", str(save_dir),
            "--settings", str(tmp_path / "none.json"),
        ])

        assert result.exit_code == 0
        assert len(list(save_dir.glob("timelapse-save-*.mp4"))) == 1

    def test_finalize_failure(self, runner, tmp_path, monkeypatch):
        """A failed remux exits 1 and keeps the capture."""
        self._fake_finalize(monkeypatch, 1)
        capture = tmp_path / "timelapse-temp-1.mp4"
        capture.write_bytes(b"frames")

        result = runner.invoke(cli, [
            "finalize", str(capture), str(tmp_path / "out.mp4"),
            "--settings", str(tmp_path / "none.json"),
        ])

        assert result.exit_code == 1
        assert capture.exists()

    def test_missing_capture(self, runner, tmp_path):
        """A missing capture file is rejected by click."""
        result = runner.invoke(cli, ["finalize", str(tmp_path / "missing.mp4")])

        assert result.exit_code != 0
