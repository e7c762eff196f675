"""
Unit tests for the Finalizer.

Uses a mock encoder that copies the source to the destination instead of
running ffmpeg.
"""

import shutil
import subprocess

import pytest

from timelapse.core.finalizer import FinalizationRequest, Finalizer


class MockEncoder:
    """Mock encoder for testing finalize."""

    def __init__(self, exit_code=0, error=None):
        self.exit_code = exit_code
        self.error = error
        self.calls = []

    def run_finalize(self, time_scale, source, destination):
        self.calls.append((time_scale, source, destination))
        if self.error is not None:
            raise self.error
        if self.exit_code == 0:
            shutil.copyfile(source, destination)
        return ("ffmpeg output", self.exit_code)


@pytest.fixture
def capture(tmp_path):
    path = tmp_path / "timelapse-temp-abc.mp4"
    path.write_bytes(b"captured frames")
    return path


class TestFinalizationRequest:

    def test_time_scale_60(self):
        """A final rate of 60 fps scales timestamps by 1/60."""
        assert FinalizationRequest("a", "b", 60).time_scale == 1 / 60

    def test_time_scale_1(self):
        """finalFps 1 means no speed-up."""
        assert FinalizationRequest("a", "b", 1).time_scale == 1


class TestFinalizer:
    """Unit tests for Finalizer.finalize()."""

    def test_success_moves_capture(self, tmp_path, capture):
        """On success the destination exists and the capture is gone."""
        encoder = MockEncoder()
        destination = tmp_path / "out.mp4"

        result = Finalizer(encoder).finalize(FinalizationRequest(str(capture), str(destination), 60))

        assert result.success
        assert result.destination == str(destination)
        assert destination.read_bytes() == b"captured frames"
        assert not capture.exists()
        assert encoder.calls == [(1 / 60, str(capture), str(destination))]

    def test_existing_destination_is_replaced(self, tmp_path, capture):
        """An existing destination is deleted before the remux."""
        encoder = MockEncoder()
        destination = tmp_path / "out.mp4"
        destination.write_bytes(b"old timelapse")

        result = Finalizer(encoder).finalize(FinalizationRequest(str(capture), str(destination), 60))

        assert result.success
        assert destination.read_bytes() == b"captured frames"

    def test_destination_removed_before_run(self, tmp_path, capture):
        """ffmpeg must never see an existing output (it would prompt)."""
        destination = tmp_path / "out.mp4"
        destination.write_bytes(b"old timelapse")
        existed = []

        class CheckingEncoder(MockEncoder):
            def run_finalize(self, time_scale, source, dest):
                existed.append(destination.exists())
                return super().run_finalize(time_scale, source, dest)

        Finalizer(CheckingEncoder()).finalize(FinalizationRequest(str(capture), str(destination), 60))

        assert existed == [False]

    def test_nonzero_exit_keeps_capture(self, tmp_path, capture):
        """A non-zero exit keeps the capture."""
        encoder = MockEncoder(exit_code=1)

        result = Finalizer(encoder).finalize(
            FinalizationRequest(str(capture), str(tmp_path / "out.mp4"), 60)
        )

        assert not result.success
        assert result.output == "ffmpeg output"
        assert capture.read_bytes() == b"captured frames"

    @pytest.mark.parametrize("error", [
        FileNotFoundError("ffmpeg"),
        PermissionError("denied"),
        subprocess.SubprocessError("boom"),
    ])
    def test_invocation_error_keeps_capture(self, tmp_path, capture, error):
        """Errors running ffmpeg keep the capture."""
        encoder = MockEncoder(error=error)

        result = Finalizer(encoder).finalize(
            FinalizationRequest(str(capture), str(tmp_path / "out.mp4"), 60)
        )

        assert not result.success
        assert result.error
        assert capture.exists()

    def test_same_path_refused(self, capture):
        """Finalizing onto the capture itself would destroy it."""
        encoder = MockEncoder()

        result = Finalizer(encoder).finalize(FinalizationRequest(str(capture), str(capture), 60))

        assert not result.success
        assert capture.exists()
        assert encoder.calls == []

    def test_never_loses_both_files(self, tmp_path, capture):
        """Either the destination exists and the capture is gone, or the capture is kept."""
        for exit_code in (0, 1, 2):
            if not capture.exists():
                capture.write_bytes(b"captured frames")
            destination = tmp_path / f"out-{exit_code}.mp4"

            result = Finalizer(MockEncoder(exit_code)).finalize(
                FinalizationRequest(str(capture), str(destination), 30)
            )

            if result.success:
                assert destination.exists() and not capture.exists()
            else:
                assert capture.exists()
