"""
Finalizer - turn a finished capture into the saved timelapse.

The capture is recorded at a low source frame rate. Finalizing rescales its
input timestamps by 1 / final_fps and stream-copies the result into the
destination container, which plays the capture back sped up.
"""

import os
import subprocess
from dataclasses import dataclass

from timelapse.core.naming import delete_file
from timelapse.encoder.base import Encoder
from timelapse.logging import get_timelapse_logger

logger = get_timelapse_logger(__name__)


@dataclass(frozen=True)
class FinalizationRequest:
    """Source capture, destination path and target frame rate."""
    source: str
    destination: str
    final_fps: int

    @property
    def time_scale(self) -> float:
        return 1 / self.final_fps


@dataclass
class FinalizeResult:
    """
    Result of a finalize run.

    On success the destination exists and the source is gone. On failure the
    source is left as it was.
    """
    success: bool
    destination: str
    output: str = ""
    error: str = ""


class Finalizer:
    """
    Runs the rescale synchronously through the encoder.

    Example:
        finalizer = Finalizer(FfmpegEncoder())
        result = finalizer.finalize(FinalizationRequest(temp, "out.mp4", 60))
        if result.success:
            print(f"Saved {result.destination}")
    """

    def __init__(self, encoder: Encoder):
        self.encoder = encoder

    def finalize(self, request: FinalizationRequest) -> FinalizeResult:
        """
        Rescale request.source into request.destination.

        An existing file at the destination is replaced. There is no timeout:
        this returns when the encoder exits.

        Args:
            request: What to finalize

        Returns:
            FinalizeResult
        """
        source = os.path.abspath(request.source)
        destination = os.path.abspath(request.destination)

        if source == destination:
            logger.error(f"Refusing to finalize {source} onto itself")
            return FinalizeResult(False, destination, error="source and destination are the same file")

        try:
            delete_file(destination)
        except OSError as e:
            logger.error(f"Could not replace {destination}: {e}")
            return FinalizeResult(False, destination, error=str(e))

        try:
            output, code = self.encoder.run_finalize(request.time_scale, source, destination)
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"Could not run finalize: {e}")
            return FinalizeResult(False, destination, error=str(e))

        if code != 0:
            logger.error(f"Finalize exited with code {code}")
            logger.debug(output)
            return FinalizeResult(False, destination, output=output, error=f"exit code {code}")

        try:
            delete_file(source)
        except OSError as e:
            logger.warning(f"Saved {destination} but could not delete {source}: {e}")

        logger.info(f"Finalized {source} -> {destination}")
        return FinalizeResult(True, destination, output=output)
