"""
ffmpeg encoder - run the ffmpeg binary on the local machine.
"""

import subprocess
from typing import List, Optional, Sequence, Tuple

from timelapse.encoder.base import CaptureProcess, Encoder, ProbeResult
from timelapse.logging import get_timelapse_logger

logger = get_timelapse_logger(__name__)

# Exit codes meaning "ran and printed usage"
PROBE_OK_CODES = (0, 1)


def format_time_scale(time_scale: float) -> str:
    """
    Render an -itsscale value without losing precision.

    Example:
        format_time_scale(1.0)    -> "1"
        format_time_scale(1 / 60) -> "0.016666666666666666"
    """
    if float(time_scale).is_integer():
        return str(int(time_scale))
    return repr(float(time_scale))


def capture_args(
    binary: Sequence[str],
    input_driver: str,
    display: str,
    source_fps: int,
    output_path: str,
) -> List[str]:
    """Command line for grabbing the screen."""
    return [
        *binary,
        "-f", input_driver,
        "-framerate", str(source_fps),
        "-i", display,
        output_path,
    ]


def finalize_args(binary: Sequence[str], time_scale: float, source: str, destination: str) -> List[str]:
    """Command line for the timestamp rescale + stream copy."""
    return [
        *binary,
        "-itsscale", format_time_scale(time_scale),
        "-i", source,
        "-c", "copy",
        destination,
    ]


class PopenCapture(CaptureProcess):
    """CaptureProcess backed by subprocess.Popen."""

    def __init__(self, process: subprocess.Popen):
        self._process = process

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid

    def terminate(self) -> None:
        if self._process.poll() is None:
            try:
                self._process.terminate()
            except ProcessLookupError:
                pass

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        try:
            return self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return None

    def poll(self) -> Optional[int]:
        return self._process.poll()


class FfmpegEncoder(Encoder):
    """
    Encoder running ffmpeg through subprocess.

    Args:
        binary: Command used to invoke ffmpeg, as a list
            (default: ["ffmpeg"]). Tests point this at a stand-in script.

    Example:
        encoder = FfmpegEncoder()
        process = encoder.launch_capture("x11grab", ":0.0", 1, "/tmp/capture.mp4")
        encoder.terminate_capture(process)
        encoder.wait_capture(process)
        output, code = encoder.run_finalize(1 / 60, "/tmp/capture.mp4", "out.mp4")
    """

    def __init__(self, binary: Optional[Sequence[str]] = None):
        self.binary = list(binary or ["ffmpeg"])

    def run_command(self, args: list) -> Tuple[str, int]:
        """
        Run command from list of arguments (no shell).

        Args:
            args: Command and arguments as list

        Returns:
            Tuple of (output, exit_code)
        """
        result = subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
        )
        return result.stdout + result.stderr, result.returncode

    def launch_capture(
        self,
        input_driver: str,
        display: str,
        source_fps: int,
        output_path: str,
    ) -> CaptureProcess:
        args = capture_args(self.binary, input_driver, display, source_fps, output_path)
        logger.debug(f"launching capture: {' '.join(args)}")

        # ffmpeg prints progress forever; detach all streams so nothing fills up
        process = subprocess.Popen(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        logger.info(f"Capture process started (pid {process.pid})")
        return PopenCapture(process)

    def terminate_capture(self, process: CaptureProcess) -> None:
        logger.debug(f"terminating capture process {process.pid}")
        process.terminate()

    def wait_capture(self, process: CaptureProcess, timeout: Optional[float] = None) -> Optional[int]:
        code = process.wait(timeout=timeout)
        if code is not None:
            logger.info(f"Capture process exited with code {code}")
        return code

    def run_finalize(self, time_scale: float, source: str, destination: str) -> Tuple[str, int]:
        args = finalize_args(self.binary, time_scale, source, destination)
        logger.debug(f"running finalize: {' '.join(args)}")
        return self.run_command(args)

    def probe_available(self) -> ProbeResult:
        try:
            _, code = self.run_command(list(self.binary))
        except FileNotFoundError:
            return ProbeResult.NOT_INSTALLED
        except OSError as e:
            logger.debug(f"probe could not run {self.binary[0]}: {e}")
            return ProbeResult.PROBE_FAILED

        if code in PROBE_OK_CODES:
            return ProbeResult.INSTALLED

        logger.debug(f"probe exit code {code}")
        return ProbeResult.NOT_INSTALLED
