"""
Base encoder interface.

The recording controller only talks to the external tool through this
interface, so it can be driven by a fake in tests.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple


class ProbeResult(Enum):
    """Outcome of the availability probe."""
    INSTALLED = "installed"
    NOT_INSTALLED = "not_installed"
    PROBE_FAILED = "probe_failed"


class CaptureProcess(ABC):
    """Handle to a running capture process."""

    @property
    @abstractmethod
    def pid(self) -> Optional[int]:
        pass

    @abstractmethod
    def terminate(self) -> None:
        """Ask the process to stop."""
        pass

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        Block until the process exits.

        Args:
            timeout: Seconds to wait, None waits forever

        Returns:
            Exit code, or None if the timeout expired first
        """
        pass

    @abstractmethod
    def poll(self) -> Optional[int]:
        """Exit code if the process has exited, else None."""
        pass


class Encoder(ABC):
    """
    Abstract base class for the external encoder.

    Implementations:
    - FfmpegEncoder: Run the ffmpeg binary via subprocess
    """

    @abstractmethod
    def launch_capture(
        self,
        input_driver: str,
        display: str,
        source_fps: int,
        output_path: str,
    ) -> CaptureProcess:
        """
        Start grabbing the screen into output_path.

        Returns once the process has been spawned.

        Raises:
            OSError: If the process could not be spawned
        """
        pass

    @abstractmethod
    def terminate_capture(self, process: CaptureProcess) -> None:
        """Request termination of a capture process."""
        pass

    @abstractmethod
    def wait_capture(self, process: CaptureProcess, timeout: Optional[float] = None) -> Optional[int]:
        """Wait for a capture process to exit and return its exit code."""
        pass

    @abstractmethod
    def run_finalize(self, time_scale: float, source: str, destination: str) -> Tuple[str, int]:
        """
        Rescale timestamps of source and remux into destination (blocking).

        Returns:
            Tuple of (output, exit_code)

        Raises:
            OSError: If the tool could not be invoked
        """
        pass

    @abstractmethod
    def probe_available(self) -> ProbeResult:
        """Check whether the tool can be run."""
        pass
