"""
Encoder layer around the external ffmpeg tool.

Provides abstraction for:
- Launching and terminating the screen capture
- Running the timestamp rescale (finalize)
- Probing whether the tool is installed
"""

from timelapse.encoder.base import CaptureProcess, Encoder, ProbeResult
from timelapse.encoder.ffmpeg import FfmpegEncoder

__all__ = ["CaptureProcess", "Encoder", "ProbeResult", "FfmpegEncoder"]
