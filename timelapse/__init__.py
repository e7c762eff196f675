__version__ = "0.1.0"

from timelapse.core import RecordingController, RecordingState, Finalizer, FinalizationRequest
from timelapse.config import Settings
from timelapse.logging import get_logger, get_timelapse_logger, setup_logging

"""
Foundations of Timelapse:
    RecordingController starts and stops one screen capture and saves it.
    RecordingState is the lifecycle the controller moves through.
    Finalizer rescales a finished capture into the sped-up timelapse.
    FinalizationRequest describes one finalize run.
    Settings holds save directory and frame rates.
"""

__all__ = [
    "RecordingController",
    "RecordingState",
    "Finalizer",
    "FinalizationRequest",
    "Settings",
    "get_logger",
    "get_timelapse_logger",
    "setup_logging",
]
