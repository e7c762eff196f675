"""
Core Timelapse functionality.

Exports the recording state machine, controller and finalizer.
"""

from timelapse.core.state import RecordingState, ControllerState, ActiveRecording
from timelapse.core.finalizer import Finalizer, FinalizationRequest, FinalizeResult
from timelapse.core.controller import RecordingController
from timelapse.core.platform import Platform

__all__ = [
    "RecordingState",
    "ControllerState",
    "ActiveRecording",
    "Finalizer",
    "FinalizationRequest",
    "FinalizeResult",
    "RecordingController",
    "Platform",
]
