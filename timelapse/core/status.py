"""
Status shown to the user for each recording state.
"""

from dataclasses import dataclass
from typing import Optional

from timelapse.core.state import RecordingState

START_COMMAND = "start"
STOP_COMMAND = "stop"


@dataclass(frozen=True)
class StatusItem:
    label: str
    command: Optional[str]
    tooltip: str
    busy: bool = False


IDLE_STATUS = StatusItem("Record", START_COMMAND, "Start recording a timelapse")
BUSY_STATUS = StatusItem("Please wait", None, "Please wait", busy=True)


def status_for(state: RecordingState, elapsed: str = "00:00:00") -> StatusItem:
    """
    Status for state. elapsed is only used while recording.
    """
    if state == RecordingState.NOT_RECORDING:
        return IDLE_STATUS
    if state == RecordingState.RECORDING:
        return StatusItem("Stop", STOP_COMMAND, elapsed)
    return BUSY_STATUS
