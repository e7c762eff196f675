"""
Recording state machine.

NOT_RECORDING -> STARTING -> RECORDING -> STOPPING -> FINALIZING -> NOT_RECORDING

STARTING may fall back to NOT_RECORDING when the capture process could not
be launched. Teardown uses force() to jump to FINALIZING.
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, Optional, Set

from timelapse.encoder.base import CaptureProcess
from timelapse.errors import InvalidTransitionError, RecordingInvariantError
from timelapse.logging import get_timelapse_logger

logger = get_timelapse_logger(__name__)

HISTORY_LIMIT = 32


class RecordingState(Enum):
    """Recording lifecycle states."""
    NOT_RECORDING = "not_recording"
    STARTING = "starting"
    RECORDING = "recording"
    STOPPING = "stopping"
    FINALIZING = "finalizing"


TRANSITIONS: Dict[RecordingState, Set[RecordingState]] = {
    RecordingState.NOT_RECORDING: {RecordingState.STARTING},
    RecordingState.STARTING: {RecordingState.RECORDING, RecordingState.NOT_RECORDING},
    RecordingState.RECORDING: {RecordingState.STOPPING},
    RecordingState.STOPPING: {RecordingState.FINALIZING},
    RecordingState.FINALIZING: {RecordingState.NOT_RECORDING},
}


@dataclass(frozen=True)
class Transition:
    source: RecordingState
    target: RecordingState


class ActiveRecording:
    """
    The recording in progress.

    temporary_file_path is fixed at creation and read-only afterwards.
    """

    def __init__(self, temporary_file_path: str):
        self._temporary_file_path = temporary_file_path
        self.process: Optional[CaptureProcess] = None
        self.started_at: Optional[float] = None

    @property
    def temporary_file_path(self) -> str:
        return self._temporary_file_path

    def __repr__(self):
        return f"ActiveRecording(temporary_file_path={self._temporary_file_path!r})"


@dataclass
class ControllerState:
    """
    Everything the controller mutates: current state, the active recording,
    whether the encoder is usable and the most recent transitions.
    """
    state: RecordingState = RecordingState.NOT_RECORDING
    active: Optional[ActiveRecording] = None
    encoder_available: bool = True
    history: Deque[Transition] = field(default_factory=lambda: deque(maxlen=HISTORY_LIMIT))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def transition(self, target: RecordingState, reason: Optional[str] = None) -> Transition:
        """
        Move to target.

        Raises:
            InvalidTransitionError: If target is not reachable from the current state
        """
        with self._lock:
            if target not in TRANSITIONS[self.state]:
                raise InvalidTransitionError(self.state, target)
            return self._set(target, reason)

    def force(self, target: RecordingState, reason: Optional[str] = None) -> Transition:
        """Move to target without validation (teardown only)."""
        with self._lock:
            return self._set(target, reason)

    def require_active(self) -> ActiveRecording:
        if self.active is None:
            raise RecordingInvariantError("Tried to stop recording when not currently recording")
        return self.active

    def reset(self) -> None:
        with self._lock:
            if self.state != RecordingState.NOT_RECORDING:
                self._set(RecordingState.NOT_RECORDING, "reset")
            self.active = None

    def _set(self, target: RecordingState, reason: Optional[str]) -> Transition:
        event = Transition(self.state, target)
        logger.transition(self.state.value, target.value, reason)
        self.state = target
        self.history.append(event)
        return event
