"""
Recording controller.

Owns the recording state machine and the one capture process that may be
running. The flow is:

1. start(): NOT_RECORDING -> STARTING, pick a temp file, launch the capture,
   STARTING -> RECORDING once the process is spawned
2. stop(): RECORDING -> STOPPING, terminate the capture and wait for it,
   ask where to save, STOPPING -> FINALIZING, run the Finalizer,
   FINALIZING -> NOT_RECORDING, report the outcome
3. shutdown(): best-effort save of whatever is still recording
"""

import os
import threading
import time
from typing import Callable, Optional

from timelapse.config import FileSettingsProvider, Settings, SettingsProvider
from timelapse.core.finalizer import FinalizationRequest, Finalizer, FinalizeResult
from timelapse.core.naming import new_save_file, temporary_recording_file
from timelapse.core.platform import Platform
from timelapse.core.state import ActiveRecording, ControllerState, RecordingState
from timelapse.core.status import StatusItem, status_for
from timelapse.core.ticker import ElapsedTicker
from timelapse.desktop import CommandClipboard, CommandOpener
from timelapse.encoder import Encoder, FfmpegEncoder, ProbeResult
from timelapse.errors import SettingsError
from timelapse.logging import get_timelapse_logger
from timelapse.services import Clipboard, FilePicker, Notifier, Opener

logger = get_timelapse_logger(__name__)

OPEN_ACTION = "Open"
OPEN_AND_COPY_ACTION = "Open & copy"
COPY_ACTION = "Copy to clipboard"
VISIT_WEBSITE_ACTION = "Visit website in browser"

FFMPEG_DOWNLOAD_URL = "https://ffmpeg.org/download.html"
FFMPEG_MISSING_MESSAGE = (
    "ffmpeg is not installed! Timelapse requires ffmpeg to record your screen "
    "and speed up the video."
)
PROBE_FAILED_MESSAGE = "Could not check if ffmpeg is installed. Features of Timelapse may not work!"
SAVE_FAILED_MESSAGE = "Could not save timelapse!"
COPIED_MESSAGE = "Copied timelapse path to clipboard"

DEFAULT_TEARDOWN_TIMEOUT = 30.0


class RecordingController:
    """
    Start/stop control over a single screen recording.

    Example:
        controller = RecordingController(notifier, file_picker)
        controller.activate()
        controller.start()
        ...
        controller.stop()
        controller.shutdown()
    """

    def __init__(
        self,
        notifier: Notifier,
        file_picker: FilePicker,
        settings: Optional[SettingsProvider] = None,
        encoder: Optional[Encoder] = None,
        platform: Optional[Platform] = None,
        clipboard: Optional[Clipboard] = None,
        opener: Optional[Opener] = None,
        on_status: Optional[Callable[[StatusItem], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = 1.0,
    ):
        """
        Initialize controller.

        Args:
            notifier: Shows messages and returns chosen actions
            file_picker: Asks for the save destination
            settings: Settings source (default: ~/.timelapse/settings.json)
            encoder: External tool wrapper (default: FfmpegEncoder)
            platform: Platform info (auto-detected if None)
            clipboard: Clipboard (default: platform clipboard command)
            opener: Opener for videos and links (default: platform opener)
            on_status: Called with a StatusItem whenever the status changes
            clock: Monotonic clock in seconds, for the elapsed time
            tick_interval: Seconds between elapsed-time updates
        """
        self.notifier = notifier
        self.file_picker = file_picker
        self.settings_provider = settings or FileSettingsProvider()
        self.encoder = encoder or FfmpegEncoder()
        self.platform = platform or Platform.detect()
        self.clipboard = clipboard or CommandClipboard(self.platform)
        self.opener = opener or CommandOpener(self.platform)
        self.on_status = on_status
        self.clock = clock
        self.tick_interval = tick_interval

        self.finalizer = Finalizer(self.encoder)
        self.state = ControllerState()
        self._ticker: Optional[ElapsedTicker] = None

    @property
    def recording_state(self) -> RecordingState:
        return self.state.state

    @property
    def status(self) -> StatusItem:
        ticker = self._ticker
        elapsed = ticker.elapsed() if ticker is not None else "00:00:00"
        return status_for(self.state.state, elapsed)

    def settings(self) -> Settings:
        return Settings.from_provider(self.settings_provider)

    def activate(self) -> ProbeResult:
        """
        Probe the encoder once and publish the initial status.

        When the tool is missing, start() and stop() stay disabled for the
        lifetime of this controller.
        """
        result = self.encoder.probe_available()

        if result == ProbeResult.NOT_INSTALLED:
            logger.error("ffmpeg is not installed, recording disabled")
            self.state.encoder_available = False
            self._show_unavailable()
        elif result == ProbeResult.PROBE_FAILED:
            logger.warning("Could not check if ffmpeg is installed")
            self.notifier.warning(PROBE_FAILED_MESSAGE)

        self._publish()
        return result

    def start(self) -> None:
        """
        Start recording the screen.

        Raises:
            UnsupportedPlatformError: Before any state change or launch
            InvalidTransitionError: If not currently NOT_RECORDING
            SettingsError: For invalid settings
        """
        if not self.state.encoder_available:
            self._show_unavailable()
            return

        input_driver = self.platform.input_driver()
        settings = self.settings()
        display = self.platform.resolve_display(settings.display)

        self._enter(RecordingState.STARTING)
        active = ActiveRecording(temporary_recording_file())
        self.state.active = active

        try:
            active.process = self.encoder.launch_capture(
                input_driver, display, settings.source_fps, active.temporary_file_path
            )
        except OSError as e:
            logger.error(f"Could not launch capture: {e}")
            self.state.active = None
            self._enter(RecordingState.NOT_RECORDING, "launch failed")
            self.notifier.error(f"Could not start recording: {e}")
            return

        self._enter(RecordingState.RECORDING)
        logger.info(f"Recording to {active.temporary_file_path}")

    def stop(self) -> Optional[FinalizeResult]:
        """
        Stop recording, ask for a destination and save the timelapse.

        Blocks until the finalize step has finished. Invalid settings or an
        unusable save directory are reported as a failed save.

        Returns:
            FinalizeResult, or None when the encoder is unavailable

        Raises:
            InvalidTransitionError: If not currently RECORDING
            RecordingInvariantError: If there is no active recording
        """
        if not self.state.encoder_available:
            self._show_unavailable()
            return None

        self._enter(RecordingState.STOPPING)
        active = self.state.require_active()

        if active.process is not None:
            self.encoder.terminate_capture(active.process)
            self.encoder.wait_capture(active.process)

        # Settings are only read once the capture has stopped
        try:
            settings = self.settings()
            destination = self.file_picker.pick_destination()
            save_path = os.path.abspath(destination) if destination else new_save_file(settings.save_directory)
        except (SettingsError, OSError) as e:
            logger.error(f"Could not prepare timelapse destination: {e}")
            self._enter(RecordingState.FINALIZING, "no destination")
            result = FinalizeResult(False, "", error=str(e))
        else:
            result = self._stop_and_save(save_path, settings.final_fps)

        self.state.active = None
        self._enter(RecordingState.NOT_RECORDING)

        if result.success:
            self._report_saved(result.destination)
        else:
            self.notifier.error(SAVE_FAILED_MESSAGE)

        return result

    def shutdown(self, timeout: float = DEFAULT_TEARDOWN_TIMEOUT) -> None:
        """
        Tear down: save anything still recording into a new default path.

        Best effort. Errors are logged at debug level and not reported. The
        finalize runs on a worker that is left behind after timeout seconds.
        """
        self._cancel_ticker()
        active = self.state.active

        try:
            if active is not None:
                self._teardown_save(active, timeout)
        except Exception as e:
            logger.debug(f"teardown save failed: {e}")
        finally:
            self.state.reset()
            self._publish()

    def open_video(self, path: str) -> None:
        try:
            self.opener.open(path)
        except OSError as e:
            logger.error(f"Could not open {path}: {e}")
            self.notifier.error(f"Could not open {path}")

    def _stop_and_save(self, save_path: str, final_fps: int) -> FinalizeResult:
        active = self.state.require_active()
        self._enter(RecordingState.FINALIZING)

        request = FinalizationRequest(active.temporary_file_path, save_path, final_fps)
        return self.finalizer.finalize(request)

    def _teardown_save(self, active: ActiveRecording, timeout: float) -> None:
        if active.process is not None:
            self.encoder.terminate_capture(active.process)
            if self.encoder.wait_capture(active.process, timeout=timeout) is None:
                logger.debug("capture process still running after teardown timeout")

        settings = self.settings()
        self.state.force(RecordingState.FINALIZING, "teardown")
        request = FinalizationRequest(
            active.temporary_file_path,
            new_save_file(settings.save_directory),
            settings.final_fps,
        )

        worker = threading.Thread(
            target=self._teardown_finalize,
            args=(request,),
            name="timelapse-teardown",
            daemon=True,
        )
        worker.start()
        worker.join(timeout)

        if worker.is_alive():
            logger.debug("teardown finalize still running, detaching")

    def _teardown_finalize(self, request: FinalizationRequest) -> None:
        try:
            result = self.finalizer.finalize(request)
            logger.debug(f"teardown finalize success={result.success} -> {request.destination}")
        except Exception as e:
            logger.debug(f"teardown finalize failed: {e}")

    def _report_saved(self, path: str) -> None:
        action = self.notifier.info(
            f"Saved timelapse: {path}",
            OPEN_ACTION,
            OPEN_AND_COPY_ACTION,
            COPY_ACTION,
        )

        if action == OPEN_ACTION:
            self.open_video(path)
        elif action == OPEN_AND_COPY_ACTION:
            self._copy_path(path)
            self.open_video(path)
        elif action == COPY_ACTION:
            self._copy_path(path)

    def _copy_path(self, path: str) -> None:
        try:
            self.clipboard.copy(path)
        except OSError as e:
            logger.warning(f"Could not copy to clipboard: {e}")
            self.notifier.warning("Could not copy timelapse path to clipboard")
            return

        self.notifier.info(COPIED_MESSAGE)

    def _show_unavailable(self) -> None:
        action = self.notifier.error(FFMPEG_MISSING_MESSAGE, VISIT_WEBSITE_ACTION)

        # Any other answer, including dismissal, is a no-op
        if action == VISIT_WEBSITE_ACTION:
            self.open_video(FFMPEG_DOWNLOAD_URL)

    def _enter(self, target: RecordingState, reason: Optional[str] = None) -> None:
        self.state.transition(target, reason)

        if target == RecordingState.RECORDING:
            active = self.state.require_active()
            active.started_at = self.clock()
            self._ticker = ElapsedTicker(active.started_at, self._on_tick, self.tick_interval, self.clock)
            self._ticker.start()
        else:
            self._cancel_ticker()

        self._publish()

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _on_tick(self, elapsed: str) -> None:
        if self.state.state == RecordingState.RECORDING:
            self._publish(elapsed)

    def _publish(self, elapsed: str = "00:00:00") -> None:
        if self.on_status is not None:
            self.on_status(status_for(self.state.state, elapsed))
