"""
Unit tests for the console notifier, file picker and status line.

Answers are fed through click's test runner input.
"""

import pytest
from click.testing import CliRunner

from timelapse.cli.console import ConsoleFilePicker, ConsoleNotifier, ConsoleStatus, FixedFilePicker
from timelapse.core.state import RecordingState
from timelapse.core.status import status_for

ACTIONS = ("Open", "Open & copy", "Copy to clipboard")


def answer(callable_, text):
    """Run callable_ with text as the terminal input."""
    with CliRunner().isolation(input=text):
        return callable_()


class TestConsoleNotifier:
    """Unit tests for choosing actions from a notice."""

    @pytest.mark.parametrize("text, expected", [
        ("1\n", "Open"),
        ("2\n", "Open & copy"),
        (" 3 \n", "Copy to clipboard"),
    ])
    def test_numbered_action(self, text, expected):
        """A listed number picks that action."""
        notifier = ConsoleNotifier()

        assert answer(lambda: notifier.info("Saved timelapse: /videos/demo.mp4", *ACTIONS), text) == expected

    @pytest.mark.parametrize("text", ["\n", "open\n", "0\n", "4\n", "-1\n"])
    def test_dismissed(self, text):
        """Empty, non-numeric and out-of-range answers dismiss the notice."""
        notifier = ConsoleNotifier()

        assert answer(lambda: notifier.info("Saved timelapse: /videos/demo.mp4", *ACTIONS), text) is None

    def test_no_actions_does_not_prompt(self):
        """A notice without actions returns without reading input."""
        notifier = ConsoleNotifier()

        assert answer(lambda: notifier.warning("Could not check if ffmpeg is installed"), "") is None

    def test_non_interactive_never_prompts(self):
        """--yes mode dismisses every notice."""
        notifier = ConsoleNotifier(interactive=False)

        assert answer(lambda: notifier.error("ffmpeg is not installed!", "Visit website in browser"), "") is None


class TestFilePickers:
    """Unit tests for destination pickers."""

    def test_console_picker_strips_answer(self):
        """The typed path is returned without surrounding blanks."""
        assert answer(ConsoleFilePicker().pick_destination, "  demo.mp4 \n") == "demo.mp4"

    def test_console_picker_blank_cancels(self):
        """Enter alone means no destination."""
        assert answer(ConsoleFilePicker().pick_destination, "\n") is None

    def test_fixed_picker(self):
        """--output always wins."""
        assert FixedFilePicker("/videos/demo.mp4").pick_destination() == "/videos/demo.mp4"
        assert FixedFilePicker(None).pick_destination() is None


class TestConsoleStatus:
    """Unit tests for the status line."""

    def test_repeated_item_is_ignored(self):
        """The same status is only rendered once."""
        status = ConsoleStatus()
        item = status_for(RecordingState.RECORDING, "00:00:01")

        with CliRunner().isolation():
            status(item)
            status(item)

        assert status.last == item

    def test_tracks_latest_item(self):
        """Leaving RECORDING updates the rendered item."""
        status = ConsoleStatus()

        with CliRunner().isolation():
            status(status_for(RecordingState.RECORDING, "00:00:01"))
            status(status_for(RecordingState.STOPPING))
            status(status_for(RecordingState.NOT_RECORDING))

        assert status.last == status_for(RecordingState.NOT_RECORDING)
