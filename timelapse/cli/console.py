"""
Console implementations of the controller's collaborators.
"""

from typing import Optional

import click
from rich.markup import escape

from timelapse.core.status import StatusItem
from timelapse.logging import console, get_timelapse_logger
from timelapse.services import FilePicker, Notifier

logger = get_timelapse_logger(__name__)


class ConsoleNotifier(Notifier):
    """
    Prints notices and, when interactive, asks for one of the actions.

    Entering nothing (or anything that is not a listed number) dismisses.
    """

    def __init__(self, interactive: bool = True):
        self.interactive = interactive

    def info(self, message: str, *actions: str) -> Optional[str]:
        return self._show("info", message, actions)

    def warning(self, message: str, *actions: str) -> Optional[str]:
        return self._show("warning", message, actions)

    def error(self, message: str, *actions: str) -> Optional[str]:
        return self._show("error", message, actions)

    def _show(self, level: str, message: str, actions: tuple) -> Optional[str]:
        logger.notice(level, message, list(actions))

        if not actions or not self.interactive:
            return None

        answer = click.prompt(
            "Choose an action (Enter to dismiss)",
            default="",
            show_default=False,
            err=True,
        )
        try:
            index = int(answer.strip())
        except ValueError:
            return None

        if 1 <= index <= len(actions):
            return actions[index - 1]
        return None


class ConsoleFilePicker(FilePicker):
    """Prompts for the output path. Empty input means cancel."""

    def pick_destination(self) -> Optional[str]:
        answer = click.prompt(
            "Timelapse output file (Enter for default)",
            default="",
            show_default=False,
            err=True,
        )
        return answer.strip() or None


class FixedFilePicker(FilePicker):
    """Always returns the same destination (--output)."""

    def __init__(self, destination: Optional[str]):
        self.destination = destination

    def pick_destination(self) -> Optional[str]:
        return self.destination


class ConsoleStatus:
    """Renders StatusItems on a single console line."""

    def __init__(self):
        self.last: Optional[StatusItem] = None

    def __call__(self, item: StatusItem) -> None:
        if item == self.last:
            return

        if item.command == "stop":
            text = f"[timelapse.recording]● REC[/timelapse.recording] {escape(item.tooltip)}"
        elif item.busy:
            text = f"[timelapse.busy]… {escape(item.label)}[/timelapse.busy]"
        else:
            text = f"[timelapse.idle]○ {escape(item.tooltip)}[/timelapse.idle]"

        if self.last is not None and self.last.command == "stop" and item.command != "stop":
            console.print()

        # Elapsed-time updates overwrite the same line
        end = "\r" if item.command == "stop" else "\n"
        console.print(text, end=end)
        self.last = item
