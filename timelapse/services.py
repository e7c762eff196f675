"""
Interfaces for the collaborators the controller calls into.

The CLI ships console implementations (timelapse.cli.console); tests use
small fakes.
"""

from abc import ABC, abstractmethod
from typing import Optional


class Notifier(ABC):
    """
    Shows messages, optionally with a fixed set of actions.

    Each method returns the chosen action label, or None when the message
    was dismissed.
    """

    @abstractmethod
    def info(self, message: str, *actions: str) -> Optional[str]:
        pass

    @abstractmethod
    def warning(self, message: str, *actions: str) -> Optional[str]:
        pass

    @abstractmethod
    def error(self, message: str, *actions: str) -> Optional[str]:
        pass


class FilePicker(ABC):
    """Asks where to save the timelapse."""

    @abstractmethod
    def pick_destination(self) -> Optional[str]:
        """Chosen path, or None if the user cancelled."""
        pass


class Clipboard(ABC):

    @abstractmethod
    def copy(self, text: str) -> None:
        pass


class Opener(ABC):
    """Opens files and links with whatever the desktop associates."""

    @abstractmethod
    def open(self, target: str) -> None:
        pass
