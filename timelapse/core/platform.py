"""
Platform detection and the fixed per-OS lookups Timelapse needs:
screen-grab input driver, default display selector, opener and clipboard
commands.
"""

import os
import platform as platform_module
from dataclasses import dataclass
from typing import Dict, List, Optional

from timelapse.errors import UnsupportedPlatformError

WINDOWS = "Windows"
MACOS = "Darwin"
LINUX = "Linux"

INPUT_DRIVERS: Dict[str, str] = {
    WINDOWS: "gdigrab",
    MACOS: "avfoundation",
    LINUX: "x11grab",
}

DEFAULT_DISPLAYS: Dict[str, str] = {
    WINDOWS: "desktop",
    MACOS: "Capture screen 0",
    LINUX: ":0.0",
}

OPENERS: Dict[str, List[str]] = {
    WINDOWS: ["explorer"],
    MACOS: ["open"],
    LINUX: ["xdg-open"],
}

CLIPBOARD_COMMANDS: Dict[str, List[str]] = {
    WINDOWS: ["clip"],
    MACOS: ["pbcopy"],
    LINUX: ["xclip", "-selection", "clipboard"],
}


@dataclass
class Platform:
    """Platform information (OS and architecture)."""
    system: str  # Linux, Darwin, Windows
    version: str
    arch: str

    @classmethod
    def detect(cls) -> "Platform":
        """Detect the local platform."""
        system = platform_module.system()
        version = platform_module.release()

        if system == MACOS:
            version = platform_module.mac_ver()[0] or version

        return cls(
            system=system,
            version=version,
            arch=platform_module.machine(),
        )

    @property
    def supported(self) -> bool:
        return self.system in INPUT_DRIVERS

    def input_driver(self) -> str:
        """
        ffmpeg input format used to grab the screen.

        Raises:
            UnsupportedPlatformError: For anything but Windows, macOS and Linux
        """
        try:
            return INPUT_DRIVERS[self.system]
        except KeyError:
            raise UnsupportedPlatformError(self.system) from None

    def default_display(self) -> str:
        """
        Default display selector passed to ffmpeg's -i.

        On Linux the X display from $DISPLAY wins when set.
        """
        if self.system not in DEFAULT_DISPLAYS:
            raise UnsupportedPlatformError(self.system)

        if self.system == LINUX and os.environ.get("DISPLAY"):
            return os.environ["DISPLAY"]

        return DEFAULT_DISPLAYS[self.system]

    def opener(self) -> List[str]:
        """Command used to open files and links."""
        try:
            return list(OPENERS[self.system])
        except KeyError:
            raise UnsupportedPlatformError(self.system, what="Operating system") from None

    def clipboard_command(self) -> List[str]:
        """Command that copies stdin to the clipboard."""
        try:
            return list(CLIPBOARD_COMMANDS[self.system])
        except KeyError:
            raise UnsupportedPlatformError(self.system, what="Operating system") from None

    def resolve_display(self, override: Optional[str] = None) -> str:
        return override or self.default_display()
