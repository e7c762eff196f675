"""
Desktop integration through platform commands:
explorer/open/xdg-open for opening, clip/pbcopy/xclip for the clipboard.
"""

import subprocess
import threading
from typing import Optional

from timelapse.core.platform import Platform
from timelapse.logging import get_timelapse_logger
from timelapse.services import Clipboard, Opener

logger = get_timelapse_logger(__name__)


class CommandOpener(Opener):
    """
    Opens a file or URL with the platform opener.

    Raises:
        UnsupportedPlatformError: On platforms without a known opener
    """

    def __init__(self, platform: Optional[Platform] = None):
        self.platform = platform or Platform.detect()

    def open(self, target: str) -> None:
        args = self.platform.opener() + [target]
        logger.debug(f"opening {target} with {args[0]}")

        # The opener may run as long as the viewer does; reap it off-thread
        process = subprocess.Popen(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        threading.Thread(target=process.wait, name="timelapse-opener", daemon=True).start()


class CommandClipboard(Clipboard):
    """Copies text by piping it into the platform clipboard command."""

    def __init__(self, platform: Optional[Platform] = None):
        self.platform = platform or Platform.detect()

    def copy(self, text: str) -> None:
        args = self.platform.clipboard_command()
        result = subprocess.run(args, input=text, capture_output=True, text=True)

        if result.returncode != 0:
            raise OSError(f"{args[0]} exited with code {result.returncode}: {result.stderr.strip()}")
