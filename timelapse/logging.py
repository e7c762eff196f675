"""
Logging for Timelapse.

Example:
    from timelapse.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Capture process started")
    logger.warning("Could not delete temporary capture")
    logger.error("Finalize failed", exc_info=True)
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Custom theme for Timelapse
TIMELAPSE_THEME = Theme({
    "log.time": "dim cyan",
    "log.level.debug": "dim blue",
    "log.level.info": "green",
    "log.level.warning": "yellow",
    "log.level.error": "bold red",
    "log.level.critical": "bold white on red",
    "timelapse.success": "bold green",
    "timelapse.recording": "bold red",
    "timelapse.busy": "yellow",
    "timelapse.idle": "cyan",
    "timelapse.notice.info": "bold cyan",
    "timelapse.notice.warning": "bold yellow",
    "timelapse.notice.error": "bold red",
})

# Global console instance
console = Console(theme=TIMELAPSE_THEME, stderr=True)

# Flag to track if logging has been initialized
_initialized = False


def setup_logging(
    level: str = "INFO",
    show_time: bool = True,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> None:
    """
    init Timelapse's logging

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Show timestamps in log output
        show_path: Show file path in log output
        rich_tracebacks: Use rich formatting for tracebacks

    Note:
        This should be called once at application startup.
        Subsequent calls will be ignored to prevent duplicate handlers.
    """
    global _initialized

    if _initialized:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=True,
        tracebacks_show_locals=True,
    )

    handler.setFormatter(
        logging.Formatter(
            "%(message)s",
            datefmt="[%X]",
        )
    )

    logging.basicConfig(
        level=numeric_level,
        handlers=[handler],
        force=True,  # Override any existing configuration
    )

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a given module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if not _initialized:
        setup_logging()

    return logging.getLogger(name)


class TimelapseLogger:
    """
    Timelapse-specific logger

    Wraps standard logger with convenience methods for recording events.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.console = console

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        self.logger.error(message, **kwargs)

    def success(self, message: str) -> None:
        """
        Print success message with special formatting.

        Args:
            message: Success message to display
        """
        from rich.markup import escape

        self.console.print(f"[timelapse.success]✓[/timelapse.success] {escape(message)}")

    def transition(self, source: str, target: str, reason: Optional[str] = None) -> None:
        """
        Log a recording state transition at debug level.

        Args:
            source: State being left
            target: State being entered
            reason: Optional short reason
        """
        msg = f"state {source} -> {target}"
        if reason:
            msg += f" ({reason})"
        self.logger.debug(msg)

    def notice(self, level: str, message: str, actions: Optional[list] = None) -> None:
        """
        Print a user notice.

        Args:
            level: info, warning or error
            message: Notice text
            actions: Optional action labels offered with the notice
        """
        from rich.markup import escape

        style = f"timelapse.notice.{level}"
        self.console.print(f"[{style}]{escape(message)}[/{style}]")
        for index, action in enumerate(actions or [], start=1):
            self.console.print(f"  [dim]{index})[/dim] {escape(action)}")


def get_timelapse_logger(name: str) -> TimelapseLogger:
    """
    Get a TimelapseLogger instance for the given module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        TimelapseLogger instance

    Example:
        logger = get_timelapse_logger(__name__)
        logger.success("Saved timelapse")
        logger.transition("recording", "stopping")
    """
    return TimelapseLogger(name)
