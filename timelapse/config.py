"""
Settings for Timelapse.

Values come from a SettingsProvider keyed by the setting names below.
The CLI layers command line flags over a JSON file (~/.timelapse/settings.json):

    {
        "saveDirectory": "~/Videos/timelapses",
        "sourceFps": 1,
        "finalFps": 60
    }
"""

import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from timelapse.errors import SettingsError

SAVE_DIRECTORY = "saveDirectory"
SOURCE_FPS = "sourceFps"
FINAL_FPS = "finalFps"
DISPLAY = "display"

FALLBACK_SAVE_DIR = "timelapses"
FALLBACK_SOURCE_FPS = 1
FALLBACK_FINAL_FPS = 60


class SettingsProvider(ABC):
    """Read-only source of settings."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass


class DictSettingsProvider(SettingsProvider):

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values = dict(values or {})

    def get(self, key: str, default: Any = None) -> Any:
        value = self.values.get(key)
        return default if value is None else value


class FileSettingsProvider(SettingsProvider):
    """
    Settings stored as a JSON object.

    A missing file reads as empty. The file is re-read on every get() so
    edits apply to the next recording.
    """

    def __init__(self, path: Optional[str] = None):
        if path is None:
            path = self._default_path()
        self.path = path

    @staticmethod
    def _default_path() -> str:
        """Get default settings file path."""
        return str(Path.home() / ".timelapse" / "settings.json")

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SettingsError(f"Could not read settings from {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self.path} must contain a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        value = self._load().get(key)
        return default if value is None else value


class ChainedSettingsProvider(SettingsProvider):
    """First provider returning a non-None value wins."""

    def __init__(self, *providers: SettingsProvider):
        self.providers = providers

    def get(self, key: str, default: Any = None) -> Any:
        for provider in self.providers:
            value = provider.get(key)
            if value is not None:
                return value
        return default


def _positive_int(key: str, value: Any) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        raise SettingsError(f"{key} must be an integer, got {value!r}") from None

    if number <= 0:
        raise SettingsError(f"{key} must be greater than zero, got {number}")
    return number


@dataclass(frozen=True)
class Settings:
    save_directory: str
    source_fps: int
    final_fps: int
    display: Optional[str] = None

    @classmethod
    def from_provider(cls, provider: SettingsProvider) -> "Settings":
        """
        Resolve settings, applying fallbacks.

        Raises:
            SettingsError: For non-numeric or non-positive frame rates
        """
        save_dir = provider.get(SAVE_DIRECTORY) or FALLBACK_SAVE_DIR

        return cls(
            save_directory=os.path.abspath(os.path.expanduser(str(save_dir))),
            source_fps=_positive_int(SOURCE_FPS, provider.get(SOURCE_FPS, FALLBACK_SOURCE_FPS)),
            final_fps=_positive_int(FINAL_FPS, provider.get(FINAL_FPS, FALLBACK_FINAL_FPS)),
            display=provider.get(DISPLAY),
        )
