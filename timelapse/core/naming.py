"""
Unique file names for captures and saved timelapses.

Temporary captures go to the OS temp dir as timelapse-temp-*.mp4, saved
timelapses to the save directory as timelapse-save-*.mp4, so the two
namespaces never collide.
"""

import hashlib
import os
import secrets
import tempfile
from pathlib import Path

TEMP_BASE_NAME = "timelapse-temp"
SAVE_BASE_NAME = "timelapse-save"
VIDEO_EXTENSION = ".mp4"


def _random_suffix() -> str:
    digest = hashlib.sha256(secrets.token_bytes(1024)).hexdigest()
    return digest + str(int.from_bytes(secrets.token_bytes(4), "little"))


def next_name(parent_dir: str, base_name: str, extension: str) -> str:
    """
    Return an absolute path under parent_dir that does not exist yet.

    Args:
        parent_dir: Directory for the file
        base_name: File name prefix
        extension: Extension including the dot (".mp4")

    Returns:
        <parent_dir>/<base_name>-<random><extension>
    """
    parent = os.path.abspath(parent_dir)

    while True:
        candidate = os.path.join(parent, f"{base_name}-{_random_suffix()}{extension}")
        if not os.path.exists(candidate):
            return candidate


def temporary_recording_file() -> str:
    """Path for a new capture in the OS temp dir."""
    return next_name(tempfile.gettempdir(), TEMP_BASE_NAME, VIDEO_EXTENSION)


def new_save_file(save_directory: str) -> str:
    """
    Path for a new timelapse in save_directory.

    The directory is created if needed.
    """
    save_dir = os.path.abspath(save_directory)
    create_directories(save_dir)

    return next_name(save_dir, SAVE_BASE_NAME, VIDEO_EXTENSION)


def create_directories(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def delete_file(path: str) -> None:
    """Delete path if it exists."""
    if os.path.exists(path):
        os.unlink(path)
