"""Helpers for paths, files, directories and terminal capabilities."""

from __future__ import annotations

import os
import sys
from typing import Optional, TextIO


def executable_path() -> str:
    """Absolute path of the running executable, or an empty string."""
    return sys.executable or ""


def normalize_path(path: str) -> str:
    """Use the native path separator throughout."""
    if os.sep == "\\":
        return path.replace("/", "\\")
    return path.replace("\\", "/")


def file_exists(path: str) -> bool:
    """True when the path can be opened for reading."""
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def create_directory(path: str) -> bool:
    """Create a single directory; an existing one counts as success."""
    try:
        os.mkdir(path, 0o755)
    except FileExistsError:
        return True
    except OSError:
        return False
    return True


def normalize_line_endings(content: str) -> str:
    """Turn CRLF and lone CR line endings into LF."""
    return content.replace("\r\n", "\n").replace("\r", "\n")


def enable_ansi_colors(stream: Optional[TextIO] = None) -> bool:
    """True when the stream is a terminal that can show ANSI colours."""
    target = sys.stdout if stream is None else stream
    isatty = getattr(target, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False


def current_directory() -> str:
    """The working directory, or an empty string if it cannot be read."""
    try:
        return os.getcwd()
    except OSError:
        return ""


def get_filename(path: str) -> str:
    """The part after the last slash or backslash."""
    pos = max(path.rfind("/"), path.rfind("\\"))
    return path[pos + 1:] if pos >= 0 else path


def get_directory(path: str) -> str:
    """The part before the last slash or backslash, or '.'."""
    pos = max(path.rfind("/"), path.rfind("\\"))
    return path[:pos] if pos >= 0 else "."