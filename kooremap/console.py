"""Coloured status messages and progress output for the terminal."""

from __future__ import annotations

import sys
from enum import Enum
from typing import Optional, TextIO

from kooremap.platform_utils import enable_ansi_colors

_RESET = "\033[0m"


class Color(Enum):
    """Terminal colours, valued by their ANSI escape sequence."""

    DEFAULT = _RESET
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_CYAN = "\033[96m"


class ConsoleOutput:
    """Writes messages to a stream, coloured when the stream supports it."""

    def __init__(self, stream: Optional[TextIO] = None, colors: Optional[bool] = None) -> None:
        self._stream = stream
        self.colors_enabled = enable_ansi_colors(self.stream) if colors is None else colors

    @property
    def stream(self) -> TextIO:
        return sys.stdout if self._stream is None else self._stream

    def color_code(self, color: Color) -> str:
        return color.value if self.colors_enabled else ""

    def reset_code(self) -> str:
        return _RESET if self.colors_enabled else ""

    def print(self, text: str, color: Color = Color.DEFAULT) -> None:
        self.stream.write(self.color_code(color) + text + self.reset_code())

    def println(self, text: str = "", color: Color = Color.DEFAULT) -> None:
        self.print(text, color)
        self.stream.write("\n")

    def info(self, message: str) -> None:
        self.print("[INFO] ", Color.CYAN)
        self.println(message)

    def success(self, message: str) -> None:
        self.print("[OK] ", Color.BRIGHT_GREEN)
        self.println(message)

    def warning(self, message: str) -> None:
        self.print("[WARN] ", Color.BRIGHT_YELLOW)
        self.println(message)

    def error(self, message: str) -> None:
        self.print("[ERROR] ", Color.BRIGHT_RED)
        self.println(message)

    def progress_bar(self, percent: int, width: int = 50) -> None:
        """Redraw a progress bar on the current line."""
        percent = max(0, min(100, percent))
        filled = width * percent // 100
        bar = "=" * filled
        if filled < width:
            bar += ">" + " " * (width - filled - 1)
        out = self.stream
        out.write("\r[")
        out.write(self.color_code(Color.BRIGHT_GREEN) + bar + self.reset_code())
        out.write(f"] {percent:3d}%")
        out.flush()

    def separator(self, ch: str = "=", width: int = 60) -> None:
        self.println(ch * width, Color.DEFAULT)

    def header(self, text: str) -> None:
        self.separator("=")
        self.println(text, Color.BRIGHT_BLUE)
        self.separator("=")

    def key_value(self, key: str, value: str, key_width: int = 20) -> None:
        self.stream.write(f"{key + ':':<{key_width}}{value}\n")

    def clear_line(self) -> None:
        self.stream.write("\r" + " " * 80 + "\r")
        self.stream.flush()