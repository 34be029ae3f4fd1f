from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TextIO

ANSI_COLORS = {
    "green": "\033[32m",
    "red": "\033[31m",
}
ANSI_RESET = "\033[0m"
ANSI_CLEAR = "\033[2J\033[H"


def supports_color(stream: TextIO) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Console:
    """Line-oriented console I/O with optional ANSI highlighting."""

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] | None = None,
        stream: TextIO | None = None,
        color: bool | None = None,
    ) -> None:
        self._input_fn = input_fn if input_fn is not None else input
        self._stream = stream if stream is not None else sys.stdout
        self._color = supports_color(self._stream) if color is None else color

    def print(self, text: str = "") -> None:
        self._stream.write(f"{text}\n")

    def prompt(self, text: str) -> str:
        self._stream.flush()
        return self._input_fn(text)

    def clear(self) -> None:
        if self._color:
            self._stream.write(ANSI_CLEAR)

    @contextmanager
    def highlight(self, color: str) -> Iterator[None]:
        if not self._color:
            yield
            return

        self._stream.write(ANSI_COLORS[color])
        try:
            yield
        finally:
            self._stream.write(ANSI_RESET)
            self._stream.flush()
