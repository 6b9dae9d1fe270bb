"""Line-oriented output sink with a configurable indentation unit."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, TextIO


class ShellWriter:
    """Collects indented source lines."""

    def __init__(self, *, use_tabs: bool = False, indent_size: int = 4) -> None:
        if indent_size < 0:
            raise ValueError("indent_size must not be negative")
        self.unit = "\t" if use_tabs else " " * indent_size
        self.level = 0
        self._lines: List[str] = []

    def line(self, text: str = "") -> None:
        """Write ``text``; embedded newlines start new lines at the current level."""
        for part in text.split("\n"):
            if part:
                self._lines.append(self.unit * self.level + part)
            else:
                self._lines.append("")

    def open_block(self, header: str) -> None:
        self.line(header)
        self.line("{")
        self.level += 1

    def close_block(self, suffix: str = "") -> None:
        if self.level == 0:
            raise RuntimeError("close_block called without an open block")
        self.level -= 1
        self.line("}" + suffix)

    @contextmanager
    def block(self, header: str) -> Iterator["ShellWriter"]:
        self.open_block(header)
        try:
            yield self
        finally:
            self.close_block()

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def text(self) -> str:
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"

    def write_to(self, stream: TextIO) -> None:
        stream.write(self.text())


__all__ = ["ShellWriter"]
