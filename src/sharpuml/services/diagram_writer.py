"""Append-only text sink used by the PlantUML generator."""

from collections.abc import Iterator
from contextlib import contextmanager

from ..constants import INDENT_UNIT


class DiagramWriter:
    """
    Collects diagram lines with a current indentation level.

    Lines are joined with ``\\n`` on render and the result carries no
    trailing newline.

    Example:
        writer = DiagramWriter()
        writer.line("class Order {")
        with writer.indented():
            writer.line("+ Id : int")
        writer.line("}")
        text = writer.render()
    """

    def __init__(self, indent_unit: str = INDENT_UNIT):
        self.indent_unit = indent_unit
        self.level = 0
        self._lines: list[str] = []

    def line(self, text: str = "") -> None:
        """Append one line at the current indentation (blank lines stay empty)."""
        if text:
            self._lines.append(f"{self.indent_unit * self.level}{text}")
        else:
            self._lines.append("")

    def lines(self, texts) -> None:
        for text in texts:
            self.line(text)

    def blank(self) -> None:
        self._lines.append("")

    @contextmanager
    def indented(self) -> Iterator["DiagramWriter"]:
        """Increase indentation by one step for the duration of the block."""
        self.level += 1
        try:
            yield self
        finally:
            self.level -= 1

    def render(self) -> str:
        return "\n".join(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
