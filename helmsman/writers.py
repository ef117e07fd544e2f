"""
Text output: where commands and the dispatcher write user-facing text.

A text writer exposes write(text, stream) and writeln(text, stream), where
`text` is a string or any rich renderable (Text, Panel, Table, ...) and
`stream` is STDOUT or STDERR. StdTextWriter prints through two rich consoles
bound to the process standard streams; colors follow the terminal.
"""
from enum import IntEnum
from typing import Protocol, runtime_checkable

from rich.console import Console


class Stream(IntEnum):
    """
    output side of a text writer (values follow the file descriptors).
    """
    STDOUT = 1
    STDERR = 2


STDOUT = Stream.STDOUT
STDERR = Stream.STDERR


@runtime_checkable
class TextWriter(Protocol):
    def write(self, text, stream=STDOUT): ...
    def writeln(self, text="", stream=STDOUT): ...


class StdTextWriter:
    """
    Rich-backed text writer for the process standard streams.

    Parameters
    - stdout / stderr: consoles to print through; fresh ones bound to
      sys.stdout / sys.stderr are created when omitted.
    - markup: interpret rich console markup ("[bold]...[/bold]") in plain
      strings. Off by default so user text is written verbatim; renderables
      are printed as they are.
    """

    def __init__(self, stdout=None, stderr=None, *, markup=False):
        self._consoles = {
            STDOUT: stdout or Console(),
            STDERR: stderr or Console(stderr=True),
        }
        self._markup = markup

    def console(self, stream=STDOUT):
        try:
            return self._consoles[Stream(stream)]
        except ValueError:
            raise ValueError(f"unknown stream {stream!r}") from None

    def write(self, text, stream=STDOUT):
        self.console(stream).print(text, end="", markup=self._markup, highlight=False)
        return self

    def writeln(self, text="", stream=STDOUT):
        self.console(stream).print(text, markup=self._markup, highlight=False)
        return self


__all__ = (
    "Stream",
    "STDOUT",
    "STDERR",
    "TextWriter",
    "StdTextWriter",
)
