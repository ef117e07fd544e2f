"""
Helmsman faults (errors) and exception rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for the dispatcher's own
  errors. Codes are grouped by domain to keep logs/searches predictable.
- ConsoleError: base type that carries message + options and a fault code.
- InvalidCommandError / DuplicateCommandError / CommandNotFoundError /
  MissingSubcommandError: the concrete error kinds.
- render_exception(): turn any exception into a bordered, colorized rich block
  for the error side of a text writer.

Integration
- Registration raises InvalidCommandError synchronously; lookups raise
  CommandNotFoundError. Errors raised by commands themselves are never wrapped.
- Only the dispatcher's run() renders errors; rendering never alters propagation.
"""
import traceback
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.panel import Panel
from rich.text import Text


class FaultCode(IntEnum):
    """
    canonical fault codes used by the dispatcher (stable identifiers).

    grouping
    - routing (1110x)
      • UNKNOWN_COMMAND, MISSING_SUBCOMMAND
    - registration (1120x)
      • INVALID_COMMAND, DUPLICATE_COMMAND
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND    = 11101
    MISSING_SUBCOMMAND = 11102

    # --- registration errors (11xxx) ---
    INVALID_COMMAND    = 11201
    DUPLICATE_COMMAND  = 11202

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ConsoleError(Exception):
    """
    Base class of every error raised by the dispatcher itself.

    The message is positional; any keyword options (the offending name, the
    reference, ...) are kept in a read-only mapping for callers and renderers.
    """
    code = FaultCode.INVALID_COMMAND

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message


class InvalidCommandError(ConsoleError):
    code = FaultCode.INVALID_COMMAND


class DuplicateCommandError(InvalidCommandError):
    code = FaultCode.DUPLICATE_COMMAND


class CommandNotFoundError(ConsoleError):
    code = FaultCode.UNKNOWN_COMMAND


class MissingSubcommandError(ConsoleError):
    code = FaultCode.MISSING_SUBCOMMAND


def getstyles():
    """
    presentation styles, merged with an optional __styles__ mapping in __main__.
    """
    return defaultdict(str, {
        "exception": "bold red",
        "exception-border": "red",
        "warning": "red",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _origin(error):
    frames = traceback.extract_tb(error.__traceback__)
    if not frames:
        return "<unknown>", 0
    return frames[-1].filename, frames[-1].lineno


def _trace(error):
    lines = []
    frames = traceback.extract_tb(error.__traceback__)
    for index, frame in enumerate(reversed(frames)):
        lines.append(f"#{index} {frame.filename}({frame.lineno}): {frame.name}()")
    lines.append(f"#{len(frames)} {{main}}")
    return lines


def _describe(error):
    filename, lineno = _origin(error)
    return "Uncaught exception '%s' with message '%s' in %s:%s" % (
        type(error).__name__,
        error,
        filename,
        lineno,
    )


def format_exception(error, /):
    """
    Build the plain-text report of an exception.

    Layout
    - header: kind, message and origin location ("file:line").
    - "Stack trace:" then one numbered line per frame, innermost first.
    - "Caused by:" blocks for each chained exception (__cause__, then
      __context__ unless suppressed), each with its own header and trace.
    """
    if not isinstance(error, BaseException):
        raise TypeError("format_exception() argument must be an exception")

    lines = [_describe(error), "Stack trace:", *_trace(error)]

    seen = {id(error)}
    cause = error.__cause__ or (None if error.__suppress_context__ else error.__context__)
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        lines += ["", "Caused by:", _describe(cause), *_trace(cause)]
        cause = cause.__cause__ or (None if cause.__suppress_context__ else cause.__context__)

    return "\n".join(lines)


def render_exception(error, /):
    """
    Wrap the report of an exception in a bordered, colorized rich Panel.

    The text and border styles come from the "exception" and
    "exception-border" keys, which the host application may override through a
    __styles__ mapping in __main__. Errors raised by the dispatcher itself
    carry their normalized fault code in the panel title.
    """
    styles = getstyles()
    title = None
    if isinstance(error, ConsoleError):
        title = Text.assemble("[ ", (error.code.normalize(), styles["exception"]), " ]")
    return Panel(
        Text(format_exception(error), style=styles["exception"]),
        title=title,
        title_align="left",
        border_style=styles["exception-border"],
        expand=False,
    )


__all__ = (
    "FaultCode",
    "ConsoleError",
    "InvalidCommandError",
    "DuplicateCommandError",
    "CommandNotFoundError",
    "MissingSubcommandError",
    "format_exception",
    "render_exception",
    "getstyles",
)
