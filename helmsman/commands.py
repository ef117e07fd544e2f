"""
Helmsman command layer: the Command base class and the bundled help command.

What this module provides
- Command: base class for class-based commands. It is constructed with the
  owning dispatcher and exposes execute(args, options). The default execute()
  routes to subcommand methods:

      class DatabaseCommand(Command):
          def execute_migrate(self, args, options): ...
          def execute_dump_schema(self, args, options): ...

      $ app database migrate          → execute_migrate([], {})
      $ app database dump-schema x    → execute_dump_schema(["x"], {})

  It also offers write/writeln/writeerr helpers bound to the dispatcher's
  text writer.

- HelpCommand: registered by default under "help"; lists the available
  commands, or prints the documentation of one command (or subcommand).

Any class with a (dispatcher) constructor and an execute(args, options) method
is a valid command; subclassing Command is a convenience, not a requirement.
"""
import functools
import inspect
import sys
from pathlib import Path

from rich.table import Table
from rich.text import Text

from .faults import CommandNotFoundError, MissingSubcommandError
from .references import ClassReference, FunctionReference
from .writers import STDERR, STDOUT

PREFIX = "execute_"


class Command:
    """
    Base class for class-based commands.

    Subclasses either override execute(args, options) or define one
    execute_<name> method per subcommand; hyphens in the subcommand name map
    to underscores in the method name.
    """

    def __init__(self, dispatcher):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self):
        return self._dispatcher

    @classmethod
    def subcommands(cls):
        """
        Names of the subcommands this command routes to, in hyphenated form.
        """
        return sorted(
            name.removeprefix(PREFIX).replace("_", "-")
            for name, member in inspect.getmembers(cls, callable)
            if name.startswith(PREFIX) and len(name) > len(PREFIX)
        )

    def execute(self, args, options):
        """
        Route to the execute_<subcommand> method named by the first argument.

        Raises
        - MissingSubcommandError: when no argument is given.
        - CommandNotFoundError: when no method matches the subcommand.
        """
        if not args:
            raise MissingSubcommandError("missing subcommand name", command=type(self).__name__)

        name, *args = args
        method = getattr(self, PREFIX + name.replace("-", "_"), None)
        if not name or not callable(method):
            raise CommandNotFoundError(f"subcommand {name!r} does not exist", name=name, command=type(self).__name__)
        return method(args, options)

    def write(self, text, stream=STDOUT):
        self._dispatcher.write(text, stream)
        return self

    def writeln(self, text="", stream=STDOUT):
        self._dispatcher.writeln(text, stream)
        return self

    def writeerr(self, text):
        self._dispatcher.writeln(text, STDERR)
        return self


def _target(entry):
    if isinstance(entry, (ClassReference, FunctionReference)):
        target = entry.target
    else:
        target = entry.callback
    while isinstance(target, functools.partial):
        target = target.func
    return target


def _doc(object):
    doc = getattr(object, "__doc__", None)
    if not isinstance(doc, str) or not doc.strip():
        return None
    return inspect.cleandoc(doc)


def _summary(object):
    doc = _doc(object)
    return doc.splitlines()[0] if doc else ""


class HelpCommand(Command):
    """
    Display the list of available commands, or the help of a single command.

    Usage
      help                       list every command
      help <command>             show the documentation of a command
      help <command> <sub>       show the documentation of a subcommand
    """

    def _prog(self):
        return getattr(__import__("__main__"), "__prog__", Path(sys.argv[0]).name or "app")

    def execute(self, args, options):
        if not args:
            return self._list()
        return self._describe(*args[:2])

    def _list(self):
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Command", style="cyan", no_wrap=True)
        table.add_column("Description")

        for name in self.dispatcher:
            entry = self.dispatcher.get_reference(name)
            if name == self.dispatcher.help_command or _target(entry) is type(self):
                continue
            table.add_row(Text(name), Text(_summary(_target(entry))))

        self.writeln(Text("Available commands:", style="bold"))
        self.writeln(table)
        self.writeln(Text(f"Use '{self._prog()} {self.dispatcher.help_command} <command>' for more info"))

    def _describe(self, name, subcommand=None):
        target = _target(self.dispatcher.get_reference(name))

        if subcommand is not None:
            method = getattr(target, PREFIX + subcommand.replace("-", "_"), None)
            if not subcommand or not callable(method):
                raise CommandNotFoundError(f"subcommand {subcommand!r} does not exist", name=subcommand, command=name)
            title, doc = f"{name} {subcommand}", _doc(method)
        else:
            title, doc = name, _doc(target)

        self.writeln(Text(title, style="bold"))
        self.writeln(Text(doc) if doc else Text("No description available", style="dim"))

        if subcommand is None and (isinstance(target, Command) or inspect.isclass(target) and issubclass(target, Command)):
            subcommands = target.subcommands()
            if subcommands:
                self.writeln()
                self.writeln(Text("Subcommands:", style="bold"))
                for each in subcommands:
                    self.writeln(Text(f"  {each}"))


__all__ = (
    "Command",
    "HelpCommand",
)
