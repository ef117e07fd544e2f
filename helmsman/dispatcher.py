"""
Helmsman dispatcher: registry of commands and command runner.

Flow of run(argv)
1. argv defaults to sys.argv[1:]; a string is split with shell rules.
2. The options parser splits argv into positionals and options.
3. Without positionals, a "Missing command name" warning is written and the
   help command is run instead.
4. The first positional names the command; the rest are its arguments.
5. execute() resolves the name and invokes the command.

Any Exception raised along the way is rendered to the error stream. The process
then exits with status 1, or, with exit_on_exception disabled, the exception
is re-raised unchanged. execute() itself never catches.

Quick start
    from helmsman import Dispatcher, Command

    class GreetCommand(Command):
        '''Say hello.'''
        def execute(self, args, options):
            self.writeln(f"hello {' '.join(args) or 'world'}")

    def shout(args, options, dispatcher):
        '''Say it louder.'''
        dispatcher.writeln(" ".join(args).upper())

    app = Dispatcher([GreetCommand, shout])
    app.run()          # $ app greet you / $ app shout hey / $ app help
"""
import logging
import shlex
import sys
from collections.abc import Iterable

from rich.text import Text

from .commands import HelpCommand
from .faults import getstyles, render_exception
from .parsers import DefaultOptionsParser
from .registry import Registry
from .utils import Unset, coalesce
from .writers import STDERR, STDOUT, StdTextWriter

logger = logging.getLogger(__name__)


def _tokens(argv):
    argv = coalesce(argv, sys.argv[1:])
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("run() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("run() argument must be a string or an iterable of strings")


class Dispatcher(Registry):
    """
    Registry of available commands and command runner.

    Parameters
    - commands: initial commands, as accepted by add_commands().
    - parser: options parser (DefaultOptionsParser when omitted).
    - writer: text writer (StdTextWriter when omitted).
    - exit_on_exception: call sys.exit(1) after rendering an uncaught error.
    - help_command: command run when no command name is given.
    - help_command_class: command registered under help_command before the
      initial commands; None registers nothing.
    - strict: reject duplicate command names instead of replacing them.
    """

    def __init__(
            self,
            commands=(),
            parser=None,
            writer=None,
            *,
            exit_on_exception=True,
            help_command="help",
            help_command_class=HelpCommand,
            strict=False,
    ):
        super().__init__(strict=strict)
        self._parser = parser or DefaultOptionsParser()
        self._writer = writer or StdTextWriter()
        self._exit_on_exception = bool(exit_on_exception)
        self._help_command = help_command
        if help_command_class:
            self.add_command(help_command_class, help_command)
        self.add_commands(commands)

    @property
    def parser(self):
        return self._parser

    def set_parser(self, parser):
        self._parser = parser
        return self

    @property
    def writer(self):
        return self._writer

    def set_writer(self, writer):
        self._writer = writer
        return self

    @property
    def exit_on_exception(self):
        return self._exit_on_exception

    def set_exit_on_exception(self, exit=True):
        """
        Sets whether to call sys.exit(1) when an exception is caught by run().
        """
        self._exit_on_exception = bool(exit)
        return self

    @property
    def help_command(self):
        return self._help_command

    def run(self, argv=Unset):
        """
        Parse argv and execute the command it names.

        Parameters
        - argv:
          • Unset: read sys.argv[1:].
          • str: shell-like string, split via shlex.split.
          • Iterable[str]: pre-tokenized arguments.

        Returns
        - whatever the executed command returns.
        """
        try:
            args, options = self._parser.parse(_tokens(argv))
            args = list(args)
            if not args:
                self._writer.writeln(Text("Missing command name", style=getstyles()["warning"]), STDERR)
                args.append(self._help_command)

            name = args.pop(0)
            return self.execute(name, args, options)

        except Exception as e:
            logger.debug("Command failed with %s", type(e).__name__, exc_info=True)
            self.write_exception(e)
            if self._exit_on_exception:
                sys.exit(1)
            raise

    def execute(self, command, args=(), options=None):
        """
        Executes a command.

        Raises
        - CommandNotFoundError: when no command is registered under `command`.
        - anything the command itself raises, unchanged.
        """
        entry = self.get_reference(command)
        logger.debug("Executing command %r with %d argument(s)", command, len(args))
        return entry.invoke(list(args), dict(options or {}), self)

    def write(self, text, stream=STDOUT):
        """
        Writes some text to the text writer.
        """
        self._writer.write(text, stream)
        return self

    def writeln(self, text="", stream=STDOUT):
        """
        Writes a line of text to the text writer.
        """
        self._writer.writeln(text, stream)
        return self

    def write_exception(self, error):
        """
        Writes a bordered, colorized report of `error` to the error stream.
        """
        self._writer.writeln(render_exception(error), STDERR)
        return self


__all__ = (
    "Dispatcher",
)
