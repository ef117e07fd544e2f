"""
Command registry: named storage of command references.

Names map to CommandReference variants in insertion order. A name registered
twice keeps the last reference, unless the registry is strict, in which case
the second registration raises DuplicateCommandError.

Registration is fail-fast: a callback that cannot be classified, or a closure
without an alias, raises InvalidCommandError immediately and leaves the
registry untouched.
"""
import importlib.util
import logging
import re
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path

from .faults import CommandNotFoundError, DuplicateCommandError
from .references import reference
from .utils import pascalize, rename

logger = logging.getLogger(__name__)

SUFFIX = "command.py"


def _numeric(key):
    if isinstance(key, bool):
        return False
    if isinstance(key, (int, float)):
        return True
    return isinstance(key, str) and bool(re.fullmatch(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*", key))


def _load(path, module):
    """
    Execute a source file as module `module` and publish it in sys.modules.
    """
    spec = importlib.util.spec_from_file_location(module, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"unable to load {str(path)!r}", path=str(path))
    instance = importlib.util.module_from_spec(spec)
    sys.modules[module] = instance
    try:
        spec.loader.exec_module(instance)
    except BaseException:
        del sys.modules[module]
        raise
    return instance


class Registry:
    """
    Ordered mapping of command names to command references.

    Parameters
    - strict: when True, registering an existing name raises
      DuplicateCommandError instead of replacing the previous entry.
    """

    def __init__(self, *, strict=False):
        self._commands = {}
        self._strict = bool(strict)

    @property
    def strict(self):
        return self._strict

    def add_command(self, callback, alias=None):
        """
        Register a command.

        Parameters
        - callback: class (or dotted path to one), named function (or dotted
          path to one), object exposing execute(), or any other callable.
        - alias: name used on the command line; when empty, the name is
          derived from the callback. Closures must always have one.

        Returns
        - self, so registrations can be chained.

        Raises
        - InvalidCommandError: when the callback cannot be used as a command.
        - DuplicateCommandError: strict registries only, on a repeated name.
        """
        entry = reference(callback)
        name = alias if alias else entry.name
        if self._strict and name in self._commands:
            raise DuplicateCommandError(f"command {name!r} is already registered", name=name, callback=callback)
        if name in self._commands:
            logger.debug("Replacing command %r", name)
        self._commands[name] = entry
        logger.debug("Registered command %r as %s", name, type(entry).__name__)
        return self

    def add_commands(self, commands):
        """
        Register several commands at once.

        - Mapping: non-numeric keys are used as aliases; numeric keys
          (0, 2, "3", ...) are ignored and the name is derived.
        - Any other iterable: every item is registered under its derived name.
        """
        if isinstance(commands, Mapping):
            for name, callback in commands.items():
                self.add_command(callback, None if _numeric(name) else name)
        elif isinstance(commands, Iterable) and not isinstance(commands, str):
            for callback in commands:
                self.add_command(callback)
        else:
            raise TypeError("add_commands() argument must be a mapping or an iterable")
        return self

    def add_commands_from_dir(self, directory, namespace="", include_files=False):
        """
        Register every "*command.py" file of a directory as a class reference.

        Scan rules
        - immediate entries only, sorted by filename.
        - regular files whose name ends with "command.py" (any case) and has a
          non-empty stem before it; dotfiles are skipped.
        - the class is named after the stem in Pascal case
          ("greet_command.py" → "GreetCommand").

        Parameters
        - directory: path of the directory to scan.
        - namespace: dotted package prefix of the scanned modules.
        - include_files: load each file as module "namespace.stem" instead of
          relying on it being importable.

        Filesystem errors propagate unchanged.
        """
        directory = Path(directory)
        logger.debug("Scanning %s for commands", directory)
        for path in sorted(directory.iterdir(), key=lambda path: path.name):
            filename = path.name
            if (
                path.is_dir() or
                filename.startswith(".") or
                len(filename) <= len(SUFFIX) or
                not filename.lower().endswith(SUFFIX)
            ):
                continue
            module = ".".join(filter(None, (namespace.strip("."), path.stem)))
            if include_files:
                _load(path, module)
            self.add_command(f"{module}.{pascalize(path.stem)}")
        return self

    def command(self, alias=None):
        """
        Decorator form of add_command().

            @registry.command()
            def deploy(args, options, dispatcher): ...

            @registry.command("up")
            def start(args, options, dispatcher): ...

        The decorated callback is returned unchanged.
        """
        if callable(alias) and not isinstance(alias, str):
            # Bare usage: @registry.command
            self.add_command(alias)
            return alias

        @rename("command")
        def wrapper(callback, /):
            self.add_command(callback, alias)
            return callback

        return wrapper

    def get_reference(self, name):
        """
        Return the CommandReference registered under `name`.
        """
        try:
            return self._commands[name]
        except (KeyError, TypeError):
            raise CommandNotFoundError(f"command {name!r} does not exist", name=name) from None

    def get_command(self, name):
        """
        Return the callback registered under `name`, exactly as it was given.
        """
        return self.get_reference(name).callback

    def get_commands(self):
        """
        Snapshot of every registered command, {name: callback}, in insertion order.
        """
        return {name: entry.callback for name, entry in self._commands.items()}

    def __contains__(self, name):
        return name in self._commands

    def __iter__(self):
        return iter(list(self._commands))

    def __len__(self):
        return len(self._commands)


__all__ = (
    "Registry",
)
