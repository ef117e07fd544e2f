"""
Command references: the stored form of a registered command.

A callback handed to the registry is classified exactly once, at registration,
into one of four variants:

- ClassReference     a class (or dotted path to one) exposing execute();
                     instantiated with the dispatcher on every execution.
- FunctionReference  a named routine (or dotted path to one); called directly.
- InstanceReference  an object exposing execute(); reused as-is.
- ClosureReference   any other callable (lambda, partial, ...); needs an alias.

Each variant knows its default command name (the name deriver) and how to
invoke itself, so the dispatcher never inspects callback shapes.

Naming rules
- routines: lowercase, underscores become hyphens, outer hyphens trimmed
  ("_say_hello" → "say-hello").
- classes and instances: last namespace segment, trailing "Command" removed,
  Pascal case hyphenated ("pkg.mod.FooBarCommand" → "foo-bar").
"""
import inspect
from dataclasses import dataclass
from typing import Any

from .faults import InvalidCommandError
from .utils import dashize, locate

SUFFIX = "Command"


def _executable(object):
    return callable(getattr(object, "execute", None))


def _resolve(path):
    try:
        return locate(path)
    except (LookupError, ImportError) as error:
        raise InvalidCommandError(f"{path!r} must reference a class or a function", callback=path) from error


def _nonempty(name, callback):
    if not name:
        raise InvalidCommandError(f"unable to derive a command name from {callback!r}", callback=callback)
    return name


@dataclass(frozen=True, eq=False)
class CommandReference:
    """
    Base of the reference variants; callback is kept exactly as registered.
    """
    callback: Any

    @property
    def name(self) -> str:
        raise NotImplementedError

    def invoke(self, args, options, dispatcher):
        raise NotImplementedError


@dataclass(frozen=True, eq=False)
class ClassReference(CommandReference):

    @property
    def target(self) -> type:
        """
        The referenced class; dotted paths are resolved on every access.
        """
        if isinstance(self.callback, str):
            return _resolve(self.callback)
        return self.callback

    @property
    def name(self) -> str:
        if isinstance(self.callback, str):
            name = self.callback.rsplit(".", 1)[-1]
        else:
            name = self.callback.__name__
        return _nonempty(dashize(name.removesuffix(SUFFIX)), self.callback)

    def invoke(self, args, options, dispatcher):
        return self.target(dispatcher).execute(args, options)


@dataclass(frozen=True, eq=False)
class FunctionReference(CommandReference):

    @property
    def target(self):
        if isinstance(self.callback, str):
            return _resolve(self.callback)
        return self.callback

    @property
    def name(self) -> str:
        if isinstance(self.callback, str):
            name = self.callback.rsplit(".", 1)[-1]
        else:
            name = self.callback.__name__
        return _nonempty(name.replace("_", "-").strip("-").lower(), self.callback)

    def invoke(self, args, options, dispatcher):
        return self.target(args, options, dispatcher)


@dataclass(frozen=True, eq=False)
class InstanceReference(CommandReference):

    @property
    def name(self) -> str:
        name = type(self.callback).__name__
        return _nonempty(dashize(name.removesuffix(SUFFIX)), self.callback)

    def invoke(self, args, options, dispatcher):
        return self.callback.execute(args, options)


@dataclass(frozen=True, eq=False)
class ClosureReference(CommandReference):

    @property
    def name(self) -> str:
        raise InvalidCommandError("commands using closures must have an alias", callback=self.callback)

    def invoke(self, args, options, dispatcher):
        return self.callback(args, options, dispatcher)


def _named(routine):
    return (name := getattr(routine, "__name__", None)) and name.isidentifier()


def reference(callback, /):
    """
    Classify a callback into its CommandReference variant.

    Order of checks
    1. str: resolved as a dotted path; must name a class or a routine.
    2. class: must expose a callable execute().
    3. named routine (function, builtin, bound method; lambdas excluded).
    4. object exposing a callable execute().
    5. any other callable.

    Raises
    - InvalidCommandError: for unresolvable paths, classes without execute(),
      and non-callable objects without execute().
    """
    if isinstance(callback, CommandReference):
        return callback

    if isinstance(callback, str):
        target = _resolve(callback)
        if inspect.isclass(target):
            if not _executable(target):
                raise InvalidCommandError(f"{callback!r} must implement an execute() method", callback=callback)
            return ClassReference(callback)
        if inspect.isroutine(target):
            return FunctionReference(callback)
        raise InvalidCommandError(f"{callback!r} must reference a class or a function", callback=callback)

    if inspect.isclass(callback):
        if not _executable(callback):
            raise InvalidCommandError(f"{callback.__qualname__!r} must implement an execute() method", callback=callback)
        return ClassReference(callback)

    if inspect.isroutine(callback) and _named(callback):
        return FunctionReference(callback)

    if _executable(callback):
        return InstanceReference(callback)

    if callable(callback):
        return ClosureReference(callback)

    raise InvalidCommandError(
        f"{type(callback).__qualname__!r} must implement an execute() method",
        callback=callback,
    )


def derive(callback, /):
    """
    Derive the default command name of a callback.

    Raises
    - InvalidCommandError: when the callback is not a valid command, or is a
      closure (closures must be registered with an alias).
    """
    return reference(callback).name


__all__ = (
    "CommandReference",
    "ClassReference",
    "FunctionReference",
    "InstanceReference",
    "ClosureReference",
    "reference",
    "derive",
)
