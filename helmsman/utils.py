"""
Helmsman utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the reference, registry and dispatcher layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks and help.

- dashize(text)
  • Pascal/camel case to lowercase hyphenated words ("FooBar" → "foo-bar").

- pascalize(text)
  • snake case file stems to class names ("greet_command" → "GreetCommand").

- locate(path)
  • Resolve a dotted path ("pkg.module.Attribute") to the object it names.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> dashize("FooBar")
    'foo-bar'
    >>> locate("os.path.join")  # doctest: +ELLIPSIS
    <function join at ...>
"""
import builtins
import functools
import importlib
import re
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator

    Raises
    - TypeError: on a non-callable target, a non-string name, a callable that
      refuses attribute updates, or a wrong number of arguments.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


@functools.cache
def dashize(text, /):
    """
    Convert a Pascal/camel case identifier into lowercase hyphenated words.

    Every uppercase letter except a leading one opens a new word, so acronyms
    are split letter by letter ("HTTPServer" → "h-t-t-p-server").

    Examples
    - dashize("FooBar")  -> "foo-bar"
    - dashize("fooBar")  -> "foo-bar"
    - dashize("Deploy")  -> "deploy"
    """
    if not isinstance(text, str):
        raise TypeError("dashize() argument must be a string")
    return re.sub(r"(?<!^)(?=[A-Z])", "-", text).lower().strip("-")


@functools.cache
def pascalize(text, /):
    """
    Convert a snake case stem into a Pascal case class name.

    Only the first letter of each underscore-separated word is raised, so stems
    that are already Pascal case come back unchanged.

    Examples
    - pascalize("greet_command") -> "GreetCommand"
    - pascalize("GreetCommand")  -> "GreetCommand"
    """
    if not isinstance(text, str):
        raise TypeError("pascalize() argument must be a string")
    return "".join(word[:1].upper() + word[1:] for word in text.split("_"))


def locate(path, /):
    """
    Resolve a dotted path to the object it names.

    The longest importable module prefix wins; the remaining segments are read
    as attributes from it. "pkg.module.Class.method" therefore imports
    "pkg.module" (when "pkg.module.Class" is not a module) and walks
    ".Class.method".

    Raises
    - TypeError: when path is not a string.
    - LookupError: when no prefix is importable or an attribute is missing.
    - ImportError: when an existing module fails to import (a missing
      dependency of its own, for instance); never masked as LookupError.
    """
    if not isinstance(path, str):
        raise TypeError("locate() argument must be a string")
    if not re.fullmatch(r"(?!\d)\w+(\.(?!\d)\w+)*", path := path.strip()):
        raise LookupError(f"{path!r} is not a dotted path")

    segments = path.split(".")
    for index in range(len(segments), 0, -1):
        prefix = ".".join(segments[:index])
        try:
            object = importlib.import_module(prefix)
        except ModuleNotFoundError as error:
            # Only a missing prefix (or parent) means "not a module"; anything
            # else failed inside a module that does exist
            if error.name is None or not (prefix == error.name or prefix.startswith(error.name + ".")):
                raise
            continue
        try:
            for segment in segments[index:]:
                object = getattr(object, segment)
        except AttributeError:
            raise LookupError(f"unable to locate {path!r}") from None
        return object

    # A bare name may still refer to a builtin ("print", "len")
    if len(segments) == 1 and hasattr(builtins, path):
        return getattr(builtins, path)
    raise LookupError(f"unable to locate {path!r}")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "dashize",
    "pascalize",
    "locate",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
