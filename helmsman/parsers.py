"""
Options parsing: split an argument vector into positionals and options.

Any object with a parse(argv) -> (args, options) method can be plugged into the
dispatcher. DefaultOptionsParser understands the usual shell forms:

    --name=value     options["name"] = "value"
    --name           options["name"] = True
    -abc             options["a"] = options["b"] = options["c"] = True
    -n=value         options["n"] = "value"
    --               every following token is positional
    -                positional (conventionally stdin)

Repeating an option collects its values in a list, in order of appearance.
"""
from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class OptionsParser(Protocol):
    def parse(self, argv: Sequence[str]) -> tuple[list[str], dict[str, object]]: ...


class DefaultOptionsParser:
    """
    Default implementation of the OptionsParser contract.

    Parameters
    - aliases: optional mapping renaming option keys after parsing
      (e.g. {"v": "verbose"} turns "-v" into options["verbose"]).
    """

    def __init__(self, aliases=None):
        if aliases is not None and not isinstance(aliases, Mapping):
            raise TypeError("aliases must be a mapping")
        self._aliases = dict(aliases or {})

    @property
    def aliases(self):
        return dict(self._aliases)

    def _store(self, options, key, value):
        key = self._aliases.get(key, key)
        if key not in options:
            options[key] = value
        elif isinstance(options[key], list):
            options[key].append(value)
        else:
            options[key] = [options[key], value]

    def parse(self, argv):
        args = []
        options = {}
        tokens = list(argv)

        for index, token in enumerate(tokens):
            if token == "--":
                args.extend(tokens[index + 1:])
                break
            if token.startswith("--"):
                key, separator, value = token[2:].partition("=")
                self._store(options, key, value if separator else True)
            elif token.startswith("-") and len(token) > 1:
                keys, separator, value = token[1:].partition("=")
                if separator:
                    # "-n=value" assigns to the last letter of the cluster
                    for key in keys[:-1]:
                        self._store(options, key, True)
                    self._store(options, keys[-1:], value)
                else:
                    for key in keys:
                        self._store(options, key, True)
            else:
                args.append(token)

        return args, options


__all__ = (
    "OptionsParser",
    "DefaultOptionsParser",
)
