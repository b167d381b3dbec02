"""
Argtree command layer: declare the command tree a parser walks.

What this module provides
- Command: one node of the declared tree (name, presentation strings,
  options, positionals, subcommands and whether a subcommand is required).
- Program: the root node; adds the built-in help/version flags and the
  rendering switches used when a fault is printed.

Core ideas
- Declarations are immutable: every field is sanitized once and exposed as a
  read-only property; containers come back as tuples.
- Structure is validated later, in one place: duplicate keys, aliases and
  subcommand names, positional ordering and env rules are configuration
  invariants checked by argtree.normalize (ConfigError). Constructors here
  only reject values of the wrong type or shape (TypeError/ValueError).

Quick start
    from argtree import Program, Command, Parser, flag, option, positional

    program = Program(
        "git",
        options=[flag("verbose", alias="v")],
        subcommands=[
            Command("add", options=[flag("force", alias="f")], positionals=[positional("paths", multi=True)]),
            Command("remove", positionals=[positional("path", required=True)]),
        ],
        subcommand_required=True,
        help=True,
        version="1.0.0",
    )

    result = Parser(program).parse(["-v", "add", "--force", "a.txt", "b.txt"])
    result.command_path   # ("git", "add")
    result["paths"]       # ["a.txt", "b.txt"]

See also
- argtree.arguments for field declarations.
- argtree.normalize for the configuration invariants.
"""
import functools
import operator
import re
from collections.abc import Iterable

from rich.text import Text

from .arguments import Option, Positional
from .utils import *


class CommandType(type):
    """
    Metaclass giving command declarations a read-only, printable surface.

    Responsibilities
    - Derive __typename__ from the class name for consistent messages.
    - Expose every name in __introspectable__ through mirror().
    - Provide __repr__/__rich_repr__ over __displayable__ (or
      __introspectable__ when unset).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
                if name not in namespace and not any(hasattr(base, name) for base in bases)
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - command(name='add', title=None, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_strings(cls, metadata):
    """
    Normalize scalar string/Text metadata fields.

    - name: required str, trimmed, non-empty and not starting with "-" (a
      subcommand is selected by a positional token, which never starts
      with a dash).
    - title, descr, example, version: str | Text | Unset; strings are trimmed
      and must stay non-empty; Unset becomes None.

    Mutates the metadata dict in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif name.startswith("-"):
        raise ValueError(f"{cls.__typename__} 'name' cannot start with '-'")
    metadata["name"] = name

    for name in ("title", "descr", "example", "version"):
        if name not in metadata:
            continue
        if not isinstance(object := metadata[name], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)


def _process_iterables(cls, metadata):
    """
    Normalize the declared children into tuples, checking element types.

    - options: Iterable[Option]
    - positionals: Iterable[Positional]
    - subcommands: Iterable[Command] (a Program cannot be nested)

    Declaration order is preserved: it drives positional binding and the
    validator's per-field order.
    """
    for name, kind in (
            ("options", Option),
            ("positionals", Positional),
            ("subcommands", Command),
    ):
        if not isinstance(object := metadata[name], Iterable) or isinstance(object, str | Text):
            raise TypeError(f"{cls.__typename__} {name!r} must be an iterable of {kind.__typename__}s")
        items = tuple(object)
        for item in items:
            if not isinstance(item, kind) or isinstance(item, Program):
                raise TypeError(f"{cls.__typename__} {name!r} must be an iterable of {kind.__typename__}s")
        metadata[name] = items


class Command(metaclass=CommandType):
    """
    Declared command node.

    Responsibilities
    - Hold the declaration of one command level: presentation strings,
      options, positionals and child commands.
    - Expose them as read-only properties; the node never changes after
      construction, so one declaration can back any number of parsers.

    Notes
    - A child command inherits every option of its ancestors (its visibility
      scope), but never their positionals.
    - Subcommand names are matched only by the first positional token of a
      level; afterwards tokens bind to positionals.
    """

    __introspectable__ = (
        "name",
        "title",
        "descr",
        "example",
        "options",
        "positionals",
        "subcommands",
        "subcommand_required",
    )

    __displayable__ = (
        "name",
        "title",
        "options",
        "positionals",
        "subcommands",
        "subcommand_required",
    )

    def __new__(
            cls,
            name,
            /,
            options=(),
            positionals=(),
            subcommands=(),
            subcommand_required=False,
            *,
            title=Unset,
            descr=Unset,
            example=Unset,
    ):
        """
        Construct a Command declaration.

        Parameters
        - name: str
          Name typed to select this command (the program name at the root).
        - options: Iterable[Option]
        - positionals: Iterable[Positional]
        - subcommands: Iterable[Command]
        - subcommand_required: bool
          Fail validation when this level is the deepest one entered.
        - title, descr, example: str | Text | Unset
          Presentation only; handed to presenters untouched.
        """
        metadata = {
            "name": name,
            "title": title,
            "descr": descr,
            "example": example,
            "options": options,
            "positionals": positionals,
            "subcommands": subcommands,
            "subcommand_required": bool(subcommand_required),
        }
        _process_strings(cls, metadata)
        _process_iterables(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __deepcopy__(self, memo, /):
        # Declarations are immutable and shared by every parse.
        return self


class Program(Command):
    """
    Root of a declared command tree.

    Adds to Command
    - help: when True, a "help" flag is synthesized at the root (and thus
      visible in every subcommand). Parser.run prints help and exits 0.
    - version: when set, a "version" flag is synthesized; Parser.run prints
      the version and exits 0.
    - colorful / fancy: rendering switches applied to faults printed by
      Parser.run (plain text and rich panel chrome respectively).
    """

    __introspectable__ = Command.__introspectable__ + (
        "help",
        "version",
        "colorful",
        "fancy",
    )

    __displayable__ = Command.__displayable__ + (
        "help",
        "version",
    )

    def __new__(
            cls,
            name,
            /,
            options=(),
            positionals=(),
            subcommands=(),
            subcommand_required=False,
            *,
            title=Unset,
            descr=Unset,
            example=Unset,
            help=False,
            version=Unset,
            colorful=True,
            fancy=False,
    ):
        self = super().__new__(
            cls,
            name,
            options,
            positionals,
            subcommands,
            subcommand_required,
            title=title,
            descr=descr,
            example=example,
        )
        metadata = {"name": name, "version": version}
        _process_strings(cls, metadata)
        self._version = metadata["version"]
        self._help = bool(help)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        return self


__all__ = (
    "Command",
    "Program",
)

# Keep the metaclass out of star-imports; it is not part of the public API.
del CommandType
