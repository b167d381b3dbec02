"""
Configuration normalizer: turn a declared Program into lookup-ready scopes.

normalize(program) walks the declared tree once, depth-first, and returns the
root Scope. Every Scope is the immutable, pre-computed view the walker and the
validator need for one command level:

- options: the level's own options in declaration order (the synthesized
  "version" and "help" flags come first at the root, when requested).
- options_by_key: key and alias → Option for the whole visibility scope, i.e.
  the level's own options plus every ancestor's.
- owners: option key → depth of the scope declaring it; bound values land on
  the result node of that depth.
- subcommands_by_name: name → child Scope.

Configuration invariants are all checked here and reported as ConfigError;
nothing is re-validated at parse time:

- option keys and aliases are unique across a visibility scope, and
  positional keys share that namespace;
- aliases are exactly one character;
- "env" options declare an environment variable, and no option combines an
  environment variable with multi;
- required positionals precede optional ones, and only the last positional
  may be multi;
- sibling subcommands have distinct names.

Children inherit the option table as it stands before the level's positionals
are added, and never see their siblings' options.
"""
import logging
from types import MappingProxyType
from typing import NamedTuple

from .arguments import flag
from .commands import Command, Program
from .faults import ConfigError, FaultCode

logger = logging.getLogger(__name__)


class Scope(NamedTuple):
    command: Command
    parent: "Scope | None"
    depth: int
    path: tuple
    options: tuple
    positionals: tuple
    options_by_key: MappingProxyType
    owners: MappingProxyType
    subcommands_by_name: MappingProxyType

    @property
    def name(self):
        return self.command.name

    @property
    def root(self):
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    @property
    def rendering(self):
        """
        Fault rendering switches of the program this scope belongs to.
        """
        program = self.root.command
        return {"colorful": program.colorful, "fancy": program.fancy}

    def lineage(self):
        """
        Return the scopes from the root down to this one.
        """
        lineage = [scope := self]
        while scope.parent is not None:
            lineage.append(scope := scope.parent)
        return tuple(reversed(lineage))

    def resolve(self, path, /):
        """
        Return the scope reached by following command names from this one.

        The first name must be this scope's own name (a result's command_path
        can be passed as-is). Raises KeyError for a path the tree does not
        declare.
        """
        names = iter(path)
        if next(names, None) != self.name:
            raise KeyError(self.name)
        scope = self
        for name in names:
            scope = scope.subcommands_by_name[name]
        return scope

    def __repr__(self):
        return f"scope(path={" ".join(self.path)!r})"


def _check_option(option, path):
    where = " ".join(path)
    if option.kind == "env" and option.envvar is None:
        raise ConfigError(
            f"option {option.key!r} of command {where!r} is of kind env and must specify an environment variable",
            code=FaultCode.ENV_WITHOUT_VARIABLE,
            key=option.key,
            path=path,
        )
    if option.envvar is not None and option.multi:
        raise ConfigError(
            f"option {option.key!r} of command {where!r} cannot specify both an environment variable and multi",
            code=FaultCode.ENV_MULTI,
            key=option.key,
            path=path,
        )
    if option.alias is not None and (len(option.alias) != 1 or option.alias == "="):
        raise ConfigError(
            f"alias {option.alias!r} of option {option.key!r} in command {where!r} must be exactly one character",
            code=FaultCode.MALFORMED_ALIAS,
            key=option.key,
            alias=option.alias,
            path=path,
        )


def _claim(table, name, path, kind="option"):
    if name in table:
        raise ConfigError(
            f"{kind} {name!r} of command {" ".join(path)!r} conflicts with another",
            code=FaultCode.DUPLICATE_KEY,
            key=name,
            path=path,
        )


def _normalize(command, parent, inherited, owners):
    depth = parent.depth + 1 if parent is not None else 0
    path = (*parent.path, command.name) if parent is not None else (command.name,)

    options = list(command.options)
    if parent is None and isinstance(command, Program):
        if command.help:
            options.insert(0, flag("help", descr="Prints help text for this command."))
        if command.version:
            options.insert(0, flag("version", descr="Prints version of this command."))

    table = dict(inherited)
    owners = dict(owners)
    for option in options:
        _check_option(option, path)
        _claim(table, option.key, path)
        table[option.key] = option
        if option.alias is not None:
            _claim(table, option.alias, path)
            table[option.alias] = option
        owners[option.key] = depth

    # children see options only; positional keys stay local to this level
    keys = set(table)
    required = True
    multi = None
    for positional in command.positionals:
        _claim(keys, positional.key, path, "argument")
        keys.add(positional.key)
        if multi is not None:
            raise ConfigError(
                f"argument {positional.key!r} of command {" ".join(path)!r} cannot follow the multi-argument {multi!r}",
                code=FaultCode.MULTI_NOT_LAST,
                key=positional.key,
                path=path,
            )
        if positional.multi:
            multi = positional.key
        if not positional.required:
            required = False
        elif not required:
            raise ConfigError(
                f"required argument {positional.key!r} of command {" ".join(path)!r} cannot follow an optional argument",
                code=FaultCode.REQUIRED_AFTER_OPTIONAL,
                key=positional.key,
                path=path,
            )

    children = {}
    scope = Scope(
        command=command,
        parent=parent,
        depth=depth,
        path=path,
        options=tuple(options),
        positionals=command.positionals,
        options_by_key=MappingProxyType(table),
        owners=MappingProxyType(owners),
        subcommands_by_name=MappingProxyType(children),
    )

    for subcommand in command.subcommands:
        if subcommand.name in children:
            raise ConfigError(
                f"command {subcommand.name!r} of command {" ".join(path)!r} conflicts with another",
                code=FaultCode.DUPLICATE_SUBCOMMAND,
                key=subcommand.name,
                path=path,
            )
        children[subcommand.name] = _normalize(subcommand, scope, table, owners)

    logger.debug(
        "normalized %r: %d option keys, %d positionals, %d subcommands",
        " ".join(path), len(table), len(scope.positionals), len(children),
    )
    return scope


def normalize(program, /):
    """
    Validate a declared Program and build its normalized scope tree.

    Parameters
    - program: Program
      The declared root. It is only read; the returned scopes reference its
      nodes and options but never modify them.

    Returns
    - Scope: the root scope.

    Raises
    - TypeError: when program is not a Program.
    - ConfigError: on the first configuration invariant violated.
    """
    if not isinstance(program, Program):
        raise TypeError("normalize() argument must be a program")
    return _normalize(program, None, {}, {})


__all__ = (
    "Scope",
    "normalize",
)
