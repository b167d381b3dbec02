"""
Validator: turn a bound result tree into final, typed values.

validate(result, scope, environ) visits the levels the walker entered, root
first. Per level, every declared option (declaration order) resolves to:

1. its bound value, passed through parse (per element when multi);
2. else, when it declares an environment variable present in environ, that
   variable's value, passed through parse;
3. else, for a flag, False;
4. else, when required, a MissingOptionError;
5. else its default, as declared (plain list, dict and set defaults are
   shallow-copied so one parse cannot alter the next).

Positionals follow the same steps without the environment. A level whose
command requires a subcommand fails when none was entered. Exceptions raised
by a parse function become InvalidValueError, chained to the original.

The bound tree is only read; the returned tree is new.
"""
import copy
import logging

from .faults import (
    InvalidValueError,
    MissingArgumentError,
    MissingCommandError,
    MissingOptionError,
)
from .results import ParsedResult, Scalar, Sequence, Switch
from .utils import Unset

logger = logging.getLogger(__name__)


def _default(spec):
    if type(default := spec.default) in (list, dict, set):
        return copy.copy(default)
    return default


def _coerce(spec, raw, bound, scope, label):
    if spec.parse is None:
        return raw
    try:
        return spec.parse(raw)
    except Exception as exception:
        raise InvalidValueError(
            f"invalid value {raw!r} for {label}: {exception}",
            bound,
            key=spec.key,
            value=raw,
            **scope.rendering,
        ) from exception


def _resolve(spec, values, bound, scope, label):
    match values.get(spec.key):
        case Switch():
            return True
        case Scalar(raw=raw):
            return _coerce(spec, raw, bound, scope, label)
        case Sequence(raw=raw):
            return [_coerce(spec, each, bound, scope, label) for each in raw]
        case None:
            return Unset
        case other:
            raise TypeError(f"unexpected bound value {other!r} for {label}")


def _validate_options(node, scope, environ, bound):
    values = {}
    for spec in scope.options:
        label = f"option '--{spec.key}'"
        value = _resolve(spec, node.values, bound, scope, label)
        if value is not Unset:
            values[spec.key] = value
        elif spec.envvar is not None and spec.envvar in environ:
            logger.debug("option %r read from environment variable %r", spec.key, spec.envvar)
            values[spec.key] = _coerce(
                spec, environ[spec.envvar], bound, scope, f"environment variable {spec.envvar!r}"
            )
        elif not spec.valued:
            values[spec.key] = False
        elif spec.required:
            if spec.kind == "env":
                message = f"missing required environment variable {spec.envvar!r}"
            else:
                message = f"missing required {label} for command {" ".join(scope.path)!r}"
            raise MissingOptionError(
                message,
                bound,
                key=spec.key,
                envvar=spec.envvar,
                hint=f"set {spec.envvar!r} or pass '--{spec.key}'" if spec.envvar is not None else None,
                **scope.rendering,
            )
        else:
            values[spec.key] = _default(spec)
    return values


def _validate_positionals(node, scope, bound):
    values = {}
    for spec in scope.positionals:
        label = f"argument {spec.key!r}"
        value = _resolve(spec, node.values, bound, scope, label)
        if value is not Unset:
            values[spec.key] = value
        elif spec.required:
            raise MissingArgumentError(
                f"missing required {label} for command {" ".join(scope.path)!r}",
                bound,
                key=spec.key,
                **scope.rendering,
            )
        else:
            values[spec.key] = _default(spec)
    return values


def validate(result, scope, environ, /):
    """
    Validate, coerce and default a bound result tree.

    Parameters
    - result: ParsedResult
      Root of the tree returned by bind().
    - scope: Scope
      The scope bind() started from.
    - environ: Mapping[str, str]
      Environment lookup for options declaring an environment variable.

    Returns
    - ParsedResult: a new tree holding final values.

    Raises
    - MissingOptionError, MissingArgumentError, MissingCommandError,
      InvalidValueError; the error carries a snapshot of the bound tree.
    """
    root = parent = None
    for node in result.levels():
        if parent is not None:
            scope = scope.subcommands_by_name[node.name]
        level = ParsedResult(node.name, depth=node.depth)
        level.values.update(_validate_options(node, scope, environ, result))
        level.values.update(_validate_positionals(node, scope, result))
        if node.child is None and scope.command.subcommand_required:
            raise MissingCommandError(
                f"command {" ".join(scope.path)!r} requires a subcommand",
                result,
                hint=f"choose one of {", ".join(map(repr, scope.subcommands_by_name))}",
                **scope.rendering,
            )
        if parent is None:
            root = level
        else:
            parent.child = level
        parent = level

    logger.debug("validated command path %r", " ".join(root.command_path))
    return root


__all__ = (
    "validate",
)
