"""
Tree walker: bind a token stream against a normalized scope tree.

bind(tokens, scope) runs one explicit loop over the tokens. The walker state
is the active scope, the chain of result nodes entered so far, the token
cursor and the positional index of the active level (reset to 0 on every
descent). Rules per token:

- option/flag token, key visible in the active scope:
  • flag spec: records Switch(); an inline value fails.
  • value-bearing spec given as a combined flag ("-abc"): fails.
  • value-bearing spec without inline value: takes the next token when it is
    positional, otherwise fails.
  • multi: appends; single: fails when already bound.
- option/flag token with an unknown key: fails.
- positional token at index 0 naming a subcommand: descends.
- any other positional token: binds to the positional at the current index,
  or fails when the level has none left. A multi positional keeps absorbing.

Required fields, defaults and coercion are left to the validator.
"""
import logging

from .faults import (
    DuplicatedOptionError,
    FlagAssignmentError,
    FlagUsageError,
    OptionValueRequiredError,
    UnexpectedArgumentError,
    UnknownOptionError,
)
from .results import ParsedResult, Scalar, Sequence, Switch
from .tokens import FlagToken, OptionToken, PositionalToken
from .utils import ordinal

logger = logging.getLogger(__name__)


class _Walker:
    __slots__ = ("tokens", "scope", "nodes", "cursor", "index")

    def __init__(self, tokens, scope):
        self.tokens = tokens
        self.scope = scope
        self.nodes = [ParsedResult(scope.name, depth=scope.depth)]
        self.cursor = 0
        self.index = 0

    @property
    def root(self):
        return self.nodes[0]

    def fail(self, error, message, /, **options):
        raise error(message, self.root, **self.scope.rendering, **options)

    def walk(self):
        while self.cursor < len(self.tokens):
            token = self.tokens[self.cursor]
            self.cursor += 1
            match token:
                case PositionalToken(value=value):
                    self.positional(value)
                case OptionToken() | FlagToken():
                    self.option(token)
                case _:
                    raise TypeError(f"bind() cannot handle {type(token).__name__!r} tokens")
        return self.root

    def option(self, token):
        if (spec := self.scope.options_by_key.get(token.key)) is None:
            self.fail(
                UnknownOptionError,
                f"{ordinal(self.cursor)} token: unknown option {token.name!r} for command {" ".join(self.scope.path)!r}",
                key=token.key,
            )
        node = self.nodes[self.scope.owners[spec.key]]

        if not spec.valued:
            if isinstance(token, OptionToken) and token.inline:
                self.fail(
                    FlagAssignmentError,
                    f"flag {token.name!r} cannot take a value",
                    key=spec.key,
                    value=token.value,
                    hint=f"use {token.name!r} on its own",
                )
            node.values[spec.key] = Switch()
            return

        if isinstance(token, FlagToken):
            self.fail(
                FlagUsageError,
                f"option '--{spec.key}' requires a value and cannot be combined as a flag",
                key=spec.key,
                hint=f"use '-{token.key}=VALUE' or '--{spec.key} VALUE'",
            )

        if token.inline:
            raw = token.value
        elif self.cursor < len(self.tokens) and isinstance(self.tokens[self.cursor], PositionalToken):
            raw = self.tokens[self.cursor].value
            self.cursor += 1
        else:
            self.fail(
                OptionValueRequiredError,
                f"option {token.name!r} requires a value",
                key=spec.key,
                hint=f"use '{token.name}=VALUE' for values starting with '-'",
            )

        if not spec.multi and spec.key in node.values:
            self.fail(
                DuplicatedOptionError,
                f"option '--{spec.key}' was already given",
                key=spec.key,
            )

        if spec.multi:
            node.values.setdefault(spec.key, Sequence([])).raw.append(raw)
        else:
            node.values[spec.key] = Scalar(raw)

    def positional(self, value):
        if self.index == 0 and (scope := self.scope.subcommands_by_name.get(value)) is not None:
            self.descend(scope)
            return

        if self.index >= len(positionals := self.scope.positionals):
            self.fail(
                UnexpectedArgumentError,
                f"{ordinal(self.cursor)} token: unexpected argument {value!r} for command {" ".join(self.scope.path)!r}",
                value=value,
            )
        spec = positionals[self.index]
        node = self.nodes[-1]
        if spec.multi:
            node.values.setdefault(spec.key, Sequence([])).raw.append(value)
        else:
            node.values[spec.key] = Scalar(value)
            self.index += 1

    def descend(self, scope):
        node = ParsedResult(scope.name, depth=scope.depth)
        self.nodes[-1].child = node
        self.nodes.append(node)
        self.scope = scope
        self.index = 0
        logger.debug("entered command %r", " ".join(scope.path))


def bind(tokens, scope, /):
    """
    Bind tokens against a normalized scope and return the raw result tree.

    Parameters
    - tokens: Iterable[OptionToken | FlagToken | PositionalToken]
    - scope: Scope
      Where binding starts, normally the root returned by normalize().

    Returns
    - ParsedResult: root of the tree, values tagged as Switch/Scalar/Sequence.

    Raises
    - ParseError subclasses for the first token that does not fit; the error
      carries a snapshot of the tree bound so far.
    """
    return _Walker(list(tokens), scope).walk()


__all__ = (
    "bind",
)
