"""
Tokenizer: raw argument strings → typed tokens.

Each input string is matched against three patterns, first match wins:

    --key, --key=value    OptionToken (long form)
    -k, -k=value          OptionToken keyed by the alias character
    -abc                  FlagToken("a"), FlagToken("b"), FlagToken("c")

Anything else is a PositionalToken holding the literal string. A bare "-"
matches the last pattern with nothing after the dash and yields no token.
There is no quoting, escaping or "--" end-of-options marker: a value that
starts with a dash has to be given inline ("--name=-5").
"""
import re
from typing import NamedTuple

_LONG = re.compile(r"^--([^=]+)(?:(=)(.*))?$", re.DOTALL)
_SHORT = re.compile(r"^-([^=])(?:(=)(.*))?$", re.DOTALL)
_FLAGS = re.compile(r"^-(.*)$", re.DOTALL)


class OptionToken(NamedTuple):
    key: str
    inline: bool = False
    value: str | None = None
    short: bool = False

    @property
    def name(self):
        """
        The option as typed, without its inline value ("--key" or "-k").
        """
        return f"{"-" if self.short else "--"}{self.key}"

    def __str__(self):
        if self.inline:
            return f"{self.name}={self.value}"
        return self.name


class FlagToken(NamedTuple):
    key: str

    @property
    def name(self):
        return f"-{self.key}"

    def __str__(self):
        return self.name


class PositionalToken(NamedTuple):
    value: str

    def __str__(self):
        return self.value


def _split(argument):
    if (match := _LONG.fullmatch(argument)) is not None:
        key, equals, value = match.groups()
        yield OptionToken(key, equals is not None, value)
    elif (match := _SHORT.fullmatch(argument)) is not None:
        key, equals, value = match.groups()
        yield OptionToken(key, equals is not None, value, short=True)
    elif (match := _FLAGS.fullmatch(argument)) is not None:
        for key in match.group(1):
            yield FlagToken(key)
    else:
        yield PositionalToken(argument)


def tokenize(arguments, /):
    """
    Lazily convert raw argument strings into tokens.

    Parameters
    - arguments: Iterable[str]
      The process arguments, program name excluded.

    Yields
    - OptionToken | FlagToken | PositionalToken, in input order. Only the
      combined-flags form produces more than one token per string.

    Raises
    - TypeError: when arguments is a bare string or holds a non-string.
    """
    if isinstance(arguments, str):
        raise TypeError("tokenize() argument must be an iterable of strings, not a string")
    for argument in arguments:
        if not isinstance(argument, str):
            raise TypeError(f"tokenize() arguments must be strings, not {type(argument).__name__!r}")
        yield from _split(argument)


__all__ = (
    "OptionToken",
    "FlagToken",
    "PositionalToken",
    "tokenize",
)
