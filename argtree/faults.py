"""
Argtree faults (configuration and parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain so logs and searches stay predictable.
- ArgtreeError: base type carrying a message plus read-only context options,
  able to render itself with rich.
- ConfigError: setup-time mistakes in a declared program (raised once, by the
  normalizer, before any parse happens).
- ParseError and its subclasses: user-input faults raised while binding or
  validating. Each one owns a deep snapshot of the partial result tree at the
  moment of failure, so a presenter can show which command was active.
- getdoc(): optional description lookup for a code from the host application.

Policy
- First fault wins: the pipeline raises and never collects.
- The core never prints and never exits; rendering happens only when a caller
  asks rich to print a fault (see Parser.run).
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - options (1111x)
      • UNKNOWN_OPTION, FLAG_ASSIGNMENT, FLAG_USAGE, OPTION_VALUE_REQUIRED,
        DUPLICATED_OPTION
    - positionals (1112x)
      • UNEXPECTED_ARGUMENT
    - requirements (1113x)
      • MISSING_OPTION, MISSING_ARGUMENT, MISSING_COMMAND
    - coercion (1114x)
      • INVALID_VALUE
    - configuration (2xxxx)
      • DUPLICATE_KEY, DUPLICATE_SUBCOMMAND, REQUIRED_AFTER_OPTIONAL,
        MULTI_NOT_LAST, ENV_WITHOUT_VARIABLE, ENV_MULTI, MALFORMED_ALIAS

    normalize() lets a host remap codes to its own labels while the numeric
    values stay stable.
    """
    # --- option errors (1111x) ---
    UNKNOWN_OPTION              = 11111
    FLAG_ASSIGNMENT             = 11112
    FLAG_USAGE                  = 11113
    OPTION_VALUE_REQUIRED       = 11114
    DUPLICATED_OPTION           = 11115

    # --- positional errors (1112x) ---
    UNEXPECTED_ARGUMENT         = 11121

    # --- requirement errors (1113x) ---
    MISSING_OPTION              = 11131
    MISSING_ARGUMENT            = 11132
    MISSING_COMMAND             = 11133

    # --- coercion errors (1114x) ---
    INVALID_VALUE               = 11141

    # --- configuration errors (2xxxx) ---
    DUPLICATE_KEY               = 21101
    DUPLICATE_SUBCOMMAND        = 21102
    REQUIRED_AFTER_OPTIONAL     = 21111
    MULTI_NOT_LAST              = 21112
    ENV_WITHOUT_VARIABLE        = 21121
    ENV_MULTI                   = 21122
    MALFORMED_ALIAS             = 21123

    def normalize(self):
        """
        return a host-normalized string for this code.

        a host application can define a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels; otherwise the numeric
        value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; None is returned when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


class ArgtreeError(Exception):
    """
    Base fault: a message plus read-only context.

    Context options (all optional)
    - hint: one actionable sentence shown under the message.
    - key / value / envvar / alias: the offending field or input.
    - program: program name used in the rendered header.
    - colorful / fancy: rendering switches (default True / False).
    """
    code = Unset
    title = "error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def program(self):
        return self.options.get("program", "argtree")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", self.program), "prog-name"),
            " — ",
            text(self.code.normalize() if self.code else "", "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        body = [text(self.message, "error-message")]
        if self.hint:
            body.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)


class ConfigError(ArgtreeError, ValueError):
    """
    A declared program breaks a configuration invariant.

    Raised only by the normalizer, before any parsing; it signals a
    programming mistake in the declaration, never a user-input problem.
    """
    title = "invalid configuration"

    def __init__(self, message, /, code, **options):
        if not isinstance(code, FaultCode):
            raise TypeError("ConfigError() 'code' must be a fault-code")
        super().__init__(message, code=code, **options)
        self.code = code


class ParseError(ArgtreeError):
    """
    A user-supplied argument list does not fit the declared program.

    Attributes
    - result: deep snapshot of the partial result tree when the fault was
      raised (None when no tree existed yet). Later mutation of the live tree
      is never visible through it.
    - path: command names from the root to the deepest command entered.
    """
    title = "invalid input"

    def __init__(self, message, /, result=None, **options):
        super().__init__(message, **options)
        self.result = copy.deepcopy(result)
        self.path = tuple(result.command_path) if result is not None else ()

    @property
    def program(self):
        return self.options.get("program", self.path[0] if self.path else "argtree")


class UnknownOptionError(ParseError):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"

class FlagAssignmentError(ParseError):
    code = FaultCode.FLAG_ASSIGNMENT
    title = "flag cannot take a value"

class FlagUsageError(ParseError):
    code = FaultCode.FLAG_USAGE
    title = "option used as flag"

class OptionValueRequiredError(ParseError):
    code = FaultCode.OPTION_VALUE_REQUIRED
    title = "option requires a value"

class DuplicatedOptionError(ParseError):
    code = FaultCode.DUPLICATED_OPTION
    title = "duplicate option"

class UnexpectedArgumentError(ParseError):
    code = FaultCode.UNEXPECTED_ARGUMENT
    title = "unexpected argument"

class MissingOptionError(ParseError):
    code = FaultCode.MISSING_OPTION
    title = "missing required option"

class MissingArgumentError(ParseError):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing required argument"

class MissingCommandError(ParseError):
    code = FaultCode.MISSING_COMMAND
    title = "missing required command"

class InvalidValueError(ParseError):
    code = FaultCode.INVALID_VALUE
    title = "invalid value"


__all__ = (
    "FaultCode",
    "ArgtreeError",
    "ConfigError",
    "ParseError",
    "UnknownOptionError",
    "FlagAssignmentError",
    "FlagUsageError",
    "OptionValueRequiredError",
    "DuplicatedOptionError",
    "UnexpectedArgumentError",
    "MissingOptionError",
    "MissingArgumentError",
    "MissingCommandError",
    "InvalidValueError",
    "getdoc",
)
