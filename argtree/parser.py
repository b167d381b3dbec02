"""
Parser facade: normalize once, parse many times.

    parser = Parser(program)          # ConfigError here, never later
    result = parser.parse(["add", "--force", "a.txt"])

parse() is the pure pipeline tokenize → bind → validate and only ever raises.
run() is the process-facing wrapper: it reads sys.argv, answers --help and
--version, prints faults with rich and exits (0 for help/version, 2 for a
ParseError). Text for help and usage comes from a Presenter; BarePresenter is
the minimal one used when none is given.
"""
import logging
import os
import sys
from typing import Protocol, runtime_checkable

from rich.console import Console

from .commands import Program
from .faults import ParseError
from .normalize import normalize
from .tokens import tokenize
from .utils import *
from .validate import validate
from .walker import bind

logger = logging.getLogger(__name__)


@runtime_checkable
class Presenter(Protocol):
    """
    Text producer for help, usage and faults.

    Every method receives the normalized scope of the command concerned (the
    deepest one entered) and returns a plain string; markup is not
    interpreted when run() prints it.
    """

    def usage(self, scope, path, /):
        ...

    def help(self, scope, path, /):
        ...

    def error(self, error, scope, /):
        ...


class BarePresenter:
    """
    Minimal presenter: command path, fields and description, no layout.
    """

    def usage(self, scope, path, /):
        parts = ["usage:", *path]
        if scope.options_by_key:
            parts.append("[options]")
        for spec in scope.positionals:
            name = f"<{spec.key}>{"..." if spec.multi else ""}"
            parts.append(name if spec.required else f"[{name}]")
        if scope.subcommands_by_name:
            commands = "|".join(scope.subcommands_by_name)
            parts.append(f"{{{commands}}}" if scope.command.subcommand_required else f"[{commands}]")
        return " ".join(parts)

    def help(self, scope, path, /):
        lines = [self.usage(scope, path)]
        for text in (scope.command.title, scope.command.descr):
            if text is not None:
                lines.extend(("", str(text)))
        return "\n".join(lines)

    def error(self, error, scope, /):
        return f"{error.message}\n{self.usage(scope, scope.path)}"


class Parser:
    """
    Reusable parser bound to one declared Program.

    The program is normalized in the constructor; every parse() then works on
    the same read-only scope tree and builds a fresh result, so a Parser can
    be kept around and called repeatedly.
    """

    def __init__(self, program, /):
        if not isinstance(program, Program):
            raise TypeError("Parser() argument must be a program")
        self._program = program
        self._scope = normalize(program)

    @property
    def program(self):
        return self._program

    @property
    def scope(self):
        return self._scope

    def version(self):
        return self._program.version

    def parse(self, arguments, /, environ=Unset):
        """
        Parse arguments (program name excluded) into a validated result.

        environ defaults to a snapshot of os.environ taken for this call; pass
        a mapping to make the parse independent of the process environment.
        """
        environ = dict(os.environ) if environ is Unset else environ
        bound = bind(tokenize(arguments), self._scope)
        return validate(bound, self._scope, environ)

    def run(self, arguments=Unset, /, *, environ=Unset, presenter=Unset):
        """
        Parse for a process entry point.

        - help flag bound: print the help text and exit 0.
        - version flag bound: print the version and exit 0.
        - ParseError: print to stderr and exit 2. Without a presenter the fault
          is rendered with rich, followed by the usage line; a given presenter
          supplies the whole text through its error() method.

        Help and version are answered before validation, so they work even
        when required fields are missing. ConfigError and any exception raised
        by the caller's code propagate untouched.
        """
        arguments = sys.argv[1:] if arguments is Unset else arguments
        environ = dict(os.environ) if environ is Unset else environ
        composite = presenter is not Unset
        presenter = coalesce(presenter, BarePresenter())

        try:
            bound = bind(tokenize(arguments), self._scope)
            scope = self._scope.resolve(bound.command_path)
            if self._program.help and "help" in bound.values:
                Console().print(presenter.help(scope, scope.path), markup=False, highlight=False)
                sys.exit(0)
            if self._program.version and "version" in bound.values:
                Console().print(self.version(), markup=False, highlight=False)
                sys.exit(0)
            return validate(bound, self._scope, environ)
        except ParseError as error:
            logger.debug("parse failed with %s at %r", type(error).__name__, " ".join(error.path))
            scope = self._scope.resolve(error.path) if error.path else self._scope
            console = Console(stderr=True)
            if composite:
                console.print(presenter.error(error, scope), markup=False, highlight=False)
            else:
                console.print(error)
                console.print(presenter.usage(scope, scope.path), markup=False, highlight=False)
            sys.exit(2)


def parse(program, arguments, /, environ=Unset):
    """
    One-shot helper: Parser(program).parse(arguments, environ).
    """
    return Parser(program).parse(arguments, environ)


__all__ = (
    "Presenter",
    "BarePresenter",
    "Parser",
    "parse",
)
