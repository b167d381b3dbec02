r"""
Argtree field specifications.

Overview
- Specs
  • Field: shared shape of every declared input (key, multi, required,
    default, parse, descr).
  • Option[_T]: named input reached through "--key" or its one-character
    alias "-k". Three kinds:
      – "flag": presence-only, resolves to True/False.
      – "valued": carries a value ("--key=value" or "--key value").
      – "env": like "valued", but falls back to an environment variable.
  • Positional[_T]: unnamed input bound by position.

- Factories
  • flag(...), option(...), env(...), positional(...): short constructors
    reading like the declarations they produce.

- Introspection & representation
  • ArgumentType metaclass provides a stable __repr__/__rich_repr__ and
    exposes the fields listed in __introspectable__ as read-only properties.

Validation highlights (construction time, TypeError/ValueError)
- key: non-empty string; option keys cannot start with "-" nor contain "=".
- alias: a string when given (its one-character shape is a configuration
  invariant checked by the normalizer, together with env/multi rules).
- parse: callable when given; applied per element for multi fields.
- descr: non-empty string or rich Text when given.
- flags carry no value, so they reject multi/required/default/parse/envvar.

Quick example:
    >>> from argtree.arguments import flag, option, env, positional
    >>> verbose = flag("verbose", alias="v")
    >>> count = option("count", parse=int, default=1)
    >>> token = env("token", "API_TOKEN", required=True)
    >>> files = positional("files", multi=True)
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass giving field specs a readable, read-only public surface.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for consistent labels in messages.
    - Expose every name listed in __introspectable__ as a mirror() property,
      unless the class body or a base already defines that name.
    - Provide __repr__/__rich_repr__ built from __displayable__ (falls back
      to __introspectable__).
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
            - option(kind='valued', key='count', alias='c', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every field.

    - key: required, non-empty after trimming.
    - descr: Unset | str | Text, non-empty when a string; Unset becomes None.
    - parse: Unset or callable; Unset becomes None (no coercion).
    - multi/required: coerced with bool().
    - default: not validated; any value, including None, is accepted.

    Mutates the metadata dict in place.
    """
    if not isinstance(key := metadata["key"], str):
        raise TypeError(f"{cls.__typename__} 'key' must be a string")
    elif not (key := key.strip()):
        raise ValueError(f"{cls.__typename__} 'key' cannot be empty")
    metadata["key"] = key

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if metadata["parse"] is not Unset and not callable(metadata["parse"]):
        raise TypeError(f"{cls.__typename__} 'parse' must be callable")
    metadata["parse"] = coalesce(metadata["parse"])

    metadata["multi"] = bool(metadata["multi"])
    metadata["required"] = bool(metadata["required"])


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate metadata specific to named (option) fields.

    - kind: one of "flag", "valued", "env".
    - key: the long name typed after "--"; it cannot start with "-" or
      contain "=", otherwise the tokenizer could never produce it.
    - alias: Unset | str; Unset becomes None. Its length is a configuration
      invariant reported by the normalizer as a ConfigError.
    - envvar: Unset | non-empty str; Unset becomes None.
    - flags are presence-only: multi, required, default, parse and envvar
      are rejected for them.
    """
    if metadata["kind"] not in ("flag", "valued", "env"):
        raise ValueError(f"{cls.__typename__} 'kind' must be one of 'flag', 'valued' or 'env'")

    if metadata["key"].startswith("-") or "=" in metadata["key"]:
        raise ValueError(f"{cls.__typename__} 'key' cannot start with '-' nor contain '='")

    if not isinstance(alias := metadata["alias"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'alias' must be a string")
    metadata["alias"] = coalesce(alias)

    if not isinstance(envvar := metadata["envvar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'envvar' must be a string")
    elif isinstance(envvar, str) and not (envvar := envvar.strip()):
        raise ValueError(f"{cls.__typename__} 'envvar' cannot be empty")
    metadata["envvar"] = coalesce(envvar)

    if metadata["kind"] == "flag":
        for name in ("multi", "required", "parse", "envvar"):
            if metadata[name]:
                raise TypeError(f"flag {cls.__typename__} cannot specify {name!r}")
        if metadata["default"] is not None:
            raise TypeError(f"flag {cls.__typename__} cannot specify 'default'")


class Field(metaclass=ArgumentType):
    """
    Shared shape of declared inputs.

    A Field is immutable once built: every attribute is a read-only property
    over a sanitized private value. Subclasses add naming (Option) or nothing
    (Positional); the walker and validator only rely on this shared shape plus
    isinstance checks.
    """

    @property
    def default(self):
        # Returned as declared; the validator copies it into each result.
        return self._default

    def __deepcopy__(self, memo, /):
        # Specs are immutable and shared by every parse.
        return self


class Option[_T](Field):
    """
    Named field specification.

    Highlights
    - Reached by "--key" or, when declared, by the one-character alias "-k".
    - kind "flag" binds True when present and False otherwise.
    - kind "valued" needs a value, inline ("--key=value", "-k=value") or as the
      next positional token ("--key value").
    - kind "env" behaves like "valued" and, when absent from the arguments,
      reads envvar from the injected environment. A "valued" option may also
      declare envvar to get the same fallback.
    - multi options accumulate every occurrence in order.
    """

    __introspectable__ = (
        "kind",
        "key",
        "alias",
        "envvar",
        "multi",
        "required",
        "default",
        "parse",
        "descr",
    )

    __displayable__ = (
        "kind",
        "key",
        "alias",
        "envvar",
        "multi",
        "required",
        "default",
    )

    def __new__(
            cls,
            key,
            /,
            kind="valued",
            alias=Unset,
            envvar=Unset,
            multi=False,
            required=False,
            default=None,
            parse=Unset,
            descr=Unset,
    ):
        """
        Construct an Option spec.

        Parameters
        - key: str
          Long name and result key ("--key" on the command line).
        - kind: "flag" | "valued" | "env"
        - alias: Unset | str
          Single character reachable as "-x".
        - envvar: Unset | str
          Environment variable read when the option is absent (mandatory for
          kind "env").
        - multi: bool
          Accumulate every occurrence into a list.
        - required: bool
          Fail validation when neither arguments nor environment provide it.
        - default: Any
          Bound when the option is absent and not required.
        - parse: Unset | Callable[[str], _T]
          Converter applied to the raw string (per element when multi).
        - descr: Unset | str | Text
          Short description for presenters.
        """
        metadata = {
            "kind": kind,
            "key": key,
            "alias": alias,
            "envvar": envvar,
            "multi": multi,
            "required": required,
            "default": default,
            "parse": parse,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def valued(self):
        """
        Whether this option takes a value on the command line.
        """
        return self._kind != "flag"


class Positional[_T](Field):
    """
    Positional field specification.

    Positionals of one command are filled left to right. A multi positional
    keeps absorbing values and must therefore be the last one declared; the
    normalizer also requires every required positional to precede the
    optional ones.
    """

    __introspectable__ = (
        "key",
        "multi",
        "required",
        "default",
        "parse",
        "descr",
    )

    __displayable__ = (
        "key",
        "multi",
        "required",
        "default",
    )

    def __new__(
            cls,
            key,
            /,
            multi=False,
            required=False,
            default=None,
            parse=Unset,
            descr=Unset,
    ):
        metadata = {
            "key": key,
            "multi": multi,
            "required": required,
            "default": default,
            "parse": parse,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


def flag(key, /, alias=Unset, descr=Unset):
    """
    Declare a presence-only option: `flag("verbose", alias="v")`.
    """
    return Option(key, "flag", alias=alias, descr=descr)


def option(key, /, alias=Unset, **kwargs):
    """
    Declare a value-bearing option.

    Accepts the Option keywords except kind: envvar, multi, required,
    default, parse and descr.

    Example
    - option("red", alias="r", multi=True) accepts "-r a -r b" → ["a", "b"].
    """
    return Option(key, "valued", alias=alias, **kwargs)


def env(key, envvar, /, alias=Unset, **kwargs):
    """
    Declare an environment-backed option: `env("token", "API_TOKEN")`.

    The option can still be given on the command line; the variable is only
    read when it is absent there.
    """
    return Option(key, "env", alias=alias, envvar=envvar, **kwargs)


def positional(key, /, **kwargs):
    """
    Declare a positional argument (multi, required, default, parse, descr).
    """
    return Positional(key, **kwargs)


__all__ = (
    # Classes (specifications)
    "Field",
    "Option",
    "Positional",

    # Factories
    "flag",
    "option",
    "env",
    "positional",
)

# Keep the metaclass out of star-imports; it is not part of the public API.
del ArgumentType
