r"""
Argschema option and positional specifications.

Overview
- Specs
  • OptionSpec[_T]: named input introduced by a short (-x) and/or long (--xyz)
    token, with any number of long aliases; either value-bearing or a
    presence-only flag.
  • PositionalSpec[_T]: positional slot filled by order; fixed (required or
    optional) or variadic (captures every remaining token).

- Converters
  • integer / string / decimal: text → value converters used as 'type'.
  • CONVERTERS: type names accepted by schema documents ("int", "str", ...).

- Introspection & representation
  • SpecType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ via read-only properties.

Metadata (sanitized on construction)
- Shared
  • name: canonical key in Bindings; starts with a letter or '_', then
    letters, digits, '_' or '-'.
  • type: Callable (converter). int is normalized to integer.
  • default: Unset | Any (not converted; bound as-is).
  • required: bool.
  • metavar: Unset | str (label in usage), non-empty when provided.
  • descr: Unset | str (short help), non-empty when provided.
- OptionSpec only
  • short: Unset | single character.
  • long / aliases: long spellings without the '--' prefix.
  • flag: bool (presence-only).
  • hidden: bool (suppressed from usage).
- PositionalSpec only
  • variadic: bool.

Validation highlights
- A flag cannot be required and cannot carry a default.
- A required spec cannot carry a default.
- A variadic slot cannot carry a default; its empty capture is the default.

Quick example:
    >>> block_size = OptionSpec("block-size", short="b", long="block-size",
    ...                         aliases=("blocksize", "bs"), type=int, default=12)
    >>> quiet = OptionSpec("quiet", short="q", flag=True)
    >>> words = PositionalSpec("words", variadic=True)
"""
import builtins
import functools
import operator
import re

from .utils import *


def integer(text, /):
    """
    convert text to an int.

    accepts decimal and 0x/0o/0b prefixed literals (underscores allowed as in
    python literals). leading zeros are read as decimal ("010" → 10).
    raises ValueError on anything else.
    """
    if not isinstance(text, str):
        raise TypeError("integer() argument must be a string")
    try:
        return int(text, 0)
    except ValueError:
        return int(text, 10)


def string(text, /):
    """
    identity converter (raw string values).
    """
    if not isinstance(text, str):
        raise TypeError("string() argument must be a string")
    return text


def decimal(text, /):
    """
    convert text to a float.
    """
    if not isinstance(text, str):
        raise TypeError("decimal() argument must be a string")
    return float(text)


CONVERTERS = {
    "int": integer,
    "integer": integer,
    "str": string,
    "string": string,
    "float": decimal,
    "decimal": decimal,
}
"""
type names accepted by schema documents, mapped to their converters.
"""


class SpecType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and usage output.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option-spec(name='quiet', short='q', ...)
            """
            fields = ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            return f"{type(self).__typename__}({fields})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers, skipping unset fields.
            """
            for name in type(self).__introspectable__:
                if (object := getattr(self, name)) is not Unset:
                    yield name, object
        self.__rich_repr__ = __rich_repr__

        return self


_NAME = re.compile(r"[^\W\d][\w-]*")
_LONG = re.compile(r"[^\s=-][^\s=]*")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every spec.

    Responsibilities
    - name: required, non-empty, shell/identifier friendly (see _NAME).
    - type: callable; the builtin int is replaced by integer() so that
      0x-prefixed values parse like their C counterparts.
    - metavar / descr: Unset or non-empty strings after trimming.
    - required + default: mutually exclusive.

    Raises
    - TypeError: wrong kind of value.
    - ValueError: right kind, bad value.

    Notes
    - This function mutates the provided metadata dict in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not _NAME.fullmatch(name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' must start with a letter and contain only letters, digits, '_' or '-'")
    metadata["name"] = name

    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")
    if metadata["type"] is builtins.int:
        metadata["type"] = integer

    for field in ("metavar", "descr"):
        if not isinstance(value := metadata[field], str | UnsetType):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
        metadata[field] = value

    if metadata["required"] and metadata["default"] is not Unset:
        raise ValueError(f"required {cls.__typename__} {name!r} cannot have a default value")


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the flag tokens of an option.

    Responsibilities
    - short: Unset or exactly one character that is neither '-' nor whitespace.
    - long / aliases: spellings without the '--' prefix, no whitespace, no '='.
      Aliases are normalized to a tuple; duplicates (including the long name)
      are rejected.
    - at least one token (short, long or alias) must be declared.
    - flag: cannot be required and cannot carry a default.
    """
    name = metadata["name"]

    if not isinstance(short := metadata["short"], str | UnsetType):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and (len(short) != 1 or short == "-" or short.isspace()):
        raise ValueError(f"{cls.__typename__} 'short' must be a single character, got {short!r}")

    if not isinstance(long := metadata["long"], str | UnsetType):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif isinstance(long, str) and not _LONG.fullmatch(long):
        raise ValueError(f"invalid {cls.__typename__} 'long' {long!r}")

    if isinstance(aliases := metadata["aliases"], str):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings, not a string")
    seen = [long] if long is not Unset else []
    for alias in aliases:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} aliases must be strings")
        elif not _LONG.fullmatch(alias):
            raise ValueError(f"invalid {cls.__typename__} alias {alias!r}")
        elif alias in seen:
            raise ValueError(f"{cls.__typename__} {name!r} declares {alias!r} more than once")
        seen.append(alias)
    metadata["aliases"] = tuple(seen[1:] if long is not Unset else seen)

    if short is Unset and not seen:
        raise ValueError(f"{cls.__typename__} {name!r} must declare a short, long or alias spelling")

    if metadata["flag"]:
        if metadata["required"]:
            raise ValueError(f"flag {cls.__typename__} {name!r} cannot be required")
        if metadata["default"] is not Unset:
            raise ValueError(f"flag {cls.__typename__} {name!r} cannot have a default value")


class OptionSpec[_T](metaclass=SpecType):
    """
    Named option specification.

    OptionSpec[_T] declares how a named input (e.g., -b/--block-size/--bs) is
    recognized and converted. Value-bearing options take their value inline
    (--name=value, -bvalue) or from the next token; flags are presence-only
    and bind True when specified.

    Binding states after a parse
    - explicitly set: the converted value (or True for a flag).
    - not set, with default: the default, unchanged.
    - not set, without default: Unset (or an error when required).
    """

    __introspectable__ = (
        "name",
        "short",
        "long",
        "aliases",
        "type",
        "flag",
        "default",
        "required",
        "metavar",
        "descr",
        "hidden",
    )

    def __init__(
            self,
            name,
            /,
            short=Unset,
            long=Unset,
            aliases=(),
            type=str,
            flag=False,
            default=Unset,
            required=False,
            metavar=Unset,
            descr=Unset,
            hidden=False
    ):
        metadata = {
            "name": name,
            "short": short,
            "long": long,
            "aliases": aliases,
            "type": type,
            "flag": bool(flag),
            "default": default,
            "required": bool(required),
            "metavar": metavar,
            "descr": descr,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def takes_value(self):
        return not self._flag

    @property
    def tokens(self):
        """
        every command-line spelling of this option, short first ("-b", "--block-size", "--bs").
        """
        tokens = []
        if self._short is not Unset:
            tokens.append("-" + self._short)
        if self._long is not Unset:
            tokens.append("--" + self._long)
        tokens.extend("--" + alias for alias in self._aliases)
        return tuple(tokens)


class PositionalSpec[_T](metaclass=SpecType):
    """
    Positional slot specification.

    Fixed slots consume exactly one token each, in declaration order. The
    variadic slot (at most one, always last) captures every remaining token.

    'required' defaults to True for fixed slots without a default and False
    otherwise (variadic slot, or a declared default); a required variadic slot
    needs at least one token.
    """

    __introspectable__ = (
        "name",
        "type",
        "required",
        "default",
        "variadic",
        "metavar",
        "descr",
    )

    def __init__(
            self,
            name,
            /,
            type=str,
            required=Unset,
            default=Unset,
            variadic=False,
            metavar=Unset,
            descr=Unset
    ):
        metadata = {
            "name": name,
            "type": type,
            "required": bool(coalesce(required, not variadic and default is Unset)),
            "default": default,
            "variadic": bool(variadic),
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)

        if metadata["variadic"] and metadata["default"] is not Unset:
            raise ValueError(f"variadic {builtins.type(self).__typename__} {metadata['name']!r} cannot have a default value")
        metadata["metavar"] = coalesce(metadata["metavar"], metadata["name"].upper())

        for name, object in metadata.items():
            setattr(self, "_" + name, object)


__all__ = (
    # Classes (specifications)
    "OptionSpec",
    "PositionalSpec",

    # Converters
    "integer",
    "string",
    "decimal",
    "CONVERTERS",
)
