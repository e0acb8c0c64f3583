"""
Schema: the immutable declaration of everything a parser recognizes.

A Schema owns an ordered sequence of OptionSpecs, the fixed positional
slots, an optional trailing variadic slot, and the parsing policies. It is
validated once at construction and never mutated afterwards, so one Schema
may be shared by any number of concurrent parse calls.

Policies
- unknown: "reject" | "ignore"
  what to do with an option-shaped token that matches no option.
- extras: "ignore" | "reject"
  what to do with surplus positional tokens when there is no variadic slot.
- permute: bool
  True lets options and positionals interleave (GNU style); False stops
  option scanning at the first positional token (strict POSIX order).
- help: bool
  reserve -h/--help and turn them into a HelpRequested outcome.
"""
from types import MappingProxyType

from .faults import SchemaError
from .parser import HELP_TOKENS, parse as _parse
from .specs import OptionSpec, PositionalSpec
from .utils import *

_UNKNOWN_POLICIES = ("reject", "ignore")
_EXTRAS_POLICIES = ("ignore", "reject")


class Schema:
    """
    Immutable, validated set of option and positional specifications.

    Introspection (read-only)
    - options: tuple of OptionSpec, declaration order.
    - positionals: tuple of fixed PositionalSpec, slot order.
    - variadic: the variadic PositionalSpec, or None.
    - switches: mapping of every flag token ("-b", "--block-size", "--bs") to its OptionSpec.
    - prog, descr: optional program name and description for usage rendering.
    - unknown, extras, permute, help: parsing policies.
    """

    __slots__ = (
        "_options",
        "_positionals",
        "_variadic",
        "_switches",
        "_prog",
        "_descr",
        "_unknown",
        "_extras",
        "_permute",
        "_help",
    )

    options = mirror("options")
    positionals = mirror("positionals")
    switches = mirror("switches")
    unknown = mirror("unknown")
    extras = mirror("extras")
    permute = mirror("permute")
    help = mirror("help")

    def __init__(
            self,
            options=(),
            positionals=(),
            *,
            prog=Unset,
            descr=Unset,
            unknown="reject",
            extras="ignore",
            permute=True,
            help=True
    ):
        if unknown not in _UNKNOWN_POLICIES:
            raise SchemaError(f"unknown-option policy must be one of {_UNKNOWN_POLICIES}, got {unknown!r}")
        if extras not in _EXTRAS_POLICIES:
            raise SchemaError(f"extra-positionals policy must be one of {_EXTRAS_POLICIES}, got {extras!r}")
        for field, value in (("prog", prog), ("descr", descr)):
            if not isinstance(value, str | UnsetType):
                raise SchemaError(f"schema {field!r} must be a string")

        options = tuple(options)
        positionals = tuple(positionals)

        names = set()
        switches = {}
        for spec in options:
            if not isinstance(spec, OptionSpec):
                raise SchemaError(f"schema options must be option specs, got {spec!r}")
            if spec.name in names:
                raise SchemaError(f"option name {spec.name!r} is declared more than once")
            names.add(spec.name)
            for token in spec.tokens:
                if help and token in HELP_TOKENS:
                    raise SchemaError(f"option {spec.name!r} claims {token!r}, which is reserved for help")
                if token in switches:
                    raise SchemaError(
                        f"options {switches[token].name!r} and {spec.name!r} both claim {token!r}"
                    )
                switches[token] = spec

        fixed = []
        variadic = None
        optional = None
        for spec in positionals:
            if not isinstance(spec, PositionalSpec):
                raise SchemaError(f"schema positionals must be positional specs, got {spec!r}")
            if spec.name in names:
                raise SchemaError(f"positional name {spec.name!r} is already in use")
            names.add(spec.name)
            if variadic is not None:
                raise SchemaError(f"positional {spec.name!r} cannot follow the variadic slot {variadic.name!r}")
            if spec.variadic:
                variadic = spec
                continue
            if spec.required and optional is not None:
                raise SchemaError(
                    f"required positional {spec.name!r} cannot come after optional positional {optional.name!r}"
                )
            if not spec.required and optional is None:
                optional = spec
            fixed.append(spec)

        if variadic is not None and variadic.required and optional is not None:
            raise SchemaError(
                f"required variadic positional {variadic.name!r} cannot come after optional positional {optional.name!r}"
            )

        self._options = options
        self._positionals = tuple(fixed)
        self._variadic = variadic
        self._switches = MappingProxyType(switches)
        self._prog = prog
        self._descr = descr
        self._unknown = unknown
        self._extras = extras
        self._permute = bool(permute)
        self._help = bool(help)

    @property
    def variadic(self):
        return self._variadic

    @property
    def prog(self):
        return coalesce(self._prog)

    @property
    def descr(self):
        return coalesce(self._descr)

    @property
    def slots(self):
        """
        every positional slot in order, the variadic one (if any) last.
        """
        return self._positionals + ((self._variadic,) if self._variadic is not None else ())

    @property
    def required(self):
        """
        number of tokens the fixed slots (and a required variadic slot) need at minimum.
        """
        count = sum(spec.required for spec in self._positionals)
        return count + (self._variadic is not None and self._variadic.required)

    def option(self, name, /):
        """
        look up an OptionSpec by canonical name (KeyError when absent).
        """
        for spec in self._options:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def positional(self, name, /):
        """
        look up a PositionalSpec (fixed or variadic) by name (KeyError when absent).
        """
        for spec in self.slots:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def parse(self, argv, /):
        """
        parse an argument vector (without the program name) against this schema.

        returns Bindings or HelpRequested; raises a ParseError subclass.
        """
        return _parse(self, argv)

    def __rich_repr__(self):
        if self._prog is not Unset:
            yield "prog", self._prog
        yield "options", list(self._options)
        yield "positionals", list(self.slots)
        yield "unknown", self._unknown
        yield "extras", self._extras
        yield "permute", self._permute

    def __repr__(self):
        fields = ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
        return f"schema({fields})"


__all__ = (
    "Schema",
)
