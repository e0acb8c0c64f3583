"""
Parse outcomes: Bindings (success) and HelpRequested (graceful stop).

A parse call produces exactly one of
- Bindings: every option and fixed positional slot resolved, plus the
  variadic capture;
- HelpRequested: a help flag was seen, nothing else was validated;
- a ParseError (raised, see argschema.faults).

Both outcome types are immutable once built.
"""
from enum import Enum
from types import MappingProxyType

from .utils import *


class Origin(Enum):
    """
    where a bound value came from.

    - EXPLICIT: given on the command line.
    - DEFAULT: not given; the declared default was bound.
    - UNSET: not given and no default; the Unset sentinel was bound.
    """
    EXPLICIT = "explicit"
    DEFAULT = "default"
    UNSET = "unset"


class Bindings:
    """
    Fully resolved result of a successful parse.

    Attributes (read-only)
    - schema: the Schema the arguments were parsed against.
    - options: mapping option name → value, one key per option in declaration order.
    - positionals: mapping slot name → value, one key per fixed slot in slot order.
    - variadic: tuple of converted trailing tokens (empty when none).
    - ignored: tokens dropped by the schema's "ignore" policies, in input order.

    Lookups
    - bindings[name] resolves options, then fixed slots, then the variadic slot name.
    - origin(name) tells explicit, defaulted and unset values apart.
    """

    __slots__ = ("_schema", "_options", "_positionals", "_variadic", "_ignored", "_origins")

    schema = mirror("schema")
    options = mirror("options")
    positionals = mirror("positionals")
    variadic = mirror("variadic")
    ignored = mirror("ignored")

    def __init__(self, schema, options, positionals, variadic=(), ignored=(), *, origins):
        self._schema = schema
        self._options = dict(options)
        self._positionals = dict(positionals)
        self._variadic = tuple(variadic)
        self._ignored = tuple(ignored)
        self._origins = dict(origins)

    def __getitem__(self, name):
        if name in self._options:
            return self._options[name]
        if name in self._positionals:
            return self._positionals[name]
        if (variadic := self._schema.variadic) is not None and variadic.name == name:
            return self._variadic
        raise KeyError(name)

    def __contains__(self, name):
        try:
            self[name]
        except KeyError:
            return False
        return True

    def origin(self, name, /):
        """
        return the Origin of an option or fixed positional slot.

        the variadic slot is EXPLICIT when it captured at least one token,
        UNSET otherwise.
        """
        try:
            return self._origins[name]
        except KeyError:
            if (variadic := self._schema.variadic) is not None and variadic.name == name:
                return Origin.EXPLICIT if self._variadic else Origin.UNSET
            raise KeyError(name) from None

    def is_set(self, name, /):
        """
        whether the value was given on the command line.
        """
        return self.origin(name) is Origin.EXPLICIT

    def as_dict(self):
        """
        plain, JSON-friendly snapshot (Unset becomes None).
        """
        payload = {
            "options": {name: coalesce(value) for name, value in self._options.items()},
            "positionals": {name: coalesce(value) for name, value in self._positionals.items()},
            "variadic": list(self._variadic),
        }
        if self._ignored:
            payload["ignored"] = list(self._ignored)
        return payload

    def to_argv(self, prefer="long"):
        """
        re-serialize into a canonical token sequence.

        only explicitly set values are emitted, so parsing the result against
        the same schema yields equal Bindings.

        parameters
        - prefer: "long" | "alias" | "short"
          spelling used for options declaring it; otherwise falls back to
          long, then the first alias, then short.

        layout
        - options in declaration order: "--name=VALUE" for long spellings,
          "-x VALUE" for short ones, the bare token for flags.
        - "--" when any positional token starts with '-'.
        - fixed positionals in slot order, then the variadic capture.
        """
        if prefer not in ("long", "alias", "short"):
            raise ValueError("to_argv() 'prefer' must be one of 'long', 'alias' or 'short'")

        argv = []
        for spec in self._schema.options:
            if self._origins[spec.name] is not Origin.EXPLICIT:
                continue
            token = _spelling(spec, prefer)
            if spec.flag:
                argv.append(token)
            elif token.startswith("--"):
                argv.append(f"{token}={self._options[spec.name]}")
            else:
                argv.extend((token, str(self._options[spec.name])))

        positionals = [
            str(self._positionals[spec.name])
            for spec in self._schema.positionals
            if self._origins[spec.name] is Origin.EXPLICIT
        ]
        positionals.extend(map(str, self._variadic))
        if any(token.startswith("-") for token in positionals):
            argv.append("--")
        argv.extend(positionals)
        return argv

    def __eq__(self, other):
        if not isinstance(other, Bindings):
            return NotImplemented
        return (
            self._options == other._options
            and self._positionals == other._positionals
            and self._variadic == other._variadic
            and self._origins == other._origins
        )

    __hash__ = None

    def __rich_repr__(self):
        yield "options", dict(self._options)
        yield "positionals", dict(self._positionals)
        yield "variadic", list(self._variadic)
        if self._ignored:
            yield "ignored", list(self._ignored)

    def __repr__(self):
        fields = ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
        return f"bindings({fields})"


def _spelling(spec, prefer):
    short = ["-" + spec.short] if spec.short is not Unset else []
    long = ["--" + spec.long] if spec.long is not Unset else []
    aliases = ["--" + alias for alias in spec.aliases]
    match prefer:
        case "short":
            order = short + long + aliases
        case "alias":
            order = aliases + long + short
        case _:
            order = long + aliases + short
    return order[0]


class HelpRequested:
    """
    Graceful outcome: a help flag was recognized.

    Returned (not raised) by the parser as soon as the help token is scanned;
    no Bindings are produced and no further validation happens.

    Attributes
    - schema: the Schema whose usage should be rendered.
    - token: the help spelling that was used ("-h", "--help", or a cluster like "-qh").
    - index: 0-based position of that token in the argument vector.
    """

    __slots__ = ("_schema", "_token", "_index")

    schema = mirror("schema")
    token = mirror("token")
    index = mirror("index")

    def __init__(self, schema, token, index):
        self._schema = schema
        self._token = token
        self._index = index

    def __eq__(self, other):
        if not isinstance(other, HelpRequested):
            return NotImplemented
        return (self._schema, self._token, self._index) == (other._schema, other._token, other._index)

    __hash__ = None

    def __repr__(self):
        return f"help-requested(token={self._token!r}, index={self._index!r})"


__all__ = (
    "Origin",
    "Bindings",
    "HelpRequested",
)
