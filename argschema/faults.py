"""
Argschema faults (parse errors, schema errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- ParseError and its subclasses: one class per failure kind of a parse call.
  Each carries a message plus read-only context options (code, title, hint,
  token, index, ...) and knows how to render itself with rich.
- SchemaError: a schema (or schema document) that cannot be used.
- report(): print a fault on the stderr console. The engine never calls it; it
  is the entry point for host CLI wrappers.

UX goals
- Position-first messages: every parse message includes the ordinal position
  of the offending token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - schema (100xx)
      • INVALID_SCHEMA, INVALID_DOCUMENT
    - options (111xx)
      • UNKNOWN_OPTION, UNEXPECTED_OPTION_VALUE, MISSING_OPTION_VALUE,
        INVALID_OPTION_VALUE, MISSING_REQUIRED_OPTION
    - positionals (112xx)
      • UNEXPECTED_POSITIONAL, MISSING_POSITIONAL, INVALID_POSITIONAL_VALUE

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- schema errors (10xxx) ---
    INVALID_SCHEMA              = 10001
    INVALID_DOCUMENT            = 10002

    # --- option errors (111xx) ---
    UNKNOWN_OPTION              = 11112
    UNEXPECTED_OPTION_VALUE     = 11113
    MISSING_OPTION_VALUE        = 11117
    INVALID_OPTION_VALUE        = 11124
    MISSING_REQUIRED_OPTION     = 11126

    # --- positional errors (112xx) ---
    UNEXPECTED_POSITIONAL       = 11221
    MISSING_POSITIONAL          = 11225
    INVALID_POSITIONAL_VALUE    = 11227

    @property
    def kind(self):
        """
        CamelCase kind label, e.g. FaultCode.UNKNOWN_OPTION.kind == "UnknownOption".
        """
        return "".join(part.title() for part in self.name.split("_"))


_STYLES = {
    # header parts
    "prog-name": "bold #E6E6F0",  # near-white program name
    "code": "bold #00E5FF",  # neon cyan fault code
    "error-title": "bold #FF4DA6",  # friendly pinky title

    # body
    "error-message": "#C8C8D0",  # soft light gray message
    "hint-arrow": "#9CE19C dim",  # gentle green arrow
    "hint": "italic #9CE19C",  # gentle green hint text
}


class _Renderable:
    """
    Shared rich rendering for faults.

    options consumed
    - code: FaultCode (required)
    - title: str, hint: str (optional)
    - prog: str (program name shown in the header; defaults to the code only)
    - colorful: bool (default True), fancy: bool (default False)
    """

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = defaultdict(str, _STYLES)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        header = []
        if prog := self.options.get("prog"):
            header.extend((text(prog, "prog-name"), " — "))
        header.extend((
            text(str(self.code.value), "code"),
            " | ",
            text(self.title.title(), "error-title"),
        ))
        header = Text.assemble("[ ", *header, " ]")

        message = text(self.message, "error-message")
        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=header, title_align="left")
        return Group(header, *parts)

    @property
    def code(self):
        return self.options["code"]

    @property
    def title(self):
        return self.options.get("title") or self.code.name.lower().replace("_", " ")

    @property
    def hint(self):
        return self.options.get("hint")

    def replace(self, **overrides):
        """
        return a copy of this fault with some context options overridden.
        """
        return type(self)(self.message, **{**self.options, **overrides})


class SchemaError(_Renderable, ValueError):
    """
    A schema declaration (or schema document) that cannot be used.

    Raised at schema construction or load time, never during a parse call.
    """

    def __init__(self, message, /, **options):
        options.setdefault("code", FaultCode.INVALID_SCHEMA)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)


class ParseError(_Renderable, Exception):
    """
    Base type of every failure of a parse call.

    attributes
    - message: lowercased, position-first description.
    - options: read-only mapping of context (code, title, hint, token, index,
      plus kind-specific keys such as option/slot/suggestions).

    A parse call raises exactly one ParseError; no partial Bindings exist when
    it does.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    @property
    def kind(self):
        return self.code.kind

    @property
    def token(self):
        return self.options.get("token")

    @property
    def index(self):
        return self.options.get("index")


class UnknownOptionError(ParseError): ...
class UnexpectedOptionValueError(ParseError): ...
class MissingOptionValueError(ParseError): ...
class InvalidOptionValueError(ParseError): ...
class MissingRequiredOptionError(ParseError): ...
class MissingPositionalArgumentError(ParseError): ...
class UnexpectedPositionalArgumentError(ParseError): ...
class InvalidPositionalValueError(ParseError): ...


def report(fault, /, **options):
    """
    print a fault on the stderr console.

    options are merged into the fault's own context before rendering
    (typically prog, colorful, fancy). returns the fault actually printed.
    """
    if not isinstance(fault, ParseError | SchemaError):
        raise TypeError("report() argument must be a parse or schema error")
    fault = fault.replace(**options)
    console.print(fault)
    return fault


__all__ = (
    "FaultCode",
    "SchemaError",
    "ParseError",
    "UnknownOptionError",
    "UnexpectedOptionValueError",
    "MissingOptionValueError",
    "InvalidOptionValueError",
    "MissingRequiredOptionError",
    "MissingPositionalArgumentError",
    "UnexpectedPositionalArgumentError",
    "InvalidPositionalValueError",
    "report",
)
