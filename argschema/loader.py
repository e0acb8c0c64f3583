"""
Schema documents: TOML → Schema.

Document layout
    prog = "example"                 # optional
    descr = "what the command does"  # optional

    [settings]                       # optional, every key optional
    unknown = "reject"               # "reject" | "ignore"
    extras = "ignore"                # "ignore" | "reject"
    permute = true
    help = true

    [[option]]                       # zero or more, declaration order kept
    name = "block-size"
    short = "b"
    long = "block-size"
    aliases = ["blocksize", "bs"]
    type = "int"                     # see argschema.specs.CONVERTERS
    default = 12                     # converted with the type ("str" when omitted)
    # flag, required, metavar, descr, hidden

    [[positional]]                   # zero or more, slot order kept
    name = "out_file"
    # type, required, default, variadic, metavar, descr
    # a slot declaring a default is optional unless required = true

Every problem (syntax, unknown key, wrong value kind, invalid spec or schema)
is reported as a SchemaError carrying FaultCode.INVALID_DOCUMENT and the
document source.
"""
import logging
import tomllib
from pathlib import Path

from .faults import FaultCode, SchemaError
from .schema import Schema
from .specs import CONVERTERS, OptionSpec, PositionalSpec

logger = logging.getLogger(__name__)

_TOP_KEYS = {
    "prog": str,
    "descr": str,
    "settings": dict,
    "option": list,
    "positional": list,
}
_SETTINGS = {
    "unknown": str,
    "extras": str,
    "permute": bool,
    "help": bool,
}
_OPTION_KEYS = {
    "name": str,
    "short": str,
    "long": str,
    "aliases": list,
    "type": str,
    "flag": bool,
    "default": object,
    "required": bool,
    "metavar": str,
    "descr": str,
    "hidden": bool,
}
_POSITIONAL_KEYS = {
    "name": str,
    "type": str,
    "required": bool,
    "default": object,
    "variadic": bool,
    "metavar": str,
    "descr": str,
}


def _fail(message, source):
    return SchemaError(
        message,
        code=FaultCode.INVALID_DOCUMENT,
        title="invalid schema document",
        hint="fix %s and try again" % source,
        source=source,
    )


def _check(table, allowed, where, source):
    if not isinstance(table, dict):
        raise _fail(f"{where} must be a table", source)
    for key, value in table.items():
        try:
            kind = allowed[key]
        except KeyError:
            raise _fail(f"{where} has unknown key {key!r}", source) from None
        if kind is not object and (not isinstance(value, kind) or (kind is not bool and isinstance(value, bool))):
            raise _fail(f"{where} key {key!r} must be of type {kind.__name__}", source)


def _convert(entry, where, source):
    """
    replace the 'type' name of an entry by its converter and convert its default.

    defaults go through the same converter as command-line values (the entry's
    type, else "str"), so `default = "0xDEADBEEF"` and `default = 0xDEADBEEF`
    bind the same int, and `default = 12` on an untyped option binds "12".
    """
    name = entry.get("type", "str")
    try:
        converter = CONVERTERS[name]
    except KeyError:
        names = ", ".join(sorted(CONVERTERS))
        raise _fail(f"{where} has unknown type {name!r} (expected one of: {names})", source) from None

    entry = entry | ({"type": converter} if "type" in entry else {})
    if "default" in entry:
        default = entry["default"]
        if isinstance(default, bool) or not isinstance(default, str | int | float):
            raise _fail(f"{where} default must be a string or a number, got {default!r}", source)
        try:
            entry["default"] = converter(default if isinstance(default, str) else str(default))
        except ValueError as exception:
            raise _fail(f"{where} has an invalid default {default!r} for type {name!r}", source) from exception
    return entry


def build(document, /, source="<schema>"):
    """
    build a Schema from an already decoded document (a dict, e.g. from tomllib).
    """
    _check(document, _TOP_KEYS, "schema document", source)

    settings = document.get("settings", {})
    _check(settings, _SETTINGS, "[settings]", source)

    options = []
    for position, entry in enumerate(document.get("option", []), 1):
        where = f"option #{position}"
        _check(entry, _OPTION_KEYS, where, source)
        entry = dict(_convert(entry, where, source))
        if "name" not in entry:
            raise _fail(f"{where} is missing 'name'", source)
        try:
            options.append(OptionSpec(entry.pop("name"), **entry))
        except (TypeError, ValueError) as exception:
            raise _fail(f"{where}: {exception}", source) from exception

    positionals = []
    for position, entry in enumerate(document.get("positional", []), 1):
        where = f"positional #{position}"
        _check(entry, _POSITIONAL_KEYS, where, source)
        entry = dict(_convert(entry, where, source))
        if "name" not in entry:
            raise _fail(f"{where} is missing 'name'", source)
        try:
            positionals.append(PositionalSpec(entry.pop("name"), **entry))
        except (TypeError, ValueError) as exception:
            raise _fail(f"{where}: {exception}", source) from exception

    metadata = {key: document[key] for key in ("prog", "descr") if key in document}

    try:
        schema = Schema(options, positionals, **metadata, **settings)
    except SchemaError as exception:
        raise _fail(exception.message, source) from exception

    logger.debug("loaded %d option(s) and %d positional slot(s) from %s", len(options), len(schema.slots), source)
    return schema


def loads(text, /, source="<string>"):
    """
    build a Schema from TOML text.
    """
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exception:
        raise _fail(f"malformed TOML: {exception}", source) from exception
    return build(document, source)


def load(path, /):
    """
    build a Schema from a TOML file.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exception:
        raise _fail(f"cannot read schema document: {exception.strerror or exception}", str(path)) from exception
    return loads(text, str(path))


__all__ = (
    "build",
    "loads",
    "load",
)
