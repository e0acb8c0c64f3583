"""
Usage rendering (schema → human-readable help), built on rich.

This module is a consumer of Schema introspection only; the parsing engine
never imports it. Hosts call it when a parse returns HelpRequested or raises a
ParseError.

Layout
    usage: example [options] OUT_FILE [IN_FILE [WORDS...]]

    one line description

    positionals
      OUT_FILE                          the output file
      IN_FILE
      WORDS...                          word(s) of interest

    options
      -h  --help                        print this usage and exit
      -b  --block-size <N>  (aliased: --blocksize --bs)
                                        block size (default: 12)
          --name <arg>                  (required)

Palette
- usage-label, program-name, metavar, option-name, section-label, description, note
- when colorful is False, styling is suppressed.
"""
import io
from collections import defaultdict

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .utils import *

_STYLES = {
    "usage-label": "bold #00E6FF",  # cyan signature info
    "program-name": "bold #FF4D94",  # magenta-pink program name
    "section-label": "bold #FFFFFF",  # white section headers
    "option-name": "bold #00E6FF",  # cyan options
    "flag-name": "bold #22C55E",  # green flags
    "metavar": "bold #FFD600",  # amber parameters
    "description": "#9CA3AF",  # muted gray
    "note": "italic #737373",  # dim gray defaults/required
}


class _Styler:
    def __init__(self, colorful):
        self.colorful = colorful
        self.styles = defaultdict(str, _STYLES)

    def __call__(self, fragment, style=""):
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), self.styles[style] if self.colorful else "")


def _program(schema, prog):
    return prog or schema.prog or "command"


def usage_line(schema, prog=None, *, colorful=False):
    """
    one-line synopsis, e.g. "usage: example [options] OUT_FILE [IN_FILE [WORDS...]]".

    optional slots open a bracket that closes at the end of the line, so later
    slots read as nested in the earlier optional ones.
    """
    text = _Styler(colorful)
    usage = Text.assemble(text("usage", "usage-label"), ": ", text(_program(schema, prog), "program-name"))

    if any(not spec.hidden for spec in schema.options) or schema.help:
        usage.append(" [options]")

    opened = 0
    for spec in schema.slots:
        usage.append(" ")
        if not spec.required:
            usage.append("[")
            opened += 1
        usage.append(text(spec.metavar + ("..." if spec.variadic else ""), "metavar"))
    usage.append("]" * opened)
    return usage


def _names(spec, text):
    """
    "-b  --block-size <N>  (aliased: --blocksize --bs)" as a styled Text.
    """
    style = "flag-name" if spec.flag else "option-name"
    names = Text()
    names.append_text(text("-" + spec.short, style) if spec.short is not Unset else Text("  "))

    primary = spec.long if spec.long is not Unset else (spec.aliases[0] if spec.aliases else Unset)
    aliases = spec.aliases if spec.long is not Unset else spec.aliases[1:]
    if primary is not Unset:
        names.append("  ")
        names.append_text(text("--" + primary, style))
    if spec.takes_value:
        names.append(" ")
        names.append_text(text("<%s>" % coalesce(spec.metavar, "arg"), "metavar"))
    if aliases:
        names.append("  (aliased:")
        for alias in aliases:
            names.append(" ")
            names.append_text(text("--" + alias, style))
        names.append(")")
    return names


def _describe(descr, notes, text):
    parts = []
    if descr is not None:
        parts.append(text(descr, "description"))
    if notes:
        parts.append(text("(%s)" % ", ".join(notes), "note"))
    return Text(" ").join(parts)


def render(schema, prog=None, *, colorful=True):
    """
    full help as a rich renderable (usage line, description, positionals, options).

    hidden options are omitted; help flags come first when the schema reserves them.
    """
    text = _Styler(colorful)
    renders = [usage_line(schema, prog, colorful=colorful)]

    if schema.descr is not None:
        renders.extend((Text(""), text(schema.descr, "description")))

    if slots := schema.slots:
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for spec in slots:
            notes = []
            if spec.default is not Unset:
                notes.append("default: %s" % spec.default)
            table.add_row(
                Text.assemble("  ", text(spec.metavar + ("..." if spec.variadic else ""), "metavar")),
                _describe(coalesce(spec.descr), notes, text),
            )
        renders.extend((Text(""), text("positionals", "section-label"), table))

    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column()
    if schema.help:
        table.add_row(
            Text.assemble("  ", text("-h", "flag-name"), "  ", text("--help", "flag-name")),
            text("print this usage and exit", "description"),
        )
    for spec in schema.options:
        if spec.hidden:
            continue
        notes = []
        if spec.required:
            notes.append("required")
        elif spec.default is not Unset:
            notes.append("default: %s" % spec.default)
        table.add_row(Text.assemble("  ", _names(spec, text)), _describe(coalesce(spec.descr), notes, text))
    if table.row_count:
        renders.extend((Text(""), text("options", "section-label"), table))

    return Group(*renders)


def format_help(schema, prog=None, *, width=80):
    """
    plain-text help, as render() would print it without colors.
    """
    console = Console(file=io.StringIO(), width=width, color_system=None, force_terminal=False)
    console.print(render(schema, prog, colorful=False))
    return console.file.getvalue()


__all__ = (
    "usage_line",
    "render",
    "format_help",
)
