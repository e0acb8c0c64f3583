"""
argschema command-line wrapper.

    argschema [-v] [--json] [--prog NAME] [--no-color] SCHEMA [ARGS...]

Loads a TOML schema document, parses ARGS against it and prints the bindings.
The wrapper's own options are parsed by the engine itself with a strict-order
schema, so everything after SCHEMA belongs to the described command.

Exit codes
- 0: bindings printed.
- 1: help requested (usage on stdout) or a parse error (report on stderr).
- 2: the schema document cannot be read or is invalid.
"""
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.pretty import pprint

from . import loader
from .bindings import HelpRequested
from .faults import ParseError, SchemaError, report
from .schema import Schema
from .specs import OptionSpec, PositionalSpec
from .usage import render, usage_line

logger = logging.getLogger(__name__)

SCHEMA = Schema(
    (
        OptionSpec("verbose", short="v", long="verbose", flag=True, descr="log parsing steps on stderr"),
        OptionSpec("json", long="json", flag=True, descr="print the bindings as JSON"),
        OptionSpec("prog", long="prog", metavar="NAME", descr="program name used in usage and reports"),
        OptionSpec("no-color", long="no-color", flag=True, descr="disable colors"),
    ),
    (
        PositionalSpec("schema", descr="TOML schema document"),
        PositionalSpec("args", variadic=True, descr="arguments to parse against the schema"),
    ),
    prog="argschema",
    descr="parse arguments against a TOML schema document and print the resulting bindings.",
    permute=False,
)


def _configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _fail(fault, schema, prog, colorful):
    report(fault, prog=prog, colorful=colorful)
    Console(stderr=True, no_color=not colorful).print(usage_line(schema, prog, colorful=colorful))
    return 1


def main(argv=None):
    """
    run the wrapper on argv (sys.argv[1:] when omitted) and return the exit code.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    stdout = Console()

    try:
        options = SCHEMA.parse(argv)
    except ParseError as fault:
        return _fail(fault, SCHEMA, SCHEMA.prog, True)
    if isinstance(options, HelpRequested):
        stdout.print(render(SCHEMA))
        return 1

    colorful = not options["no-color"]
    _configure_logging(options["verbose"])

    try:
        schema = loader.load(options["schema"])
    except SchemaError as fault:
        report(fault, prog=SCHEMA.prog, colorful=colorful)
        return 2

    prog = options["prog"] or schema.prog or Path(options["schema"]).stem
    logger.debug("parsing %r as %s", options["args"], prog)

    try:
        outcome = schema.parse(options["args"])
    except ParseError as fault:
        return _fail(fault, schema, prog, colorful)
    if isinstance(outcome, HelpRequested):
        Console(no_color=not colorful).print(render(schema, prog, colorful=colorful))
        return 1

    if options["json"]:
        sys.stdout.write(json.dumps(outcome.as_dict(), indent=2) + "\n")
    else:
        pprint(outcome, console=Console(no_color=not colorful))
    return 0


if __name__ == "__main__":
    sys.exit(main())
