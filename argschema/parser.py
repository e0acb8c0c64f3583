"""
Argschema parsing engine: argument vector + Schema → Bindings | HelpRequested.

What this module provides
- parse(schema, argv): single-call entry point.
- Parser(schema): reusable engine bound to one schema.

Phases of a parse call
- scan
  • walk the tokens once, left to right.
  • '--name', '--name=value' and '-x', '-xVALUE', '-xyz' (clusters) are matched
    against the schema switches; value-bearing options take their value inline
    or from the next token (even when it starts with '-').
  • '-h'/'--help' (when reserved) return HelpRequested at once.
  • every other token is kept, in order, for positional distribution; a lone '-'
    is positional and '--' makes every following token positional.
  • with permute=False the first positional token ends option scanning.
- options
  • declaration order: explicit value, else default, else MissingRequiredOption,
    else Unset.
- positionals
  • slot order: one token per fixed slot, then the variadic capture; surplus
    tokens follow the schema's extras policy.

Errors are raised as ParseError subclasses at the point of failure; no partial
result ever escapes. The engine never prints and never exits.

Concurrency
- all per-call state lives in a private _Pass object; Parser and Schema are
  read-only, so one Parser may serve concurrent parse calls.
"""
import difflib
import logging
import operator

from .bindings import Bindings, HelpRequested, Origin
from .faults import *
from .utils import *

HELP_TOKENS = ("-h", "--help")

logger = logging.getLogger(__name__)


def _hint(schema, what):
    if schema.help and schema.prog:
        return f"run '{schema.prog} --help' to see {what}"
    if schema.help:
        return f"run with --help to see {what}"
    return f"check the command documentation for {what}"


class _Pass:
    """
    state of a single parse call: scan cursor and result accumulators.
    """

    def __init__(self, schema, argv):
        self.schema = schema
        self.argv = argv
        self.index = 0
        self.values = {}
        self.remaining = []
        self.ignored = []

    def run(self):
        logger.debug("parsing %d token(s) against %r", len(self.argv), self.schema)

        if (outcome := self._scan()) is not None:
            logger.debug("help requested by %r at index %d", outcome.token, outcome.index)
            return outcome

        options, origins = self._resolve_options()
        positionals, variadic = self._distribute(origins)

        bindings = Bindings(
            self.schema,
            options,
            positionals,
            variadic,
            (token for _, token in sorted(self.ignored, key=operator.itemgetter(0))),
            origins=origins,
        )
        logger.debug("parsed %r", bindings)
        return bindings

    def _scan(self):
        """
        classify tokens; return HelpRequested or None when scanning completes.
        """
        argv = self.argv
        while self.index < len(argv):
            token = argv[self.index]

            if token == "--":
                self.remaining.extend(enumerate(argv[self.index + 1:], self.index + 1))
                logger.debug("separator at index %d, %d token(s) forced positional", self.index, len(argv) - self.index - 1)
                return None

            if token.startswith("--"):
                outcome = self._parse_long(token)
            elif token.startswith("-") and token != "-":
                outcome = self._parse_short(token)
            else:
                self.remaining.append((self.index, token))
                self.index += 1
                if not self.schema.permute:
                    # strict order: everything after the first positional is positional
                    self.remaining.extend(enumerate(argv[self.index:], self.index))
                    return None
                continue

            if outcome is not None:
                return outcome
        return None

    def _parse_long(self, token):
        start = self.index
        name, separator, value = token[2:].partition("=")
        input = "--" + name

        if self.schema.help and input == "--help":
            if separator:
                raise UnexpectedOptionValueError(
                    "help flag %r at %s position cannot have an inline value" % (input, ordinal(start + 1)),
                    title="flag cannot take a value",
                    code=FaultCode.UNEXPECTED_OPTION_VALUE,
                    hint="remove everything from '=' (for example: %s)" % input,
                    token=token,
                    index=start,
                    option="help",
                )
            return HelpRequested(self.schema, token, start)

        try:
            spec = self.schema.switches[input]
        except KeyError:
            self._unknown(token, input, start)
            self.index = start + 1
            return None

        if spec.flag:
            if separator:
                raise UnexpectedOptionValueError(
                    "flag %r at %s position cannot have an inline value" % (input, ordinal(start + 1)),
                    title="flag cannot take a value",
                    code=FaultCode.UNEXPECTED_OPTION_VALUE,
                    hint="remove everything from '=' (for example: %s)" % input,
                    token=token,
                    index=start,
                    option=spec.name,
                )
            self._bind(spec, True)
            self.index = start + 1
            return None

        if separator:
            self.index = start + 1
        else:
            value = self._getvalue(spec, input, token, start)
        self._bind(spec, self._convert(spec, input, token, start, value))
        return None

    def _parse_short(self, token):
        start = self.index
        self.index = start + 1
        cluster = token[1:]

        for offset, char in enumerate(cluster):
            input = "-" + char

            if self.schema.help and input == "-h":
                return HelpRequested(self.schema, token, start)

            try:
                spec = self.schema.switches[input]
            except KeyError:
                self._unknown(token, input, start)
                continue

            if spec.flag:
                self._bind(spec, True)
                continue

            # the rest of the cluster, if any, is the value: -b20
            if value := cluster[offset + 1:]:
                self.index = start + 1
            else:
                value = self._getvalue(spec, input, token, start)
            self._bind(spec, self._convert(spec, input, token, start, value))
            return None
        return None

    def _getvalue(self, spec, input, token, start):
        """
        take the value of a spaced option from the next token and advance past both.
        """
        if start + 1 >= len(self.argv):
            raise MissingOptionValueError(
                "option %r at %s position requires a value" % (input, ordinal(start + 1)),
                title="missing option value",
                code=FaultCode.MISSING_OPTION_VALUE,
                hint="pass a value after a space (%s <value>) or inline (%s)" % (
                    input, "--%s=<value>" % spec.long if spec.long is not Unset else input + "<value>"
                ),
                token=token,
                index=start,
                option=spec.name,
            )
        self.index = start + 2
        return self.argv[start + 1]

    def _convert(self, spec, input, token, start, value):
        try:
            return spec.type(value)
        except (TypeError, ValueError) as exception:
            raise InvalidOptionValueError(
                "invalid value %r for option %r at %s position" % (value, input, ordinal(start + 1)),
                title="invalid option value",
                code=FaultCode.INVALID_OPTION_VALUE,
                hint=_hint(self.schema, "the expected value of %s" % input),
                token=token,
                index=start,
                option=spec.name,
                value=value,
            ) from exception

    def _bind(self, spec, value):
        if spec.name in self.values:
            logger.debug("option %r given again; the last occurrence wins", spec.name)
        self.values[spec.name] = value

    def _unknown(self, token, input, start):
        """
        apply the unknown-option policy: record the spelling, or raise.
        """
        if self.schema.unknown == "ignore":
            logger.debug("ignoring unknown option %r at index %d", input, start)
            self.ignored.append((start, token if token.startswith("--") else input))
            return

        spellings = list(self.schema.switches.keys())
        if self.schema.help:
            spellings.extend(HELP_TOKENS)
        suggestions = difflib.get_close_matches(input, spellings, 5)
        try:
            hint = "did you mean %r? %s" % (suggestions[0], _hint(self.schema, "all available options"))
        except IndexError:
            hint = _hint(self.schema, "all available options")

        raise UnknownOptionError(
            "unknown option %r at %s position" % (input, ordinal(start + 1)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint=hint,
            token=token,
            index=start,
            input=input,
            suggestions=tuple(suggestions),
        )

    def _resolve_options(self):
        """
        bind every option in declaration order (explicit, default, required check, Unset).
        """
        options = {}
        origins = {}
        for spec in self.schema.options:
            if spec.name in self.values:
                options[spec.name] = self.values[spec.name]
                origins[spec.name] = Origin.EXPLICIT
            elif spec.default is not Unset:
                options[spec.name] = spec.default
                origins[spec.name] = Origin.DEFAULT
            elif spec.required:
                spelling = "--" + spec.long if spec.long is not Unset else spec.tokens[0]
                raise MissingRequiredOptionError(
                    "missing required option %r" % spelling,
                    title="missing required option",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    hint=_hint(self.schema, "how to pass %s" % spelling),
                    option=spec.name,
                )
            else:
                options[spec.name] = Unset
                origins[spec.name] = Origin.UNSET
        return options, origins

    def _distribute(self, origins):
        """
        fill fixed slots in order, then the variadic slot; apply the extras policy.
        """
        tokens = self.remaining
        positionals = {}

        for position, spec in enumerate(self.schema.positionals):
            if position < len(tokens):
                index, token = tokens[position]
                positionals[spec.name] = self._convert_positional(spec, token, index)
                origins[spec.name] = Origin.EXPLICIT
            elif spec.required:
                raise self._missing(spec, position)
            elif spec.default is not Unset:
                positionals[spec.name] = spec.default
                origins[spec.name] = Origin.DEFAULT
            else:
                positionals[spec.name] = Unset
                origins[spec.name] = Origin.UNSET

        rest = tokens[len(self.schema.positionals):]

        if (spec := self.schema.variadic) is not None:
            if spec.required and not rest:
                raise self._missing(spec, len(self.schema.positionals))
            variadic = tuple(self._convert_positional(spec, token, index) for index, token in rest)
            return positionals, variadic

        if rest:
            if self.schema.extras == "reject":
                index, token = rest[0]
                raise UnexpectedPositionalArgumentError(
                    "unexpected positional argument %r at %s position" % (token, ordinal(index + 1)),
                    title="unexpected positional argument",
                    code=FaultCode.UNEXPECTED_POSITIONAL,
                    hint=_hint(self.schema, "the expected positional arguments"),
                    token=token,
                    index=index,
                    leftover=tuple(token for _, token in rest),
                )
            logger.debug("ignoring %d surplus positional token(s)", len(rest))
            self.ignored.extend(rest)
        return positionals, ()

    def _convert_positional(self, spec, token, index):
        try:
            return spec.type(token)
        except (TypeError, ValueError) as exception:
            raise InvalidPositionalValueError(
                "invalid value %r for positional %s at %s position" % (token, spec.metavar, ordinal(index + 1)),
                title="invalid positional value",
                code=FaultCode.INVALID_POSITIONAL_VALUE,
                hint=_hint(self.schema, "the expected value of %s" % spec.metavar),
                token=token,
                index=index,
                slot=spec.name,
            ) from exception

    def _missing(self, spec, position):
        return MissingPositionalArgumentError(
            "missing positional argument %s (expected at least %d, got %d)" % (
                spec.metavar, self.schema.required, position
            ),
            title="missing positional argument",
            code=FaultCode.MISSING_POSITIONAL,
            hint=_hint(self.schema, "the expected order of positional arguments"),
            index=len(self.argv),
            slot=spec.name,
        )


class Parser:
    """
    Reusable parsing engine bound to one Schema.

    The parser keeps no per-call state: every parse() runs its own pass, so a
    single Parser may be shared across threads.

    Example
        >>> parser = Parser(schema)
        >>> outcome = parser.parse(["-b", "20", "out.txt"])
        >>> if isinstance(outcome, HelpRequested): ...
    """

    __slots__ = ("_schema",)

    schema = mirror("schema")

    def __init__(self, schema):
        self._schema = schema

    def parse(self, argv, /):
        """
        parse an argument vector (program name excluded).

        returns
        - Bindings on success.
        - HelpRequested when a help flag is seen.

        raises
        - TypeError if argv is a string or holds non-string items.
        - a ParseError subclass for any malformed input.
        """
        if isinstance(argv, str | bytes):
            raise TypeError("parse() argument must be a sequence of strings, not a single string")
        argv = tuple(argv)
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("parse() argument must contain only strings")
        return _Pass(self._schema, argv).run()

    __call__ = parse


def parse(schema, argv, /):
    """
    parse argv against schema; see Parser.parse.
    """
    return Parser(schema).parse(argv)


__all__ = (
    "Parser",
    "parse",
    "HELP_TOKENS",
)
