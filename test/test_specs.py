# python
"""
Specification behavioral tests (OptionSpec, PositionalSpec, converters).

Scope
- Construction, normalization and read-only introspection of specs.
- Metadata constraints (names, spellings, flags, required/default exclusivity).
- Converters used as spec types.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None; omit the parameter instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argschema import OptionSpec, PositionalSpec, Unset, integer, string, decimal, CONVERTERS


class TestConverters(TestCase):
    """integer / string / decimal."""

    def testIntegerLiterals(self):
        self.assertEqual(integer("42"), 42)
        self.assertEqual(integer("-7"), -7)
        self.assertEqual(integer("0xDEADBEEF"), 0xDEADBEEF)
        self.assertEqual(integer("0o17"), 15)
        self.assertEqual(integer("0b101"), 5)
        self.assertEqual(integer("1_000"), 1000)

    def testIntegerLeadingZerosAreDecimal(self):
        self.assertEqual(integer("010"), 10)

    def testIntegerRejectsGarbage(self):
        for text in ("", "ten", "1.5", "0xZZ"):
            with self.assertRaises(ValueError):
                integer(text)

    def testConvertersRequireStrings(self):
        for converter in (integer, string, decimal):
            with self.assertRaises(TypeError):
                converter(1)

    def testDecimal(self):
        self.assertEqual(decimal("2.5"), 2.5)

    def testConverterNames(self):
        self.assertIs(CONVERTERS["int"], integer)
        self.assertIs(CONVERTERS["str"], string)
        self.assertIs(CONVERTERS["float"], decimal)


class TestOptionSpec(TestCase):
    """OptionSpec construction and validation."""

    def testDefaults(self):
        spec = OptionSpec("quiet", short="q")
        self.assertEqual(spec.name, "quiet")
        self.assertEqual(spec.short, "q")
        self.assertIs(spec.long, Unset)
        self.assertEqual(spec.aliases, ())
        self.assertIs(spec.type, str)
        self.assertFalse(spec.flag)
        self.assertIs(spec.default, Unset)
        self.assertFalse(spec.required)
        self.assertIs(spec.metavar, Unset)
        self.assertIs(spec.descr, Unset)
        self.assertFalse(spec.hidden)
        self.assertTrue(spec.takes_value)

    def testIntNormalizedToInteger(self):
        self.assertIs(OptionSpec("n", short="n", type=int).type, integer)

    def testTokens(self):
        spec = OptionSpec("block-size", short="b", long="block-size", aliases=["blocksize", "bs"])
        self.assertEqual(spec.tokens, ("-b", "--block-size", "--blocksize", "--bs"))
        self.assertEqual(spec.aliases, ("blocksize", "bs"))

    def testAliasOnlyOption(self):
        self.assertEqual(OptionSpec("bs", aliases=("bs",)).tokens, ("--bs",))

    def testNameRules(self):
        for name in ("", "1st", "-x", "a b"):
            with self.assertRaises(ValueError):
                OptionSpec(name, short="x")
        with self.assertRaises(TypeError):
            OptionSpec(1, short="x")

    def testNameTrimmed(self):
        self.assertEqual(OptionSpec("  out_file ", short="o").name, "out_file")

    def testSpellingRequired(self):
        with self.assertRaises(ValueError):
            OptionSpec("lonely")

    def testShortRules(self):
        for short in ("", "ab", "-", " "):
            with self.assertRaises(ValueError):
                OptionSpec("x", short=short)

    def testLongRules(self):
        for long in ("", "-x", "a=b", "has space"):
            with self.assertRaises(ValueError):
                OptionSpec("x", long=long)

    def testAliasRules(self):
        with self.assertRaises(TypeError):
            OptionSpec("x", long="x", aliases="xx")
        with self.assertRaises(ValueError):
            OptionSpec("x", long="x", aliases=("x",))
        with self.assertRaises(ValueError):
            OptionSpec("x", long="x", aliases=("y", "y"))
        with self.assertRaises(TypeError):
            OptionSpec("x", long="x", aliases=(1,))

    def testFlagConstraints(self):
        with self.assertRaises(ValueError):
            OptionSpec("q", short="q", flag=True, required=True)
        with self.assertRaises(ValueError):
            OptionSpec("q", short="q", flag=True, default=False)
        self.assertFalse(OptionSpec("q", short="q", flag=True).takes_value)

    def testRequiredExcludesDefault(self):
        with self.assertRaises(ValueError):
            OptionSpec("n", short="n", required=True, default="1")

    def testTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            OptionSpec("n", short="n", type="int")

    def testEmptyTextRejected(self):
        with self.assertRaises(ValueError):
            OptionSpec("n", short="n", metavar="  ")
        with self.assertRaises(TypeError):
            OptionSpec("n", short="n", descr=3)

    def testFieldsAreReadOnly(self):
        spec = OptionSpec("n", short="n")
        with self.assertRaises(AttributeError):
            spec.name = "m"

    def testRepr(self):
        spec = OptionSpec("quiet", short="q", flag=True)
        self.assertTrue(repr(spec).startswith("option-spec(name='quiet', short='q'"))
        self.assertNotIn("Unset", repr(spec))


class TestPositionalSpec(TestCase):
    """PositionalSpec construction and validation."""

    def testFixedDefaults(self):
        spec = PositionalSpec("out_file")
        self.assertTrue(spec.required)
        self.assertFalse(spec.variadic)
        self.assertEqual(spec.metavar, "OUT_FILE")

    def testVariadicOptionalByDefault(self):
        spec = PositionalSpec("words", variadic=True)
        self.assertFalse(spec.required)
        self.assertTrue(PositionalSpec("words", variadic=True, required=True).required)

    def testVariadicRejectsDefault(self):
        with self.assertRaises(ValueError):
            PositionalSpec("words", variadic=True, default=())

    def testRequiredRejectsDefault(self):
        with self.assertRaises(ValueError):
            PositionalSpec("mode", required=True, default="fast")
        self.assertEqual(PositionalSpec("mode", required=False, default="fast").default, "fast")

    def testDefaultMakesSlotOptional(self):
        spec = PositionalSpec("mode", default="fast")
        self.assertFalse(spec.required)
        self.assertEqual(spec.default, "fast")

    def testExplicitMetavar(self):
        self.assertEqual(PositionalSpec("src", metavar="SOURCE").metavar, "SOURCE")

    def testTypename(self):
        self.assertEqual(PositionalSpec.__typename__, "positional-spec")
        self.assertEqual(OptionSpec.__typename__, "option-spec")


if __name__ == "__main__":
    unittest.main()
