# python
"""
Schema behavioral tests.

Scope
- Construction-time validation (policies, duplicates, help reservation, slot order).
- Introspection used by usage renderers (options, slots, switches, lookups).

Conventions
- Test method names follow CamelCase per project convention.
- Invalid schemas must fail with SchemaError, which is also a ValueError.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argschema import Schema, SchemaError, OptionSpec, PositionalSpec, FaultCode


class TestValidation(TestCase):
    """Schemas that cannot be built."""

    def testPolicies(self):
        with self.assertRaises(SchemaError):
            Schema(unknown="warn")
        with self.assertRaises(SchemaError):
            Schema(extras="keep")

    def testSchemaErrorIsValueError(self):
        with self.assertRaises(ValueError) as context:
            Schema(unknown="warn")
        self.assertEqual(context.exception.code, FaultCode.INVALID_SCHEMA)

    def testMetadataTypes(self):
        with self.assertRaises(SchemaError):
            Schema(prog=1)
        with self.assertRaises(SchemaError):
            Schema(descr=b"x")

    def testEntryTypes(self):
        with self.assertRaises(SchemaError):
            Schema((PositionalSpec("x"),))
        with self.assertRaises(SchemaError):
            Schema((), (OptionSpec("x", short="x"),))

    def testDuplicateOptionName(self):
        with self.assertRaises(SchemaError):
            Schema((OptionSpec("x", short="x"), OptionSpec("x", short="y")))

    def testDuplicateToken(self):
        with self.assertRaises(SchemaError) as context:
            Schema((OptionSpec("a", long="same"), OptionSpec("b", aliases=("same",))))
        self.assertIn("'--same'", context.exception.message)

    def testHelpTokensReserved(self):
        with self.assertRaises(SchemaError):
            Schema((OptionSpec("host", short="h"),))
        with self.assertRaises(SchemaError):
            Schema((OptionSpec("manual", long="help"),))
        Schema((OptionSpec("host", short="h"),), help=False)

    def testPositionalNameClash(self):
        with self.assertRaises(SchemaError):
            Schema((OptionSpec("path", short="p"),), (PositionalSpec("path"),))
        with self.assertRaises(SchemaError):
            Schema((), (PositionalSpec("a"), PositionalSpec("a")))

    def testVariadicMustBeLast(self):
        with self.assertRaises(SchemaError):
            Schema((), (PositionalSpec("rest", variadic=True), PositionalSpec("tail")))
        with self.assertRaises(SchemaError):
            Schema((), (PositionalSpec("a", variadic=True), PositionalSpec("b", variadic=True)))

    def testRequiredAfterOptional(self):
        with self.assertRaises(SchemaError):
            Schema((), (PositionalSpec("a", required=False), PositionalSpec("b")))
        with self.assertRaises(SchemaError):
            Schema((), (PositionalSpec("a", required=False), PositionalSpec("b", variadic=True, required=True)))


class TestIntrospection(TestCase):
    """Read-only views over a valid schema."""

    def setUp(self):
        self.block = OptionSpec("block-size", short="b", long="block-size", aliases=("bs",), type=int, default=12)
        self.quiet = OptionSpec("quiet", short="q", flag=True)
        self.schema = Schema(
            [self.block, self.quiet],
            [PositionalSpec("out_file"), PositionalSpec("in_file", required=False), PositionalSpec("words", variadic=True)],
            prog="example",
        )

    def testOptionsAndSlots(self):
        self.assertEqual(self.schema.options, (self.block, self.quiet))
        self.assertEqual([spec.name for spec in self.schema.positionals], ["out_file", "in_file"])
        self.assertEqual(self.schema.variadic.name, "words")
        self.assertEqual([spec.name for spec in self.schema.slots], ["out_file", "in_file", "words"])
        self.assertEqual(self.schema.required, 1)

    def testSwitches(self):
        self.assertEqual(set(self.schema.switches), {"-b", "--block-size", "--bs", "-q"})
        self.assertIs(self.schema.switches["--bs"], self.block)
        with self.assertRaises(TypeError):
            self.schema.switches["-x"] = self.quiet

    def testLookups(self):
        self.assertIs(self.schema.option("quiet"), self.quiet)
        self.assertEqual(self.schema.positional("words").name, "words")
        with self.assertRaises(KeyError):
            self.schema.option("words")
        with self.assertRaises(KeyError):
            self.schema.positional("quiet")

    def testPoliciesAndMetadata(self):
        self.assertEqual(self.schema.unknown, "reject")
        self.assertEqual(self.schema.extras, "ignore")
        self.assertTrue(self.schema.permute)
        self.assertTrue(self.schema.help)
        self.assertEqual(self.schema.prog, "example")
        self.assertIsNone(self.schema.descr)

    def testNoVariadic(self):
        schema = Schema()
        self.assertIsNone(schema.variadic)
        self.assertEqual(schema.slots, ())
        self.assertEqual(schema.required, 0)

    def testRepr(self):
        self.assertTrue(repr(self.schema).startswith("schema(prog='example', options=["))


if __name__ == "__main__":
    unittest.main()
