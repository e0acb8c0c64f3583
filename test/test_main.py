# python
"""
Command-line wrapper tests.

Scope
- Exit codes: 0 bindings, 1 help or parse error, 2 invalid schema document.
- Output streams: bindings and usage on stdout, reports on stderr.
- The wrapper's own options stop at SCHEMA (strict order).

Conventions
- Test method names follow CamelCase per project convention.
- Streams are captured with contextlib redirection; no subprocess is spawned.
"""

from __future__ import annotations

import contextlib
import io
import json
import os
import tempfile
import unittest
from unittest import TestCase

from argschema.__main__ import main

EXAMPLE = """
prog = "example"

[[option]]
name = "block-size"
short = "b"
long = "block-size"
type = "int"
default = 12

[[option]]
name = "quiet"
short = "q"
flag = true

[[positional]]
name = "out_file"

[[positional]]
name = "words"
variadic = true
"""


class TestMain(TestCase):
    """Exit codes and streams of argschema SCHEMA [ARGS...]."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.directory.cleanup)
        self.path = os.path.join(self.directory.name, "example.toml")
        with open(self.path, "w", encoding="utf-8") as file:
            file.write(EXAMPLE)

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            code = main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def testJsonBindings(self):
        code, stdout, _ = self.run_main("--json", self.path, "-b", "20", "out.txt", "foo")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(stdout), {
            "options": {"block-size": 20, "quiet": None},
            "positionals": {"out_file": "out.txt"},
            "variadic": ["foo"],
        })

    def testPrettyBindings(self):
        code, stdout, _ = self.run_main("--no-color", self.path, "-q", "out.txt")
        self.assertEqual(code, 0)
        self.assertIn("out.txt", stdout)
        self.assertIn("block-size", stdout)

    def testTargetHelp(self):
        code, stdout, _ = self.run_main(self.path, "--help")
        self.assertEqual(code, 1)
        self.assertIn("usage: example", stdout)

    def testProgOverride(self):
        code, stdout, _ = self.run_main("--prog", "copier", self.path, "-h")
        self.assertEqual(code, 1)
        self.assertIn("usage: copier", stdout)

    def testWrapperHelp(self):
        code, stdout, _ = self.run_main("--help")
        self.assertEqual(code, 1)
        self.assertIn("usage: argschema", stdout)

    def testTargetParseError(self):
        code, stdout, stderr = self.run_main(self.path, "--nope")
        self.assertEqual(code, 1)
        self.assertEqual(stdout, "")
        self.assertIn("unknown option", stderr)
        self.assertIn("usage: example", stderr)

    def testWrapperParseError(self):
        code, _, stderr = self.run_main()
        self.assertEqual(code, 1)
        self.assertIn("missing positional argument SCHEMA", stderr)

    def testWrapperOptionsStopAtSchema(self):
        code, _, stderr = self.run_main(self.path, "--json", "out.txt")
        self.assertEqual(code, 1)
        self.assertIn("--json", stderr)

    def testMissingSchemaDocument(self):
        code, _, stderr = self.run_main(os.path.join(self.directory.name, "missing.toml"))
        self.assertEqual(code, 2)
        self.assertIn("cannot read schema document", stderr)

    def testInvalidSchemaDocument(self):
        with open(self.path, "w", encoding="utf-8") as file:
            file.write("[[option]]\nname = \"x\"\n")
        code, _, stderr = self.run_main(self.path)
        self.assertEqual(code, 2)
        self.assertIn("invalid schema document", stderr.lower())


if __name__ == "__main__":
    unittest.main()
