"""
Field specification tests (Option, Positional and the factories).

Scope
- Construction-time normalization and type/shape checks.
- Read-only public surface and representation.

Conventions
- Test method names follow CamelCase per project convention.
- Structural rules (alias length, env/multi) belong to the normalizer tests.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from rich.text import Text

from argtree import Option, Positional, env, flag, option, positional


class TestOption(TestCase):
    """Option construction and surface."""

    def testValuedDefaults(self):
        spec = option("count")
        self.assertEqual(spec.kind, "valued")
        self.assertTrue(spec.valued)
        self.assertIsNone(spec.alias)
        self.assertIsNone(spec.envvar)
        self.assertIsNone(spec.parse)
        self.assertIsNone(spec.default)
        self.assertFalse(spec.multi)
        self.assertFalse(spec.required)

    def testKeyIsStripped(self):
        self.assertEqual(option("  count ").key, "count")

    def testFlagFactory(self):
        spec = flag("verbose", alias="v", descr="Talk more.")
        self.assertEqual(spec.kind, "flag")
        self.assertFalse(spec.valued)
        self.assertEqual(spec.alias, "v")
        self.assertEqual(spec.descr, "Talk more.")

    def testEnvFactory(self):
        spec = env("token", "API_TOKEN", required=True)
        self.assertEqual(spec.kind, "env")
        self.assertEqual(spec.envvar, "API_TOKEN")
        self.assertTrue(spec.required)

    def testParseAndDefaultAreKept(self):
        spec = option("count", parse=int, default=1)
        self.assertIs(spec.parse, int)
        self.assertEqual(spec.default, 1)

    def testInvalidKindRejected(self):
        with self.assertRaises(ValueError):
            Option("count", "switch")

    def testKeyTypeAndShapeRejected(self):
        with self.assertRaises(TypeError):
            option(3)
        with self.assertRaises(ValueError):
            option("   ")
        with self.assertRaises(ValueError):
            option("-count")
        with self.assertRaises(ValueError):
            option("count=1")

    def testParseMustBeCallable(self):
        with self.assertRaises(TypeError):
            option("count", parse="int")

    def testEmptyDescriptionRejected(self):
        with self.assertRaises(ValueError):
            option("count", descr=" ")
        self.assertIsInstance(option("count", descr=Text("rich")).descr, Text)

    def testEmptyEnvvarRejected(self):
        with self.assertRaises(ValueError):
            env("token", "")

    def testFlagRejectsValueSettings(self):
        for keywords in (
                {"multi": True},
                {"required": True},
                {"parse": int},
                {"envvar": "VERBOSE"},
                {"default": False},
        ):
            with self.subTest(keywords=keywords):
                with self.assertRaises(TypeError):
                    Option("verbose", "flag", **keywords)

    def testFieldsAreReadOnly(self):
        spec = option("count")
        with self.assertRaises(AttributeError):
            spec.key = "other"

    def testDeepcopyKeepsIdentity(self):
        spec = option("count")
        self.assertIs(copy.deepcopy(spec), spec)

    def testReprNamesType(self):
        self.assertTrue(repr(flag("verbose")).startswith("option(kind='flag', key='verbose'"))


class TestPositional(TestCase):
    """Positional construction and surface."""

    def testDefaults(self):
        spec = positional("path")
        self.assertIsInstance(spec, Positional)
        self.assertEqual(spec.key, "path")
        self.assertFalse(spec.multi)
        self.assertFalse(spec.required)
        self.assertIsNone(spec.default)

    def testMultiRequired(self):
        spec = positional("paths", multi=True, required=True, parse=str.upper)
        self.assertTrue(spec.multi)
        self.assertTrue(spec.required)
        self.assertIs(spec.parse, str.upper)

    def testHasNoOptionSurface(self):
        spec = positional("path")
        self.assertFalse(hasattr(spec, "alias"))
        self.assertFalse(hasattr(spec, "kind"))

    def testReprNamesType(self):
        self.assertEqual(
            repr(positional("path")),
            "positional(key='path', multi=False, required=False, default=None)",
        )


if __name__ == "__main__":
    unittest.main()
