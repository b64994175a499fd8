# python
"""
Concrete module behavioral tests (resolved, read-only results).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argscan import Concrete


class TestConcrete(TestCase):
    """Behavioral tests for Concrete results."""

    def setUp(self):
        self.concrete = Concrete({0: "build", 1: ("a", "b")}, {"verbose": None, "tag": ("x",)})

    def testArgumentQueries(self):
        self.assertTrue(self.concrete.has_argument(0))
        self.assertFalse(self.concrete.has_argument(2))
        self.assertEqual(self.concrete.argument(0), "build")
        self.assertEqual(self.concrete.argument(1), ("a", "b"))
        self.assertIsNone(self.concrete.argument(2))

    def testFlagIsPresentWithoutValue(self):
        self.assertTrue(self.concrete.has_option("verbose"))
        self.assertIsNone(self.concrete.option("verbose"))
        self.assertFalse(self.concrete.has_option("quiet"))
        self.assertIsNone(self.concrete.option("quiet"))

    def testSourceMappingsAreCopied(self):
        arguments = {0: "build"}
        concrete = Concrete(arguments)
        arguments[0] = "clean"
        self.assertEqual(concrete.argument(0), "build")

    def testSnapshotsAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.concrete.options["quiet"] = None
        with self.assertRaises(AttributeError):
            self.concrete.arguments = {}

    def testListValuesAreFrozen(self):
        concrete = Concrete({0: ["a", "b"]})
        self.assertEqual(concrete.argument(0), ("a", "b"))

    def testEquality(self):
        self.assertEqual(Concrete({0: "a"}), Concrete([(0, "a")]))
        self.assertNotEqual(Concrete({0: "a"}), Concrete({0: "a"}, {"v": None}))
        with self.assertRaises(TypeError):
            hash(Concrete())

    def testRepr(self):
        self.assertEqual(repr(Concrete({0: "a"}, {"v": None})), "concrete(arguments={0: 'a'}, options={'v': None})")


if __name__ == "__main__":
    unittest.main()
