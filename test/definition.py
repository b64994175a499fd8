# python
"""
Definition module behavioral tests (schema registry and synopsis).

Scope
- Validate structural invariants enforced while arguments and options are added.
- Validate lookups by name and by shortcut.
- Validate short and full synopsis rendering.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Definition, Argument, Option, Mode).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argscan import Definition, Argument, Option, Mode
from argscan.faults import (
    FaultCode,
    DuplicateArgumentError,
    DuplicateOptionError,
    DuplicateShortcutError,
    ArgumentOrderError,
    UnknownOptionError,
)


class TestDefinitionSchema(TestCase):
    """Behavioral tests for schema construction."""

    def testEmptyDefinition(self):
        d = Definition()
        self.assertEqual(dict(d.arguments), {})
        self.assertEqual(dict(d.options), {})
        self.assertEqual(d.required_count, 0)
        self.assertFalse(d.has_complex)
        self.assertFalse(d.has_optional)

    def testMixedDefinitionsKeepArgumentOrder(self):
        d = Definition(
            Argument("source", Mode.REQUIRED),
            Option("verbose", "v"),
            Argument("target"),
        )
        self.assertEqual(list(d.arguments), ["source", "target"])
        self.assertEqual(list(d.options), ["verbose"])
        self.assertEqual(dict(d.shortcuts), {"v": "verbose"})
        self.assertEqual(d.required_count, 1)
        self.assertTrue(d.has_optional)

    def testDefinitionsMustBeDescriptors(self):
        with self.assertRaises(TypeError):
            Definition("source")

    def testDuplicateArgument(self):
        with self.assertRaises(DuplicateArgumentError) as context:
            Definition(Argument("source"), Argument("source"))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_ARGUMENT)

    def testNothingAfterComplexArgument(self):
        with self.assertRaises(ArgumentOrderError):
            Definition(Argument("files", Mode.COMPLEX), Argument("target"))

    def testRequiredAfterOptionalArgument(self):
        with self.assertRaises(ArgumentOrderError):
            Definition(Argument("source"), Argument("target", Mode.REQUIRED))

    def testDuplicateOption(self):
        with self.assertRaises(DuplicateOptionError):
            Definition(Option("verbose"), Option("verbose", "v"))

    def testDuplicateShortcut(self):
        with self.assertRaises(DuplicateShortcutError) as context:
            Definition(Option("verbose", "v"), Option("version", "v"))
        self.assertEqual(context.exception.options["input"], "v")

    def testFailedAdditionKeepsEarlierEntries(self):
        d = Definition(Argument("source"))
        with self.assertRaises(DuplicateArgumentError):
            d.add_argument(Argument("source"))
        self.assertEqual(list(d.arguments), ["source"])

    def testSetArgumentsReplacesEverything(self):
        d = Definition(Argument("files", Mode.COMPLEX | Mode.REQUIRED))
        d.set_arguments(Argument("source"))
        self.assertEqual(list(d.arguments), ["source"])
        self.assertFalse(d.has_complex)
        self.assertEqual(d.required_count, 0)

    def testSetOptionsReplacesShortcuts(self):
        d = Definition(Option("verbose", "v"))
        d.set_options(Option("version", "v"))
        self.assertEqual(dict(d.shortcuts), {"v": "version"})

    def testOptionLookups(self):
        verbose = Option("verbose", "v")
        d = Definition(verbose)
        self.assertTrue(d.has_option("verbose"))
        self.assertTrue(d.has_shortcut("v"))
        self.assertFalse(d.has_shortcut("verbose"))
        self.assertIs(d.option("verbose"), verbose)
        self.assertIs(d.shortcut("v"), verbose)

    def testUnknownOptionLookups(self):
        d = Definition(Option("verbose", "v"))
        with self.assertRaises(UnknownOptionError):
            d.option("quiet")
        with self.assertRaises(UnknownOptionError):
            d.shortcut("q")

    def testSnapshotsAreReadOnly(self):
        d = Definition(Option("verbose"))
        with self.assertRaises(TypeError):
            d.options["quiet"] = Option("quiet")


class TestDefinitionSynopsis(TestCase):
    """Behavioral tests for usage synopsis rendering."""

    def testEmptySynopsis(self):
        self.assertEqual(Definition().synopsis(), "")
        self.assertEqual(Definition().synopsis(True), "")

    def testFullOptionForms(self):
        d = Definition(
            Option("output", "o", Mode.REQUIRED),
            Option("level", mode=Mode.OPTIONAL, default="1"),
            Option("verbose", "v"),
        )
        self.assertEqual(
            d.synopsis(),
            "[-o|--output=OUTPUT] [--level[=LEVEL]] [-v|--verbose]",
        )

    def testShortOptionsCollapse(self):
        d = Definition(Option("verbose", "v"), Argument("source", Mode.REQUIRED))
        self.assertEqual(d.synopsis(short=True), "[options] [--] <source>")

    def testNestedOptionalArguments(self):
        d = Definition(
            Argument("src", Mode.REQUIRED),
            Argument("dst"),
            Argument("extra", Mode.COMPLEX),
        )
        self.assertEqual(d.synopsis(), "<src> [<dst> [<extra>...]]")

    def testOptionsAndArgumentsSeparator(self):
        d = Definition(Option("verbose", "v"), Argument("files", Mode.REQUIRED | Mode.COMPLEX))
        self.assertEqual(d.synopsis(), "[-v|--verbose] [--] <files>...")

    def testRepr(self):
        self.assertTrue(repr(Definition(Argument("source"))).startswith("definition(arguments=("))


if __name__ == "__main__":
    unittest.main()
