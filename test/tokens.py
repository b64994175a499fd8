# python
"""
Tokens module behavioral tests (scanner classification and Input queries).

Scope
- Validate the classification of positionals, long options and shortcut clusters.
- Validate the "--" terminator and bucket accumulation.
- Validate scan faults and their context.
- Validate Input queries and clone().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase
from unittest.mock import patch

from argscan import Input, Option, Mode, scan
from argscan.faults import (
    FaultCode,
    ScanError,
    MalformedAssignmentError,
    EmptyShortcutError,
    InvalidShortcutError,
)


class TestScanner(TestCase):
    """Behavioral tests for token classification."""

    def testPositionalsOnly(self):
        i = scan(["a", "b"])
        self.assertEqual(i.arguments, ("a", "b"))
        self.assertEqual(dict(i.options), {})
        self.assertEqual(dict(i.shortcuts), {})

    def testShellLikeString(self):
        i = scan("copy 'my file.txt' --to=dest")
        self.assertEqual(i.arguments, ("copy", "my file.txt"))
        self.assertEqual(dict(i.options), {"to": ("dest",)})

    def testDefaultsToProcessArguments(self):
        with patch.object(sys, "argv", ["prog", "x", "--flag"]):
            i = Input()
        self.assertEqual(i.arguments, ("x",))
        self.assertEqual(dict(i.options), {"flag": ()})

    def testTokensMustBeStrings(self):
        with self.assertRaises(TypeError):
            scan(["a", 1])
        with self.assertRaises(TypeError):
            scan(42)

    def testLongAssignmentSplitsAtFirstEquals(self):
        i = scan(["--define=a=b"])
        self.assertEqual(dict(i.options), {"define": ("a=b",)})

    def testLongAssignmentAllowsEmptyValue(self):
        i = scan(["--name="])
        self.assertEqual(dict(i.options), {"name": ("",)})

    def testOpenBucketAccumulatesUntilDash(self):
        i = scan(["x", "--tag", "a", "b", "-v", "c"])
        self.assertEqual(i.arguments, ("x",))
        self.assertEqual(dict(i.options), {"tag": ("a", "b")})
        self.assertEqual(dict(i.shortcuts), {"v": ("c",)})

    def testInlineValueKeepsAccumulating(self):
        i = scan(["--tag=a", "b"])
        self.assertEqual(dict(i.options), {"tag": ("a", "b")})

    def testRepeatedOptionReopensBucket(self):
        i = scan(["--tag", "a", "--other", "--tag", "b"])
        self.assertEqual(dict(i.options), {"tag": ("a", "b"), "other": ()})

    def testPlainTokensNeverBecomePositionalsAfterAnOption(self):
        i = scan(["--verbose", "file"])
        self.assertEqual(i.arguments, ())
        self.assertEqual(dict(i.options), {"verbose": ("file",)})

    def testTerminatorMakesRestPositional(self):
        i = scan(["--flag", "--", "-x", "--y", "z"])
        self.assertEqual(i.arguments, ("-x", "--y", "z"))
        self.assertEqual(dict(i.options), {"flag": ()})
        self.assertEqual(dict(i.shortcuts), {})

    def testOnlyFirstTerminatorIsSpecial(self):
        i = scan(["--", "--", "a"])
        self.assertEqual(i.arguments, ("--", "a"))

    def testShortcutCluster(self):
        i = scan(["-abc", "value"])
        self.assertEqual(dict(i.shortcuts), {"a": (), "b": (), "c": ("value",)})

    def testRepeatedShortcutInClusterIsRecordedOnce(self):
        i = scan(["-vv", "x"])
        self.assertEqual(dict(i.shortcuts), {"v": ("x",)})

    def testMalformedAssignment(self):
        for token in ("--=value", "--a b=c"):
            with self.subTest(token=token):
                with self.assertRaises(MalformedAssignmentError) as context:
                    scan(["x", token])
                fault = context.exception
                self.assertEqual(fault.code, FaultCode.MALFORMED_ASSIGNMENT)
                self.assertEqual(fault.options["token"], token)
                self.assertEqual(fault.options["index"], 2)

    def testEmptyShortcut(self):
        with self.assertRaises(EmptyShortcutError):
            scan(["-"])

    def testDashInsideCluster(self):
        with self.assertRaises(InvalidShortcutError):
            scan(["-a-b"])

    def testScanFaultsShareFamily(self):
        with self.assertRaises(ScanError):
            scan(["-"])


class TestInputQueries(TestCase):
    """Behavioral tests for Input read-only queries."""

    def setUp(self):
        self.verbose = Option("verbose", "v")
        self.tag = Option("tag", "t", Mode.COMPLEX | Mode.REQUIRED)
        self.quiet = Option("quiet")
        self.input = scan(["a", "b", "c", "--tag", "x", "-t", "y"])

    def testArgumentQueries(self):
        self.assertTrue(self.input.has_argument(0))
        self.assertFalse(self.input.has_argument(3))
        self.assertFalse(self.input.has_argument(-1))
        self.assertEqual(self.input.argument(1), "b")
        self.assertIsNone(self.input.argument(7))

    def testComplexArguments(self):
        self.assertEqual(self.input.complex_arguments(1), ("b", "c"))
        self.assertIsNone(self.input.complex_arguments(3))

    def testHasOptionByNameOrShortcut(self):
        self.assertTrue(self.input.has_option(self.tag))
        self.assertFalse(self.input.has_option(self.verbose))
        self.assertFalse(self.input.has_option(self.quiet))
        self.assertTrue(scan(["-v"]).has_option(self.verbose))

    def testOptionValuesLongFirst(self):
        self.assertEqual(self.input.option_values(self.tag), ("x", "y"))
        self.assertIsNone(self.input.option_values(self.verbose))
        self.assertEqual(scan(["-v"]).option_values(self.verbose), ())

    def testSnapshotsAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.input.options["tag"] = ()

    def testCloneDropsPositionalsAndOptions(self):
        clone = self.input.clone(1, self.tag)
        self.assertEqual(clone.arguments, ("b", "c"))
        self.assertEqual(dict(clone.options), {})
        self.assertEqual(dict(clone.shortcuts), {})

    def testCloneLeavesSourceUntouched(self):
        before = scan(["a", "b", "c", "--tag", "x", "-t", "y"])
        self.input.clone(2, self.tag)
        self.assertEqual(self.input, before)

    def testPlainCloneIsEqualButIndependent(self):
        clone = self.input.clone()
        self.assertEqual(clone, self.input)
        self.assertIsNot(clone, self.input)
        clone._options["tag"].append("z")
        self.assertEqual(self.input.options["tag"], ("x",))

    def testCloneRejectsNegativeStart(self):
        with self.assertRaises(TypeError):
            self.input.clone(-1)

    def testInputIsUnhashable(self):
        with self.assertRaises(TypeError):
            hash(self.input)

    def testRepr(self):
        self.assertEqual(
            repr(scan(["a", "-v"])),
            "input(arguments=('a',), options={}, shortcuts={'v': ()})",
        )


if __name__ == "__main__":
    unittest.main()
