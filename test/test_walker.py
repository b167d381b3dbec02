"""
Tree walker tests (binding rules and parse-time faults).

Conventions
- Test method names follow CamelCase per project convention.
- Programs are normalized once per test through _bind.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtree import (
    Command,
    DuplicatedOptionError,
    FaultCode,
    FlagAssignmentError,
    FlagUsageError,
    OptionValueRequiredError,
    ParseError,
    Program,
    Scalar,
    Sequence,
    Switch,
    UnexpectedArgumentError,
    UnknownOptionError,
    bind,
    flag,
    normalize,
    option,
    positional,
    tokenize,
)


def _program():
    return Program(
        "git",
        options=[
            flag("verbose", alias="v"),
            flag("green", alias="g"),
            option("red", alias="r", multi=True),
            option("name", alias="n"),
        ],
        subcommands=[
            Command("add", options=[flag("force", alias="f")], positionals=[positional("paths", multi=True)]),
            Command("remove", positionals=[positional("path", required=True)]),
        ],
        colorful=False,
    )


def _bind(*arguments, program=None):
    return bind(tokenize(arguments), normalize(program or _program()))


class TestOptions(TestCase):
    """Option and flag tokens."""

    def testFlagBindsSwitch(self):
        result = _bind("-v", "--green")
        self.assertEqual(result.values, {"verbose": Switch(), "green": Switch()})

    def testRepeatedFlagIsAccepted(self):
        self.assertEqual(_bind("-v", "-v").values, {"verbose": Switch()})

    def testCombinedFlags(self):
        self.assertEqual(_bind("-vg").values, {"verbose": Switch(), "green": Switch()})

    def testFlagWithInlineValueFails(self):
        for argument in ("--verbose=yes", "-v=yes"):
            with self.subTest(argument=argument):
                with self.assertRaises(FlagAssignmentError) as context:
                    _bind(argument)
                self.assertIs(context.exception.code, FaultCode.FLAG_ASSIGNMENT)

    def testValuedOptionInsideCombinedFlagsFails(self):
        with self.assertRaises(FlagUsageError):
            _bind("-gr")

    def testInlineValue(self):
        self.assertEqual(_bind("--name=alice").values, {"name": Scalar("alice")})
        self.assertEqual(_bind("-n=alice").values, {"name": Scalar("alice")})

    def testLookaheadValue(self):
        self.assertEqual(_bind("--name", "alice").values, {"name": Scalar("alice")})

    def testInlineValueMayStartWithDash(self):
        self.assertEqual(_bind("--name=-5").values, {"name": Scalar("-5")})

    def testDashValueIsNotTakenByLookahead(self):
        with self.assertRaises(OptionValueRequiredError):
            _bind("--name", "-5")

    def testMissingValueAtEnd(self):
        with self.assertRaises(OptionValueRequiredError):
            _bind("--name")

    def testMissingValueBeforeOption(self):
        with self.assertRaises(OptionValueRequiredError):
            _bind("--name", "--verbose")

    def testMultiAccumulatesInOrder(self):
        self.assertEqual(_bind("-r", "a", "--red=b", "-r", "c").values, {"red": Sequence(["a", "b", "c"])})

    def testSingleBoundTwiceFails(self):
        with self.assertRaises(DuplicatedOptionError) as context:
            _bind("--name=a", "-n", "b")
        self.assertEqual(context.exception.options["key"], "name")

    def testMissingValueReportedBeforeDuplicate(self):
        with self.assertRaises(OptionValueRequiredError) as context:
            _bind("--name", "a", "--name")
        self.assertEqual(context.exception.options["key"], "name")

    def testUnknownOption(self):
        with self.assertRaises(UnknownOptionError) as context:
            _bind("--colour")
        self.assertEqual(context.exception.options["key"], "colour")
        self.assertIn("'--colour'", context.exception.message)
        self.assertTrue(context.exception.message.startswith("first token: "))


class TestCommands(TestCase):
    """Subcommand descent and positional binding."""

    def testSubcommandOptionAfterSubcommand(self):
        result = _bind("add", "--force")
        self.assertEqual(result.command_path, ("git", "add"))
        self.assertEqual(result.child.values, {"force": Switch()})

    def testSubcommandOptionBeforeSubcommandIsUnknown(self):
        with self.assertRaises(UnknownOptionError):
            _bind("--force", "add")

    def testSiblingOptionIsUnknown(self):
        with self.assertRaises(UnknownOptionError):
            _bind("remove", "--force")

    def testInheritedOptionLandsOnDeclaringLevel(self):
        result = _bind("add", "-v", "a.txt")
        self.assertEqual(result.values, {"verbose": Switch()})
        self.assertEqual(result.child.values, {"paths": Sequence(["a.txt"])})
        self.assertEqual(result.child.depth, 1)

    def testMultiPositionalAccumulates(self):
        result = _bind("add", "a.txt", "b.txt")
        self.assertEqual(result.child.values["paths"], Sequence(["a.txt", "b.txt"]))

    def testSinglePositionalsAdvance(self):
        program = Program("cp", positionals=[positional("source"), positional("target")])
        result = _bind("a", "b", program=program)
        self.assertEqual(result.values, {"source": Scalar("a"), "target": Scalar("b")})

    def testSubcommandOnlyMatchesFirstPositional(self):
        program = Program(
            "tool",
            positionals=[positional("first"), positional("second")],
            subcommands=[Command("add")],
        )
        result = _bind("x", "add", program=program)
        self.assertEqual(result.command_path, ("tool",))
        self.assertEqual(result.values["second"], Scalar("add"))

    def testUnexpectedArgument(self):
        with self.assertRaises(UnexpectedArgumentError) as context:
            _bind("remove", "a.txt", "b.txt")
        self.assertEqual(context.exception.options["value"], "b.txt")

    def testUnknownCommandIsUnexpectedArgument(self):
        with self.assertRaises(UnexpectedArgumentError):
            _bind("push")

    def testRequiredChecksAreDeferred(self):
        result = _bind("remove")
        self.assertEqual(result.command_path, ("git", "remove"))
        self.assertEqual(result.child.values, {})

    def testNoArguments(self):
        result = _bind()
        self.assertEqual(result.command_path, ("git",))
        self.assertEqual(result.values, {})


class TestFaultSnapshots(TestCase):
    """Faults carry a frozen copy of the partial tree."""

    def testSnapshotShowsActiveCommand(self):
        with self.assertRaises(ParseError) as context:
            _bind("-v", "remove", "a.txt", "b.txt")
        error = context.exception
        self.assertEqual(error.path, ("git", "remove"))
        self.assertEqual(error.program, "git")
        self.assertEqual(error.result.values, {"verbose": Switch()})
        self.assertEqual(error.result.child.values, {"path": Scalar("a.txt")})

    def testSnapshotIsIndependent(self):
        with self.assertRaises(ParseError) as first:
            _bind("-r", "a", "--bogus")
        snapshot = first.exception.result
        snapshot.values["red"].raw.append("b")
        with self.assertRaises(ParseError) as second:
            _bind("-r", "a", "--bogus")
        self.assertEqual(second.exception.result.values["red"], Sequence(["a"]))

    def testFaultCarriesRenderingSwitches(self):
        with self.assertRaises(ParseError) as context:
            _bind("--bogus")
        self.assertFalse(context.exception.options["colorful"])
        self.assertFalse(context.exception.options["fancy"])


if __name__ == "__main__":
    unittest.main()
