"""
Faults module behavioral tests (structure, triggering, rendering).

Scope
- Validate fault options exposure, copying with overrides and pattern matching.
- Validate trigger(): raising outside shell mode, render-and-exit in shell mode.
- Validate rich rendering and host overrides (__prog__, __codes__, __docs__).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with an in-memory rich Console (no colors).
"""

from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console
from rich.panel import Panel

from argtally import (
    ArgumentParser,
    ArgumentFault,
    ArgumentKeyError,
    ArgumentPropertyError,
    FaultCode,
    trigger,
    getdoc,
)


def render(renderable):
    console = Console(file=io.StringIO(), width=120, color_system=None, legacy_windows=False)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultStructure(TestCase):
    """Fault options and copies."""

    def testOptionsAreReadOnly(self):
        fault = ArgumentKeyError("boom", key="--x", code=FaultCode.UNKNOWN_OPTION)
        self.assertEqual(fault.key, "--x")
        self.assertEqual(fault.code, FaultCode.UNKNOWN_OPTION)
        self.assertIsNone(fault.hint)
        with self.assertRaises(TypeError):
            fault.options["key"] = "--y"

    def testReplaceKeepsTypeAndMessage(self):
        fault = ArgumentPropertyError("boom", key="a", property="required")
        clone = copy.replace(fault, shell=False, property="expectCount")
        self.assertIsInstance(clone, ArgumentPropertyError)
        self.assertEqual(str(clone), "boom")
        self.assertEqual(clone.property, "expectCount")
        self.assertEqual(fault.property, "required")

    def testMatchArgs(self):
        match ArgumentPropertyError("boom", key="a", property="required"):
            case ArgumentKeyError(key):
                self.fail("matched the wrong kind %r" % key)
            case ArgumentPropertyError(key, property):
                self.assertEqual((key, property), ("a", "required"))

    def testKindsShareBase(self):
        self.assertTrue(issubclass(ArgumentKeyError, ArgumentFault))
        self.assertTrue(issubclass(ArgumentFault, Exception))


class TestTrigger(TestCase):
    """trigger() and shell mode."""

    def testTriggerRaisesCopy(self):
        fault = ArgumentKeyError("boom", key="--x")
        with self.assertRaises(ArgumentKeyError) as context:
            trigger(fault, prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")
        self.assertEqual(context.exception.key, "--x")

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("boom"))

    def testShellModeRendersAndExits(self):
        parser = ArgumentParser(prog="tool", shell=True, colorful=False)
        parser.add("-s", "a required string", 1, True)
        stream = io.StringIO()
        with mock.patch("argtally.faults.console", Console(file=stream, width=120, color_system=None)):
            with self.assertRaises(SystemExit) as context:
                parser.parse(["tool"])
        self.assertEqual(context.exception.code, 1)
        output = stream.getvalue()
        self.assertIn("usage: tool -s S", output)
        self.assertIn("required argument '-s' was not given", output)
        self.assertIn(str(int(FaultCode.MISSING_REQUIRED)), output)

    def testShellModeConversionFault(self):
        parser = ArgumentParser(prog="tool", shell=True, colorful=False)
        parser.add("-n", "", 1, False, "x")
        parser.parse(["tool"])
        stream = io.StringIO()
        with mock.patch("argtally.faults.console", Console(file=stream, width=120, color_system=None)):
            with self.assertRaises(SystemExit):
                parser.value("-n", 0, int)
        self.assertIn("cannot convert 'x' to int64", stream.getvalue())


class TestRendering(TestCase):
    """Rich rendering of faults."""

    def testHeaderAndHint(self):
        fault = ArgumentKeyError(
            "unknown option '--x'",
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="known options are '-n'",
            prog="tool",
            colorful=False,
        )
        output = render(fault)
        self.assertIn("[ tool — 11112 | Unknown Option ]", output)
        self.assertIn("unknown option '--x'", output)
        self.assertIn("→ known options are '-n'", output)

    def testFancyUsesPanel(self):
        fault = ArgumentKeyError("boom", prog="tool", fancy=True)
        self.assertIsInstance(fault.__rich__(), Panel)

    def testHostOverrides(self):
        main = sys.modules["__main__"]
        with (
            mock.patch.object(main, "__prog__", "hosted", create=True),
            mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}, create=True),
            mock.patch.object(main, "__docs__", {FaultCode.UNKNOWN_OPTION: "see the manual"}, create=True),
        ):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")
            self.assertEqual(getdoc(FaultCode.UNKNOWN_OPTION), "see the manual")
            self.assertIsNone(getdoc(FaultCode.UNKNOWN_ARGUMENT))
            parser = ArgumentParser(colorful=False)
            fault = parser.attempt(["tool", "--x"])
            output = render(copy.replace(fault, colorful=False))
        self.assertIn("hosted", output)
        self.assertIn("E-UNKNOWN", output)
        self.assertIn("see the manual", output)

    def testNormalizeWithoutHostMapping(self):
        self.assertEqual(FaultCode.INVALID_CHOICE.normalize(), "11124")

    def testGetdocRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(11101)


if __name__ == "__main__":
    unittest.main()
