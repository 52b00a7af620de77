"""
Formatting module behavioral tests (usage line and help layout).

Scope
- Validate metavars, bracketing of optional items and option/positional order.
- Validate help sections, aliases, choices/default notes and fancy panels.

Conventions
- Test method names follow CamelCase per project convention.
- Renderables are captured with an in-memory rich Console (no colors).
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console
from rich.panel import Panel

from argtally import ArgumentParser, Argument
from argtally.formatting import metavar, usage, help


def render(renderable, width=120):
    console = Console(file=io.StringIO(), width=width, color_system=None, legacy_windows=False)
    console.print(renderable)
    return console.file.getvalue()


def build(**options):
    parser = ArgumentParser("Copies things.", prog="tool", colorful=False, **options)
    parser.add("a", "first input", 2)
    parser.add("b", "second input", 1, False, "x")
    parser.add("-n", "a number", 1, True, aliases=("--number",))
    parser.add("--cc", "three of them", 3, False, 9)
    parser.add("-l", "any amount", ..., False)
    parser.add("-v", "chatty", 0, False)
    parser.add("--level", "how hard", 1, False, 1, (1, 2, 3))
    return parser


class TestUsage(TestCase):
    """Usage line rendering."""

    def testMetavar(self):
        self.assertEqual(metavar(Argument("--count", "", 1, False)), "C")
        self.assertEqual(metavar(Argument("-n", "", 1, False)), "N")
        self.assertEqual(metavar(Argument("file", "", 1)), "file")

    def testUsageLine(self):
        parser = build()
        self.assertEqual(
            parser.usage().plain,
            "usage: tool -n N [--cc C C C] [-l L ...] [-v] [--level L] a a [b]",
        )

    def testUsageFunctionMatchesParser(self):
        parser = build()
        self.assertEqual(usage(parser.registry, "tool", colorful=False).plain, parser.usage().plain)

    def testEmptyRegistry(self):
        self.assertEqual(ArgumentParser(prog="tool").usage().plain, "usage: tool")


class TestHelp(TestCase):
    """Help rendering."""

    def testSections(self):
        output = render(build().help())
        self.assertIn("Copies things.", output)
        self.assertIn("usage: tool", output)
        self.assertIn("positional arguments:", output)
        self.assertIn("options:", output)
        self.assertLess(output.index("positional arguments:"), output.index("options:"))

    def testAliasesListedWithCanonicalName(self):
        self.assertIn("-n, --number", render(build().help()))

    def testChoicesAndDefaults(self):
        output = render(build().help())
        self.assertIn("how hard {1,2,3} (default: 1)", output)
        self.assertIn("three of them (default: 9)", output)
        self.assertNotIn("(default: )", output)

    def testFancyPanel(self):
        parser = build(fancy=True)
        self.assertIsInstance(parser.help(), Panel)
        self.assertIn("TOOL HELP", render(parser.help()))

    def testHelpFunction(self):
        parser = build()
        self.assertEqual(render(help(parser.registry, "tool", "Copies things.", colorful=False)), render(parser.help()))


if __name__ == "__main__":
    unittest.main()
