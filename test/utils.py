"""
Tests for the internal utilities.

This module verifies:
- The Unset sentinel (singleton identity, falsy semantics, finality).
- coalesce() replacing only Unset.
- mirror() read-only views over containers.
- isoption() token classification and stringify() normalization.
"""
import copy
import unittest
from unittest import TestCase

from argtally.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor and the module constant are the same object.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(self.unset, Unset)

    def testFalsy(self) -> None:
        self.assertFalse(bool(Unset))
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testUnionWithTypes(self) -> None:
        """
        Unset takes part in isinstance() unions.
        """
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(None, str | Unset))

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for the helper functions.
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testRename(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")
        with self.assertRaises(TypeError):
            rename(5, "x")

    def testMirrorFreezesContainers(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testIsOption(self) -> None:
        for token in ("-n", "--count", "-help", "--ñ", "-n5"):
            with self.subTest(token=token):
                self.assertTrue(isoption(token))
        for token in ("-", "--", "-5", "-.5", "--1", "-_x", "file", "", "---x"):
            with self.subTest(token=token):
                self.assertFalse(isoption(token))
        with self.assertRaises(TypeError):
            isoption(5)

    def testStringify(self) -> None:
        self.assertEqual(stringify(True), "1")
        self.assertEqual(stringify(False), "0")
        self.assertEqual(stringify(10), "10")
        self.assertEqual(stringify(2.5), "2.5")
        self.assertEqual(stringify("01"), "01")


if __name__ == '__main__':
    unittest.main()
