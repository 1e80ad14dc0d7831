"""
Tests for the internal helpers.

This module verifies:
- The `Unset` sentinel (singleton identity, falsy semantics, finality, unions).
- `coalesce` preserving legitimate falsy values.
- `rename` in both call forms and its argument validation.
- `mirror` returning copies of containers and None for unset slots.
"""
import copy
import unittest
from unittest import TestCase

from argtree.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the exported instance on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFinal(self) -> None:
        """
        The sentinel type cannot be subclassed.
        """
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnionInIsinstance(self) -> None:
        """
        `str | Unset` and `Unset | str` both work as isinstance targets.
        """
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance(Unset, Unset | str)
        self.assertNotIsInstance(3, str | Unset)


class CoalesceTest(TestCase):
    def testUnsetUsesDefault(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalsyValuesArePreserved(self) -> None:
        for value in (None, 0, False, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    def testDirectForm(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self) -> None:
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename(len, "name")
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("name")(1)


class MirrorTest(TestCase):
    class Holder:
        items = mirror("items")
        mapping = mirror("mapping")
        slot = mirror("slot")
        text = mirror("text")

        def __init__(self):
            self._items = ["a", ["b"]]
            self._mapping = {"k": ("v",)}
            self._slot = Unset
            self._text = "text"

    def testContainersAreCopied(self) -> None:
        holder = self.Holder()
        items = holder.items
        items[1].append("c")
        self.assertEqual(holder.items, ["a", ["b"]])
        self.assertEqual(holder.mapping, {"k": ["v"]})

    def testUnsetReadsAsNone(self) -> None:
        self.assertIsNone(self.Holder().slot)

    def testStringsAreNotSplit(self) -> None:
        self.assertEqual(self.Holder().text, "text")

    def testReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.Holder().items = []  # type: ignore[misc]

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
