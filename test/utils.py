"""
Utility helpers tests (sentinel, naming helpers, dotted path resolution).
"""
import os.path
import unittest
from unittest import TestCase

from helmsman.utils import Unset, UnsetType, coalesce, dashize, locate, pascalize, rename


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestNaming(TestCase):

    def testDashize(self):
        self.assertEqual(dashize("FooBar"), "foo-bar")
        self.assertEqual(dashize("fooBar"), "foo-bar")
        self.assertEqual(dashize("Deploy"), "deploy")
        self.assertEqual(dashize(""), "")

    def testPascalize(self):
        self.assertEqual(pascalize("greet_command"), "GreetCommand")
        self.assertEqual(pascalize("GreetCommand"), "GreetCommand")

    def testRenameDecorator(self):
        @rename("other")
        def original():
            pass

        self.assertEqual(original.__name__, "other")
        self.assertEqual(original.__qualname__, "other")


class TestLocate(TestCase):

    def testModuleAttribute(self):
        self.assertIs(locate("os.path.join"), os.path.join)

    def testNestedAttribute(self):
        self.assertIs(locate("helmsman.commands.Command.execute"), __import__("helmsman").Command.execute)

    def testBuiltin(self):
        self.assertIs(locate("len"), len)

    def testMissingAttribute(self):
        with self.assertRaises(LookupError):
            locate("os.path.nothing_here")

    def testMissingModule(self):
        with self.assertRaises(LookupError):
            locate("helmsman_missing_module.thing")

    def testMalformedPath(self):
        with self.assertRaises(LookupError):
            locate("not a path")

    def testNonString(self):
        with self.assertRaises(TypeError):
            locate(42)


if __name__ == "__main__":
    unittest.main()
