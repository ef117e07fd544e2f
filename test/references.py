"""
Reference classification and name derivation tests.

Scope
- Each callback shape lands in the expected CommandReference variant.
- Default names follow the routine and class naming rules.
- Invalid callbacks fail with InvalidCommandError.

Conventions
- Test method names follow CamelCase per project convention.
"""
import functools
import importlib
import sys
import tempfile
import types
import unittest
from pathlib import Path
from unittest import TestCase, mock

from helmsman import (
    Command,
    HelpCommand,
    ClassReference,
    FunctionReference,
    InstanceReference,
    ClosureReference,
    InvalidCommandError,
    reference,
    derive,
)


class FooBarCommand(Command):
    def execute(self, args, options):
        return "foo-bar"


class Deploy:
    def __init__(self, dispatcher):
        self.dispatcher = dispatcher

    def execute(self, args, options):
        return "deploy"


class HTTPServerCommand(Command):
    pass


class NotACommand:
    pass


def say_hello(args, options, dispatcher):
    return "hello"


def _private_task_(args, options, dispatcher):
    return "private"


class TestNameDerivation(TestCase):
    """Default names derived from each callback shape."""

    def testClassSuffixStripped(self):
        self.assertEqual(derive(FooBarCommand), "foo-bar")

    def testClassWithoutSuffix(self):
        self.assertEqual(derive(Deploy), "deploy")

    def testAcronymsSplitPerLetter(self):
        self.assertEqual(derive(HTTPServerCommand), "h-t-t-p-server")

    def testDottedClassPathUsesLastSegment(self):
        self.assertEqual(derive("helmsman.commands.HelpCommand"), "help")

    def testPackageLevelClassPath(self):
        self.assertEqual(derive("helmsman.HelpCommand"), "help")

    def testInstanceUsesRuntimeType(self):
        self.assertEqual(derive(FooBarCommand(None)), "foo-bar")

    def testFunctionUnderscoresBecomeHyphens(self):
        self.assertEqual(derive(say_hello), "say-hello")

    def testFunctionOuterHyphensTrimmed(self):
        self.assertEqual(derive(_private_task_), "private-task")

    def testDottedFunctionPath(self):
        self.assertEqual(derive("os.path.join"), "join")

    def testDerivationIsDeterministic(self):
        self.assertEqual(derive(FooBarCommand), derive(FooBarCommand))

    def testBareCommandClassHasNoName(self):
        with self.assertRaises(InvalidCommandError):
            derive(Command)

    def testClosureWithoutAliasRejected(self):
        with self.assertRaises(InvalidCommandError) as context:
            derive(lambda args, options, dispatcher: None)
        self.assertIn("alias", str(context.exception))


class TestClassification(TestCase):
    """Each callback shape maps to one reference variant."""

    def testClass(self):
        self.assertIsInstance(reference(FooBarCommand), ClassReference)

    def testClassPath(self):
        entry = reference("helmsman.commands.HelpCommand")
        self.assertIsInstance(entry, ClassReference)
        self.assertIs(entry.target, HelpCommand)
        self.assertEqual(entry.callback, "helmsman.commands.HelpCommand")

    def testFunction(self):
        self.assertIsInstance(reference(say_hello), FunctionReference)

    def testBoundMethodIsFunction(self):
        self.assertIsInstance(reference(FooBarCommand(None).execute), FunctionReference)

    def testInstance(self):
        self.assertIsInstance(reference(Deploy(None)), InstanceReference)

    def testLambdaIsClosure(self):
        self.assertIsInstance(reference(lambda args, options, dispatcher: None), ClosureReference)

    def testPartialIsClosure(self):
        self.assertIsInstance(reference(functools.partial(say_hello)), ClosureReference)

    def testReferencePassesThrough(self):
        entry = reference(say_hello)
        self.assertIs(reference(entry), entry)

    def testClassWithoutExecuteRejected(self):
        with self.assertRaises(InvalidCommandError):
            reference(NotACommand)

    def testObjectWithoutExecuteRejected(self):
        with self.assertRaises(InvalidCommandError):
            reference(42)

    def testUnknownPathRejected(self):
        with self.assertRaises(InvalidCommandError):
            reference("helmsman_missing_module.SomethingCommand")

    def testPathToPlainValueRejected(self):
        with self.assertRaises(InvalidCommandError):
            reference("os.sep")

    def testErrorCarriesCallback(self):
        with self.assertRaises(InvalidCommandError) as context:
            reference(NotACommand)
        self.assertIs(context.exception.options["callback"], NotACommand)


class TestInvocation(TestCase):
    """Invocation shape of every variant."""

    def testClassInstantiatedWithDispatcher(self):
        received = []

        class Probe(Command):
            def execute(self, args, options):
                received.append((self.dispatcher, args, options))
                return "done"

        dispatcher = object()
        self.assertEqual(reference(Probe).invoke(["a"], {"b": True}, dispatcher), "done")
        self.assertEqual(received, [(dispatcher, ["a"], {"b": True})])

    def testFunctionCalledWithDispatcher(self):
        received = []

        def probe(args, options, dispatcher):
            received.append((args, options, dispatcher))

        dispatcher = object()
        reference(probe).invoke(["x"], {}, dispatcher)
        self.assertEqual(received, [(["x"], {}, dispatcher)])

    def testInstanceReused(self):
        instance = Deploy(None)
        entry = reference(instance)
        self.assertEqual(entry.invoke([], {}, object()), "deploy")
        self.assertIs(entry.callback, instance)

    def testClosureCalledWithDispatcher(self):
        entry = reference(lambda args, options, dispatcher: (args, options, dispatcher))
        self.assertEqual(entry.invoke(["a"], {}, "d"), (["a"], {}, "d"))


class TestDottedPaths(TestCase):
    """Failures while resolving dotted paths."""

    def testMissingDependencyIsChained(self):
        with tempfile.TemporaryDirectory() as directory:
            (Path(directory) / "helmsman_broken_deploy_command.py").write_text(
                "import helmsman_missing_dependency\n"
                "\n"
                "class DeployCommand:\n"
                "    def execute(self, args, options):\n"
                "        pass\n"
            )
            sys.path.insert(0, directory)
            importlib.invalidate_caches()
            try:
                with self.assertRaises(InvalidCommandError) as context:
                    reference("helmsman_broken_deploy_command.DeployCommand")
            finally:
                sys.path.remove(directory)
                sys.modules.pop("helmsman_broken_deploy_command", None)

        cause = context.exception.__cause__
        self.assertIsInstance(cause, ModuleNotFoundError)
        self.assertEqual(cause.name, "helmsman_missing_dependency")

    def testUnknownPathIsChained(self):
        with self.assertRaises(InvalidCommandError) as context:
            reference("helmsman_missing_module.SomethingCommand")
        self.assertIsInstance(context.exception.__cause__, LookupError)

    def testPathVanishingAfterRegistration(self):
        module = types.ModuleType("helmsman_transient_commands")
        module.FooBarCommand = FooBarCommand
        module.say_hello = say_hello

        with mock.patch.dict(sys.modules, {module.__name__: module}):
            classes = reference("helmsman_transient_commands.FooBarCommand")
            functions = reference("helmsman_transient_commands.say_hello")
            self.assertEqual(classes.invoke([], {}, None), "foo-bar")

            del module.FooBarCommand, module.say_hello
            for entry in (classes, functions):
                with self.assertRaises(InvalidCommandError) as context:
                    entry.invoke([], {}, None)
                self.assertIsInstance(context.exception.__cause__, LookupError)


if __name__ == "__main__":
    unittest.main()
