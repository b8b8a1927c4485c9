import contextlib
import io
import os
import unittest
from unittest import mock

from minilisp.lang.error import (ArityError, DivisionByZeroError, ErrorHandler, EvalError, LexError, LispError,
                                 LispSyntaxError, ParseError, UnexpectedEOFError)


def captured(func, *args, **kwargs):
    """Returns stdout printed by func(*args, **kwargs)."""
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        func(*args, **kwargs)
    return out.getvalue()


class LispErrorTestCase(unittest.TestCase):

    def test_fields(self):
        error = LispError("'{}' is bad", "(a b)", start=1, end=2)
        self.assertIn("(a b)", error.msg)
        self.assertEqual("(a b)", error.expr)
        self.assertEqual((1, 2), (error.start, error.end))
        self.assertEqual(error.msg, str(error))

    def test_defaults(self):
        error = LispError("keyboard interrupt")
        self.assertEqual("", error.expr)
        self.assertEqual(0, error.end)

        error = LispError("'{}' and '{}'", ("first", "second"))
        self.assertEqual("first", error.expr)
        self.assertEqual(5, error.end)

    def test_hierarchy(self):
        self.assertTrue(issubclass(LexError, ParseError))
        self.assertTrue(issubclass(UnexpectedEOFError, ParseError))
        self.assertTrue(issubclass(ArityError, EvalError))
        self.assertTrue(issubclass(DivisionByZeroError, EvalError))
        self.assertFalse(issubclass(LispSyntaxError, ParseError))
        self.assertFalse(issubclass(LispSyntaxError, SyntaxError))


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        patcher = mock.patch.dict(os.environ, {"NO_COLOR": "1"})
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_diagnose(self):
        diagnosis = ErrorHandler.diagnose(LispError("'{}'", "(+ 1 $)", start=5, end=6))
        first, second = diagnosis.split("\n")
        self.assertIn("(+ 1 ", first)
        self.assertEqual(7, second.index("^"))

    def test_non_fatal_throw(self):
        handler = ErrorHandler(fatal=False)
        handler.register_line("<in>", "(/ 1 0)", 3)

        def throw():
            with handler:
                raise DivisionByZeroError("division of '{}' by zero", "1.0")

        out = captured(throw)
        self.assertIn("DivisionByZeroError", out)
        self.assertIn("File '<in>', line 3", out)
        self.assertEqual((None, None), handler.traceback["<in>"])

    def test_fatal_throw(self):
        handler = ErrorHandler(fatal=True)

        def throw():
            with handler:
                raise LispSyntaxError("'{}' is empty", "()")

        with self.assertRaises(SystemExit) as context:
            captured(throw)
        self.assertEqual(1, context.exception.code)

    def test_recursion_error(self):
        handler = ErrorHandler(fatal=False)

        def throw():
            with handler:
                raise RecursionError()

        self.assertIn("maximum recursion depth", captured(throw))

    def test_internal_error(self):
        handler = ErrorHandler(fatal=False)

        def throw():
            with handler:
                raise KeyError("oops")

        out = io.StringIO()
        with contextlib.redirect_stdout(out), self.assertRaises(KeyError):
            throw()
        self.assertIn("[internal]", out.getvalue())

    def test_warn(self):
        handler = ErrorHandler()
        handler.register_file("prog.lisp")
        handler.register_line("prog.lisp", "(a) (b)", 4)

        out = captured(handler.warn, "ignoring input after first form in '{}'", "(a) (b)", start=4)
        self.assertIn("prog.lisp:4:", out)
        self.assertIn("warning:", out)

    def test_register_step(self):
        self.assertEqual("", captured(ErrorHandler().register_step, "apply", "(+ 1 2)"))
        self.assertIn("(+ 1 2)", captured(ErrorHandler(verbose=True).register_step, "apply", "(+ 1 2)"))


if __name__ == '__main__':
    unittest.main()
