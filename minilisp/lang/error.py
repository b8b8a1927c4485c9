"""Error handling for minilisp. Only LispErrors should be encountered during running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Error taxonomy:

```
LispError
 ├── ParseError             ; raised by minilisp.reader before anything is evaluated
 │    ├── LexError          ; a character that starts no token
 │    ├── FormatError       ; a numeric token that is not a float
 │    ├── MalformedInputError
 │    └── UnexpectedEOFError
 └── EvalError              ; raised by minilisp.lang.evaluator/builtins
      ├── LispSyntaxError   ; malformed special form, empty list, non-symbol head
      ├── ArgumentError
      │    ├── ArityError
      │    └── ArgumentTypeError
      ├── DivisionByZeroError
      └── UnboundNameError
```
"""

import sys

from termcolor import colored


class LispError(Exception):
    """Templates an error/warning message so that it can be used to throw a minilisp error/warning."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for LispError or warning. exprs[0] should be the offending expr that caused the error, and
        start/end delimit the offending slice of it.
        """
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class ParseError(LispError):
    """Superclass of all errors raised while turning text into an Expression."""


class LexError(ParseError):
    """Raised when a slice of the source matches none of the token classes."""


class FormatError(ParseError):
    """Raised when a numeric token cannot be converted to a float."""


class MalformedInputError(ParseError):
    """Raised when a ')' is read with no enclosing '('."""


class UnexpectedEOFError(ParseError):
    """Raised when input ends before a complete expression is read."""


class EvalError(LispError):
    """Superclass of all errors raised while evaluating an Expression."""


class LispSyntaxError(EvalError):
    pass


class ArgumentError(EvalError):
    pass


class ArityError(ArgumentError):
    pass


class ArgumentTypeError(ArgumentError):
    pass


class DivisionByZeroError(EvalError):
    pass


class UnboundNameError(EvalError):
    pass


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom minilisp errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, kind, expr):
        """Prints an evaluation step if verbose. kind is a short tag (e.g. 'define', 'apply')."""
        if self.verbose:
            print(colored(f"  {kind:>7} ", ErrorHandler.STEP, attrs=["bold"]) + colored(str(expr), attrs=["dark"]))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        """Returns 'file:line: ' for the most recently registered line, or '' if no line is registered."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line is not None:
                return f"{file}:{line_num}: "
        return ""

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = LispError(*args, **kwargs)

        error_msg = colored(self._location(), attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a LispError, and self.traceback must be a dict
        of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored(f"{type(error).__name__}: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LispError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LispError("maximum recursion depth exceeded (does a definition call itself without a base "
                                 "case?)"))
        elif exc_type is not None and issubclass(exc_type, LispError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LispError(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
