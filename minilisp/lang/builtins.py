"""Builtin procedures. A builtin is named by a symbol that is unbound in the current Environment, and is applied to
an already-evaluated argument list.

Numeric builtins read their arguments positionally: a missing argument is an ArityError, a non-Number argument is
an ArgumentTypeError, and arguments past the ones a builtin reads are ignored. Results follow IEEE 754 rather than
Python's math module, so domain errors give nan and overflows give an infinity instead of raising.
"""

import math
import operator

from minilisp.lang.error import ArgumentTypeError, ArityError, DivisionByZeroError, UnboundNameError
from minilisp.reader.expression import Bool, Number


DIVISION_EPSILON = 1e-12  # divisors with a smaller magnitude are treated as zero


def number_arg(args, idx, name):
    """Returns the float value of args[idx], raising an ArgumentError if it is missing or not a Number."""
    try:
        arg = args[idx]
    except IndexError:
        msg = "'{}' expects at least {} argument(s), got {}"
        raise ArityError(msg, (name, str(idx + 1), str(len(args))), diagnosis=False)

    if not isinstance(arg, Number):
        raise ArgumentTypeError("'{}' is not a number (argument {} of '{}')", (str(arg), str(idx + 1), name))
    return arg.value


def binary(func, result=Number):
    """Builtin reading two numbers and wrapping func(first, second) in result."""

    def builtin(args, name):
        first = number_arg(args, 0, name)
        second = number_arg(args, 1, name)
        return result(func(first, second))

    return builtin


def unary(func, overflow=lambda x: math.inf):
    """Builtin reading one number. overflow(x) gives the result when func(x) is too large for a float."""

    def builtin(args, name):
        x = number_arg(args, 0, name)
        try:
            return Number(func(x))
        except OverflowError:
            return Number(overflow(x))
        except ValueError:
            return Number(math.nan)

    return builtin


def power(base, exponent):
    try:
        return math.pow(base, exponent)
    except OverflowError:
        odd = exponent.is_integer() and int(exponent) % 2 == 1
        return -math.inf if base < 0 and odd else math.inf
    except ValueError:
        return math.inf if base == 0 else math.nan  # 0 to a negative power, or negative base to a fraction


def divide(dividend, divisor):
    if abs(divisor) < DIVISION_EPSILON:
        raise DivisionByZeroError("division of '{}' by zero ('{}')", (repr(dividend), repr(divisor)))
    return dividend / divisor


def ln(x):
    if x == 0:
        return -math.inf
    return math.log(x)


def begin(args, name):
    """Returns the last argument. Arguments have already been evaluated in order."""
    if not args:
        raise ArityError("called '{}' with empty list", name, diagnosis=False)
    return args[-1]


def car(args, name):
    """Returns the first argument."""
    if not args:
        raise ArityError("called '{}' with empty list", name, diagnosis=False)
    return args[0]


BUILTINS = {
    "^": binary(power),
    "*": binary(operator.mul),
    "/": binary(divide),
    "+": binary(operator.add),
    "-": binary(operator.sub),

    ">": binary(operator.gt, Bool),
    "<": binary(operator.lt, Bool),
    ">=": binary(operator.ge, Bool),
    "<=": binary(operator.le, Bool),
    "=": binary(operator.eq, Bool),

    "abs": unary(abs),
    "sin": unary(math.sin),
    "cos": unary(math.cos),
    "tan": unary(math.tan),
    "sinh": unary(math.sinh, overflow=lambda x: math.copysign(math.inf, x)),
    "cosh": unary(math.cosh),
    "tanh": unary(math.tanh),
    "exp": unary(math.exp),
    "ln": unary(ln),

    "begin": begin,
    "car": car,
}


def apply_builtin(name, args):
    """Applies the builtin called name to args."""
    try:
        builtin = BUILTINS[name]
    except KeyError:
        raise UnboundNameError("'{}', not in env", name, diagnosis=False)
    return builtin(args, name)
