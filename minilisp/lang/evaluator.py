"""Evaluation of minilisp Expressions against an Environment.

Atoms:
    - Numbers and Bools evaluate to themselves.
    - A bound Symbol evaluates to its binding, and an unbound Symbol evaluates to itself. The second rule is how
      procedure names reach apply_procedure: "+" is never bound, so evaluating it yields Symbol("+"), which is then
      looked up in the builtin table.

Lists (the head must be a Symbol):
    (if TEST CONSEQUENT ALTERNATIVE)   ; CONSEQUENT only if TEST evaluates to exactly true
    (define NAME EXPR)                 ; binds in the current Environment, evaluates to true
    (lambda PARAM* BODY)               ; evaluates to itself
    (PROC ARG*)                        ; procedure application

User procedures are not closures. Applying one clones the caller's Environment, binds the parameters in the clone,
evaluates the body there and throws the clone away.
"""

from minilisp.lang.builtins import apply_builtin
from minilisp.lang.error import LispSyntaxError
from minilisp.reader.expression import TRUE, Bool, List, Number, Symbol, is_symbol


def evaluate(expr, env, error_handler=None):
    """Evaluates expr in env and returns the resulting Expression. env is mutated by define. If error_handler is
    given, evaluation steps are registered with it and suspect applications are warned about.
    """
    if isinstance(expr, (Number, Bool)):
        return expr

    elif isinstance(expr, Symbol):
        value = env.lookup(expr.name)
        return expr if value is None else value

    elif not isinstance(expr, List):
        raise LispSyntaxError("'{}' is not an expression", repr(expr), internal=True)

    if len(expr) == 0:
        raise LispSyntaxError("cannot evaluate empty list '{}'", str(expr))

    head = expr.head
    if not isinstance(head, Symbol):
        raise LispSyntaxError("'{}' does not start with a symbol", str(expr), start=1, end=len(str(head)) + 1)

    special_form = SPECIAL_FORMS.get(head.name)
    if special_form is not None:
        return special_form(expr, env, error_handler)

    procedure = evaluate(head, env, error_handler)
    args = [evaluate(arg, env, error_handler) for arg in expr.rest]
    _register(error_handler, "apply", List([procedure] + args))
    return apply_procedure(procedure, args, env, error_handler)


def evaluate_if(expr, env, error_handler=None):
    if len(expr.rest) != 3:
        raise LispSyntaxError("'{}' expects a test, a consequent and an alternative", str(expr))

    test, consequent, alternative = expr.rest
    if evaluate(test, env, error_handler) == TRUE:
        _register(error_handler, "if", consequent)
        return evaluate(consequent, env, error_handler)

    _register(error_handler, "if", alternative)
    return evaluate(alternative, env, error_handler)


def evaluate_define(expr, env, error_handler=None):
    if len(expr.rest) != 2:
        raise LispSyntaxError("'{}' expects a name and an expression", str(expr))

    name, value = expr.rest
    if not isinstance(name, Symbol):
        raise LispSyntaxError("'{}' is not a symbol", str(name))

    result = evaluate(value, env, error_handler)
    env.define(name.name, result)
    _register(error_handler, "define", List([name, result]))
    return TRUE


def evaluate_lambda(expr, env, error_handler=None):
    return expr


SPECIAL_FORMS = {
    "if": evaluate_if,
    "define": evaluate_define,
    "lambda": evaluate_lambda,
}


def apply_procedure(procedure, args, env, error_handler=None):
    """Applies procedure to the evaluated args. procedure is either an unbound Symbol naming a builtin or a lambda
    List. The caller's env is never mutated.
    """
    if isinstance(procedure, Symbol):
        return apply_builtin(procedure.name, args)

    elif isinstance(procedure, List) and is_symbol(procedure.head, "lambda"):
        return apply_lambda(procedure, args, env, error_handler)

    raise LispSyntaxError("'{}' is not a procedure", str(procedure))


def apply_lambda(procedure, args, env, error_handler=None):
    """Binds each parameter of procedure to its argument in a clone of env, then evaluates the body in the clone.
    Parameters and arguments are paired up to the shorter of the two: extras are dropped, not reported as errors.
    """
    if len(procedure) < 2:
        raise LispSyntaxError("'{}' has no body", str(procedure))

    *params, body = procedure.rest
    if len(params) != len(args) and error_handler is not None:
        msg = "'{}' takes {} parameter(s) but was given {} argument(s); extras are ignored"
        error_handler.warn(msg, (str(procedure), str(len(params)), str(len(args))))

    local_env = env.copy()
    for param, arg in zip(params, args):
        evaluate(List([Symbol("define"), param, arg]), local_env, error_handler)

    return evaluate(body, local_env, error_handler)


def _register(error_handler, kind, expr):
    if error_handler is not None:
        error_handler.register_step(kind, expr)
