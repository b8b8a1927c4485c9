"""Recursive-descent parser: turns the Tokens of a Lexer into exactly one Expression.

```
<form> ::= "(" <form>* ")"   ; List
         | <bareword>        ; Symbol
         | <operator>        ; Symbol
         | <number>          ; Number
```

Only the first complete form is read. Anything after it is left in the Lexer for the caller to inspect (see
Lexer.remaining) and is not an error here.
"""

from minilisp.lang.error import FormatError, MalformedInputError, UnexpectedEOFError
from minilisp.reader.expression import List, Number, Symbol
from minilisp.reader.tokens import BAREWORD, CLOSE, NUMBER, OPEN, OPERATOR, Lexer


def parse(program):
    """Returns the first Expression in program. Raises a ParseError if program does not start with a well-formed
    expression.
    """
    return read_form(Lexer(program))


def read_form(lexer):
    """Reads one top-level Expression from lexer."""
    expr = read_expression(lexer)
    if expr is None:
        msg = "'{}' has ')' without a matching '('"
        raise MalformedInputError(msg, lexer.source, start=lexer.token.start, end=lexer.token.end)
    return expr


def read_expression(lexer):
    """Reads the next Expression from lexer. Returns None if the token read was a ')', which terminates the List
    being read by the caller.
    """
    token = next(lexer, None)
    if token is None:
        raise UnexpectedEOFError("unexpected end of input in '{}'", lexer.source, start=len(lexer.source))

    if token.type == OPEN:
        nodes = []
        while True:
            node = read_expression(lexer)
            if node is None:
                break
            nodes.append(node)
        return List(nodes)

    elif token.type == CLOSE:
        return None

    elif token.type in (BAREWORD, OPERATOR):
        return Symbol(token.slice)

    elif token.type == NUMBER:
        try:
            return Number(float(token.slice))
        except ValueError:
            msg = "'{}' is not a valid number"
            raise FormatError(msg, lexer.source, start=token.start, end=token.end)

    raise MalformedInputError("'{}' has unknown token type '{}'", (lexer.source, token.type), diagnosis=False)
