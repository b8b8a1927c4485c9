"""Lexical analysis for minilisp. Converts raw program text into a stream of classified tokens.

Token grammar:

```
<open>      ::= "("
<close>     ::= ")"
<bareword>  ::= [a-zA-Z]+
<number>    ::= [+-]? ([0-9]* ".")? [0-9]+ ([eE] [+-]? [0-9]+)?
<operator>  ::= [>^<=+*/-]+
```

Runs of whitespace between tokens are skipped. When several classes match at the same position, the longest match
wins, so "-5" is a number and "-" alone is an operator. Tokens carry no value beyond their class and slice: numbers
are converted by the parser.
"""

import re
from dataclasses import dataclass

from minilisp.lang.error import LexError


OPEN, CLOSE, BAREWORD, NUMBER, OPERATOR = "OPEN", "CLOSE", "BAREWORD", "NUMBER", "OPERATOR"


@dataclass(frozen=True)
class Token:
    type: str
    slice: str
    start: int
    end: int


class Lexer:
    """Restartable iterator over the Tokens of source."""
    WHITESPACE = re.compile(r"[ \t\n\f\r]+")
    PATTERNS = [  # ordered by priority, used only to break ties between equally long matches
        (OPEN, re.compile(r"\(")),
        (CLOSE, re.compile(r"\)")),
        (BAREWORD, re.compile(r"[a-zA-Z]+")),
        (NUMBER, re.compile(r"[+-]?([0-9]*\.)?[0-9]+([eE][+-]?[0-9]+)?")),
        (OPERATOR, re.compile(r"[>^<=+*/-]+")),
    ]

    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.token = None

    @property
    def slice(self):
        """Text of the last token read, or '' if no token has been read yet."""
        return self.token.slice if self.token else ""

    def restart(self):
        """Rewinds to the beginning of source."""
        self.pos = 0
        self.token = None

    def remaining(self):
        """Unconsumed source, stripped of surrounding whitespace."""
        return self.source[self.pos:].strip()

    def _skip_whitespace(self):
        match = Lexer.WHITESPACE.match(self.source, self.pos)
        if match:
            self.pos = match.end()

    def __iter__(self):
        return self

    def __next__(self):
        self._skip_whitespace()
        if self.pos >= len(self.source):
            raise StopIteration

        best = None
        for token_type, pattern in Lexer.PATTERNS:
            match = pattern.match(self.source, self.pos)
            if match and (best is None or match.end() > best[1].end()):
                best = (token_type, match)

        if best is None:
            msg = "'{}' contains unknown token '{}'"
            raise LexError(msg, (self.source, self.source[self.pos]), start=self.pos, end=self.pos + 1)

        token_type, match = best
        self.token = Token(token_type, match.group(), match.start(), match.end())
        self.pos = match.end()
        return self.token


def tokenize(source):
    """Returns list of all Tokens in source."""
    return list(Lexer(source))
