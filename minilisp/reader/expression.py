"""minilisp abstract syntax tree.

An Expression is either an atom or a list of Expressions:

```
<expression> ::= <atom>
               | "(" <expression>* ")"   ; List: owns its nodes, no sharing and no cycles
<atom>       ::= <symbol>                ; bareword or operator token
               | <number>                ; every number is a float
               | <bool>                  ; never produced by the parser, only by evaluation
```

All Expressions are immutable, hashable, and compare structurally: two atoms are equal only if they are the same
kind of atom holding the same value, and two Lists are equal if their nodes are pairwise equal.
"""

from dataclasses import dataclass


class Expression:
    """Superclass of every node in a minilisp syntax tree."""

    def display(self, indents=0):
        """Recursively displays Expression tree with readable format.

        Format:
        List(nodes=[
            <Atom>(<value>),
            List(nodes=[
                ...
            ])
        ])
        """
        if not isinstance(self, List):
            return f"{'    ' * indents}{self!r}"

        result = f"{'    ' * indents}List(nodes=["
        for node in self.nodes:
            result += "\n" + node.display(indents + 1) + ","
        if self.nodes:
            result = result[:-1] + f"\n{'    ' * indents}"
        return result + "])"


class Atom(Expression):
    """Indivisible leaf value."""
    nodes = ()  # atoms have no child Expressions


@dataclass(frozen=True)
class Symbol(Atom):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Number(Atom):
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    def __str__(self):
        return repr(self.value)


@dataclass(frozen=True)
class Bool(Atom):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True, init=False)
class List(Expression):
    nodes: tuple

    def __init__(self, nodes=()):
        object.__setattr__(self, "nodes", tuple(nodes))

    @property
    def head(self):
        """First node, or None if this List is empty."""
        return self.nodes[0] if self.nodes else None

    @property
    def rest(self):
        return self.nodes[1:]

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def __getitem__(self, idx):
        return self.nodes[idx]

    def __str__(self):
        return "(" + " ".join(str(node) for node in self.nodes) + ")"

    def __repr__(self):
        return f"List({list(self.nodes)!r})"


TRUE = Bool(True)
FALSE = Bool(False)


def is_symbol(expr, name=None):
    """Whether or not expr is a Symbol (called name, if name is given)."""
    return isinstance(expr, Symbol) and (name is None or expr.name == name)
