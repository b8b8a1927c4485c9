"""Symbol environments.

An Environment is one flat scope: there is no parent chain. Each call to a user procedure works on a clone of the
caller's current Environment, so a lambda sees the bindings in effect where it is called rather than where it was
defined, and nothing it defines survives the call.
"""

import math

from minilisp.reader.expression import Number


class Environment(dict):
    """Mapping of symbol name: bound Expression."""

    def define(self, name, value):
        """Binds value to name, overwriting any prior binding."""
        self[name] = value

    def lookup(self, name):
        """Returns the Expression bound to name, or None if name is unbound."""
        return self.get(name)

    def copy(self):
        """Returns a clone of this Environment. Expressions are immutable, so a shallow copy is enough."""
        return Environment(self)

    def __repr__(self):
        return f"Environment({dict.__repr__(self)})"


def standard_environment():
    """Returns a fresh Environment with the standard constants bound."""
    env = Environment()
    env.define("pi", Number(math.pi))
    env.define("e", Number(math.e))
    return env
