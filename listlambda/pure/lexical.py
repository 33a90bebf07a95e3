"""Expression tree for the listlambda language: lambda calculus plus list literals and three builtins.

The `pure` directory contains the expression model and its reduction. Parsing lives in listlambda/grammar/pure.py.

Every expression is one of

```
Application   ; (a b c ...), at least two items, associating by left
Constant      ; alphabetic identifier, doubles as free/bound variable
Lambda        ; (x.body)
Builtin       ; hd | tl | eval
List          ; {a b c ...}, possibly empty
```

Trees are built once and never mutated afterwards: substitution and reduction always return new nodes, so a node is
only ever owned by the one parent that holds it.

------------------------------------------------------------------------------------------------------------------------

Note that substitution is not capture-avoiding. A binder with the same name as the substituted variable stops
substitution dead, but a free variable in the substituted term can still be captured by an inner binder with a
different name:

    ((x.(y.x)) y)  ->  (y.y)

There is no alpha conversion anywhere in this implementation.
"""

from abc import abstractmethod, ABC
from copy import deepcopy


class Expression(ABC):
    """Superclass that represents any listlambda expression."""

    def __init__(self):
        self._cls = type(self).__name__

    @property
    @abstractmethod
    def nodes(self):
        """Direct children of this expression, in stored order."""

    @property
    @abstractmethod
    def expr(self):
        """Source representation. Parsing it gives back an equal expression."""

    @abstractmethod
    def sub(self, var, new_term):
        """Returns a copy of self with every free Constant(var) replaced with a copy of new_term."""

    @abstractmethod
    def _key(self):
        """Tuple used for structural equality and hashing."""

    def display(self, indents=0):
        """Recursively displays expression tree with readable format.

        Format:
        <Expression>(expr='<expr>', nodes=[
            <Expression>(expr='<expr>', nodes=[
                ...
                <Expression>(expr='<expr>')  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{self._cls}(expr='{self.expr}'"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __eq__(self, other):
        return isinstance(other, type(self)) and self._key() == other._key()

    def __hash__(self):
        return hash((self._cls, self._key()))

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr


class Application(Expression):
    """Application of two or more expressions, left to right."""

    def __init__(self, items):
        super().__init__()
        self.items = tuple(items)
        if len(self.items) < 2:
            raise ValueError(f"Application needs at least 2 items, got {len(self.items)}")

    @property
    def nodes(self):
        return list(self.items)

    @property
    def expr(self):
        return "(" + " ".join(item.expr for item in self.items) + ")"

    def sub(self, var, new_term):
        return Application(item.sub(var, new_term) for item in self.items)

    def _key(self):
        return self.items


class Constant(Expression):
    """Identifier: either a free constant or a variable bound by an enclosing Lambda."""

    def __init__(self, name):
        super().__init__()
        self.name = name

    @property
    def nodes(self):
        return []

    @property
    def expr(self):
        return self.name

    def sub(self, var, new_term):
        if self.name == var:
            return deepcopy(new_term)
        return self

    def _key(self):
        return (self.name,)


class Lambda(Expression):
    """Abstraction binding a single parameter: (param.body)."""

    def __init__(self, param, body):
        super().__init__()
        self.param = param
        self.body = body

    @property
    def nodes(self):
        return [Constant(self.param), self.body]

    @property
    def expr(self):
        return f"({self.param}.{self.body.expr})"

    def sub(self, var, new_term):
        if self.param == var:
            return self  # shadowed: nothing below this binder refers to the outer var
        return Lambda(self.param, self.body.sub(var, new_term))

    def _key(self):
        return (self.param, self.body)


class Builtin(Expression):
    """Primitive operator, only ever dispatched against a List argument."""
    HD = "hd"
    TL = "tl"
    EVAL = "eval"
    KEYWORDS = [HD, TL, EVAL]

    def __init__(self, keyword):
        super().__init__()
        if keyword not in Builtin.KEYWORDS:
            raise ValueError(f"'{keyword}' is not a builtin")
        self.keyword = keyword

    @property
    def nodes(self):
        return []

    @property
    def expr(self):
        return self.keyword

    def sub(self, var, new_term):
        return self

    def _key(self):
        return (self.keyword,)


class List(Expression):
    """List literal. elements are stored in reverse of source order, so the head of the list is elements[-1] and both
    head and tail only touch the end of the tuple.
    """

    def __init__(self, elements=()):
        super().__init__()
        self.elements = tuple(elements)

    @classmethod
    def from_source(cls, items):
        """Builds a List from items in source (left to right) order."""
        return cls(reversed(list(items)))

    @property
    def source_order(self):
        return list(reversed(self.elements))

    @property
    def head(self):
        """One-element List holding the first source element, or an empty List."""
        return List(self.elements[-1:])

    @property
    def tail(self):
        """List without its first source element. The tail of an empty List is empty."""
        return List(self.elements[:-1])

    @property
    def nodes(self):
        return list(self.elements)

    @property
    def expr(self):
        return "{" + " ".join(element.expr for element in self.source_order) + "}"

    def sub(self, var, new_term):
        return self  # list contents are quoted

    def _key(self):
        return self.elements


def substitute(expr, var, new_term):
    """Replaces every free Constant(var) in expr with a copy of new_term. Returns a new tree; expr is left intact."""
    return expr.sub(var, new_term)
