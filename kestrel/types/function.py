"""Function values: native primitives and user closures.

Both kinds carry an `is_macro` flag fixed at construction. `defmacro` never
flips the flag on an existing function; it builds a macro copy with
`as_macro()`, so a function value is never observed half-converted.
"""

from __future__ import annotations

import copy
from io import StringIO
from typing import Callable, Sequence

from kestrel import SExpression, LispValue
from kestrel.types.constants import Nil
from kestrel.types.environment import Environment
from kestrel.types.symbol import Symbol


class Function:
    """Common base for Primitive and Closure."""

    __slots__ = ("is_macro", "meta")

    def __init__(self, is_macro: bool = False, meta: LispValue = Nil):
        self.is_macro: bool = is_macro
        self.meta: LispValue = meta

    def as_macro(self) -> Function:
        clone = copy.copy(self)
        clone.is_macro = True
        return clone

    def with_meta(self, meta: LispValue) -> Function:
        clone = copy.copy(self)
        clone.meta = meta
        return clone


class Primitive(Function):
    """A native operation over an evaluated argument list.

    Primitives never see the caller's environment.
    """

    __slots__ = ("name", "fn")

    def __init__(
        self,
        name: str,
        fn: Callable[[list[LispValue]], LispValue],
        is_macro: bool = False,
        meta: LispValue = Nil,
    ):
        super().__init__(is_macro, meta)
        self.name = name
        self.fn = fn

    def apply(self, args: list[LispValue]) -> LispValue:
        return self.fn(args)

    def __repr__(self) -> str:
        return f"<Primitive {self.name}>"


class Closure(Function):
    """A first-class lambda: parameter list, body and captured environment."""

    __slots__ = ("params", "body", "env")

    def __init__(
        self,
        params: Sequence[Symbol],
        body: SExpression,
        env: Environment,
        is_macro: bool = False,
        meta: LispValue = Nil,
    ):
        super().__init__(is_macro, meta)
        self.params: list[Symbol] = list(params)
        self.body: SExpression = body
        self.env: Environment = env

    def bind(self, args: list[LispValue]) -> Environment:
        """Return a fresh frame over the captured environment with params bound to args."""
        return Environment(self.env, self.params, args)

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(λ (")
            buffer.write(" ".join(str(p) for p in self.params))
            buffer.write(") ")
            buffer.write(str(self.body))
            buffer.write(")")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)
