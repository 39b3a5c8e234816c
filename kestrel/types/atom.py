from __future__ import annotations

from kestrel import LispValue
from kestrel.types.constants import Nil


class Atom:
    """A single mutable slot. `reset!` and `swap!` are the only writers."""

    __slots__ = ("value", "meta")

    def __init__(self, value: LispValue, meta: LispValue = Nil):
        self.value: LispValue = value
        self.meta: LispValue = meta

    def reset(self, value: LispValue) -> LispValue:
        self.value = value
        return value

    def with_meta(self, meta: LispValue) -> Atom:
        # A new cell: the copy's slot is independent of the original's.
        return Atom(self.value, meta)

    def __repr__(self) -> str:
        return f"Atom({self.value!r})"
