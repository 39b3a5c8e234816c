from __future__ import annotations


class Constant:
    """One of the three interned constants: null, #t and #f.

    Instances are compared by identity; there is exactly one of each.
    """
    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self): return self.name
    def __str__(self): return self.name

    def __bool__(self):
        return self.name == "#t"

    def __copy__(self): return self
    def __deepcopy__(self, memo): return self


Nil = Constant("null")
TRUE = Constant("#t")
FALSE = Constant("#f")


def is_truthy(value) -> bool:
    """Lisp truthiness: everything except #f and null is true."""
    return value is not FALSE and value is not Nil


def from_bool(flag: bool) -> Constant:
    return TRUE if flag else FALSE
