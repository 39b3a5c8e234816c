from __future__ import annotations

from typing import Any


class Vector(list):
    """A bracketed sequence `[a b c]`.

    Shares every element operation with a plain list, but is a distinct tag:
    it evaluates element-wise instead of as an application, answers
    `vector?`, and is rebuilt with `vec` by quasiquote.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Vector({list.__repr__(self)})"


def is_list(x: Any) -> bool:
    """True for a List form (not a Vector)."""
    return isinstance(x, list) and not isinstance(x, Vector)


def is_seq(x: Any) -> bool:
    """True for either sequence tag."""
    return isinstance(x, list)
