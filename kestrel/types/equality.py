"""Structural equality for Lisp values (the `=` primitive)."""

from __future__ import annotations

from kestrel import LispValue


def is_equal(a: LispValue, b: LispValue) -> bool:
    """Deep equality.

    - Lists and vectors cross-compare: same length, pairwise equal.
    - Otherwise the variants must match exactly, so 1 and 1.0 differ.
    - Maps: same key count, and every key on the left maps to an equal value
      on the right. With equal counts that implies identical key sets.
    - Constants, atoms and functions compare by identity.
    """
    if a is b:
        return True
    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return False
        return all(is_equal(x, y) for x, y in zip(a, b))
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        if len(a) != len(b):
            return False
        for k, v in a.items():
            if k not in b or not is_equal(v, b[k]):
                return False
        return True
    # Symbol and Keyword compare by name; atoms and functions fall back to identity.
    return a == b
