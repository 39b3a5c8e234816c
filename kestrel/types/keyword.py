from __future__ import annotations
import sys


class Keyword:
    """A keyword value, written and printed as `:name`.

    Distinct from Text: `(keyword? :a)` is true, `(string? :a)` is false, and
    `:a` never equals `"a"`.
    """
    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = sys.intern(name)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Keyword) and self.name == other.name

    def __hash__(self) -> int:
        return hash((Keyword, self.name))

    def __repr__(self):
        return f"Keyword({self.name!r})"

    def __str__(self):
        return ":" + self.name
