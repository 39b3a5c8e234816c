"""Render Lisp values back to text.

`readably=True` produces text the reader accepts again (strings quoted and
escaped); `readably=False` is the display form used by `str` and `println`.
"""

from __future__ import annotations

from kestrel import LispValue
from kestrel.types.atom import Atom
from kestrel.types.constants import Constant
from kestrel.types.function import Closure, Primitive
from kestrel.types.keyword import Keyword
from kestrel.types.symbol import Symbol
from kestrel.types.vector import Vector


def _escape(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _key_str(key: LispValue, readably: bool) -> str:
    if isinstance(key, Keyword):
        return str(key)
    if isinstance(key, str) and readably:
        return f'"{_escape(key)}"'
    return str(key)


def pr_str(value: LispValue, readably: bool = True) -> str:
    if isinstance(value, Constant):
        return value.name
    if isinstance(value, Symbol):
        return value.id
    if isinstance(value, Keyword):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"' if readably else value
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, Vector):
        return "[" + join(value, " ", readably) + "]"
    if isinstance(value, list):
        return "(" + join(value, " ", readably) + ")"
    if isinstance(value, dict):
        parts = []
        for k, v in value.items():
            parts.append(_key_str(k, readably))
            parts.append(pr_str(v, readably))
        return "{" + " ".join(parts) + "}"
    if isinstance(value, Atom):
        return f"(atom {pr_str(value.value, readably)})"
    if isinstance(value, Closure):
        kind = "macro" if value.is_macro else "function"
        return f"#<{kind} {pr_str(value.params, True)} {pr_str(value.body, True)}>"
    if isinstance(value, Primitive):
        kind = "builtin macro" if value.is_macro else "builtin function"
        return f"#<{kind} {value.name}>"
    return str(value)


def join(values: list[LispValue], sep: str, readably: bool) -> str:
    return sep.join(pr_str(v, readably) for v in values)


def as_hex(n: int) -> str:
    return f"#x{n:x}" if n >= 0 else f"-#x{-n:x}"


def as_binary(n: int) -> str:
    return f"#b{n:b}" if n >= 0 else f"-#b{-n:b}"
