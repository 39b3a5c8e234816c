"""Built-in functions for the Kestrel runtime environment.

This module defines equality, predicates, arithmetic and comparison, string
and I/O helpers, list/vector/map operations, higher-order application,
metadata and atoms. Every builtin receives only its evaluated argument list.

`CORE` is the read-only name -> Primitive table; `register(env)` copies it
into a root environment. `eval` is deliberately absent: it has to close over
a particular root environment, so the interpreter binds it.
"""
from __future__ import annotations

import sys
import time
from pathlib import Path
from types import MappingProxyType
from typing import Callable

from kestrel import LispValue
from kestrel.errors import (
    KestrelArithmeticError,
    KestrelArityError,
    KestrelContinue,
    KestrelIncomplete,
    KestrelIndexError,
    KestrelParseError,
    KestrelThrown,
    KestrelTypeError,
)
from kestrel.evaluation.apply import apply_function
from kestrel.evaluation.evaluator import evaluate
from kestrel.printer import as_binary, as_hex, join, pr_str
from kestrel.reader.parser import read_str
from kestrel.types.atom import Atom
from kestrel.types.constants import FALSE, Nil, TRUE, from_bool
from kestrel.types.environment import Environment
from kestrel.types.equality import is_equal
from kestrel.types.function import Function, Primitive
from kestrel.types.keyword import Keyword
from kestrel.types.symbol import Symbol
from kestrel.types.vector import Vector, is_list, is_seq

Builtin = Callable[[list[LispValue]], LispValue]


def _arity(name: str, args: list[LispValue], count: int) -> None:
    if len(args) != count:
        raise KestrelArityError(f"{name} expects {count} argument(s), got {len(args)}")


def _min_arity(name: str, args: list[LispValue], count: int) -> None:
    if len(args) < count:
        raise KestrelArityError(f"{name} expects at least {count} argument(s), got {len(args)}")


def _expect(name: str, value: LispValue, kinds: type | tuple[type, ...], what: str) -> LispValue:
    if not isinstance(value, kinds):
        raise KestrelTypeError(f"{name}: expected {what}, got {pr_str(value)}")
    return value


def _expect_seq(name: str, value: LispValue) -> list:
    return _expect(name, value, list, "a list or vector")


def _expect_map(name: str, value: LispValue) -> dict:
    return _expect(name, value, dict, "a map")


def _expect_key(name: str, value: LispValue) -> str | Keyword:
    return _expect(name, value, (str, Keyword), "a string or keyword key")


def _predicate(name: str, test: Callable[[LispValue], bool]) -> Builtin:
    def check(args: list[LispValue]) -> LispValue:
        _arity(name, args, 1)
        return from_bool(test(args[0]))
    return check


# -------------------------------
# Equality and errors
# -------------------------------
def equals(args: list[LispValue]) -> LispValue:
    """(= a b): structural equality, #t or #f."""
    _arity("=", args, 2)
    return from_bool(is_equal(args[0], args[1]))


def throw(args: list[LispValue]) -> LispValue:
    """(throw form): raise a user failure carrying `form` as its payload."""
    _arity("throw", args, 1)
    raise KestrelThrown(args[0])


# -------------------------------
# Symbols and keywords
# -------------------------------
def symbol(args: list[LispValue]) -> Symbol:
    _arity("symbol", args, 1)
    return Symbol(_expect("symbol", args[0], str, "a string"))


def keyword(args: list[LispValue]) -> Keyword:
    """(keyword "a") => :a; a keyword argument comes back unchanged."""
    _arity("keyword", args, 1)
    value = args[0]
    if isinstance(value, Keyword):
        return value
    return Keyword(_expect("keyword", value, str, "a string or keyword"))


def _is_number(value: LispValue) -> bool:
    return isinstance(value, (int, float))


def _is_fn(value: LispValue) -> bool:
    return isinstance(value, Function) and not value.is_macro


def _is_macro(value: LispValue) -> bool:
    return isinstance(value, Function) and value.is_macro


# -------------------------------
# Strings and output
# -------------------------------
def format_str(args: list[LispValue]) -> str:
    """(format-str a b ...): readable forms joined by spaces."""
    return join(args, " ", True)


def to_str(args: list[LispValue]) -> str:
    """(str a b ...): display forms concatenated."""
    return join(args, "", False)


def println(args: list[LispValue]) -> LispValue:
    print(join(args, " ", False))
    return Nil


def _format_directive(cmd: str, arg: LispValue) -> str:
    if cmd == "s":
        return _expect("format", arg, str, "a string for ~s")
    if cmd == "d":
        return str(_expect("format", arg, int, "an integer for ~d"))
    if cmd == "b":
        return as_binary(_expect("format", arg, int, "an integer for ~b"))
    if cmd == "x":
        return as_hex(_expect("format", arg, int, "an integer for ~x"))
    return repr(_expect("format", arg, float, "a float for ~f"))


def format_line(fmt: str, values: list[LispValue]) -> str:
    """Expand the ~ directives of `fmt`.

    ~~ tilde, ~% newline, ~t tab; ~s ~d ~b ~x ~f consume the next argument.
    Directives are case-insensitive.
    """
    out: list[str] = []
    pending = iter(values)
    i = 0
    while i < len(fmt):
        ch = fmt[i]
        if ch != "~":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= len(fmt):
            raise KestrelTypeError("format: format string ends with a lone ~")
        cmd = fmt[i + 1].lower()
        i += 2
        if cmd == "~":
            out.append("~")
        elif cmd == "%":
            out.append("\n")
        elif cmd == "t":
            out.append("\t")
        elif cmd in "sdbxf":
            try:
                arg = next(pending)
            except StopIteration:
                raise KestrelArityError(f"format: not enough arguments for ~{cmd}") from None
            out.append(_format_directive(cmd, arg))
        else:
            raise KestrelTypeError(f"format: Invalid format command ~{fmt[i - 1]}")
    return "".join(out)


def format_(args: list[LispValue]) -> LispValue:
    """(format "fmt" args...): print the expanded line, return null."""
    _min_arity("format", args, 1)
    fmt = _expect("format", args[0], str, "a format string")
    print(format_line(fmt, args[1:]))
    return Nil


def read_string(args: list[LispValue]) -> LispValue:
    """(read-string "text"): the first form of `text`, unevaluated. Empty text reads as null."""
    _arity("read-string", args, 1)
    source = _expect("read-string", args[0], str, "a string")
    try:
        return read_str(source)
    except KestrelIncomplete as ex:
        raise KestrelParseError(f"read-string: {ex}") from None
    except KestrelContinue:
        return Nil


def read_file(args: list[LispValue]) -> str:
    _arity("read-file", args, 1)
    name = _expect("read-file", args[0], str, "a file name")
    if not name:
        raise KestrelTypeError("Empty file argument")
    try:
        return Path(name).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise KestrelTypeError(f"File \"{name}\" was not found.") from None


def split(args: list[LispValue]) -> list:
    """(split "a,b" ","): split on the first character of the delimiter."""
    _arity("split", args, 2)
    text = _expect("split", args[0], str, "a string")
    delim = _expect("split", args[1], str, "a delimiter string")
    if not delim:
        raise KestrelTypeError("split: delimiter must not be empty")
    return text.split(delim[0])


# -------------------------------
# Numbers
# -------------------------------
def _numeric_pair(name: str, args: list[LispValue]) -> tuple[int | float, int | float]:
    _arity(name, args, 2)
    a, b = args
    if not _is_number(a) or not _is_number(b):
        raise KestrelTypeError(f"{name}: expected numbers, got {pr_str(a)} and {pr_str(b)}")
    if type(a) is not type(b):
        raise KestrelTypeError(f"{name}: cannot mix integer and float ({pr_str(a)}, {pr_str(b)})")
    return a, b


def _binary(name: str, op: Callable[[LispValue, LispValue], LispValue]) -> Builtin:
    def run(args: list[LispValue]) -> LispValue:
        a, b = _numeric_pair(name, args)
        return op(a, b)
    return run


def _compare(name: str, op: Callable[[LispValue, LispValue], bool]) -> Builtin:
    def run(args: list[LispValue]) -> LispValue:
        a, b = _numeric_pair(name, args)
        return from_bool(op(a, b))
    return run


def divide(args: list[LispValue]) -> int | float:
    """(/ a b): integer division truncates toward zero; dividing by zero fails."""
    a, b = _numeric_pair("/", args)
    if b == 0:
        raise KestrelArithmeticError("/: division by zero")
    if isinstance(a, float):
        return a / b
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def time_ms(args: list[LispValue]) -> int:
    _arity("time-ms", args, 0)
    return time.time_ns() // 1_000_000


# -------------------------------
# Constructors
# -------------------------------
def make_list(args: list[LispValue]) -> list:
    return list(args)


def make_vector(args: list[LispValue]) -> Vector:
    return Vector(args)


def hash_map(args: list[LispValue]) -> dict:
    """(hash-map k1 v1 k2 v2 ...)"""
    if len(args) % 2:
        raise KestrelArityError("hash-map expects an even number of arguments")
    return {_expect_key("hash-map", k): v for k, v in zip(args[::2], args[1::2])}


# -------------------------------
# Maps
# -------------------------------
def contains(args: list[LispValue]) -> LispValue:
    _arity("contains?", args, 2)
    return from_bool(_expect_key("contains?", args[1]) in _expect_map("contains?", args[0]))


def assoc(args: list[LispValue]) -> dict:
    """(assoc m k v ...): a copy of m with the pairs added."""
    _min_arity("assoc", args, 1)
    result = dict(_expect_map("assoc", args[0]))
    pairs = args[1:]
    if len(pairs) % 2:
        raise KestrelArityError("assoc expects key/value pairs")
    for k, v in zip(pairs[::2], pairs[1::2]):
        result[_expect_key("assoc", k)] = v
    return result


def dissoc(args: list[LispValue]) -> dict:
    """(dissoc m k ...): a copy of m without the keys."""
    _min_arity("dissoc", args, 1)
    result = dict(_expect_map("dissoc", args[0]))
    for k in args[1:]:
        result.pop(k, None)
    return result


def get(args: list[LispValue]) -> LispValue:
    """(get m k): the value or null; (get null k) is null."""
    _arity("get", args, 2)
    if args[0] is Nil:
        return Nil
    return _expect_map("get", args[0]).get(_expect_key("get", args[1]), Nil)


def keys(args: list[LispValue]) -> list:
    _arity("keys", args, 1)
    return list(_expect_map("keys", args[0]).keys())


def vals(args: list[LispValue]) -> list:
    _arity("vals", args, 1)
    return list(_expect_map("vals", args[0]).values())


# -------------------------------
# Sequences
# -------------------------------
def cons(args: list[LispValue]) -> list:
    """(cons x seq): a new List with x in front; a null tail counts as empty."""
    _arity("cons", args, 2)
    head, tail = args
    if tail is Nil:
        return [head]
    return [head, *_expect_seq("cons", tail)]


def concat(args: list[LispValue]) -> list:
    result: list = []
    for seq in args:
        if seq is Nil:
            continue
        result.extend(_expect_seq("concat", seq))
    return result


def vec(args: list[LispValue]) -> Vector:
    _arity("vec", args, 1)
    return Vector(_expect_seq("vec", args[0]))


def nth(args: list[LispValue]) -> LispValue:
    _arity("nth", args, 2)
    seq = _expect_seq("nth", args[0])
    idx = _expect("nth", args[1], int, "an integer index")
    if idx < 0 or idx >= len(seq):
        raise KestrelIndexError("nth: index out of range")
    return seq[idx]


def first(args: list[LispValue]) -> LispValue:
    _arity("first", args, 1)
    if args[0] is Nil:
        return Nil
    seq = _expect_seq("first", args[0])
    return seq[0] if seq else Nil


def rest(args: list[LispValue]) -> list:
    _arity("rest", args, 1)
    if args[0] is Nil:
        return []
    return list(_expect_seq("rest", args[0])[1:])


def is_empty(args: list[LispValue]) -> LispValue:
    _arity("empty?", args, 1)
    if args[0] is Nil:
        return TRUE
    return from_bool(len(_expect_seq("empty?", args[0])) == 0)


def length(args: list[LispValue]) -> int:
    _arity("length", args, 1)
    if args[0] is Nil:
        return 0
    return len(_expect_seq("length", args[0]))


def conj(args: list[LispValue]) -> list:
    """(conj seq x ...): appends to a Vector, prepends (one at a time) to a List."""
    _min_arity("conj", args, 1)
    seq = _expect_seq("conj", args[0])
    if isinstance(seq, Vector):
        return Vector([*seq, *args[1:]])
    return [*reversed(args[1:]), *seq]


def seq(args: list[LispValue]) -> LispValue:
    """(seq x): a List view of x, or null when x is empty."""
    _arity("seq", args, 1)
    value = args[0]
    if isinstance(value, list):
        return list(value) if value else Nil
    if isinstance(value, str):
        return list(value) if value else Nil
    return Nil


# -------------------------------
# Higher order
# -------------------------------
def apply_(args: list[LispValue]) -> LispValue:
    """(apply f a b (c d)) == (f a b c d)"""
    _min_arity("apply", args, 2)
    fn, *middle, last = args
    return apply_function(fn, [*middle, *_expect_seq("apply", last)], evaluate)


def map_(args: list[LispValue]) -> list:
    _arity("map", args, 2)
    fn = args[0]
    return [apply_function(fn, [x], evaluate) for x in _expect_seq("map", args[1])]


# -------------------------------
# Metadata
# -------------------------------
def with_meta(args: list[LispValue]) -> LispValue:
    if len(args) not in (1, 2):
        raise KestrelArityError("with-meta expects a value and an optional meta form")
    target = _expect("with-meta", args[0], (Function, Atom), "a function or atom")
    return target.with_meta(args[1] if len(args) == 2 else Nil)


def meta(args: list[LispValue]) -> LispValue:
    _arity("meta", args, 1)
    value = args[0]
    if isinstance(value, (Function, Atom)):
        return value.meta
    return Nil


# -------------------------------
# Atoms
# -------------------------------
def atom(args: list[LispValue]) -> Atom:
    _arity("atom", args, 1)
    return Atom(args[0])


def deref(args: list[LispValue]) -> LispValue:
    _arity("deref", args, 1)
    return _expect("deref", args[0], Atom, "an atom").value


def reset(args: list[LispValue]) -> LispValue:
    _arity("reset!", args, 2)
    return _expect("reset!", args[0], Atom, "an atom").reset(args[1])


def swap(args: list[LispValue]) -> LispValue:
    """(swap! a f x ...): store (f @a x ...) in a and return it."""
    _min_arity("swap!", args, 2)
    cell = _expect("swap!", args[0], Atom, "an atom")
    return cell.reset(apply_function(args[1], [cell.value, *args[2:]], evaluate))


# -------------------------------
# Process
# -------------------------------
def exit_(args: list[LispValue]) -> LispValue:
    if len(args) > 1:
        raise KestrelArityError("exit expects an optional exit code")
    code = _expect("exit", args[0], int, "an integer exit code") if args else 0
    sys.exit(code)


_BUILTINS: dict[str, Builtin] = {
    "=": equals,
    "throw": throw,
    "null?": _predicate("null?", lambda v: v is Nil),
    "true?": _predicate("true?", lambda v: v is TRUE),
    "false?": _predicate("false?", lambda v: v is FALSE),
    "symbol": symbol,
    "symbol?": _predicate("symbol?", lambda v: isinstance(v, Symbol)),
    "string?": _predicate("string?", lambda v: isinstance(v, str)),
    "keyword": keyword,
    "keyword?": _predicate("keyword?", lambda v: isinstance(v, Keyword)),
    "number?": _predicate("number?", _is_number),
    "fn?": _predicate("fn?", _is_fn),
    "macro?": _predicate("macro?", _is_macro),

    "format-str": format_str,
    "str": to_str,
    "format": format_,
    "println": println,
    "read-string": read_string,
    "read-file": read_file,

    "<": _compare("<", lambda a, b: a < b),
    "<=": _compare("<=", lambda a, b: a <= b),
    ">": _compare(">", lambda a, b: a > b),
    ">=": _compare(">=", lambda a, b: a >= b),
    "+": _binary("+", lambda a, b: a + b),
    "-": _binary("-", lambda a, b: a - b),
    "*": _binary("*", lambda a, b: a * b),
    "/": divide,
    "time-ms": time_ms,

    "list": make_list,
    "list?": _predicate("list?", is_list),
    "vector": make_vector,
    "vector?": _predicate("vector?", lambda v: isinstance(v, Vector)),
    "hash-map": hash_map,
    "map?": _predicate("map?", lambda v: isinstance(v, dict)),
    "contains?": contains,
    "assoc": assoc,
    "dissoc": dissoc,
    "get": get,
    "keys": keys,
    "vals": vals,

    "sequential?": _predicate("sequential?", is_seq),
    "cons": cons,
    "concat": concat,
    "vec": vec,
    "nth": nth,
    "first": first,
    "rest": rest,
    "empty?": is_empty,
    "length": length,
    "conj": conj,
    "seq": seq,
    "apply": apply_,
    "map": map_,

    "with-meta": with_meta,
    "meta": meta,
    "atom": atom,
    "atom?": _predicate("atom?", lambda v: isinstance(v, Atom)),
    "deref": deref,
    "reset!": reset,
    "swap!": swap,

    "split": split,
    "exit": exit_,
}

CORE: MappingProxyType = MappingProxyType(
    {name: Primitive(name, fn) for name, fn in _BUILTINS.items()}
)


def register(env: Environment) -> None:
    """Bind every builtin in `env` (normally the root frame)."""
    for name, prim in CORE.items():
        env.define(Symbol(name), prim)
