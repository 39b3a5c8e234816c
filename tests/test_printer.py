import pytest

from kestrel.printer import as_binary, as_hex, pr_str
from kestrel.types.atom import Atom
from kestrel.types.constants import Nil, TRUE, FALSE
from kestrel.types.function import Closure, Primitive
from kestrel.types.environment import Environment
from kestrel.types.keyword import Keyword
from kestrel.types.symbol import Symbol
from kestrel.types.vector import Vector


@pytest.mark.parametrize(
    "value, readable, display",
    [
        (Nil, "null", "null"),
        (TRUE, "#t", "#t"),
        (FALSE, "#f", "#f"),
        (42, "42", "42"),
        (-7, "-7", "-7"),
        (2.5, "2.5", "2.5"),
        (Symbol("abc"), "abc", "abc"),
        (Keyword("k"), ":k", ":k"),
        ('a"b', '"a\\"b"', 'a"b'),
        ("line\nbreak", '"line\\nbreak"', "line\nbreak"),
        ("back\\slash", '"back\\\\slash"', "back\\slash"),
        ([1, Vector([2, 3])], "(1 [2 3])", "(1 [2 3])"),
        ([], "()", "()"),
        ({"a": 1, Keyword("b"): "x"}, '{"a" 1 :b "x"}', "{a 1 :b x}"),
        (Atom("v"), '(atom "v")', "(atom v)"),
    ],
)
def test_pr_str(value, readable, display):
    assert pr_str(value, True) == readable
    assert pr_str(value, False) == display


def test_function_printing():
    x = Symbol("x")
    square = Closure([x], [Symbol("*"), x, x], Environment())
    assert pr_str(square) == "#<function (x) (* x x)>"
    assert pr_str(square.as_macro()) == "#<macro (x) (* x x)>"
    plus = Primitive("+", lambda args: args[0] + args[1])
    assert pr_str(plus) == "#<builtin function +>"
    assert pr_str(plus.as_macro()) == "#<builtin macro +>"


@pytest.mark.parametrize("n, hexed, binary", [(255, "#xff", "#b11111111"), (0, "#x0", "#b0"), (-5, "-#x5", "-#b101")])
def test_radix_helpers(n, hexed, binary):
    assert as_hex(n) == hexed
    assert as_binary(n) == binary
