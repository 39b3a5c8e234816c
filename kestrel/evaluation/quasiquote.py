"""Quasiquote rewriting.

`quasiquote(form)` turns a template into an ordinary expression built from
`cons`, `concat`, `vec` and `quote`. Evaluating that expression rebuilds the
template with `(unquote x)` parts evaluated and `(unquote-splice x)` parts
spliced in.

    `(1 ,x ,@ys)  =>  (cons 1 (cons x (concat ys ())))
"""

from kestrel import SExpression
from kestrel.types.symbol import Symbol
from kestrel.types.vector import Vector, is_list

QUOTE = Symbol("quote")
UNQUOTE = Symbol("unquote")
UNQUOTE_SPLICE = Symbol("unquote-splice")
CONS = Symbol("cons")
CONCAT = Symbol("concat")
VEC = Symbol("vec")


def _starts_with(form: SExpression, sym: Symbol) -> bool:
    return is_list(form) and len(form) == 2 and form[0] == sym


def quasiquote(form: SExpression) -> SExpression:
    if isinstance(form, Vector):
        return [VEC, quasiquote_loop(form)]
    if _starts_with(form, UNQUOTE):
        return form[1]
    if isinstance(form, list):
        return quasiquote_loop(form)
    if isinstance(form, (Symbol, dict)):
        return [QUOTE, form]
    return form


def quasiquote_loop(elements: list) -> SExpression:
    """Fold right to left into nested cons/concat calls."""
    acc: SExpression = []
    for element in reversed(elements):
        if _starts_with(element, UNQUOTE_SPLICE):
            acc = [CONCAT, element[1], acc]
        else:
            acc = [CONS, quasiquote(element), acc]
    return acc
