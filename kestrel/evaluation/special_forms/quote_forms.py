"""Special forms: quote, quasiquote and quasiquote-expand."""

from kestrel import EvaluatorFn
from kestrel import SExpression, LispValue
from kestrel.errors import KestrelArityError
from kestrel.evaluation.quasiquote import quasiquote
from kestrel.types.environment import Environment
from kestrel.types.tail_call import TailCall


def _single(name: str, tail: list[SExpression]) -> SExpression:
    if len(tail) != 1:
        raise KestrelArityError(f"{name} expects exactly 1 argument")
    return tail[0]


def quote_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    return _single("quote", tail)


def quasiquote_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> TailCall:
    """Rewrite the template and continue evaluating the rewrite in place."""
    return TailCall(quasiquote(_single("quasiquote", tail)), env)


def quasiquote_expand_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    """Return the rewrite itself, unevaluated. Handy when debugging templates."""
    return quasiquote(_single("quasiquote-expand", tail))
