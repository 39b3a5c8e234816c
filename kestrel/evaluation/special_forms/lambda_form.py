from kestrel import EvaluatorFn
from kestrel import SExpression, LispValue
from kestrel.errors import KestrelArityError, KestrelTypeError
from kestrel.evaluation.special_forms.body import implicit_begin
from kestrel.types.environment import Environment
from kestrel.types.function import Closure
from kestrel.types.symbol import Symbol
from kestrel.types.vector import is_seq


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    # (lambda (params) body...): several body forms run as an implicit begin,
    # no body at all makes the function return null.
    if not tail:
        raise KestrelArityError("lambda requires at least a parameter list")

    params = tail[0]
    if not is_seq(params):
        raise KestrelTypeError(f"lambda parameter list must be a list, got {params!r}")
    for p in params:
        if not isinstance(p, Symbol):
            raise KestrelTypeError(f"lambda parameter must be a symbol, got {p!r}")

    return Closure(params, implicit_begin(tail[1:]), env)
