from kestrel import EvaluatorFn
from kestrel import SExpression, LispValue
from kestrel.errors import KestrelArityError
from kestrel.types.environment import Environment


def define_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """
    (define name value)
    Binds in the current frame only; redefining a name in the same frame fails.
    """
    if len(tail) != 2:
        raise KestrelArityError("define requires exactly 2 arguments")

    name, val_expr = tail
    value = evaluate_fn(val_expr, env)
    env.define(name, value)
    return value
