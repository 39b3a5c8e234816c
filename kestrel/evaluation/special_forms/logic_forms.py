from kestrel import EvaluatorFn, SExpression
from kestrel.types.constants import FALSE, TRUE
from kestrel.types.environment import Environment


def and_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SExpression:
    """Short-circuiting AND over the #f constant.

    (and a b c ...) evaluates each operand left-to-right and returns #f as soon
    as one of them yields #f. Otherwise the result is #t, never the last value.
    null is not #f, so (and null) is #t.
    """
    for expr in tail:
        if evaluate_fn(expr, env) is FALSE:
            return FALSE
    return TRUE
