from kestrel import EvaluatorFn
from kestrel import SExpression
from kestrel.errors import KestrelArityError, KestrelMissingElseBranch
from kestrel.types.constants import is_truthy
from kestrel.types.environment import Environment
from kestrel.types.tail_call import TailCall


def if_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> TailCall:
    if len(tail) not in (2, 3):
        raise KestrelArityError("if requires a condition, a then-expression and an optional else")

    cond = evaluate_fn(tail[0], env)
    if is_truthy(cond):
        return TailCall(tail[1], env)
    if len(tail) == 3:
        return TailCall(tail[2], env)
    raise KestrelMissingElseBranch("'if' condition was false and there is no else branch.")
