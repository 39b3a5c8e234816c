from kestrel import EvaluatorFn
from kestrel import SExpression, LispValue
from kestrel.types.constants import Nil
from kestrel.types.environment import Environment
from kestrel.types.tail_call import TailCall


def begin_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    if not tail:
        return Nil
    for e in tail[:-1]:
        evaluate_fn(e, env)
    return TailCall(tail[-1], env)
