# Try-Catch handling
# Usage:
#   (try (throw "boom")
#        (catch e e))          ; => "boom"
#
#   (try (nth (list) 1)
#        (catch e (str "caught: " e)))
#
# The symbol in the catch clause is bound, in a new frame, to the thrown Form
# for a user `throw` and to the failure message (Text) for anything else.
# Continuation signals and SystemExit are never caught.

from kestrel import EvaluatorFn
from kestrel import SExpression, LispValue
from kestrel.errors import KestrelArityError, KestrelContinue, KestrelError
from kestrel.evaluation.special_forms.body import implicit_begin
from kestrel.types.environment import Environment
from kestrel.types.symbol import Symbol
from kestrel.types.tail_call import TailCall
from kestrel.types.vector import is_list

CATCH = Symbol("catch")


def _catch_clause(tail: list[SExpression]) -> list | None:
    if len(tail) < 2:
        return None
    clause = tail[1]
    if not is_list(clause) or not clause or clause[0] != CATCH:
        return None
    return clause


def try_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    if not tail:
        raise KestrelArityError("try requires a protected expression")

    try:
        return evaluate_fn(tail[0], env)
    except KestrelContinue:
        raise
    except Exception as ex:
        clause = _catch_clause(tail)
        if clause is None:
            raise
        if len(clause) < 3 or not isinstance(clause[1], Symbol):
            raise KestrelArityError("catch clause must look like (catch name handler...)") from ex
        payload = ex.payload if isinstance(ex, KestrelError) else str(ex)
        handler_env = Environment(env, [clause[1]], [payload])
        return TailCall(implicit_begin(clause[2:]), handler_env)
