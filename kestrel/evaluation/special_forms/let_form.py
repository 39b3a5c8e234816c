"""Special form: let.

Accepts both binding shapes:

    (let ((a 1) (b (+ a 1))) body...)
    (let (a 1 b (+ a 1)) body...)

Bindings are evaluated in order inside the new frame, so later ones see
earlier ones. The body runs in tail position.
"""

from kestrel import EvaluatorFn
from kestrel import SExpression
from kestrel.errors import KestrelArityError, KestrelTypeError
from kestrel.evaluation.special_forms.body import implicit_begin
from kestrel.types.environment import Environment
from kestrel.types.tail_call import TailCall
from kestrel.types.vector import is_seq


def _binding_pairs(bindings: list[SExpression]) -> list[tuple[SExpression, SExpression]]:
    if bindings and is_seq(bindings[0]):
        pairs = []
        for b in bindings:
            if not is_seq(b) or len(b) != 2:
                raise KestrelTypeError(f"let binding must be (name value), got {b!r}")
            pairs.append((b[0], b[1]))
        return pairs
    if len(bindings) % 2:
        raise KestrelArityError("let bindings must come in name/value pairs")
    return list(zip(bindings[::2], bindings[1::2]))


def let_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> TailCall:
    if not tail:
        raise KestrelArityError("let requires a binding list")
    bindings = tail[0]
    if not is_seq(bindings):
        raise KestrelTypeError(f"let bindings must be a list, got {bindings!r}")

    local_env = Environment(outer=env)
    for name, val_expr in _binding_pairs(bindings):
        local_env.define(name, evaluate_fn(val_expr, local_env))

    return TailCall(implicit_begin(tail[1:]), local_env)
