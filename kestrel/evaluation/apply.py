"""Application engine for Kestrel.

Non-tail application of any function value. The evaluator's own tail path
(default application in the trampoline) binds closures the same way, so the
two routes always agree; everything else that has to call a function from
Python (`apply`, `map`, `swap!`, the macro expander) comes through here.
"""

from kestrel import LispValue, EvaluatorFn
from kestrel.errors import KestrelNotCallable
from kestrel.printer import pr_str
from kestrel.types.function import Closure, Primitive


def apply_function(fn: LispValue, args: list[LispValue], evaluate_fn: EvaluatorFn) -> LispValue:
    """Apply `fn` to already-evaluated `args` and run it to completion.

    - Primitive: called with the argument list.
    - Closure: body evaluated in a fresh frame over the captured environment.
    - Otherwise: KestrelNotCallable.
    """
    if isinstance(fn, Primitive):
        return fn.apply(args)
    if isinstance(fn, Closure):
        return evaluate_fn(fn.body, fn.bind(args))
    raise KestrelNotCallable(
        f"Typecheck failed. For function call head, got \"{pr_str(fn, True)}\" when expecting a function."
    )
