from kestrel import EvaluatorFn
from kestrel import SExpression, LispValue
from kestrel.errors import KestrelArityError, KestrelTypeError, KestrelUnboundSymbol
from kestrel.types.environment import Environment
from kestrel.types.symbol import Symbol


def set_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """(set! var expr)

    The stored value is the result of evaluating `expr` and then evaluating
    that result once more; the value returned is the first result. For
    self-evaluating values (numbers, strings, constants) the two agree.
    """
    if len(tail) != 2:
        raise KestrelArityError("set! requires exactly 2 arguments: (set! var value)")
    var_sym, val_expr = tail
    if not isinstance(var_sym, Symbol):
        raise KestrelTypeError(f"set! first argument must be a Symbol, got {var_sym!r}")

    value = evaluate_fn(val_expr, env)
    if env.find(var_sym) is None:
        raise KestrelUnboundSymbol(f"set!: The symbol {var_sym} was not found in the environment.")
    env.set(var_sym, evaluate_fn(value, env))
    return value
