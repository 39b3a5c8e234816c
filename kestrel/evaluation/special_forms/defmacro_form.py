"""Special form: defmacro.

    (defmacro name expr)

`expr` is evaluated to a function value; a macro copy of it is bound to
`name` in the current frame. The original function value is left as it was.
"""

from __future__ import annotations

import logging

from kestrel import EvaluatorFn, SExpression, LispValue
from kestrel.errors import KestrelArityError, KestrelTypeError
from kestrel.printer import pr_str
from kestrel.types.environment import Environment
from kestrel.types.function import Function
from kestrel.types.symbol import Symbol

logger = logging.getLogger(__name__)


def defmacro_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    if len(tail) != 2:
        raise KestrelArityError("defmacro requires a name and a function expression")

    macro_name, fn_expr = tail
    if not isinstance(macro_name, Symbol):
        raise KestrelTypeError(f"Macro name must be a Symbol, got {pr_str(macro_name)}")

    fn = evaluate_fn(fn_expr, env)
    if not isinstance(fn, Function):
        raise KestrelTypeError(f"defmacro: \"{pr_str(fn)}\" is not a function")

    macro = fn.as_macro()
    env.define(macro_name, macro)
    logger.debug("defined macro %s", macro_name)
    return macro
