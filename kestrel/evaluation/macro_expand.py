"""Macro expansion.

A form is macro-headed when it is a non-empty List whose head symbol is bound,
in the current environment, to a Function with its macro flag set. Expansion
applies the macro to the unevaluated tail and repeats until the form is no
longer macro-headed.
"""

from __future__ import annotations

import logging

from kestrel import SExpression, EvaluatorFn
from kestrel.evaluation.apply import apply_function
from kestrel.types.environment import Environment
from kestrel.types.function import Function
from kestrel.types.symbol import Symbol
from kestrel.types.vector import is_list

logger = logging.getLogger(__name__)


def is_macro_call(form: SExpression, env: Environment) -> bool:
    if not is_list(form) or not form:
        return False
    head = form[0]
    if not isinstance(head, Symbol):
        return False
    frame = env.find(head)
    if frame is None:
        return False
    value = frame.vars[head]
    return isinstance(value, Function) and value.is_macro


def macro_expand(form: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> SExpression:
    """Expand `form` until its head is no longer a macro."""
    while is_macro_call(form, env):
        macro = env.lookup(form[0])
        form = apply_function(macro, list(form[1:]), evaluate_fn)
    return form
