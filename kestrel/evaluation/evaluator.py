"""Core evaluator and trampoline for the Kestrel interpreter.

`evaluate` owns a mutable `(ast, env)` pair and loops. Special forms either
return a finished value or a TailCall naming the next `(expr, env)` to run;
closure application in the default case does the same. Tail position
therefore never grows the Python stack.
"""

from __future__ import annotations

from kestrel import SExpression, LispValue
from kestrel.errors import KestrelNotCallable
from kestrel.evaluation.macro_expand import macro_expand
from kestrel.evaluation.special_forms import SPECIAL_FORMS
from kestrel.printer import pr_str
from kestrel.types.environment import Environment
from kestrel.types.function import Closure, Primitive
from kestrel.types.symbol import Symbol
from kestrel.types.tail_call import TailCall
from kestrel.types.vector import Vector, is_list


def eval_ast(ast: SExpression, env: Environment) -> LispValue:
    """Evaluate a non-List form: look up symbols, evaluate vector elements and map values."""
    if isinstance(ast, Symbol):
        return env.lookup(ast)
    if isinstance(ast, Vector):
        return Vector(evaluate(x, env) for x in ast)
    if isinstance(ast, dict):
        return {k: evaluate(v, env) for k, v in ast.items()}
    return ast


def evaluate(ast: SExpression, env: Environment) -> LispValue:
    """
    Trampoline evaluator: tail-call aware evaluation.
    """
    while True:
        if not is_list(ast):
            return eval_ast(ast, env)

        ast = macro_expand(ast, env, evaluate)
        if not is_list(ast):
            return eval_ast(ast, env)

        if not ast:
            return ast

        head = ast[0]
        if isinstance(head, Symbol) and head in SPECIAL_FORMS:
            result = SPECIAL_FORMS[head](ast[1:], env, evaluate)
        else:
            result = _apply_default(ast, env)

        if isinstance(result, TailCall):
            ast, env = result.expr, result.env
            continue
        return result


def _apply_default(ast: list, env: Environment) -> LispValue | TailCall:
    values = [evaluate(x, env) for x in ast]
    fn, args = values[0], values[1:]
    if isinstance(fn, Closure):
        return TailCall(fn.body, fn.bind(args))
    if isinstance(fn, Primitive):
        return fn.apply(args)
    raise KestrelNotCallable(
        f"Typecheck failed. For function call head, got \"{pr_str(fn, True)}\" when expecting a function."
    )
