"""Looping special forms for Kestrel: dotimes and countdown.

Both share one header shape, `(var count)`, and bind the loop variable in the
*current* frame rather than a fresh one. The variable is removed again when
the loop finishes, whether or not the body failed.

Each loop is a small evaluator object that closes over the header and body
and reuses the main evaluator for the body; loops are terminal and do not go
through the trampoline.
"""

from __future__ import annotations

from kestrel import SExpression, LispValue, EvaluatorFn
from kestrel.errors import KestrelInvalidLoopForm
from kestrel.evaluation.special_forms.body import implicit_begin
from kestrel.printer import pr_str
from kestrel.types.constants import Nil
from kestrel.types.environment import Environment
from kestrel.types.symbol import Symbol
from kestrel.types.vector import is_seq


class LoopEval:
    """Parses and validates `(var count)`; subclasses implement `run`."""

    form_name = "loop"

    def __init__(
        self,
        tail: list[SExpression],
        evaluate_fn: EvaluatorFn,
    ):
        if not tail:
            raise KestrelInvalidLoopForm(f"{self.form_name}: missing (var count) header")
        header = tail[0]
        if not is_seq(header) or len(header) != 2 or not isinstance(header[0], Symbol):
            raise KestrelInvalidLoopForm(
                f"{self.form_name}: invalid symbol or iterator used in {pr_str(header)}"
            )
        self.var: Symbol = header[0]
        self.count_expr: SExpression = header[1]
        self.body: SExpression = implicit_begin(tail[1:])
        self.evaluate_fn: EvaluatorFn = evaluate_fn

    def count(self, env: Environment) -> int:
        count = self.evaluate_fn(self.count_expr, env)
        if not isinstance(count, int):
            raise KestrelInvalidLoopForm(
                f"{self.form_name}: iteration count must be an integer, got {pr_str(count)}"
            )
        return count

    def eval(self, env: Environment) -> LispValue:
        count = self.count(env)
        env.define(self.var, self.initial(count))
        try:
            return self.run(count, env)
        finally:
            env.remove(self.var)

    def initial(self, count: int) -> int:
        raise NotImplementedError

    def run(self, count: int, env: Environment) -> LispValue:
        raise NotImplementedError


class DoTimesLoopEval(LoopEval):
    """(dotimes (var count) body...): body runs with var = 0 .. count-1."""

    form_name = "dotimes"

    def initial(self, count: int) -> int:
        return 0

    def run(self, count: int, env: Environment) -> LispValue:
        last_value = Nil
        for i in range(count):
            env.vars[self.var] = i
            last_value = self.evaluate_fn(self.body, env)
        return last_value


class CountdownLoopEval(LoopEval):
    """(countdown (var count) body...)

    Starts at `count` and steps down while the variable is below zero, so any
    count of zero or more finishes straight away with null. A negative count
    would never reach the exit test and is rejected up front.
    """

    form_name = "countdown"

    def count(self, env: Environment) -> int:
        count = super().count(env)
        if count < 0:
            raise KestrelInvalidLoopForm(f"countdown: count must not be negative, got {count}")
        return count

    def initial(self, count: int) -> int:
        return count

    def run(self, count: int, env: Environment) -> LispValue:
        last_value = Nil
        i = count
        while i < 0:
            env.vars[self.var] = i
            last_value = self.evaluate_fn(self.body, env)
            i -= 1
        return last_value


def do_times_n_loop_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Special form (dotimes (var n) ...): run body `n` times."""
    return DoTimesLoopEval(tail, evaluate_fn).eval(env)


def countdown_loop_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Special form (countdown (var n) ...)."""
    return CountdownLoopEval(tail, evaluate_fn).eval(env)
