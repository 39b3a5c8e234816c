"""Interpreter facade.

Owns one root environment: the builtin table, a per-interpreter `eval`,
the documentation records used by `man`/`help`, and (optionally) the prelude.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from kestrel import LispValue, SExpression
from kestrel.builtin.core import register
from kestrel.config import get_docs_path, get_recursion_limit
from kestrel.docs import Documentation
from kestrel.errors import KestrelArityError
from kestrel.evaluation.evaluator import evaluate
from kestrel.modules.package_loader import load_prelude
from kestrel.reader.parser import read_all
from kestrel.types.constants import Nil
from kestrel.types.environment import Environment
from kestrel.types.function import Primitive
from kestrel.types.symbol import Symbol

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Evaluates Kestrel source against a persistent root environment.

    prelude: True loads core.lisp from the prelude directory, False skips it,
             and a string is evaluated as the prelude instead.
    docs_path: documentation JSON; defaults to the configured location.
    """
    def __init__(self, prelude: bool | str = True, docs_path: Path | None = None):
        limit = get_recursion_limit()
        if limit is not None and limit > sys.getrecursionlimit():
            sys.setrecursionlimit(limit)

        self.env = Environment()
        register(self.env)
        self.env.define(Symbol("eval"), Primitive("eval", self._eval_primitive))
        self.env.documentation = Documentation.load(docs_path if docs_path is not None else get_docs_path())

        if isinstance(prelude, str):
            self.eval_prelude(prelude)
        elif prelude:
            load_prelude(self)

    @property
    def documentation(self) -> Documentation:
        return self.env.documentation

    def _eval_primitive(self, args: list[LispValue]) -> LispValue:
        if len(args) != 1:
            raise KestrelArityError(f"eval expects 1 argument(s), got {len(args)}")
        return evaluate(args[0], self.env)

    def evaluate(self, form: SExpression) -> LispValue:
        """Evaluate an already-read form in the root environment."""
        return evaluate(form, self.env)

    def eval_prelude(self, code: str) -> None:
        """Evaluate a string of Lisp code as prelude."""
        for expr in read_all(code):
            evaluate(expr, self.env)

    def eval(self, code: str) -> LispValue:
        """Evaluate every form in `code`.

        Returns null for no forms, the value for one form and a list of
        values for several.
        """
        results = [evaluate(expr, self.env) for expr in read_all(code)]
        if not results:
            return Nil
        if len(results) == 1:
            return results[0]
        return results

    def eval_file(self, path: str | Path) -> LispValue:
        logger.debug("evaluating %s", path)
        return self.eval(Path(path).read_text(encoding="utf-8"))
