# Core type aliases for Kestrel's data model.
# Plain Python types carry most values (int, float, str, list, dict); the
# variants Python has no native shape for (symbols, keywords, vectors, atoms,
# functions and the three constants) live under kestrel.types.
#
# Naming guidance:
# - SExpression: Use in reader/macro code to denote syntactic forms (code-as-data).
# - LispValue:  Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to `Any` and are interchangeable.

from typing import Any, Callable

__version__ = "0.3.0"

# Runtime value alias
LispValue = Any
SExpression = LispValue

# Evaluator function type: evaluate(expr, env) -> value
EvaluatorFn = Callable[..., LispValue]
