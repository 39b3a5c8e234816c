from kestrel import SExpression
from kestrel.types.environment import Environment


class TailCall:
    """Returned by a special form to hand `(expr, env)` back to the trampoline."""

    __slots__ = ("expr", "env")

    def __init__(self, expr: SExpression, env: Environment):
        self.expr = expr
        self.env = env
