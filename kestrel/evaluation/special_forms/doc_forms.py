from kestrel import EvaluatorFn, SExpression, LispValue
from kestrel.docs import Documentation
from kestrel.errors import KestrelArityError, KestrelTypeError
from kestrel.types.constants import Nil
from kestrel.types.environment import Environment
from kestrel.types.symbol import Symbol


def man_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    """(man name) / (help [name]): print documentation and return null.

    The name is not evaluated. With no name, or null, print the general help.
    """
    if len(tail) > 1:
        raise KestrelArityError("man/help take at most one name")

    docs = env.root().documentation or Documentation()
    if not tail or tail[0] is Nil:
        docs.print_default_help()
        return Nil

    name = tail[0]
    if not isinstance(name, Symbol):
        raise KestrelTypeError(f"man expects a symbol, got {name!r}")
    docs.man(name, env)
    return Nil
