from kestrel import SExpression, EvaluatorFn
from kestrel.errors import KestrelArityError, KestrelTypeError
from kestrel.evaluation.macro_expand import is_macro_call, macro_expand
from kestrel.printer import pr_str
from kestrel.types.environment import Environment


def macroexpand_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SExpression:
    """(macro-expand form): fully expand a macro-headed form and return it unevaluated.

    The argument is not evaluated, so it is written without a quote:
    (macro-expand (unless c x)).
    """
    if len(tail) != 1:
        raise KestrelArityError("macro-expand expects exactly 1 argument")
    form = tail[0]
    if not is_macro_call(form, env):
        raise KestrelTypeError(f"macro-expand: \"{pr_str(form)}\" is not a macro")
    return macro_expand(form, env, evaluate_fn)
