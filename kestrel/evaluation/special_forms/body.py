from kestrel import SExpression
from kestrel.types.constants import Nil
from kestrel.types.symbol import Symbol

BEGIN = Symbol("begin")


def implicit_begin(forms: list[SExpression]) -> SExpression:
    """Collapse a body of zero or more forms into a single form."""
    if not forms:
        return Nil
    if len(forms) == 1:
        return forms[0]
    return [BEGIN, *forms]
