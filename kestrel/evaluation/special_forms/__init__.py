"""Registry of special forms for the Kestrel evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table before ordinary function application.

Every handler has the signature `(tail, env, evaluate_fn)` and returns either
a finished value or a TailCall for the trampoline to continue with.
"""

from types import MappingProxyType

from kestrel.types.symbol import Symbol
from kestrel.evaluation.special_forms.define_form import define_form
from kestrel.evaluation.special_forms.let_form import let_form
from kestrel.evaluation.special_forms.begin_form import begin_form
from kestrel.evaluation.special_forms.if_form import if_form
from kestrel.evaluation.special_forms.lambda_form import lambda_form
from kestrel.evaluation.special_forms.quote_forms import quote_form, quasiquote_form, quasiquote_expand_form
from kestrel.evaluation.special_forms.defmacro_form import defmacro_form
from kestrel.evaluation.special_forms.macroexpand_form import macroexpand_form
from kestrel.evaluation.special_forms.do_loop_forms import do_times_n_loop_form, countdown_loop_form
from kestrel.evaluation.special_forms.logic_forms import and_form
from kestrel.evaluation.special_forms.set_form import set_form
from kestrel.evaluation.special_forms.try_catch_form import try_form
from kestrel.evaluation.special_forms.doc_forms import man_form

SPECIAL_FORMS = MappingProxyType({
    Symbol("define"): define_form,
    Symbol("let"): let_form,
    Symbol("begin"): begin_form,
    Symbol("if"): if_form,
    Symbol("lambda"): lambda_form,
    Symbol("quote"): quote_form,
    Symbol("quasiquote"): quasiquote_form,
    Symbol("quasiquote-expand"): quasiquote_expand_form,
    Symbol("defmacro"): defmacro_form,
    Symbol("macro-expand"): macroexpand_form,
    Symbol("dotimes"): do_times_n_loop_form,
    Symbol("countdown"): countdown_loop_form,
    Symbol("and"): and_form,
    Symbol("set!"): set_form,
    Symbol("try"): try_form,
    Symbol("man"): man_form,
    Symbol("help"): man_form,
})
