from __future__ import annotations

"""
Lightweight indexer for Kestrel Lisp files without evaluating code.

We scan the buffer and build an index for:
- definitions: (define name ...), (defn name ...), (defmacro name ...)
- delimiter problems: unmatched or mismatched ) ] } and openers left unclosed

The scanner is tolerant: it never raises on partial/incomplete buffers. We only
extract enough structure to power LSP features (document symbols, completion,
hover and delimiter diagnostics).
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import re

from kestrel.builtin.core import CORE
from kestrel.docs import Documentation
from kestrel.evaluation.special_forms import SPECIAL_FORMS

# Simple token patterns for scanning
TOKEN_REGEX = re.compile(
    r"\s+|;[^\n]*|,@|[()\[\]{}]|'|`|,|\^|\"(?:\\.|[^\"\\])*\"?|[^\s()\[\]{}'\"`,;^]+"
)

CLOSED_STRING = re.compile(r"\"(?:\\.|[^\"\\])*\"")

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")", "]", "}"}
DEFINING_FORMS = {"define": "var", "defn": "function", "defmacro": "macro"}


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function" | "macro"
    line: int
    col: int


@dataclass
class DelimiterProblem:
    message: str
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    delimiter_problems: List[DelimiterProblem] = field(default_factory=list)
    has_unmatched_quote: bool = False

    @property
    def balanced(self) -> bool:
        return not self.delimiter_problems and not self.has_unmatched_quote


def _iter_tokens(text: str) -> Iterator[Tuple[str, int]]:
    for m in TOKEN_REGEX.finditer(text):
        tok = m.group(0)
        if not tok or tok.isspace() or tok.startswith(";"):
            continue
        yield tok, m.start()


def _position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def _definition_kind(head: str, tokens: List[Tuple[str, int]], name_pos: int) -> str:
    kind = DEFINING_FORMS[head]
    # (define f (lambda ...)) is reported as a function
    if kind == "var" and name_pos + 2 < len(tokens):
        if tokens[name_pos + 1][0] == "(" and tokens[name_pos + 2][0] == "lambda":
            return "function"
    return kind


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens = list(_iter_tokens(text))
    stack: List[Tuple[str, int]] = []

    for i, (tok, start) in enumerate(tokens):
        if tok in OPENERS:
            stack.append((tok, start))
            if tok != "(" or i + 2 >= len(tokens):
                continue
            head, name_tok = tokens[i + 1][0], tokens[i + 2]
            if head in DEFINING_FORMS and name_tok[0] not in OPENERS and name_tok[0] not in CLOSERS:
                name = name_tok[0]
                if not name.startswith('"'):
                    line, col = _position_from_offset(text, name_tok[1])
                    kind = _definition_kind(head, tokens, i + 2)
                    idx.symbols[name] = SymbolDef(name=name, kind=kind, line=line, col=col)
        elif tok in CLOSERS:
            line, col = _position_from_offset(text, start)
            if not stack:
                idx.delimiter_problems.append(DelimiterProblem(f"Unexpected '{tok}'", line, col))
                continue
            opener, _ = stack.pop()
            if OPENERS[opener] != tok:
                idx.delimiter_problems.append(
                    DelimiterProblem(f"Expected '{OPENERS[opener]}', got '{tok}'", line, col)
                )
        elif tok.startswith('"') and not CLOSED_STRING.fullmatch(tok):
            idx.has_unmatched_quote = True

    for opener, start in stack:
        line, col = _position_from_offset(text, start)
        idx.delimiter_problems.append(DelimiterProblem(f"Unclosed '{opener}'", line, col))

    return idx


# Special forms are not in the primitive table; give them fixed signatures.
SPECIAL_FORM_SIGNATURES: Dict[str, str] = {
    "define": "(define name value)",
    "let": "(let (name value ...) body...)",
    "begin": "(begin forms...)",
    "if": "(if cond then [else])",
    "lambda": "(lambda (params...) body...)",
    "quote": "(quote form)",
    "quasiquote": "(quasiquote form)",
    "quasiquote-expand": "(quasiquote-expand form)",
    "defmacro": "(defmacro name fn)",
    "macro-expand": "(macro-expand form)",
    "dotimes": "(dotimes (var count) body...)",
    "countdown": "(countdown (var count) body...)",
    "and": "(and forms...)",
    "set!": "(set! name value)",
    "try": "(try expr (catch name handler...))",
    "man": "(man name)",
    "help": "(help [name])",
}


def builtin_signatures(docs: Optional[Documentation] = None) -> Dict[str, str]:
    """Signatures for every primitive and special form, taken from docs where available."""
    sigs: Dict[str, str] = {}
    for name in CORE:
        page = docs.get(name) if docs is not None else None
        sigs[name] = f"({name} {' '.join(page.args)})" if page is not None else f"({name} ...)"
    for sym in SPECIAL_FORMS:
        sigs[str(sym)] = SPECIAL_FORM_SIGNATURES.get(str(sym), f"({sym} ...)")
    return sigs
