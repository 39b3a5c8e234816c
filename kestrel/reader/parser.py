"""
  Kestrel Reader, Lexer and Parser

- Streaming, lazy parsing
- Emits Python primitives and kestrel.types values:

    - null / #t / #f -> Nil / TRUE / FALSE
    - lists          -> Python list
    - vectors        -> Vector
    - maps           -> dict (string or keyword keys)
    - symbols        -> Symbol
    - :keywords      -> Keyword
    - strings        -> str
    - numbers        -> int (decimal, #x/0x hex, #b/0b binary) / float
    - reader macros  -> (quote x), (quasiquote x), (unquote x),
                        (unquote-splice x), (with-meta x), (deref x)

Running out of tokens before a form starts raises KestrelContinue; running out
inside an open list, vector or map raises KestrelIncomplete. Both are signals,
not failures.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from kestrel import SExpression
from kestrel.errors import KestrelContinue, KestrelIncomplete, KestrelParseError
from kestrel.types.constants import Nil, TRUE, FALSE
from kestrel.types.keyword import Keyword
from kestrel.types.symbol import Symbol
from kestrel.types.vector import Vector


TOKEN_RE = re.compile(
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<splice>,@)"  # ,@
    r"|(?P<deref>->(?=[^\s)\]}]))"  # ->x
    r"|(?P<macro>['`,^])"  # ' ` , ^
    r"|(?P<open>[(\[{])"
    r"|(?P<close>[)\]}])"
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r'|(?P<open_string>"(?:\\.|[^\\"])*$)'  # string running off the end
    r"|(?P<atom>[^\s()\[\]{}'\"`,;^]+)",  # fallback: numbers, constants, symbols
    re.DOTALL,
)

INT_RE = re.compile(r"^-?[0-9]+$")
HEX_RE = re.compile(r"^[0#][xX]([0-9a-fA-F]+)$")
BIN_RE = re.compile(r"^[0#][bB]([01]+)$")
FLOAT_RE = re.compile(r"^-?[0-9][0-9.]*$")
ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

ESCAPES: dict[str, str] = {"n": "\n", '"': '"', "\\": "\\"}

READER_MACROS: dict[str, Symbol] = {
    "'": Symbol("quote"),
    "`": Symbol("quasiquote"),
    ",": Symbol("unquote"),
    ",@": Symbol("unquote-splice"),
    "^": Symbol("with-meta"),
    "->": Symbol("deref"),
}

CLOSERS: dict[str, str] = {"(": ")", "[": "]", "{": "}"}


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            raise KestrelParseError(f"unrecognized character at {pos}: {source[pos]!r}")
        pos = m.end()
        kind = m.lastgroup
        if kind == "comment":
            continue
        if kind == "open_string":
            raise KestrelParseError("expected '\"', got EOF")
        if kind in ("splice", "deref"):
            kind = "macro"
        yield kind, m.group(0)


def read_atom(token: str) -> SExpression:
    if INT_RE.match(token):
        return int(token)
    m = HEX_RE.match(token)
    if m:
        return int(m.group(1), 16)
    m = BIN_RE.match(token)
    if m:
        return int(m.group(1), 2)
    if FLOAT_RE.match(token):
        try:
            return float(token)
        except ValueError:
            raise KestrelParseError(f"unrecognized token: '{token}'") from None
    if token == "null":
        return Nil
    if token == "#t":
        return TRUE
    if token == "#f":
        return FALSE
    if token.startswith(":"):
        return Keyword(token[1:])
    return Symbol(token)


def read_string_literal(token: str) -> str:
    body = token[1:-1]
    return ESCAPE_RE.sub(lambda m: ESCAPES.get(m.group(1), "\\" + m.group(1)), body)


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def at_end(self) -> bool:
        return self.peek()[0] is None

    def parse_expr(self) -> SExpression:
        """Read one form. Raises KestrelContinue if the stream is already exhausted."""
        tok_type, tok_val = self.advance()
        if tok_type is None:
            raise KestrelContinue()

        if tok_type == "macro":
            if self.at_end():
                raise KestrelIncomplete(f"expected a form after '{tok_val}'")
            return [READER_MACROS[tok_val], self.parse_expr()]

        if tok_type == "open":
            items = self._parse_seq(tok_val)
            if tok_val == "[":
                return Vector(items)
            if tok_val == "{":
                return self._to_map(items)
            return items

        if tok_type == "close":
            raise KestrelParseError(f"unexpected '{tok_val}'")

        if tok_type == "string":
            return read_string_literal(tok_val)

        return read_atom(tok_val)

    def _parse_seq(self, opener: str) -> list[SExpression]:
        closer = CLOSERS[opener]
        items: list[SExpression] = []
        while True:
            tok_type, tok_val = self.peek()
            if tok_type is None:
                raise KestrelIncomplete(f"expected '{closer}', got EOF")
            if tok_type == "close":
                self.advance()
                if tok_val != closer:
                    raise KestrelParseError(f"expected '{closer}', got '{tok_val}'")
                return items
            items.append(self.parse_expr())

    @staticmethod
    def _to_map(items: list[SExpression]) -> dict:
        if len(items) % 2:
            raise KestrelParseError("map literal needs an even number of forms")
        result = {}
        for key, value in zip(items[::2], items[1::2]):
            if not isinstance(key, (str, Keyword)):
                raise KestrelParseError(f"map keys must be strings or keywords, got {key!r}")
            result[key] = value
        return result

    def parse_all(self) -> Iterator[SExpression]:
        while not self.at_end():
            yield self.parse_expr()


def read_str(source: str) -> SExpression:
    """Read the first form of `source`."""
    return TokenStream(lex(source)).parse_expr()


def read_all(source: str) -> Iterator[SExpression]:
    """Lazily read every form of `source`."""
    return TokenStream(lex(source)).parse_all()
