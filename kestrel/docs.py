"""Documentation records consulted by `man` and `help`.

Pages come from a JSON file shaped like

    {"pages": [{"name": "+", "args": ["a", "b"], "desc": "...",
                "returns": ["number", "The sum of a and b."]}, ...]}

Missing or unreadable documentation is not an error: `Documentation.load`
logs it at debug level and returns an empty record set.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from kestrel.types.environment import Environment
    from kestrel.types.symbol import Symbol

logger = logging.getLogger(__name__)

DEFAULT_HELP = """
This is a Lisp interpreter. It can evaluate basic
Lisp expressions, such as (+ 1 2) or (define a 25).

List of a few built-ins:
(+ <arg0> <arg1>) - Add two numbers.
(list <values...>) - Create a list out of the given values. (list) creates an empty list.
(define <sym-name> <value>) - Bind a symbol to a value.
(defmacro <sym-name> <value>) - Define a macro.
(let (<name> <value> ...) ...) - Define symbols that are valid within the let.
(if cond true-case [false-case]) - If statement. If the condition is false and there is
no false-case, evaluation fails.
(lambda (<argument-list>) ...) - Define an anonymous function.
(try <expr> (catch <name> <handler>)) - Evaluate <expr>, running <handler> on failure.

For detailed information on a single function (if available), try out (man <function-name>).

Types:
int - Any integer value, e.g. 10. Hexadecimal (#x231, 0x3343943) and binary (#b101) forms
      are accepted. Integers can be as large as you want.
float - Floating point number, e.g. 2.25.
string - Sequence of characters enclosed in quotes.
keyword - A name prefixed with a colon, e.g. :key. Evaluates to itself.
list - A list of values enclosed in parens, e.g (1 2 3).
vector - A list of values enclosed in brackets, e.g [1 2 3].
map - Keys and values enclosed in braces, e.g {"a" 1 :b 2}.
symbol - A literal, e.g 'sym'. Symbols can be bound to values using 'define'. For example,
         (define var (+ 10 15)) will bind the result of (+ 10 15) to 'var'.

Constants:
#t - true
#f - false
null - null value
"""


@dataclass
class ManPage:
    name: str
    args: list[str] = field(default_factory=list)
    desc: str = ""
    returns: list[str] = field(default_factory=lambda: ["", ""])

    @classmethod
    def from_json(cls, raw: dict) -> ManPage:
        returns = list(raw.get("returns") or [])
        returns += [""] * (2 - len(returns))
        return cls(
            name=str(raw["name"]),
            args=[str(a) for a in raw.get("args") or []],
            desc=str(raw.get("desc") or ""),
            returns=returns,
        )

    @property
    def signature(self) -> str:
        parts = [*self.args, self.returns[0]]
        return f"(defun {self.name} (function {' '.join(p for p in parts if p)}))"

    def render(self) -> str:
        return f"Signature: {self.signature}\n\n{self.desc}\n\nReturns: {self.returns[1]}"


@dataclass
class Documentation:
    pages: dict[str, ManPage] = field(default_factory=dict)
    source: Optional[Path] = None

    @classmethod
    def load(cls, path: Optional[Path]) -> Documentation:
        if path is None:
            return cls()
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            pages = [ManPage.from_json(p) for p in raw["pages"]]
        except (OSError, ValueError, KeyError, TypeError) as ex:
            logger.debug("no documentation loaded from %s: %s", path, ex)
            return cls()
        logger.debug("loaded %d man pages from %s", len(pages), path)
        return cls({p.name: p for p in pages}, Path(path))

    def get(self, name: str) -> Optional[ManPage]:
        return self.pages.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.pages

    def __len__(self) -> int:
        return len(self.pages)

    def print_default_help(self) -> None:
        print(DEFAULT_HELP)

    def man_text(self, name: Symbol, env: Environment) -> str:
        if env.find(name) is None:
            return f'Function "{name}" does not exist.'
        page = self.get(str(name))
        if page is None:
            return f"No man page for {name}"
        return page.render()

    def man(self, name: Symbol, env: Environment) -> None:
        print(self.man_text(name, env))
