"""Runtime environment for Kestrel.

The Environment stores bindings of Symbols to evaluated Lisp values and supports
nested lexical scopes via an `outer` link. `define` writes the local frame only
and refuses redefinition; `set` writes whichever frame already holds the name.
"""

from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

from kestrel import LispValue
from kestrel.errors import KestrelDuplicateDefinition, KestrelTypeError, KestrelUnboundSymbol
from kestrel.types.constants import Nil
from kestrel.types.symbol import Symbol

if TYPE_CHECKING:
    from kestrel.docs import Documentation

REST = Symbol("&rest")


class Environment:
    """Hierarchical mapping from Symbols to Lisp values."""

    __slots__ = ("vars", "outer", "documentation")

    def __init__(
        self,
        outer: Optional[Environment] = None,
        params: Optional[Sequence[Symbol]] = None,
        args: Optional[Sequence[LispValue]] = None,
    ):
        self.vars: dict[Symbol, LispValue] = {}
        self.outer: Environment | None = outer
        # Only consulted on the root frame (see root()).
        self.documentation: Documentation | None = None
        if params is not None:
            self._bind(params, list(args) if args is not None else [])

    def _bind(self, params: Sequence[Symbol], args: list[LispValue]) -> None:
        """Bind params to args positionally; `&rest name` takes the remainder as a list."""
        for i, param in enumerate(params):
            if not isinstance(param, Symbol):
                raise KestrelTypeError(f"Parameter must be a symbol, got {param!r}")
            if param == REST:
                if i + 1 < len(params):
                    self.vars[params[i + 1]] = list(args[i:])
                break
            self.vars[param] = args[i] if i < len(args) else Nil

    def define(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` to `value` in this frame.

        Raises KestrelDuplicateDefinition if this exact frame already binds
        `name`; shadowing an outer binding is fine.
        """
        if not isinstance(name, Symbol):
            raise KestrelTypeError(f"Cannot define {name!r}: not a symbol")
        if name in self.vars:
            raise KestrelDuplicateDefinition(f"Symbol '{name}' already exists in the environment.")
        self.vars[name] = value

    def find(self, name: Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: Symbol) -> LispValue:
        """Look up the value bound to `name`, innermost frame first."""
        env = self.find(name)
        if env is None:
            raise KestrelUnboundSymbol(
                f"The symbol \"{name}\" was looked up in the environment, but it does not exist."
            )
        return env.vars[name]

    def set(self, name: Symbol, value: LispValue) -> None:
        """Update an existing binding for `name` wherever it lives in the chain."""
        env = self.find(name)
        if env is None:
            raise KestrelUnboundSymbol(f"set!: The symbol {name} was not found in the environment.")
        env.vars[name] = value

    def remove(self, name: Symbol) -> None:
        """Drop a local binding if present."""
        self.vars.pop(name, None)

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def __repr__(self) -> str:
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return f"<Environment {len(self.vars)} bindings, depth {depth}>"
