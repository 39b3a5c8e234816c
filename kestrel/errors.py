from typing import Any


class KestrelError(Exception):
    """ Base class for all Kestrel failures"""

    @property
    def payload(self) -> Any:
        """The Form a `catch` clause binds: the message as Text."""
        return str(self)

class KestrelParseError(KestrelError):
    """ Raised when the reader meets a malformed token or delimiter"""

class KestrelUnboundSymbol(KestrelError):
    """ Raised when a symbol is looked up or mutated before it is bound"""

class KestrelDuplicateDefinition(KestrelError):
    """ Raised when a name is defined twice in the same frame"""

class KestrelTypeError(KestrelError):
    """ Raised when an operation is applied to the wrong value variant"""

class KestrelIndexError(KestrelError):
    """ Raised when an index falls outside a sequence"""

class KestrelNotCallable(KestrelError):
    """ Raised when a non-function value is applied"""

class KestrelMissingElseBranch(KestrelError):
    """ Raised when an `if` condition is false and there is no else clause"""

class KestrelInvalidLoopForm(KestrelError):
    """ Raised when a dotimes/countdown header is malformed"""

class KestrelArityError(KestrelError):
    """ Raised when a special form or primitive gets the wrong number of arguments"""

class KestrelArithmeticError(KestrelError):
    """ Raised on division by zero"""


class KestrelThrown(KestrelError):
    """Raised by `throw`; carries an arbitrary Form as its payload."""

    def __init__(self, value: Any):
        from kestrel.printer import pr_str
        super().__init__(pr_str(value, True))
        self.value = value

    @property
    def payload(self) -> Any:
        return self.value


class KestrelContinue(Exception):
    """ Signal: there is no complete form to evaluate yet. Not a failure."""

class KestrelIncomplete(KestrelContinue):
    """ Signal: input ended inside an open list, vector or map"""
