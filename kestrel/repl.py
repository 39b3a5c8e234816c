"""Line-oriented read-eval-print loop.

One line at a time is read, evaluated against a persistent Interpreter and,
unless the value is null, printed readably. Failures are reported and the loop
carries on; only end of input (or `(exit)`) ends it. A line that leaves a
list, vector or map open is held back and joined with the following lines.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from kestrel.errors import KestrelContinue, KestrelError, KestrelIncomplete
from kestrel.interpreter import Interpreter
from kestrel.printer import pr_str
from kestrel.reader.parser import read_all
from kestrel.types.constants import Nil

logger = logging.getLogger(__name__)

PROMPT = "kestrel> "
CONTINUATION_PROMPT = "    ...> "


class Repl:
    def __init__(
        self,
        interp: Optional[Interpreter] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        interactive: Optional[bool] = None,
    ):
        self.interp = interp if interp is not None else Interpreter()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.interactive = self.stdin.isatty() if interactive is None else interactive
        self.pending: list[str] = []

    def _write(self, text: str) -> None:
        print(text, file=self.stdout)

    def _prompt(self) -> None:
        if self.interactive:
            self.stdout.write(CONTINUATION_PROMPT if self.pending else PROMPT)
            self.stdout.flush()

    def feed(self, line: str) -> None:
        """Handle one line of input."""
        if not line.strip() and not self.pending:
            return
        source = "\n".join([*self.pending, line])
        try:
            # Read everything first so a half-finished line is never partly evaluated.
            forms = list(read_all(source))
        except KestrelIncomplete:
            self.pending.append(line)
            return
        except KestrelContinue:
            logger.debug("no form in %r", source)
            self.pending.clear()
            return
        except KestrelError as ex:
            self.pending.clear()
            self._report(ex, source)
            return
        self.pending.clear()

        for form in forms:
            try:
                result = self.interp.evaluate(form)
            except KestrelContinue:
                logger.debug("continuation signal while evaluating %r", source)
                return
            except KestrelError as ex:
                self._report(ex, source)
                return
            except Exception as ex:
                self._write(f"Error: {ex}")
                return
            if result is not Nil:
                self._write(pr_str(result, True))

    def _report(self, ex: KestrelError, source: str) -> None:
        self._write(f"{ex}\nForm:\n{source}")

    def run(self) -> None:
        while True:
            self._prompt()
            line = self.stdin.readline()
            if not line:
                if self.interactive:
                    self.stdout.write("\n")
                return
            self.feed(line.rstrip("\n"))
