from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from kestrel.config import get_prelude_root

logger = logging.getLogger(__name__)

PRELUDE_FILE = 'core.lisp'


class _HasEvalPrelude(Protocol):
    def eval_prelude(self, code: str) -> None: ...


def prelude_path() -> Path:
    return get_prelude_root() / PRELUDE_FILE


# Prelude convenience loader: core.lisp under KESTREL_PRELUDE_PATH (or the packaged copy)

def load_prelude(itp: _HasEvalPrelude) -> bool:
    p = prelude_path()
    if not p.is_file():
        logger.warning("prelude not found at %s; starting without it", p)
        return False
    logger.debug("loading prelude from %s", p)
    itp.eval_prelude(p.read_text(encoding='utf-8'))
    return True
