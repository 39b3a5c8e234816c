import pytest

from kestrel.config import _PACKAGED_DOCS_FILE
from kestrel.interpreter import Interpreter

# Two interpreter flavours are shared across the suite:
# - `bare`: builtins only, no prelude. Used for evaluator and builtin tests so
#   that nothing defined in core.lisp can mask a core behaviour.
# - `interp`: the full startup path, prelude and packaged man pages included.


@pytest.fixture
def bare():
    return Interpreter(prelude=False, docs_path=_PACKAGED_DOCS_FILE)


@pytest.fixture
def interp():
    return Interpreter(docs_path=_PACKAGED_DOCS_FILE)


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    # Tests must not pick up a developer's environment overrides.
    for var in ("KESTREL_PRELUDE_PATH", "KESTREL_DOCS_PATH", "KESTREL_RECURSION_LIMIT"):
        monkeypatch.delenv(var, raising=False)
