from __future__ import annotations
import os
from pathlib import Path
from typing import Optional


# Resolve installation dir (kestrel package directory)
_KESTREL_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_DIR = _KESTREL_DIR / 'prelude'
_DEFAULT_DOCS_FILE = Path('docs.json')
_PACKAGED_DOCS_FILE = _DEFAULT_PRELUDE_DIR / 'docs.json'


def path_from_env(var: str, default: Path) -> Path:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    return Path(raw.strip())


def get_prelude_root() -> Path:
    p = path_from_env('KESTREL_PRELUDE_PATH', _DEFAULT_PRELUDE_DIR)
    # treat as single directory; if a file path is set, return its parent
    return p if p.is_dir() else p.parent


def get_docs_path() -> Path:
    """docs.json in the working directory wins over the packaged copy."""
    p = path_from_env('KESTREL_DOCS_PATH', _DEFAULT_DOCS_FILE)
    if p.is_file() or 'KESTREL_DOCS_PATH' in os.environ:
        return p
    return _PACKAGED_DOCS_FILE


def get_recursion_limit() -> Optional[int]:
    raw = os.environ.get('KESTREL_RECURSION_LIMIT')
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
