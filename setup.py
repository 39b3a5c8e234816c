# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="kestrel",
    version="0.3.0",
    description="A small tree-walking Lisp interpreter with macros, a REPL and a language server",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["kestrel", "kestrel.*", "kestrel_lsp", "kestrel_lsp.*"]),
    package_data={"kestrel": ["prelude/*.lisp", "prelude/*.json"]},
    install_requires=[
        "pygls>=1.0,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "kestrel=kestrel.cli:main",
            "kestrel-ls=kestrel_lsp.server:main",
        ],
    },
    zip_safe=False,
)
