from __future__ import annotations

"""
A minimal pygls-based Language Server for Kestrel Lisp.

Features:
- Text synchronization and document store
- Diagnostics: reader errors from the real parser, plus delimiter and quote problems
- Hover: man pages, builtin signatures and locally defined symbols
- Completion: builtins, special forms and locals
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
)

from kestrel import __version__
from kestrel.config import get_docs_path
from kestrel.docs import Documentation
from kestrel.errors import KestrelIncomplete, KestrelParseError
from kestrel.reader.parser import read_all
from kestrel_lsp.indexer import DocumentIndex, build_index, builtin_signatures

SOURCE = "kestrel-ls"


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class KestrelLanguageServer(LanguageServer):
    CMD_NAME = "kestrel-ls"

    def __init__(self, docs: Optional[Documentation] = None):
        super().__init__(self.CMD_NAME, __version__)
        self.documents: Dict[str, DocumentState] = {}
        self.docs = docs if docs is not None else Documentation.load(get_docs_path())
        self.signatures = builtin_signatures(self.docs)

    def update(self, uri: str, text: str) -> DocumentState:
        state = DocumentState(text=text, index=build_index(text))
        self.documents[uri] = state
        return state


ls = KestrelLanguageServer()


# --- Text sync ---
@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: KestrelLanguageServer, params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    state = ls.update(uri, params.text_document.text or "")
    ls.publish_diagnostics(uri, diagnostics(state.text, state.index))


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: KestrelLanguageServer, params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        text = ls.documents[uri].text if uri in ls.documents else ""
    state = ls.update(uri, text)
    ls.publish_diagnostics(uri, diagnostics(state.text, state.index))


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: KestrelLanguageServer, params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Diagnostics ---
def _mk_range(line: int, col: int) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + 1))


def diagnostics(text: str, idx: DocumentIndex) -> List[Diagnostic]:
    diags: List[Diagnostic] = []

    for problem in idx.delimiter_problems:
        diags.append(
            Diagnostic(
                range=_mk_range(problem.line, problem.col),
                message=problem.message,
                severity=DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )

    if idx.has_unmatched_quote:
        diags.append(
            Diagnostic(
                range=_mk_range(0, 0),
                message="Unmatched quote detected",
                severity=DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )

    # The reader has the final say on what parses.
    try:
        for _ in read_all(text):
            pass
    except KestrelIncomplete as ex:
        diags.append(Diagnostic(range=_mk_range(0, 0), message=f"Incomplete form: {ex}",
                                severity=DiagnosticSeverity.Error, source=SOURCE))
    except KestrelParseError as ex:
        diags.append(Diagnostic(range=_mk_range(0, 0), message=str(ex),
                                severity=DiagnosticSeverity.Error, source=SOURCE))

    return diags


# --- Hover ---
def hover_text(ls: KestrelLanguageServer, word: str, idx: DocumentIndex) -> Optional[str]:
    page = ls.docs.get(word)
    if page is not None:
        return page.render()
    if word in ls.signatures:
        return ls.signatures[word]
    if word in idx.symbols:
        sdef = idx.symbols[word]
        return f"{word}: {sdef.kind} (defined at {sdef.line + 1}:{sdef.col + 1})"
    return None


@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(ls: KestrelLanguageServer, params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    word = extract_word_at(state.text, params.position)
    if not word:
        return None

    contents = hover_text(ls, word, state.index)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
def completion_items(ls: KestrelLanguageServer, idx: DocumentIndex) -> List[CompletionItem]:
    items: List[CompletionItem] = []
    for name, sig in ls.signatures.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    for name, sdef in idx.symbols.items():
        if name in ls.signatures:
            continue
        kind = CompletionItemKind.Variable if sdef.kind == "var" else CompletionItemKind.Function
        items.append(CompletionItem(label=name, kind=kind))
    return items


@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["("]))
def on_completion(ls: KestrelLanguageServer, params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return CompletionList(is_incomplete=False, items=[])
    return CompletionList(is_incomplete=False, items=completion_items(ls, state.index))


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(ls: KestrelLanguageServer, params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = Range(
            start=Position(line=sdef.line, character=sdef.col),
            end=Position(line=sdef.line, character=sdef.col + len(name)),
        )
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SymbolKind.Variable if sdef.kind == "var" else SymbolKind.Function,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


# --- Helpers ---
WORD_BREAKS = " \t()[]{}'`,\"\n\r"


def extract_word_at(text: str, pos: Position) -> Optional[str]:
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return None
    line = lines[pos.line]
    start = min(pos.character, len(line))
    while start > 0 and line[start - 1] not in WORD_BREAKS:
        start -= 1
    end = pos.character
    while end < len(line) and line[end] not in WORD_BREAKS:
        end += 1
    word = line[start:end]
    return word or None


def main():
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
