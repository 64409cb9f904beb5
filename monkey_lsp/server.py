from __future__ import annotations

"""
A minimal pygls-based Language Server for Monkey.

Features:
- Text synchronization and document store
- Diagnostics: parser errors
- Hover: builtin signatures and top-level bindings
- Completion: keywords, builtins and top-level bindings
- Signature Help: builtins and top-level functions/macros
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_SIGNATURE_HELP,
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
    ParameterInformation,
    Position,
    Range,
    SignatureHelp,
    SignatureHelpOptions,
    SignatureHelpParams,
    SignatureInformation,
    SymbolKind,
)
from pygls.server import LanguageServer

from monkey_lsp.indexer import (
    BUILTIN_SIGNATURES,
    KEYWORD_NAMES,
    DocumentIndex,
    build_index,
    callee_before,
    word_at,
)

logger = logging.getLogger(__name__)

SYMBOL_KINDS = {
    "function": SymbolKind.Function,
    "macro": SymbolKind.Operator,
    "var": SymbolKind.Variable,
}


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class MonkeyLanguageServer(LanguageServer):
    CMD_NAME = "monkey-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, "v0.1")
        self.documents: Dict[str, DocumentState] = {}


ls = MonkeyLanguageServer()


# --- Text sync ---
@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    _update(uri, params.text_document.text or "")


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    # Full-text sync: the last change carries the whole document
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        text = ls.documents[uri].text if uri in ls.documents else ""
    _update(uri, text)


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


def _update(uri: str, text: str) -> None:
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    logger.debug("indexed %s: %d symbol(s), %d error(s)", uri, len(idx.symbols), len(idx.errors))
    _publish_diagnostics(uri, idx)


# --- Diagnostics ---
def _mk_range(line: int, col: int, length: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + length))


def _publish_diagnostics(uri: str, idx: DocumentIndex):
    diags: List[Diagnostic] = [
        Diagnostic(
            range=_mk_range(err.line, err.column),
            message=err.message,
            severity=DiagnosticSeverity.Error,
            source="monkey-ls",
        )
        for err in idx.errors
    ]
    ls.publish_diagnostics(uri, diags)


# --- Hover ---
@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    word = word_at(_get_line(state.text, params.position), params.position.character)
    if not word:
        return None

    contents = None
    if word in state.index.symbols:
        sdef = state.index.symbols[word]
        contents = f"{state.index.signature(word) or word} — {sdef.kind} (defined at {sdef.line + 1}:{sdef.col + 1})"
    elif word in BUILTIN_SIGNATURES:
        contents = BUILTIN_SIGNATURES[word]

    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["("]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    items: List[CompletionItem] = [
        CompletionItem(label=kw, kind=CompletionItemKind.Keyword) for kw in KEYWORD_NAMES
    ]
    for name, sig in BUILTIN_SIGNATURES.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    if state:
        for name, sdef in state.index.symbols.items():
            kind = CompletionItemKind.Variable if sdef.kind == "var" else CompletionItemKind.Function
            items.append(CompletionItem(label=name, kind=kind, detail=state.index.signature(name)))
    return CompletionList(is_incomplete=False, items=items)


# --- Signature Help ---
@ls.feature(TEXT_DOCUMENT_SIGNATURE_HELP, SignatureHelpOptions(trigger_characters=["(", ","]))
def on_signature_help(params: SignatureHelpParams) -> Optional[SignatureHelp]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    prefix = _get_line(state.text, params.position)[: params.position.character]
    callee = callee_before(prefix)
    if not callee:
        return None
    label = state.index.signature(callee)
    if not label:
        return None

    params_text = label[label.find("(") + 1 : label.find(")")]
    parameters = [ParameterInformation(label=p.strip()) for p in params_text.split(",") if p.strip()]
    return SignatureHelp(
        signatures=[SignatureInformation(label=label, parameters=parameters)],
        active_signature=0,
        active_parameter=0,
    )


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(
            DocumentSymbol(name=name, kind=SYMBOL_KINDS[sdef.kind], range=rng, selection_range=rng)
        )
    return symbols


# --- Helpers ---
def _get_line(text: str, pos: Position) -> str:
    lines = text.splitlines()
    if pos.line >= len(lines):
        return ""
    return lines[pos.line]


def main() -> None:
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
