from __future__ import annotations

"""
Static indexer for Monkey source files.

The document is parsed (never evaluated) and the index records:
- top-level `let` bindings, classified as var / function / macro
- parse errors with their positions, for diagnostics

The parser recovers from errors statement by statement, so a partially typed
buffer still yields the bindings that did parse.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from monkey.reader.parser import ParseError, Parser
from monkey.reader.token import KEYWORDS
from monkey.syntax.nodes import FunctionLiteral, LetStatement, MacroLiteral


BUILTIN_SIGNATURES: Dict[str, str] = {
    "len": "len(value) -> INTEGER",
    "first": "first(array) -> value | null",
    "last": "last(array) -> value | null",
    "rest": "rest(array) -> ARRAY | null",
    "push": "push(array, value) -> ARRAY",
    "puts": "puts(values...) -> null",
    "quote": "quote(expression) -> QUOTE",
    "unquote": "unquote(expression) -> syntax (inside quote only)",
}

KEYWORD_NAMES: List[str] = sorted(KEYWORDS)


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function" | "macro"
    line: int
    col: int
    params: List[str] = field(default_factory=list)


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    errors: List[ParseError] = field(default_factory=list)

    def signature(self, name: str) -> Optional[str]:
        sdef = self.symbols.get(name)
        if sdef is None or sdef.kind == "var":
            return BUILTIN_SIGNATURES.get(name)
        keyword = "fn" if sdef.kind == "function" else "macro"
        return f"{name} = {keyword}({', '.join(sdef.params)})"


def _classify(stmt: LetStatement) -> tuple[str, List[str]]:
    match stmt.value:
        case FunctionLiteral(parameters=params):
            return "function", [p.value for p in params]
        case MacroLiteral(parameters=params):
            return "macro", [p.value for p in params]
        case _:
            return "var", []


def build_index(text: str) -> DocumentIndex:
    parser = Parser.from_source(text)
    program = parser.parse_program()

    idx = DocumentIndex(errors=list(parser.diagnostics))
    for stmt in program.statements:
        if not isinstance(stmt, LetStatement):
            continue
        kind, params = _classify(stmt)
        tok = stmt.name.token
        # later bindings shadow earlier ones, keep the first definition site
        idx.symbols.setdefault(stmt.name.value, SymbolDef(stmt.name.value, kind, tok.line, tok.column, params))
    return idx


def word_at(line: str, character: int) -> Optional[str]:
    """Return the identifier under `character` in `line`, if any."""
    start = character
    while start > 0 and (line[start - 1].isalnum() or line[start - 1] == "_"):
        start -= 1
    end = character
    while end < len(line) and (line[end].isalnum() or line[end] == "_"):
        end += 1
    word = line[start:end]
    return word or None


def callee_before(prefix: str) -> Optional[str]:
    """Name of the function whose argument list the cursor is in, if any."""
    depth = 0
    for i in range(len(prefix) - 1, -1, -1):
        ch = prefix[i]
        if ch == ")":
            depth += 1
        elif ch == "(":
            if depth == 0:
                return word_at(prefix[:i], i)
            depth -= 1
    return None
