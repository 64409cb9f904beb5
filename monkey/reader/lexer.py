"""
  Monkey Lexer

- Streaming, lazy tokenisation driven by a single master regex
- Emits Token dataclasses carrying 0-based line/column positions
- Always finishes with exactly one EOF token
- Unknown characters become ILLEGAL tokens; the parser reports them
"""

from __future__ import annotations

import re
from typing import Iterator

from monkey.reader.token import Token, TokenType, lookup_ident


TOKEN_RE = re.compile(
    r"(?P<newline>\n)"
    r"|(?P<space>[ \t\r\f\v]+)"
    r"|(?P<comment>//[^\n]*)"  # single-line comment
    r'|(?P<string>"(?P<body>(?:\\.|[^"\\])*)(?:"|\Z))'  # unterminated runs to EOF
    r"|(?P<int>\d+)"
    r"|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>==|!=|[=+\-!*/<>,;:(){}\[\]])"
    r"|(?P<illegal>.)",
    re.DOTALL,
)

OPERATORS: dict[str, TokenType] = {
    t.value: t
    for t in TokenType
    if not t.value.isalpha() and t.value.isascii()
}

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}

_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def _unescape(body: str) -> str:
    return _ESCAPE_RE.sub(lambda m: ESCAPES.get(m.group(1), m.group(0)), body)


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Token objects, ending with a single EOF token."""
    pos = 0
    line = 0
    line_start = 0
    n = len(source)

    while pos < n:
        m = TOKEN_RE.match(source, pos)
        kind = m.lastgroup
        text = m.group(kind)
        column = pos - line_start
        pos = m.end()

        if kind == "newline":
            line += 1
            line_start = pos
            continue
        if kind in ("space", "comment"):
            continue

        if kind == "string":
            yield Token(TokenType.STRING, _unescape(m.group("body")), line, column)
            # strings may span lines
            newlines = text.count("\n")
            if newlines:
                line += newlines
                line_start = m.start() + text.rfind("\n") + 1
        elif kind == "int":
            yield Token(TokenType.INT, text, line, column)
        elif kind == "ident":
            yield Token(lookup_ident(text), text, line, column)
        elif kind == "op":
            yield Token(OPERATORS[text], text, line, column)
        else:
            yield Token(TokenType.ILLEGAL, text, line, column)

    yield Token(TokenType.EOF, "", line, pos - line_start)
