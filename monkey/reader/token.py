from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TokenType(Enum):
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"
    MACRO = "MACRO"

    def __str__(self) -> str:
        return self.value


KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
    "macro": TokenType.MACRO,
}


def lookup_ident(ident: str) -> TokenType:
    """Map a word to its keyword token type, or IDENT for user names."""
    return KEYWORDS.get(ident, TokenType.IDENT)


@dataclass(frozen=True)
class Token:
    type: TokenType
    literal: str
    # Source position (0-based) is informational only and ignored by equality
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
