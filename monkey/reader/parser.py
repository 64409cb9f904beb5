"""
  Monkey Parser

- Pratt (top-down operator precedence) parser over the lexer's token stream
- Produces monkey.syntax.nodes trees
- Never raises on bad input: problems are collected in ``Parser.errors`` and
  the caller must not evaluate a program produced alongside errors
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterable, Iterator

from monkey.reader.lexer import lex
from monkey.reader.token import Token, TokenType
from monkey.reader.tracing import Tracer, traced
from monkey.syntax.nodes import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    MacroLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)

INT64_MAX = 2**63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    PRODUCT = 5  # *
    PREFIX = 6  # -X or !X
    CALL = 7  # myFunction(X)
    INDEX = 8  # array[index]


PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
}


@dataclass(frozen=True)
class ParseError:
    message: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return self.message


class Parser:
    def __init__(self, tokens: Iterable[Token], trace: bool = False):
        self._tokens: Iterator[Token] = iter(tokens)
        self._eof: Token | None = None
        self.tracer = Tracer(trace)
        self.diagnostics: list[ParseError] = []

        self.cur_token: Token = self._next()
        self.peek_token: Token = self._next()

        self.prefix_parse_fns: dict[TokenType, Callable[[], Expression | None]] = {
            TokenType.IDENT: self.parse_identifier,
            TokenType.INT: self.parse_integer_literal,
            TokenType.STRING: self.parse_string_literal,
            TokenType.BANG: self.parse_prefix_expression,
            TokenType.MINUS: self.parse_prefix_expression,
            TokenType.TRUE: self.parse_boolean,
            TokenType.FALSE: self.parse_boolean,
            TokenType.LPAREN: self.parse_grouped_expression,
            TokenType.IF: self.parse_if_expression,
            TokenType.FUNCTION: self.parse_function_literal,
            TokenType.MACRO: self.parse_macro_literal,
            TokenType.LBRACKET: self.parse_array_literal,
            TokenType.LBRACE: self.parse_hash_literal,
        }
        self.infix_parse_fns: dict[TokenType, Callable[[Expression | None], Expression | None]] = {
            TokenType.PLUS: self.parse_infix_expression,
            TokenType.MINUS: self.parse_infix_expression,
            TokenType.SLASH: self.parse_infix_expression,
            TokenType.ASTERISK: self.parse_infix_expression,
            TokenType.EQ: self.parse_infix_expression,
            TokenType.NOT_EQ: self.parse_infix_expression,
            TokenType.LT: self.parse_infix_expression,
            TokenType.GT: self.parse_infix_expression,
            TokenType.LPAREN: self.parse_call_expression,
            TokenType.LBRACKET: self.parse_index_expression,
        }

    @classmethod
    def from_source(cls, source: str, trace: bool = False) -> Parser:
        return cls(lex(source), trace=trace)

    @property
    def errors(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    # -------------------------------
    # Token handling
    # -------------------------------
    def _next(self) -> Token:
        # Keep handing out EOF once the stream is exhausted
        if self._eof is not None:
            return self._eof
        tok = next(self._tokens, None)
        if tok is None:
            tok = Token(TokenType.EOF, "")
        if tok.type is TokenType.EOF:
            self._eof = tok
        return tok

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self._next()

    def cur_token_is(self, t: TokenType) -> bool:
        return self.cur_token.type is t

    def peek_token_is(self, t: TokenType) -> bool:
        return self.peek_token.type is t

    def expect_peek(self, t: TokenType) -> bool:
        if self.peek_token_is(t):
            self.next_token()
            return True
        self.peek_error(t)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    # -------------------------------
    # Errors
    # -------------------------------
    def _error(self, message: str, tok: Token) -> None:
        self.diagnostics.append(ParseError(message, tok.line, tok.column))

    def peek_error(self, t: TokenType) -> None:
        self._error(
            f"expected next token to be {t}, got {self.peek_token.type} instead",
            self.peek_token,
        )

    def no_prefix_parse_fn_error(self, t: TokenType) -> None:
        self._error(f"no prefix parse function for {t} found", self.cur_token)

    # -------------------------------
    # Statements
    # -------------------------------
    def parse_program(self) -> Program:
        program = Program()
        while not self.cur_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            self.next_token()
        return program

    def parse_statement(self) -> Statement | None:
        match self.cur_token.type:
            case TokenType.LET:
                return self.parse_let_statement()
            case TokenType.RETURN:
                return self.parse_return_statement()
            case _:
                return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement | None:
        tok = self.cur_token
        if not self.expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)
        if not self.expect_peek(TokenType.ASSIGN):
            return None
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return LetStatement(tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        tok = self.cur_token
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return ReturnStatement(tok, value)

    @traced
    def parse_expression_statement(self) -> ExpressionStatement:
        stmt = ExpressionStatement(self.cur_token, self.parse_expression(Precedence.LOWEST))
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return stmt

    def parse_block_statement(self) -> BlockStatement:
        block = BlockStatement(self.cur_token)
        self.next_token()
        while not self.cur_token_is(TokenType.RBRACE) and not self.cur_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
            self.next_token()
        return block

    # -------------------------------
    # Expressions
    # -------------------------------
    @traced
    def parse_expression(self, precedence: Precedence) -> Expression | None:
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token.type)
            return None
        left = prefix()

        while not self.peek_token_is(TokenType.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.literal)

    @traced
    def parse_integer_literal(self) -> Expression | None:
        tok = self.cur_token
        try:
            value = int(tok.literal)
        except ValueError:
            value = None
        if value is None or value > INT64_MAX:
            self._error(f"could not parse {tok.literal} as integer", tok)
            return None
        return IntegerLiteral(tok, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.literal)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.cur_token, self.cur_token_is(TokenType.TRUE))

    @traced
    def parse_prefix_expression(self) -> Expression:
        tok = self.cur_token
        self.next_token()
        return PrefixExpression(tok, tok.literal, self.parse_expression(Precedence.PREFIX))

    @traced
    def parse_infix_expression(self, left: Expression | None) -> Expression:
        tok = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        return InfixExpression(tok, left, tok.literal, self.parse_expression(precedence))

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        exp = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenType.RPAREN):
            return None
        return exp

    def parse_if_expression(self) -> Expression | None:
        tok = self.cur_token
        if not self.expect_peek(TokenType.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenType.RPAREN):
            return None
        if not self.expect_peek(TokenType.LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self.parse_block_statement()
        return IfExpression(tok, condition, consequence, alternative)

    def parse_function_literal(self) -> Expression | None:
        tok = self.cur_token
        if not self.expect_peek(TokenType.LPAREN):
            return None
        params = self.parse_function_parameters()
        if params is None or not self.expect_peek(TokenType.LBRACE):
            return None
        return FunctionLiteral(tok, params, self.parse_block_statement())

    def parse_macro_literal(self) -> Expression | None:
        tok = self.cur_token
        if not self.expect_peek(TokenType.LPAREN):
            return None
        params = self.parse_function_parameters()
        if params is None or not self.expect_peek(TokenType.LBRACE):
            return None
        return MacroLiteral(tok, params, self.parse_block_statement())

    def parse_function_parameters(self) -> list[Identifier] | None:
        identifiers: list[Identifier] = []
        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return identifiers

        if not self.expect_peek(TokenType.IDENT):
            return None
        identifiers.append(Identifier(self.cur_token, self.cur_token.literal))
        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            identifiers.append(Identifier(self.cur_token, self.cur_token.literal))

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return identifiers

    def parse_call_expression(self, function: Expression | None) -> Expression | None:
        tok = self.cur_token
        arguments = self.parse_expression_list(TokenType.RPAREN)
        if arguments is None:
            return None
        return CallExpression(tok, function, arguments)

    def parse_array_literal(self) -> Expression | None:
        tok = self.cur_token
        elements = self.parse_expression_list(TokenType.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(tok, elements)

    def parse_expression_list(self, end: TokenType) -> list[Expression] | None:
        items: list[Expression] = []
        if self.peek_token_is(end):
            self.next_token()
            return items

        self.next_token()
        items.append(self.parse_expression(Precedence.LOWEST))
        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            items.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(end):
            return None
        return items

    def parse_index_expression(self, left: Expression | None) -> Expression | None:
        tok = self.cur_token
        self.next_token()
        index = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenType.RBRACKET):
            return None
        return IndexExpression(tok, left, index)

    def parse_hash_literal(self) -> Expression | None:
        tok = self.cur_token
        pairs: list[tuple[Expression, Expression]] = []
        while not self.peek_token_is(TokenType.RBRACE):
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)
            if not self.expect_peek(TokenType.COLON):
                return None
            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))
            if not self.peek_token_is(TokenType.RBRACE) and not self.expect_peek(TokenType.COMMA):
                return None
        if not self.expect_peek(TokenType.RBRACE):
            return None
        return HashLiteral(tok, pairs)


def parse(source: str, trace: bool = False) -> tuple[Program, list[str]]:
    """Parse ``source`` into a Program, returning it with the parser's errors."""
    parser = Parser.from_source(source, trace=trace)
    program = parser.parse_program()
    return program, parser.errors
