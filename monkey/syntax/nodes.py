"""Syntax tree for the Monkey language.

Nodes are plain dataclasses. Equality is structural (token positions are
ignored), and ``str(node)`` renders the canonical, fully parenthesised source
form used by the parser tests and by ``Quote.inspect``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from monkey.reader.token import Token


class Node:
    token: Token

    def token_literal(self) -> str:
        return self.token.literal


class Statement(Node):
    pass


class Expression(Node):
    pass


@dataclass
class Program(Node):
    statements: list[Statement] = field(default_factory=list)

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


# -------------------------------
# Statements
# -------------------------------
@dataclass
class LetStatement(Statement):
    token: Token
    name: Identifier
    value: Expression | None

    def __str__(self) -> str:
        value = str(self.value) if self.value is not None else ""
        return f"{self.token_literal()} {self.name} = {value};"


@dataclass
class ReturnStatement(Statement):
    token: Token
    return_value: Expression | None

    def __str__(self) -> str:
        value = str(self.return_value) if self.return_value is not None else ""
        return f"{self.token_literal()} {value};"


@dataclass
class ExpressionStatement(Statement):
    token: Token
    expression: Expression | None

    def __str__(self) -> str:
        return str(self.expression) if self.expression is not None else ""


@dataclass
class BlockStatement(Statement):
    token: Token
    statements: list[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


# -------------------------------
# Expressions
# -------------------------------
@dataclass
class Identifier(Expression):
    token: Token
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass
class IntegerLiteral(Expression):
    token: Token
    value: int

    def __str__(self) -> str:
        return self.token_literal()


@dataclass
class BooleanLiteral(Expression):
    token: Token
    value: bool

    def __str__(self) -> str:
        return self.token_literal()


@dataclass
class StringLiteral(Expression):
    token: Token
    value: str

    def __str__(self) -> str:
        return self.token_literal()


@dataclass
class PrefixExpression(Expression):
    token: Token
    operator: str
    right: Expression | None

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass
class InfixExpression(Expression):
    token: Token
    left: Expression | None
    operator: str
    right: Expression | None

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class IfExpression(Expression):
    token: Token
    condition: Expression | None
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    def __str__(self) -> str:
        out = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass
class FunctionLiteral(Expression):
    token: Token
    parameters: list[Identifier]
    body: BlockStatement

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass
class CallExpression(Expression):
    token: Token  # the '(' token
    function: Expression | None
    arguments: list[Expression]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass
class ArrayLiteral(Expression):
    token: Token
    elements: list[Expression]

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass
class IndexExpression(Expression):
    token: Token
    left: Expression | None
    index: Expression | None

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass
class HashLiteral(Expression):
    token: Token
    # (key, value) pairs in source order
    pairs: list[tuple[Expression, Expression]]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}:{v}" for k, v in self.pairs) + "}"


@dataclass
class MacroLiteral(Expression):
    token: Token
    parameters: list[Identifier]
    body: BlockStatement

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"
