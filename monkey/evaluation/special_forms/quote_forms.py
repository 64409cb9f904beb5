# Quote / unquote
# Usage:
#   quote(1 + 2)                 ; => QUOTE((1 + 2))
#   let x = 8; quote(unquote(x)) ; => QUOTE(8)
#   quote(unquote(4 + 4) + 1)    ; => QUOTE((8 + 1))

from __future__ import annotations

from monkey import EvaluatorFn, MonkeyValue, Node
from monkey.reader.token import Token, TokenType
from monkey.syntax.modify import modify
from monkey.syntax.nodes import BooleanLiteral, CallExpression, Expression, Identifier, IntegerLiteral
from monkey.types.environment import Environment
from monkey.types.objects import Boolean, Error, Integer, MonkeyObject, Quote, is_error, new_error


class NotRepresentable:
    """Result of converting a value that has no syntax-tree form."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NOT_REPRESENTABLE"


NOT_REPRESENTABLE = NotRepresentable()


class UnquoteException(Exception):
    """Aborts an unquote rewrite; carries the Error value the quote yields."""

    def __init__(self, error: Error):
        super().__init__(error.message)
        self.error = error


def convert_object_to_node(obj: MonkeyObject | None) -> Node | NotRepresentable:
    match obj:
        case Integer(value=value):
            return IntegerLiteral(Token(TokenType.INT, str(value)), value)
        case Boolean(value=True):
            return BooleanLiteral(Token(TokenType.TRUE, "true"), True)
        case Boolean(value=False):
            return BooleanLiteral(Token(TokenType.FALSE, "false"), False)
        case Quote(node=node):
            return node
        case _:
            return NOT_REPRESENTABLE


def is_unquote_call(node: Node) -> bool:
    return (
        isinstance(node, CallExpression)
        and isinstance(node.function, Identifier)
        and node.function.token_literal() == "unquote"
    )


def eval_unquote_calls(quoted: Node, env: Environment, evaluate_fn: EvaluatorFn) -> Node:
    """Replace every `unquote(expr)` inside `quoted` with the syntax of expr's value."""

    def modifier(node: Node) -> Node:
        if not is_unquote_call(node) or len(node.arguments) != 1:
            return node
        unquoted = evaluate_fn(node.arguments[0], env)
        if is_error(unquoted):
            raise UnquoteException(unquoted)
        converted = convert_object_to_node(unquoted)
        if converted is NOT_REPRESENTABLE:
            type_name = unquoted.type() if unquoted is not None else "NOTHING"
            raise UnquoteException(new_error(f"unquote: cannot convert {type_name} to a syntax node"))
        return converted

    return modify(quoted, modifier)


def quote_form(args: list[Expression], env: Environment, evaluate_fn: EvaluatorFn) -> MonkeyValue:
    if len(args) != 1:
        return new_error(f"wrong number of arguments to `quote`. got={len(args)}, want=1")
    try:
        node = eval_unquote_calls(args[0], env, evaluate_fn)
    except UnquoteException as ex:
        return ex.error
    return Quote(node)


def unquote_form(args: list[Expression], env: Environment, evaluate_fn: EvaluatorFn) -> MonkeyValue:
    """Reached only when `unquote` is evaluated outside a `quote`, which is an error."""
    return new_error("unquote is not valid outside of quote")
