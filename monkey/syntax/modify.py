"""Generic, structure-preserving rewriting of syntax trees.

``modify(node, modifier)`` rebuilds ``node`` bottom-up: every child is
rewritten first, then ``modifier`` is applied to the rebuilt node and its
result replaces the node. The input tree is never mutated, so the same tree
(e.g. a macro body) can be rewritten any number of times.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from monkey import Node
from monkey.syntax.nodes import (
    ArrayLiteral,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    IfExpression,
    IndexExpression,
    InfixExpression,
    LetStatement,
    MacroLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
)

ModifierFunc = Callable[[Node], Node]


def modify(node: Node | None, modifier: ModifierFunc) -> Node | None:
    if node is None:
        return None

    def walk(child):
        return modify(child, modifier)

    match node:
        case Program(statements=stmts):
            node = replace(node, statements=[walk(s) for s in stmts])
        case BlockStatement(statements=stmts):
            node = replace(node, statements=[walk(s) for s in stmts])
        case ExpressionStatement(expression=exp):
            node = replace(node, expression=walk(exp))
        case LetStatement(value=value):
            node = replace(node, value=walk(value))
        case ReturnStatement(return_value=value):
            node = replace(node, return_value=walk(value))
        case InfixExpression(left=left, right=right):
            node = replace(node, left=walk(left), right=walk(right))
        case PrefixExpression(right=right):
            node = replace(node, right=walk(right))
        case IndexExpression(left=left, index=index):
            node = replace(node, left=walk(left), index=walk(index))
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            node = replace(node, condition=walk(cond), consequence=walk(cons), alternative=walk(alt))
        case FunctionLiteral(parameters=params, body=body):
            node = replace(node, parameters=[walk(p) for p in params], body=walk(body))
        case MacroLiteral(parameters=params, body=body):
            node = replace(node, parameters=[walk(p) for p in params], body=walk(body))
        case CallExpression(function=fn, arguments=args):
            node = replace(node, function=walk(fn), arguments=[walk(a) for a in args])
        case ArrayLiteral(elements=elements):
            node = replace(node, elements=[walk(e) for e in elements])
        case HashLiteral(pairs=pairs):
            node = replace(node, pairs=[(walk(k), walk(v)) for k, v in pairs])
        case _:
            # Leaves: Identifier, IntegerLiteral, BooleanLiteral, StringLiteral
            pass

    return modifier(node)
