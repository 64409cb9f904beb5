"""Macro definition and expansion.

Two passes over a parsed Program, both driven by a dedicated macro
Environment that never shares bindings with the runtime environment:

1. ``define_macros`` moves every top-level ``let name = macro(...) {...}``
   out of the program and into the macro environment.
2. ``expand_macros`` rewrites every call whose callee names a macro: the
   unevaluated arguments are bound as Quote values, the macro body runs, and
   the Quote it returns replaces the call site.
"""

from __future__ import annotations

import logging

from monkey import Node
from monkey.errors import MonkeyMacroError
from monkey.evaluation.evaluator import evaluate, unwrap_return_value
from monkey.syntax.modify import modify
from monkey.syntax.nodes import CallExpression, Identifier, LetStatement, MacroLiteral, Program, Statement
from monkey.types.environment import Environment
from monkey.types.function import Macro
from monkey.types.objects import Quote, is_error

logger = logging.getLogger(__name__)


def is_macro_definition(stmt: Statement) -> bool:
    return isinstance(stmt, LetStatement) and isinstance(stmt.value, MacroLiteral)


def add_macro(stmt: LetStatement, env: Environment) -> None:
    literal: MacroLiteral = stmt.value
    macro = Macro(literal.parameters, literal.body, env)
    env.set(stmt.name.value, macro)
    logger.debug("defined macro %s(%s)", stmt.name.value, ", ".join(str(p) for p in literal.parameters))


def define_macros(program: Program, env: Environment) -> None:
    """Register top-level macro definitions in `env` and remove them from `program`."""
    kept: list[Statement] = []
    for stmt in program.statements:
        if is_macro_definition(stmt):
            add_macro(stmt, env)
        else:
            kept.append(stmt)
    program.statements[:] = kept


def macro_for_call(exp: CallExpression, env: Environment) -> Macro | None:
    if not isinstance(exp.function, Identifier):
        return None
    obj = env.get(exp.function.value)
    return obj if isinstance(obj, Macro) else None


def quote_args(exp: CallExpression) -> list[Quote]:
    return [Quote(arg) for arg in exp.arguments]


def extend_macro_env(macro: Macro, args: list[Quote]) -> Environment:
    if len(args) != len(macro.parameters):
        raise MonkeyMacroError(
            f"wrong number of arguments to macro: want={len(macro.parameters)}, got={len(args)}"
        )
    return macro.extend_env(args)


def expand_macros(program: Node, env: Environment) -> Node:
    """Return `program` with every macro call replaced by its expansion."""

    def expand_node(node: Node) -> Node:
        if not isinstance(node, CallExpression):
            return node
        macro = macro_for_call(node, env)
        if macro is None:
            return node

        args = quote_args(node)
        eval_env = extend_macro_env(macro, args)
        evaluated = unwrap_return_value(evaluate(macro.body, eval_env))
        if isinstance(evaluated, Quote):
            logger.debug("expanded %s into %s", node, evaluated.node)
            return evaluated.node
        if is_error(evaluated):
            raise MonkeyMacroError(f"error expanding macro {node.function}: {evaluated.message}")
        raise MonkeyMacroError("we only support returning AST-nodes from macros")

    return modify(program, expand_node)
