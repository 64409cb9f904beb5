"""Core tree-walking evaluator for the Monkey interpreter.

``evaluate(node, env)`` maps a syntax node to a runtime value (or None when a
node produces no value, e.g. ``let``). Language errors are Error values, not
exceptions: they short-circuit statement sequences, argument lists and
collection literals, and come back as the result of the whole evaluation.
"""

from __future__ import annotations

from monkey import MonkeyValue, Node
from monkey.builtin import builtins
from monkey.evaluation.special_forms import SPECIAL_FORMS
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
    StringLiteral,
)
from monkey.types.environment import Environment
from monkey.types.function import Builtin, Function, Macro
from monkey.types.objects import (
    FALSE,
    NULL,
    TRUE,
    Array,
    Error,
    Hash,
    Hashable,
    Integer,
    MonkeyObject,
    ObjectType,
    ReturnValue,
    String,
    is_error,
    native_bool_to_boolean,
    new_error,
)

INT64_MIN = -(2**63)
UINT64 = 2**64


def wrap_int64(value: int) -> int:
    """Reduce an arbitrary Python int to signed 64-bit two's complement."""
    return (value - INT64_MIN) % UINT64 + INT64_MIN


def evaluate_operand(node: Node | None, env: Environment) -> MonkeyObject:
    """Evaluate an operand position, where "no value" behaves as NULL."""
    value = evaluate(node, env)
    return NULL if value is None else value


def is_truthy(obj: MonkeyValue) -> bool:
    # Only NULL and false are falsy; 0, "" and [] are truthy
    return obj is not NULL and obj is not FALSE and obj is not None


def evaluate(node: Node | None, env: Environment) -> MonkeyValue | None:
    match node:
        # --- Statements ---
        case Program():
            return eval_program(node, env)
        case BlockStatement():
            return eval_block_statement(node, env)
        case ExpressionStatement(expression=exp):
            return evaluate(exp, env)
        case ReturnStatement(return_value=exp):
            value = evaluate(exp, env)
            if is_error(value):
                return value
            return ReturnValue(value if value is not None else NULL)
        case LetStatement(name=name, value=exp):
            value = evaluate(exp, env)
            if is_error(value):
                return value
            env.set(name.value, value if value is not None else NULL)
            return None

        # --- Literals ---
        case IntegerLiteral(value=value):
            return Integer(value)
        case BooleanLiteral(value=value):
            return native_bool_to_boolean(value)
        case StringLiteral(value=value):
            return String(value)
        case ArrayLiteral(elements=elements):
            values = eval_expressions(elements, env)
            if len(values) == 1 and is_error(values[0]):
                return values[0]
            return Array(values)
        case HashLiteral():
            return eval_hash_literal(node, env)
        case FunctionLiteral(parameters=params, body=body):
            return Function(params, body, env)
        case MacroLiteral(parameters=params, body=body):
            # Macro definitions are stripped before evaluation; a stray literal
            # (e.g. nested inside a function) still evaluates to a Macro value.
            return Macro(params, body, env)

        # --- Operators ---
        case PrefixExpression(operator=op, right=right):
            value = evaluate_operand(right, env)
            if is_error(value):
                return value
            return eval_prefix_expression(op, value)
        case InfixExpression(left=left, operator=op, right=right):
            lval = evaluate_operand(left, env)
            if is_error(lval):
                return lval
            rval = evaluate_operand(right, env)
            if is_error(rval):
                return rval
            return eval_infix_expression(op, lval, rval)
        case IfExpression():
            return eval_if_expression(node, env)
        case Identifier():
            return eval_identifier(node, env)
        case IndexExpression(left=left, index=index):
            collection = evaluate_operand(left, env)
            if is_error(collection):
                return collection
            idx = evaluate_operand(index, env)
            if is_error(idx):
                return idx
            return eval_index_expression(collection, idx)
        case CallExpression():
            return eval_call_expression(node, env)

    return None


# -------------------------------
# Statement sequences
# -------------------------------
def eval_program(program: Program, env: Environment) -> MonkeyValue | None:
    result = None
    for stmt in program.statements:
        result = evaluate(stmt, env)
        match result:
            case ReturnValue(value=value):
                return value
            case Error():
                return result
    return result


def eval_block_statement(block: BlockStatement, env: Environment) -> MonkeyValue | None:
    result = None
    for stmt in block.statements:
        result = evaluate(stmt, env)
        if result is not None and result.type() in (ObjectType.RETURN_VALUE, ObjectType.ERROR):
            return result
    return result


def eval_expressions(exps: list[Expression], env: Environment) -> list[MonkeyObject]:
    """Evaluate left to right; on the first error return a one-element list holding it."""
    result: list[MonkeyObject] = []
    for exp in exps:
        value = evaluate(exp, env)
        if is_error(value):
            return [value]
        result.append(value if value is not None else NULL)
    return result


# -------------------------------
# Operators
# -------------------------------
def eval_prefix_expression(operator: str, right: MonkeyObject) -> MonkeyObject:
    match operator:
        case "!":
            return eval_bang_operator_expression(right)
        case "-":
            return eval_minus_prefix_operator_expression(right)
        case _:
            return new_error(f"unknown operator: {operator}{right.type()}")


def eval_bang_operator_expression(right: MonkeyObject) -> MonkeyObject:
    return FALSE if is_truthy(right) else TRUE


def eval_minus_prefix_operator_expression(right: MonkeyObject) -> MonkeyObject:
    if right.type() is not ObjectType.INTEGER:
        return new_error(f"unknown operator: -{right.type()}")
    return Integer(wrap_int64(-right.value))


def eval_infix_expression(operator: str, left: MonkeyObject, right: MonkeyObject) -> MonkeyObject:
    ltype, rtype = left.type(), right.type()
    if ltype is ObjectType.INTEGER and rtype is ObjectType.INTEGER:
        return eval_integer_infix_expression(operator, left, right)
    if ltype is ObjectType.STRING and rtype is ObjectType.STRING:
        return eval_string_infix_expression(operator, left, right)
    if operator == "==":
        return native_bool_to_boolean(left == right)
    if operator == "!=":
        return native_bool_to_boolean(left != right)
    if ltype is not rtype:
        return new_error(f"type mismatch: {ltype} {operator} {rtype}")
    return new_error(f"unknown operator: {ltype} {operator} {rtype}")


def _truncated_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def eval_integer_infix_expression(operator: str, left: Integer, right: Integer) -> MonkeyObject:
    lval, rval = left.value, right.value
    match operator:
        case "+":
            return Integer(wrap_int64(lval + rval))
        case "-":
            return Integer(wrap_int64(lval - rval))
        case "*":
            return Integer(wrap_int64(lval * rval))
        case "/":
            if rval == 0:
                return new_error("division by zero")
            return Integer(wrap_int64(_truncated_div(lval, rval)))
        case "<":
            return native_bool_to_boolean(lval < rval)
        case ">":
            return native_bool_to_boolean(lval > rval)
        case "==":
            return native_bool_to_boolean(lval == rval)
        case "!=":
            return native_bool_to_boolean(lval != rval)
        case _:
            return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")


def eval_string_infix_expression(operator: str, left: String, right: String) -> MonkeyObject:
    if operator != "+":
        return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")
    return String(left.value + right.value)


# -------------------------------
# Conditionals and names
# -------------------------------
def eval_if_expression(ie: IfExpression, env: Environment) -> MonkeyValue | None:
    condition = evaluate(ie.condition, env)
    if is_error(condition):
        return condition
    if is_truthy(condition):
        return evaluate(ie.consequence, env)
    if ie.alternative is not None:
        return evaluate(ie.alternative, env)
    return NULL


def eval_identifier(node: Identifier, env: Environment) -> MonkeyObject:
    value = env.get(node.value)
    if value is not None:
        return value
    builtin = builtins.lookup(node.value)
    if builtin is not None:
        return builtin
    return new_error(f"identifier not found: {node.value}")


# -------------------------------
# Collections
# -------------------------------
def eval_index_expression(left: MonkeyObject, index: MonkeyObject) -> MonkeyObject:
    if left.type() is ObjectType.ARRAY and index.type() is ObjectType.INTEGER:
        return eval_array_index_expression(left, index)
    if left.type() is ObjectType.HASH:
        return eval_hash_index_expression(left, index)
    return new_error(f"index operator not supported: {left.type()}")


def eval_array_index_expression(array: Array, index: Integer) -> MonkeyObject:
    idx = index.value
    if idx < 0 or idx >= len(array.elements):
        return NULL
    return array.elements[idx]


def eval_hash_index_expression(hash_obj: Hash, index: MonkeyObject) -> MonkeyObject:
    if not isinstance(index, Hashable):
        return new_error(f"unusable as hash key: {index.type()}")
    value = hash_obj.get(index)
    return value if value is not None else NULL


def eval_hash_literal(node: HashLiteral, env: Environment) -> MonkeyObject:
    result = Hash()
    for key_node, value_node in node.pairs:
        key = evaluate_operand(key_node, env)
        if is_error(key):
            return key
        if not isinstance(key, Hashable):
            return new_error(f"unusable as hash key: {key.type()}")
        value = evaluate(value_node, env)
        if is_error(value):
            return value
        result.put(key, value if value is not None else NULL)
    return result


# -------------------------------
# Application
# -------------------------------
def eval_call_expression(node: CallExpression, env: Environment) -> MonkeyValue | None:
    # Special forms see their arguments as syntax
    callee = node.function
    if isinstance(callee, Identifier) and callee.token_literal() in SPECIAL_FORMS:
        return SPECIAL_FORMS[callee.token_literal()](node.arguments, env, evaluate)

    function = evaluate_operand(callee, env)
    if is_error(function):
        return function
    args = eval_expressions(node.arguments, env)
    if len(args) == 1 and is_error(args[0]):
        return args[0]
    return apply_function(function, args)


def apply_function(fn: MonkeyValue, args: list[MonkeyObject]) -> MonkeyValue | None:
    match fn:
        case Function():
            if len(args) != len(fn.parameters):
                return new_error(
                    f"wrong number of arguments: want={len(fn.parameters)}, got={len(args)}"
                )
            extended_env = fn.extend_env(args)
            evaluated = evaluate(fn.body, extended_env)
            return unwrap_return_value(evaluated)
        case Builtin():
            return fn(*args)
        case _:
            return new_error(f"not a function: {fn.type()}")


def unwrap_return_value(obj: MonkeyValue | None) -> MonkeyValue | None:
    if isinstance(obj, ReturnValue):
        return obj.value
    return obj
