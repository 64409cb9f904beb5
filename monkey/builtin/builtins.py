"""Built-in functions for the Monkey runtime.

Builtins receive already-evaluated arguments and return a Monkey value. Misuse
(wrong arity, wrong argument type) is reported by returning an Error value,
never by raising; the evaluator treats that like any other result.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from monkey.types.function import Builtin
from monkey.types.objects import (
    NULL,
    Array,
    Integer,
    MonkeyObject,
    ObjectType,
    String,
    new_error,
)


def _wrong_arity(got: int, want: int) -> MonkeyObject:
    return new_error(f"wrong number of arguments. got={got}, want={want}")


def _require_array(name: str, args: tuple[MonkeyObject, ...]) -> MonkeyObject | None:
    if args[0].type() is not ObjectType.ARRAY:
        return new_error(f"argument to `{name}` must be ARRAY, got {args[0].type()}")
    return None


# -------------------------------
# Sizes
# -------------------------------
def monkey_len(*args: MonkeyObject) -> MonkeyObject:
    """Character count of a String or element count of an Array."""
    if len(args) != 1:
        return _wrong_arity(len(args), 1)
    match args[0]:
        case String(value=value):
            return Integer(len(value))
        case Array(elements=elements):
            return Integer(len(elements))
        case other:
            return new_error(f"argument to `len` not supported, got {other.type()}")


# -------------------------------
# Array operations
# -------------------------------
def first(*args: MonkeyObject) -> MonkeyObject:
    if len(args) != 1:
        return _wrong_arity(len(args), 1)
    if (err := _require_array("first", args)) is not None:
        return err
    elements = args[0].elements
    return elements[0] if elements else NULL


def last(*args: MonkeyObject) -> MonkeyObject:
    if len(args) != 1:
        return _wrong_arity(len(args), 1)
    if (err := _require_array("last", args)) is not None:
        return err
    elements = args[0].elements
    return elements[-1] if elements else NULL


def rest(*args: MonkeyObject) -> MonkeyObject:
    """A new Array of everything after the first element (NULL when empty)."""
    if len(args) != 1:
        return _wrong_arity(len(args), 1)
    if (err := _require_array("rest", args)) is not None:
        return err
    elements = args[0].elements
    if not elements:
        return NULL
    return Array(list(elements[1:]))


def push(*args: MonkeyObject) -> MonkeyObject:
    """A new Array with the value appended; the original is left untouched."""
    if len(args) != 2:
        return _wrong_arity(len(args), 2)
    if (err := _require_array("push", args)) is not None:
        return err
    return Array([*args[0].elements, args[1]])


# -------------------------------
# Output
# -------------------------------
def puts(*args: MonkeyObject) -> MonkeyObject:
    for arg in args:
        print(arg.inspect())
    return NULL


BUILTINS: Mapping[str, Builtin] = MappingProxyType({
    "len": Builtin(monkey_len, "len"),
    "first": Builtin(first, "first"),
    "last": Builtin(last, "last"),
    "rest": Builtin(rest, "rest"),
    "push": Builtin(push, "push"),
    "puts": Builtin(puts, "puts"),
})


def lookup(name: str) -> Builtin | None:
    return BUILTINS.get(name)
