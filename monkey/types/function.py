"""Callable runtime values: closures, macros and native builtins."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import Callable

from monkey.syntax.nodes import BlockStatement, Identifier
from monkey.types.environment import Environment
from monkey.types.objects import MonkeyObject, ObjectType


def _render(keyword: str, parameters: list[Identifier], body: BlockStatement) -> str:
    with StringIO() as buffer:
        buffer.write(f"{keyword}(")
        buffer.write(", ".join(str(p) for p in parameters))
        buffer.write(") {\n")
        buffer.write(str(body))
        buffer.write("\n}")
        return buffer.getvalue()


@dataclass(eq=False, slots=True)
class Function(MonkeyObject):
    """A first-class function with parameters, body, and closure env."""

    parameters: list[Identifier]
    body: BlockStatement
    env: Environment

    def type(self) -> ObjectType:
        return ObjectType.FUNCTION

    def inspect(self) -> str:
        return _render("fn", self.parameters, self.body)

    def extend_env(self, args: list[MonkeyObject]) -> Environment:
        """Bind `args` positionally in a new frame enclosed by the captured env."""
        return extend_env(self.parameters, self.env, args)


@dataclass(eq=False, slots=True)
class Macro(MonkeyObject):
    """A macro transformer: like Function, but its arguments are Quotes."""

    parameters: list[Identifier]
    body: BlockStatement
    env: Environment

    def type(self) -> ObjectType:
        return ObjectType.MACRO

    def inspect(self) -> str:
        return _render("macro", self.parameters, self.body)

    def extend_env(self, args: list[MonkeyObject]) -> Environment:
        return extend_env(self.parameters, self.env, args)


BuiltinFunction = Callable[..., MonkeyObject]


@dataclass(eq=False, slots=True)
class Builtin(MonkeyObject):
    fn: BuiltinFunction
    name: str = ""

    def type(self) -> ObjectType:
        return ObjectType.BUILTIN

    def inspect(self) -> str:
        return "builtin function"

    def __call__(self, *args: MonkeyObject) -> MonkeyObject:
        return self.fn(*args)


def extend_env(parameters: list[Identifier], outer: Environment, args: list[MonkeyObject]) -> Environment:
    env = Environment.new_enclosed(outer)
    for param, arg in zip(parameters, args):
        env.set(param.value, arg)
    return env
