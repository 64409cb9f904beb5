from __future__ import annotations

import logging

from monkey import MonkeyValue
from monkey.errors import MonkeySyntaxError
from monkey.evaluation.evaluator import evaluate
from monkey.evaluation.macro_expansion import define_macros, expand_macros
from monkey.reader.parser import Parser
from monkey.syntax.nodes import Program
from monkey.types.environment import Environment

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Parses and evaluates Monkey source text.
    Maintains a program Environment and a macro Environment across calls, so
    `let` bindings and macro definitions persist between inputs.
    """

    def __init__(self, trace: bool = False, prelude: str | None = None):
        self.trace = trace
        self.env: Environment = Environment()
        self.macro_env: Environment = Environment()
        if prelude:
            self.eval(prelude)

    def parse(self, code: str) -> Program:
        """Parse `code`; raises MonkeySyntaxError if the parser reported errors."""
        parser = Parser.from_source(code, trace=self.trace)
        program = parser.parse_program()
        if parser.errors:
            logger.debug("rejecting input with %d parse error(s)", len(parser.errors))
            raise MonkeySyntaxError(parser.errors)
        return program

    def expand(self, code: str) -> Program:
        """Parse `code`, register its macros and return the expanded program."""
        program = self.parse(code)
        define_macros(program, self.macro_env)
        return expand_macros(program, self.macro_env)

    def eval(self, code: str) -> MonkeyValue | None:
        """Evaluate `code` and return its value (None when it produces none)."""
        return evaluate(self.expand(code), self.env)
