# Core type aliases for the Monkey interpreter.
# Syntax trees are dataclass nodes (monkey.syntax.nodes) and runtime values are
# MonkeyObject subclasses (monkey.types.objects).
#
# Naming guidance:
# - Node:        Use in reader/parser/macro code to denote syntax.
# - MonkeyValue: Use in evaluator/runtime code to denote evaluated values.
# An evaluation may also produce no value at all (None), e.g. for `let`.

from typing import Any, Callable

# Runtime value alias
MonkeyValue = Any
# Syntax node alias
Node = Any

# Evaluator function type: Python evaluator used inside special forms/macros
EvaluatorFn = Callable[..., MonkeyValue]
