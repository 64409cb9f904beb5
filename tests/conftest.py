import pytest

from monkey.evaluation.evaluator import evaluate
from monkey.evaluation.macro_expansion import define_macros, expand_macros
from monkey.interpreter import Interpreter
from monkey.reader.parser import parse
from monkey.types.environment import Environment


def parse_ok(source: str):
    """Parse `source`, failing the test on any parser error."""
    program, errors = parse(source)
    assert errors == [], f"parser had {len(errors)} errors: {errors}"
    return program


def run(source: str, env: Environment | None = None):
    """Parse, expand macros, and evaluate `source` in a fresh (or given) environment."""
    program = parse_ok(source)
    macro_env = Environment()
    define_macros(program, macro_env)
    expanded = expand_macros(program, macro_env)
    return evaluate(expanded, env if env is not None else Environment())


@pytest.fixture
def env():
    """Return a fresh environment for each test."""
    return Environment()


@pytest.fixture
def macro_env():
    """Return a fresh macro environment for each test."""
    return Environment()


@pytest.fixture
def interp():
    return Interpreter()
