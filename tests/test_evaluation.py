from fractions import Fraction

import pytest
from hypothesis import given, strategies as st

from monkey.evaluation.evaluator import evaluate, is_truthy, wrap_int64
from monkey.types.environment import Environment
from monkey.types.function import Builtin, Function
from monkey.types.objects import (
    FALSE,
    NULL,
    TRUE,
    Array,
    Boolean,
    Error,
    Hash,
    Integer,
    String,
)
from tests.conftest import parse_ok, run

INT64_MAX = 2**63 - 1
INT64_MIN = -(2**63)


# -------------------------------
# Scalars and operators
# -------------------------------
@pytest.mark.parametrize(
    "source,expected",
    [
        ("5", 5),
        ("10", 10),
        ("-5", -5),
        ("-10", -10),
        ("5 + 5 + 5 + 5 - 10", 10),
        ("2 * 2 * 2 * 2 * 2", 32),
        ("-50 + 100 + -50", 0),
        ("5 * 2 + 10", 20),
        ("5 + 2 * 10", 25),
        ("20 + 2 * -10", 0),
        ("50 / 2 * 2 + 10", 60),
        ("2 * (5 + 10)", 30),
        ("3 * 3 * 3 + 10", 37),
        ("3 * (3 * 3) + 10", 37),
        ("(5 + 10 * 2 + 15 / 3) * 2 + -10", 50),
        ("7 / 2", 3),
        ("-7 / 2", -3),
        ("7 / -2", -3),
        ("-7 / -2", 3),
    ],
)
def test_integer_expressions(source, expected):
    assert run(source) == Integer(expected)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("true", True),
        ("false", False),
        ("1 < 2", True),
        ("1 > 2", False),
        ("1 < 1", False),
        ("1 > 1", False),
        ("1 == 1", True),
        ("1 != 1", False),
        ("1 == 2", False),
        ("1 != 2", True),
        ("true == true", True),
        ("false == false", True),
        ("true == false", False),
        ("true != false", True),
        ("(1 < 2) == true", True),
        ("(1 < 2) == false", False),
        ("(1 > 2) == true", False),
        ("(1 > 2) == false", True),
        ("1 == true", False),
        ("1 != true", True),
        ('"1" == 1', False),
        ("[1, 2] == [1, 2]", True),
        ("[1, 2] == [2, 1]", False),
    ],
)
def test_boolean_expressions(source, expected):
    result = run(source)
    assert result is (TRUE if expected else FALSE)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("!true", False),
        ("!false", True),
        ("!5", False),
        ("!!true", True),
        ("!!false", False),
        ("!!5", True),
        ("!0", False),
        ('!""', False),
        ("![]", False),
    ],
)
def test_bang_operator(source, expected):
    assert run(source) is (TRUE if expected else FALSE)


def test_bang_of_null_is_true():
    assert run("!if (false) { 1 }") is TRUE


def test_booleans_are_singletons():
    assert run("1 < 2") is run("true")
    assert run("true") == Boolean(True)


# -------------------------------
# Conditionals
# -------------------------------
@pytest.mark.parametrize(
    "source,expected",
    [
        ("if (true) { 10 }", 10),
        ("if (false) { 10 }", None),
        ("if (1) { 10 }", 10),
        ("if (1 < 2) { 10 }", 10),
        ("if (1 > 2) { 10 }", None),
        ("if (1 > 2) { 10 } else { 20 }", 20),
        ("if (1 < 2) { 10 } else { 20 }", 10),
        ("if (0) { 10 } else { 20 }", 10),
        ('if ("") { 10 } else { 20 }', 10),
    ],
)
def test_if_else_expressions(source, expected):
    result = run(source)
    if expected is None:
        assert result is NULL
    else:
        assert result == Integer(expected)


# -------------------------------
# Return
# -------------------------------
@pytest.mark.parametrize(
    "source,expected",
    [
        ("return 10;", 10),
        ("return 10; 9;", 10),
        ("return 2 * 5; 9;", 10),
        ("9; return 2 * 5; 9;", 10),
        ("if (10 > 1) { return 10; }", 10),
        ("if (10 > 1) { if (10 > 1) { return 10; } return 1; }", 10),
        ("let f = fn(x) { return x; x + 10; }; f(10);", 10),
        ("let f = fn(x) { let result = x + 10; return result; return 10; }; f(10);", 20),
    ],
)
def test_return_statements(source, expected):
    assert run(source) == Integer(expected)


def test_return_inside_function_does_not_escape_caller():
    source = """
    let inner = fn() { return 1; };
    let outer = fn() { inner(); 2 };
    outer();
    """
    assert run(source) == Integer(2)


# -------------------------------
# Errors
# -------------------------------
@pytest.mark.parametrize(
    "source,message",
    [
        ("5 + true;", "type mismatch: INTEGER + BOOLEAN"),
        ("5 + true; 5;", "type mismatch: INTEGER + BOOLEAN"),
        ("-true", "unknown operator: -BOOLEAN"),
        ("true + false;", "unknown operator: BOOLEAN + BOOLEAN"),
        ("true + false + true + false;", "unknown operator: BOOLEAN + BOOLEAN"),
        ("5; true + false; 5", "unknown operator: BOOLEAN + BOOLEAN"),
        ("if (10 > 1) { true + false; }", "unknown operator: BOOLEAN + BOOLEAN"),
        ("if (10 > 1) { if (10 > 1) { return true + false; } return 1; }", "unknown operator: BOOLEAN + BOOLEAN"),
        ("foobar", "identifier not found: foobar"),
        ('"Hello" - "World"', "unknown operator: STRING - STRING"),
        ('"a" < "b"', "unknown operator: STRING < STRING"),
        ('"a" == "a"', "unknown operator: STRING == STRING"),
        ('"a" == "b"', "unknown operator: STRING == STRING"),
        ('"a" != "b"', "unknown operator: STRING != STRING"),
        ('{"name": "Monkey"}[fn(x) { x }];', "unusable as hash key: FUNCTION"),
        ("{[1]: 2}", "unusable as hash key: ARRAY"),
        ("1 / 0", "division by zero"),
        ("5[0]", "index operator not supported: INTEGER"),
        ("1(2)", "not a function: INTEGER"),
        ("let f = fn(x, y) { x + y }; f(1)", "wrong number of arguments: want=2, got=1"),
        ("fn() { 1 }(2, 3)", "wrong number of arguments: want=0, got=2"),
        ("[1, foo, bar]", "identifier not found: foo"),
        ("let f = fn(x) { x }; f(1, missing)", "identifier not found: missing"),
        ("{1: missing}", "identifier not found: missing"),
        ("-[1]", "unknown operator: -ARRAY"),
        ("[1] + [2]", "unknown operator: ARRAY + ARRAY"),
        ('[1] + "a"', "type mismatch: ARRAY + STRING"),
    ],
)
def test_error_handling(source, message):
    result = run(source)
    assert isinstance(result, Error)
    assert result.message == message
    assert result.inspect() == f"ERROR: {message}"


def test_error_stops_program():
    env = Environment()
    result = run("let a = 1; let b = a + true; let c = 3;", env)
    assert result == Error("type mismatch: INTEGER + BOOLEAN")
    assert env.get("a") == Integer(1)
    assert env.get("b") is None
    assert env.get("c") is None


# -------------------------------
# Bindings, functions, closures
# -------------------------------
@pytest.mark.parametrize(
    "source,expected",
    [
        ("let a = 5; a;", 5),
        ("let a = 5 * 5; a;", 25),
        ("let a = 5; let b = a; b;", 5),
        ("let a = 5; let b = a; let c = a + b + 5; c;", 15),
    ],
)
def test_let_statements(source, expected):
    assert run(source) == Integer(expected)


def test_let_produces_no_value():
    assert run("let a = 5;") is None


def test_let_rebinds_in_same_scope():
    assert run("let a = 1; let a = a + 1; a") == Integer(2)


def test_function_object():
    result = run("fn(x) { x + 2; };")
    assert isinstance(result, Function)
    assert [p.value for p in result.parameters] == ["x"]
    assert str(result.body) == "(x + 2)"
    assert result.inspect() == "fn(x) {\n(x + 2)\n}"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("let identity = fn(x) { x; }; identity(5);", 5),
        ("let identity = fn(x) { return x; }; identity(5);", 5),
        ("let double = fn(x) { x * 2; }; double(5);", 10),
        ("let add = fn(x, y) { x + y; }; add(5, 5);", 10),
        ("let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));", 20),
        ("fn(x) { x; }(5)", 5),
    ],
)
def test_function_application(source, expected):
    assert run(source) == Integer(expected)


def test_empty_function_body_yields_nothing():
    assert run("fn() {}()") is None


def test_closures():
    source = """
    let newAdder = fn(x) {
      fn(y) { x + y };
    };
    let addTwo = newAdder(2);
    addTwo(2);
    """
    assert run(source) == Integer(4)


def test_parameters_shadow_outer_bindings():
    source = "let x = 10; let f = fn(x) { x * 2 }; f(3) + x"
    assert run(source) == Integer(16)


def test_let_inside_function_is_local():
    env = Environment()
    run("let f = fn() { let inner = 1; inner }; f();", env)
    assert env.get("inner") is None


def test_recursion():
    source = """
    let fib = fn(n) { if (n < 2) { n } else { fib(n - 1) + fib(n - 2) } };
    fib(15);
    """
    assert run(source) == Integer(610)


def test_mutual_recursion():
    source = """
    let isEven = fn(n) { if (n == 0) { true } else { isOdd(n - 1) } };
    let isOdd = fn(n) { if (n == 0) { false } else { isEven(n - 1) } };
    isEven(10);
    """
    assert run(source) is TRUE


def test_higher_order_functions():
    source = """
    let map = fn(arr, f) {
      let iter = fn(arr, accumulated) {
        if (len(arr) == 0) { accumulated } else { iter(rest(arr), push(accumulated, f(first(arr)))) }
      };
      iter(arr, []);
    };
    let reduce = fn(arr, initial, f) {
      let iter = fn(arr, result) {
        if (len(arr) == 0) { result } else { iter(rest(arr), f(result, first(arr))) }
      };
      iter(arr, initial);
    };
    let sum = fn(arr) { reduce(arr, 0, fn(initial, el) { initial + el }) };
    sum(map([1, 2, 3, 4], fn(x) { x * 2 }));
    """
    assert run(source) == Integer(20)


def test_functions_compare_by_identity():
    assert run("let f = fn() { 1 }; f == f") is TRUE
    assert run("fn() { 1 } == fn() { 1 }") is FALSE


# -------------------------------
# Strings
# -------------------------------
def test_string_literal():
    assert run('"Hello World!"') == String("Hello World!")


def test_string_concatenation():
    assert run('"Hello" + " " + "World!"') == String("Hello World!")


# -------------------------------
# Arrays
# -------------------------------
def test_array_literal():
    result = run("[1, 2 * 2, 3 + 3]")
    assert result == Array([Integer(1), Integer(4), Integer(6)])
    assert result.inspect() == "[1, 4, 6]"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("[1, 2, 3][0]", 1),
        ("[1, 2, 3][1]", 2),
        ("[1, 2, 3][2]", 3),
        ("let i = 0; [1][i];", 1),
        ("[1, 2, 3][1 + 1];", 3),
        ("let myArray = [1, 2, 3]; myArray[2];", 3),
        ("let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];", 6),
        ("let myArray = [1, 2, 3]; let i = myArray[0]; myArray[i]", 2),
        ("[1, 2, 3][3]", None),
        ("[1, 2, 3][-1]", None),
        ("[][0]", None),
    ],
)
def test_array_index_expressions(source, expected):
    result = run(source)
    if expected is None:
        assert result is NULL
    else:
        assert result == Integer(expected)


# -------------------------------
# Hashes
# -------------------------------
def test_hash_literal():
    source = """
    let two = "two";
    {
      "one": 10 - 9,
      two: 1 + 1,
      "thr" + "ee": 6 / 2,
      4: 4,
      true: 5,
      false: 6
    }
    """
    result = run(source)
    assert isinstance(result, Hash)
    expected = [
        (String("one"), Integer(1)),
        (String("two"), Integer(2)),
        (String("three"), Integer(3)),
        (Integer(4), Integer(4)),
        (TRUE, Integer(5)),
        (FALSE, Integer(6)),
    ]
    assert [(p.key, p.value) for p in result.pairs.values()] == expected
    for key, value in expected:
        assert result.get(key) == value


def test_hash_later_duplicate_key_wins():
    result = run('{"a": 1, "a": 2}')
    assert len(result.pairs) == 1
    assert result.get(String("a")) == Integer(2)


@pytest.mark.parametrize(
    "source,expected",
    [
        ('{"foo": 5}["foo"]', 5),
        ('{"foo": 5}["bar"]', None),
        ('let key = "foo"; {"foo": 5}[key]', 5),
        ('{}["foo"]', None),
        ("{5: 5}[5]", 5),
        ("{true: 5}[true]", 5),
        ("{false: 5}[false]", 5),
        ('{1: 5}["1"]', None),
        ("{1: 5}[true]", None),
    ],
)
def test_hash_index_expressions(source, expected):
    result = run(source)
    if expected is None:
        assert result is NULL
    else:
        assert result == Integer(expected)


# -------------------------------
# Integer semantics
# -------------------------------
def test_int64_wraparound():
    assert run(f"{INT64_MAX} + 1") == Integer(INT64_MIN)
    assert run(f"-{INT64_MAX} - 2") == Integer(INT64_MAX)
    assert run(f"{INT64_MAX} * 2") == Integer(-2)


def test_negating_min_wraps():
    assert run(f"-(-{INT64_MAX} - 1)") == Integer(INT64_MIN)
    assert run(f"(-{INT64_MAX} - 1) / -1") == Integer(INT64_MIN)


@given(st.integers(min_value=INT64_MIN, max_value=INT64_MAX))
def test_wrap_int64_is_identity_in_range(n):
    assert wrap_int64(n) == n


@given(
    st.integers(min_value=-(10**9), max_value=10**9),
    st.integers(min_value=-(10**9), max_value=10**9),
)
def test_addition_and_multiplication_match_python(a, b):
    env = Environment()
    env.set("a", Integer(a))
    env.set("b", Integer(b))
    assert evaluate(parse_ok("a + b"), env) == Integer(a + b)
    assert evaluate(parse_ok("a * b"), env) == Integer(a * b)


@given(
    st.integers(min_value=-(10**12), max_value=10**12),
    st.integers(min_value=-(10**6), max_value=10**6).filter(lambda n: n != 0),
)
def test_division_truncates_toward_zero(a, b):
    env = Environment()
    env.set("a", Integer(a))
    env.set("b", Integer(b))
    expected = int(Fraction(a, b))  # int() truncates toward zero
    assert evaluate(parse_ok("a / b"), env) == Integer(expected)


# -------------------------------
# Truthiness and identifiers
# -------------------------------
@pytest.mark.parametrize(
    "value,expected",
    [(NULL, False), (FALSE, False), (TRUE, True), (Integer(0), True), (String(""), True), (Array([]), True)],
)
def test_is_truthy(value, expected):
    assert is_truthy(value) is expected


def test_builtins_resolve_after_environment():
    assert isinstance(run("len"), Builtin)
    assert run("let len = fn(x) { 42 }; len([1])") == Integer(42)


def test_evaluate_unknown_node_yields_none(env):
    assert evaluate(None, env) is None
