import logging

import pytest

from monkey.errors import MonkeyMacroError
from monkey.evaluation.macro_expansion import define_macros, expand_macros, is_macro_definition
from monkey.types.function import Macro
from monkey.types.objects import Error, Integer
from tests.conftest import parse_ok, run


def test_define_macros(macro_env):
    source = """
    let number = 1;
    let function = fn(x, y) { x + y };
    let mymacro = macro(x, y) { x + y; };
    """
    program = parse_ok(source)
    define_macros(program, macro_env)

    assert len(program.statements) == 2
    assert macro_env.get("number") is None
    assert macro_env.get("function") is None

    macro = macro_env.get("mymacro")
    assert isinstance(macro, Macro)
    assert [p.value for p in macro.parameters] == ["x", "y"]
    assert str(macro.body) == "(x + y)"
    assert macro.env is macro_env


def test_only_top_level_definitions_are_collected(macro_env):
    program = parse_ok("let f = fn() { let m = macro(x) { x }; 1 }; f()")
    define_macros(program, macro_env)
    assert len(program.statements) == 2
    assert macro_env.get("m") is None
    assert run("let f = fn() { let m = macro(x) { x }; 1 }; f()") == Integer(1)


def test_is_macro_definition():
    stmts = parse_ok("let m = macro() { 1 }; let f = fn() { 1 }; macro() { 1 }").statements
    assert [is_macro_definition(s) for s in stmts] == [True, False, False]


@pytest.mark.parametrize(
    "source,expected",
    [
        (
            "let infixExpression = macro() { quote(1 + 2); }; infixExpression();",
            "(1 + 2)",
        ),
        (
            "let reverse = macro(a, b) { quote(unquote(b) - unquote(a)); }; reverse(2 + 2, 10 - 5);",
            "(10 - 5) - (2 + 2)",
        ),
        (
            """
            let unless = macro(condition, consequence, alternative) {
                quote(if (!(unquote(condition))) {
                    unquote(consequence);
                } else {
                    unquote(alternative);
                });
            };
            unless(10 > 5, puts("not greater"), puts("greater"));
            """,
            'if (!(10 > 5)) { puts("not greater") } else { puts("greater") }',
        ),
        (
            "let m = macro() { return quote(1); }; m()",
            "1",
        ),
        (
            "let double = macro(x) { quote(unquote(x) * 2) }; double(double(1))",
            "((1 * 2) * 2)",
        ),
        (
            "let double = macro(x) { quote(unquote(x) * 2) }; let f = fn() { double(5) };",
            "let f = fn() { (5 * 2) };",
        ),
        (
            "let m = macro(x) { quote(unquote(x)) }; [m(1), {m(2): m(3)}]",
            "[1, {2: 3}]",
        ),
    ],
)
def test_expand_macros(source, expected, macro_env):
    program = parse_ok(source)
    define_macros(program, macro_env)
    expanded = expand_macros(program, macro_env)
    assert str(expanded) == str(parse_ok(expected))


def test_expansion_leaves_input_program_untouched(macro_env):
    program = parse_ok("let m = macro() { quote(1 + 2) }; m() * 3")
    define_macros(program, macro_env)
    before = str(program)
    expand_macros(program, macro_env)
    assert str(program) == before == "(m() * 3)"


def test_macro_expands_at_every_call_site():
    assert run("let double = macro(x) { quote(unquote(x) * 2) }; double(3) + double(4)") == Integer(14)


def test_macro_used_before_its_definition():
    assert run("m(1); let m = macro(x) { x };") == Integer(1)


def test_macro_arguments_are_not_evaluated(capsys):
    source = """
    let unless = macro(condition, consequence, alternative) {
        quote(if (!(unquote(condition))) { unquote(consequence); } else { unquote(alternative); });
    };
    unless(10 > 5, puts("not greater"), puts("greater"));
    """
    run(source)
    assert capsys.readouterr().out == "greater\n"


def test_macros_are_not_runtime_bindings():
    result = run("let m = macro() { quote(1) }; m")
    assert result == Error("identifier not found: m")


@pytest.mark.parametrize(
    "source,message",
    [
        ("let m = macro(a) { quote(unquote(a)) }; m(1, 2)", "wrong number of arguments to macro: want=1, got=2"),
        ("let m = macro(a, b) { quote(1) }; m()", "wrong number of arguments to macro: want=2, got=0"),
        ("let m = macro() { 1 }; m()", "we only support returning AST-nodes from macros"),
        ("let m = macro() { }; m()", "we only support returning AST-nodes from macros"),
        ("let m = macro() { missing }; m()", "error expanding macro m: identifier not found: missing"),
        ("let y = 5; let m = macro() { quote(unquote(y)) }; m()", "error expanding macro m: identifier not found: y"),
    ],
)
def test_macro_errors(source, message):
    with pytest.raises(MonkeyMacroError) as exc:
        run(source)
    assert str(exc.value) == message


def test_macro_definitions_are_logged(macro_env, caplog):
    caplog.set_level(logging.DEBUG, logger="monkey.evaluation.macro_expansion")
    program = parse_ok("let m = macro(x) { x }; m(1)")
    define_macros(program, macro_env)
    expand_macros(program, macro_env)
    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["defined macro m(x)", "expanded m(1) into 1"]
