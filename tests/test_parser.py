import pytest

from uibro.ast import Assignment, BinaryOp, Call, Chain, IfStmt, Literal, Program
from uibro.errors import Diagnostics
from uibro.lexer import TokenType, tokenize
from uibro.parser import parse


def parse_source(source, diagnostics=None):
    return parse(tokenize(source, diagnostics), diagnostics)


def num(text):
    return Literal(text, TokenType.NUMBER)


def ident(name):
    return Literal(name, TokenType.IDENTIFIER)


def assigned_value(source):
    program = parse_source(source)
    assert len(program.statements) == 1
    return program.statements[0].value


def test_window_chain_assignment():
    program = parse_source('win = Window.title("App").size(800,600);')
    assert program == Program([
        Assignment('win', Chain('Window', [
            Call('title', [Literal('App', TokenType.STRING)]),
            Call('size', [num('800'), num('600')]),
        ]))
    ])


def test_chain_records_source_lines():
    program = parse_source('\n\nb.position(1, 2)\n  .size(3, 4);')
    chain = program.statements[0]
    assert chain.line == 3
    assert [c.line for c in chain.calls] == [3, 4]


def test_multiplication_binds_tighter_than_addition():
    assert assigned_value("x = 1 + 2 * 3;") == BinaryOp(
        num('1'), '+', BinaryOp(num('2'), '*', num('3'))
    )


def test_binary_operators_are_left_associative():
    assert assigned_value("x = 10 - 4 - 3;") == BinaryOp(
        BinaryOp(num('10'), '-', num('4')), '-', num('3')
    )


def test_logical_precedence_and_unary_not():
    assert assigned_value("x = !a && b || c;") == BinaryOp(
        BinaryOp(BinaryOp(None, '!', ident('a')), '&&', ident('b')), '||', ident('c')
    )


def test_comparison_binds_tighter_than_equality():
    assert assigned_value("x = a < b == c;") == BinaryOp(
        BinaryOp(ident('a'), '<', ident('b')), '==', ident('c')
    )


def test_parentheses_override_precedence():
    assert assigned_value("x = (1 + 2) * 3;") == BinaryOp(
        BinaryOp(num('1'), '+', num('2')), '*', num('3')
    )


def test_assignment_from_bare_identifier_is_an_expression():
    assert assigned_value("a = b;") == ident('b')


def test_assignment_from_component_without_calls_is_a_chain():
    assert assigned_value("w = Window;") == Chain('Window', [])


def test_bare_chain_and_component_statements():
    program = parse_source('btn.position(1, 2).size(3, 4); Notification.show("a", "b")')
    assert [type(s) for s in program.statements] == [Chain, Chain]
    assert program.statements[0].root == 'btn'
    assert [c.name for c in program.statements[0].calls] == ['position', 'size']
    assert program.statements[1].root == 'Notification'


def test_chain_inside_expression():
    program = parse_source('if (a && b.text("x")) { }')
    condition = program.statements[0].condition
    assert condition == BinaryOp(
        ident('a'), '&&', Chain('b', [Call('text', [Literal('x', TokenType.STRING)])])
    )


def test_elseif_nests_into_else_body():
    program = parse_source("if (a) { x = 1; } elseif (b) { x = 2; } else { x = 3; }")
    outer = program.statements[0]
    assert outer.then_body == [Assignment('x', num('1'))]
    assert outer.else_body == [
        IfStmt(ident('b'), [Assignment('x', num('2'))], [Assignment('x', num('3'))])
    ]


def test_trailing_else_attaches_to_last_elseif():
    program = parse_source(
        "if (a) { x = 1; } elseif (b) { x = 2; } elseif (c) { x = 3; } else { x = 4; }"
    )
    outer = program.statements[0]
    second = outer.else_body[0]
    third = second.else_body[0]
    assert len(outer.else_body) == 1
    assert len(second.else_body) == 1
    assert third.condition == ident('c')
    assert third.else_body == [Assignment('x', num('4'))]


def test_assignment_inside_block():
    program = parse_source("if (true) { y = 2 }")
    assert program.statements[0].then_body == [Assignment('y', num('2'))]


def test_garbage_between_statements_is_discarded():
    diagnostics = Diagnostics()
    program = parse_source(") ) ; x = 1; } foo bar = 2;", diagnostics)
    assert program.statements == [Assignment('x', num('1')), Assignment('bar', num('2'))]
    assert any("Discarded" in m for m in diagnostics.messages())


def test_reserved_loop_keywords_do_not_form_statements():
    program = parse_source("while (x) { y = 1; }")
    assert program.statements == [Assignment('y', num('1'))]


def test_missing_closing_paren_is_tolerated():
    diagnostics = Diagnostics()
    program = parse_source('a.text("x"; b.text("y");', diagnostics)
    assert program.statements == [
        Chain('a', [Call('text', [Literal('x', TokenType.STRING)])]),
        Chain('b', [Call('text', [Literal('y', TokenType.STRING)])]),
    ]
    assert diagnostics.by_stage('parser')


def test_empty_argument_list():
    program = parse_source("Window.center();")
    assert program.statements[0].calls == [Call('center', [])]


@pytest.mark.parametrize("source", [
    "((((",
    "if",
    "if (",
    "if (a) {",
    "x = ",
    "a.",
    "a.b.c()",
    "}}}",
    "else { x = 1; }",
    "= = =",
    "elseif (a) { }",
    "Window.title(",
    "x = 1 +",
    "!",
])
def test_malformed_input_never_raises(source):
    program = parse_source(source, Diagnostics())
    assert isinstance(program, Program)


def test_deeply_parenthesised_expression_is_skipped():
    diagnostics = Diagnostics()
    source = 'x = ' + '(' * 150 + '1' + ')' * 150 + '; y = 2;'
    program = parse_source(source, diagnostics)
    assert program.statements == [
        Assignment('x', Literal('', TokenType.STRING)),
        Assignment('y', num('2')),
    ]
    assert diagnostics.messages() == ["Expression nested too deeply, skipped"]


def test_long_run_of_not_operators_is_cut_short():
    program = parse_source('x = ' + '!' * 1200 + 'true; y = 2;', Diagnostics())
    node = program.statements[0].value
    count = 0
    while isinstance(node, BinaryOp):
        node = node.right
        count += 1
    assert 0 < count < 1200
    assert node == Literal('', TokenType.STRING)
    assert program.statements[1] == Assignment('y', num('2'))


def test_deeply_nested_blocks_are_skipped():
    diagnostics = Diagnostics()
    source = 'if (true) { ' * 300 + 'x = 1; ' + '} ' * 300 + 'y = 2;'
    program = parse_source(source, diagnostics)
    assert len(program.statements) == 2
    assert isinstance(program.statements[0], IfStmt)
    assert program.statements[1] == Assignment('y', num('2'))
    assert "Block nested too deeply, skipped" in diagnostics.messages()


def test_long_elseif_chain():
    source = 'if (a) { }' + ' elseif (b) { }' * 2000 + ' else { x = 1; }'
    node = parse_source(source).statements[0]
    depth = 0
    while node.else_body and isinstance(node.else_body[0], IfStmt):
        node = node.else_body[0]
        depth += 1
    assert depth == 2000
    assert node.else_body == [Assignment('x', num('1'))]
