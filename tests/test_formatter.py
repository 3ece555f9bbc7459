import os

import pytest

from uibro.formatter import format_program
from uibro.lexer import tokenize
from uibro.parser import parse

DEMO = os.path.join(os.path.dirname(__file__), '..', 'examples', 'demo.ui')


def fmt(source):
    return format_program(parse(tokenize(source)))


def test_canonical_chain_assignment():
    assert fmt("win=Window . title( 'App' ).size(800,600)") == 'win = Window.title("App").size(800, 600);\n'


def test_if_elseif_else_layout():
    source = 'if (a) { x = 1; } elseif (b) { } else { Notification.show("t", "m"); }'
    assert fmt(source) == (
        'if (a) {\n'
        '    x = 1;\n'
        '} elseif (b) { } else {\n'
        '    Notification.show("t", "m");\n'
        '}\n'
    )


def test_parentheses_only_where_needed():
    assert fmt("x = (1 + 2) * 3;") == "x = (1 + 2) * 3;\n"
    assert fmt("x = 1 - (2 - 3);") == "x = 1 - (2 - 3);\n"
    assert fmt("x = (1 - 2) - 3;") == "x = 1 - 2 - 3;\n"
    assert fmt("x = !(a && b) || !c;") == "x = !(a && b) || !c;\n"


def test_strings_are_escaped():
    assert fmt(r'x = "a\"b\nc";') == 'x = "a\\"b\\nc";\n'


def test_assignment_opening_with_chain_keeps_parentheses():
    assert fmt('x = (b.text("a")) && true;') == 'x = (b.text("a") && true);\n'


def test_empty_program():
    assert fmt("// nothing here") == ""


@pytest.mark.parametrize("source", [
    'win = Window.title("App").size(800,600);',
    'x = 1 + 2 * 3 - 4 / 5; y = x >= 2 && !flag || name != "bob";',
    'if (a) { b.text("1"); } elseif (c) { d = 2; } elseif (e) { } else { f = g; }',
    'if (a) { if (b) { c = 1; } else { c = 2; } }',
    'x = (b.text("a")) && true; y = 1.2.3;',
])
def test_formatted_source_parses_to_same_tree(source):
    program = parse(tokenize(source))
    assert parse(tokenize(format_program(program))) == program


def test_demo_script_round_trips():
    with open(DEMO, encoding='utf-8') as f:
        program = parse(tokenize(f.read()))
    assert parse(tokenize(format_program(program))) == program


def test_chain_with_variable_root_and_no_calls_keeps_its_dot():
    source = 'a.; x = a.; y = 1 + a.; b.text(a.);'
    assert fmt(source) == 'a.;\nx = a.;\ny = 1 + a.;\nb.text(a.);\n'
    program = parse(tokenize(source))
    assert parse(tokenize(format_program(program))) == program


def test_component_root_without_calls():
    assert fmt('w = Window; Window;') == 'w = Window;\nWindow;\n'


def test_long_operator_run():
    source = 'x = ' + ' - '.join(str(i) for i in range(3000)) + ';'
    assert fmt(source) == source + '\n'


def test_long_elseif_chain():
    source = 'if (a) { }' + ' elseif (b) { }' * 2000 + ' else {\n    x = 1;\n}'
    assert fmt(source) == source + '\n'
