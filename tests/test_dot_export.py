from mid_valyrian.dot_export import to_dot
from mid_valyrian.parser import parse_text


def test_nodes_and_labelled_edges():
    dot = to_dot(parse_text('decree greet(who) {\n  speak("Hail " + who)\n}\ngreet("Arya")'))
    lines = dot.splitlines()
    assert lines[0] == "digraph AST {"
    assert lines[-1] == "}"
    assert '  n0 [label="Program"];' in lines
    assert any('label="FuncDecl\\nname=greet"' in line for line in lines)
    assert any('label="Binary\\nop=+"' in line for line in lines)
    assert any('label="statements[1]"' in line for line in lines)
    assert any('label="CallStmt\\nname=greet"' in line for line in lines)


def test_literal_labels_are_escaped():
    dot = to_dot(parse_text('speak("say \\\\ hi")\nfor (2) { }'))
    assert 'label="Literal\\nstring=say \\\\\\\\ hi"' in dot
    assert 'label="ForLoop\\ncount=2"' in dot


def test_every_node_is_declared_once():
    dot = to_dot(parse_text("blade x = 1\nx = x + 1\nspeak(-x)"))
    decls = [line for line in dot.splitlines() if "[label=" in line and "->" not in line]
    names = [line.split()[0] for line in decls]
    assert len(names) == len(set(names))


def test_conditional_edges_name_their_branch():
    dot = to_dot(parse_text("if (x > 1) { speak(1) } else { speak(2) }"))
    assert 'label="cond"' in dot
    assert 'label="then[0]"' in dot
    assert 'label="else[0]"' in dot
    assert 'label="Binary\\nop=>"' in dot


def test_bare_return_has_no_children():
    dot = to_dot(parse_text("decree f() {\n  return\n}"))
    assert '[label="Return"];' in dot
    assert 'label="value"' not in dot
