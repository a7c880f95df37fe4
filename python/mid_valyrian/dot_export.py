from __future__ import annotations
from itertools import count
from typing import Iterator, List, Sequence, Tuple

from .ast import (
    Program, VarDecl, Assign, FuncDecl, CallStmt, If, ForLoop, While,
    Return, Speak, MainBlock,
    Literal, Identifier, Binary, Unary, Input, Call, Value,
)

Node = object


def _esc(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"')


def _indexed(edge: str, items: Sequence[Node]) -> Iterator[Tuple[str, Node]]:
    for i, item in enumerate(items):
        yield f"{edge}[{i}]", item


def _children(node: Node) -> Iterator[Tuple[str, Node]]:
    if isinstance(node, Program):
        yield from _indexed("statements", node.statements)
    elif isinstance(node, (VarDecl, Assign, Speak)):
        yield "value", node.value
    elif isinstance(node, Return):
        if node.value is not None:
            yield "value", node.value
    elif isinstance(node, (FuncDecl, MainBlock, ForLoop)):
        yield from _indexed("body", node.body)
    elif isinstance(node, If):
        yield "cond", node.cond
        yield from _indexed("then", node.then_body)
        if node.else_body is not None:
            yield from _indexed("else", node.else_body)
    elif isinstance(node, While):
        yield "cond", node.cond
        yield from _indexed("body", node.body)
    elif isinstance(node, (CallStmt, Call)):
        yield from _indexed("args", node.args)
    elif isinstance(node, Binary):
        yield "lhs", node.lhs
        yield "rhs", node.rhs
    elif isinstance(node, Unary):
        yield "rhs", node.rhs


def _label(node: Node) -> str:
    t = type(node).__name__
    if isinstance(node, Literal):
        return f"{t}\\n{node.kind.value}={_esc(str(Value(node.kind, node.value)))}"
    if isinstance(node, (VarDecl, Assign, FuncDecl, CallStmt, Call, Identifier)):
        return f"{t}\\nname={_esc(node.name)}"
    if isinstance(node, (Binary, Unary)):
        return f"{t}\\nop={_esc(node.op.value)}"
    if isinstance(node, ForLoop):
        return f"{t}\\ncount={node.count}"
    if isinstance(node, Input) and node.prompt:
        return f"{t}\\nprompt={_esc(node.prompt)}"
    return t


def to_dot(program: Program) -> str:
    """Render a lowered program as a Graphviz digraph, one box per AST node."""
    lines: List[str] = ["digraph AST {", "  node [shape=box];"]
    ids = count()

    def emit(node: Node) -> str:
        this = f"n{next(ids)}"
        lines.append(f'  {this} [label="{_label(node)}"];')
        for edge, child in _children(node):
            lines.append(f'  {this} -> {emit(child)} [label="{edge}"];')
        return this

    emit(program)
    lines.append("}")
    return "\n".join(lines)
