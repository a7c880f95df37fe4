from __future__ import annotations

from typing import List, Optional
from lark import Lark, Token, Transformer, Tree, exceptions

from .ast import *
from .errors import ParseError, ValyrianError


def _stmts(items) -> List[Stmt]:
    return [x for x in items if isinstance(x, Stmt)]


def _exprs(items) -> List[Expr]:
    return [x for x in items if isinstance(x, Expr)]


def parse_i64(text: str, what: str) -> int:
    try:
        value = int(text.strip())
    except ValueError:
        raise ParseError(f"Invalid {what}: {text}") from None
    if not I64_MIN <= value <= I64_MAX:
        raise ParseError(f"Invalid {what}: {text}")
    return value


class AstBuilder(Transformer):
    """Lowers a parse tree produced by grammar.lark into the AST.

    Children arrive already lowered (the transform is bottom-up), so
    "statement-category" and "expression-category" children are picked
    out by their AST base class.
    """

    def program(self, items):
        return Program(statements=_stmts(items))

    def statement(self, items):
        if not items:
            raise ParseError("Empty statement found in the scroll")
        inner = items[0]
        # a call in statement position discards its result
        if isinstance(inner, Call):
            return CallStmt(name=inner.name, args=inner.args)
        return inner

    def main_block(self, items):
        return MainBlock(body=_stmts(items))

    # --- declarations ---
    def variable_declaration(self, items):
        if len(items) < 3:
            raise ParseError("Missing expression in variable declaration")
        type_tok, name_tok, value = items[0], items[1], items[2]
        data_type = DataType.from_name(str(type_tok))
        if data_type is None:
            raise ParseError(f"Unknown type: {type_tok}")
        return VarDecl(name=str(name_tok), data_type=data_type, value=value)

    def parameter_list(self, items):
        return [str(x) for x in items if isinstance(x, Token) and x.type == "NAME"]

    def function_declaration(self, items):
        name = str(items[0])
        params = items[1] if len(items) > 1 and isinstance(items[1], list) else []
        return FuncDecl(name=name, params=params, body=_stmts(items[1:]))

    # --- statements ---
    def assignment(self, items):
        return Assign(name=str(items[0]), value=items[1])

    def function_call(self, items):
        return Call(name=str(items[0]), args=_exprs(items[1:]))

    def conditional(self, items):
        cond = items[0]
        then_body: List[Stmt] = []
        else_body: List[Stmt] = []
        in_else = False
        for it in items[1:]:
            if isinstance(it, Token) and it.type == "ELSE":
                in_else = True
            elif isinstance(it, Stmt):
                (else_body if in_else else then_body).append(it)
        return If(cond=cond, then_body=then_body, else_body=else_body or None)

    def for_loop(self, items):
        count = parse_i64(str(items[0]), "loop count")
        return ForLoop(count=count, body=_stmts(items[1:]))

    def while_loop(self, items):
        return While(cond=items[0], body=_stmts(items[1:]))

    def return_statement(self, items):
        value: Optional[Expr] = items[0] if items else None
        return Return(value=value)

    def speak_statement(self, items):
        if not items:
            raise ParseError("speak() is empty")
        return Speak(value=items[0])

    # --- expressions ---
    def expression(self, items):
        return items[0]

    def binary_expr(self, items):
        # items: lhs, OP, rhs, OP, rhs ... (left-assoc)
        expr = items[0]
        i = 1
        while i < len(items):
            op = BinaryOperator.from_symbol(str(items[i]))
            if op is None:
                raise ParseError(f"Unknown binary operator: {items[i]}")
            if i + 1 >= len(items):
                raise ParseError(f"Missing right operand for {items[i]}")
            expr = Binary(op=op, lhs=expr, rhs=items[i + 1])
            i += 2
        return expr

    def unary_expr(self, items):
        first = items[0]
        if not isinstance(first, Token):
            return first
        op = UnaryOperator.from_symbol(str(first))
        if op is None:
            raise ParseError(f"Unknown unary operator: {first}")
        return Unary(op=op, rhs=items[1])

    def identifier(self, items):
        return Identifier(name=str(items[0]))

    def input_expression(self, items):
        return Input(prompt=str(items[0]) if items else "")

    # --- literals ---
    def string_literal(self, items):
        return Literal(ValueKind.TEXT, str(items[0]).strip('"'))

    def integer_literal(self, items):
        return Literal(ValueKind.INTEGER, parse_i64(str(items[0]), "integer"))

    def float_literal(self, items):
        text = str(items[0])
        try:
            return Literal(ValueKind.FLOAT, float(text.strip()))
        except ValueError:
            raise ParseError(f"Invalid float: {text}") from None

    def boolean_literal(self, items):
        text = str(items[0])
        if text == "aye":
            return Literal(ValueKind.BOOLEAN, True)
        if text == "nay":
            return Literal(ValueKind.BOOLEAN, False)
        raise ParseError(f"Invalid boolean: {text}")

    def char_literal(self, items):
        text = str(items[0])
        if len(text) != 3:
            raise ParseError(f"Invalid character literal: {text}")
        return Literal(ValueKind.CHAR, text[1])

    def __default__(self, data, children, meta):
        raise ParseError(
            f"Unknown construct: {data}",
            line=getattr(meta, "line", None),
            column=getattr(meta, "column", None),
        )


def lower(tree: Tree) -> Program:
    try:
        program = AstBuilder().transform(tree)
    except exceptions.VisitError as e:
        if isinstance(e.orig_exc, ValyrianError):
            raise e.orig_exc from None
        raise
    if not isinstance(program, Program):
        raise ParseError(f"Expected a program, found {type(program).__name__}")
    return program


def make_parser() -> Lark:
    with open(__file__.replace("parser.py", "grammar.lark"), "r", encoding="utf-8") as f:
        grammar = f.read()
    return Lark(grammar, start="program", parser="lalr", propagate_positions=True)


_PARSER: Optional[Lark] = None


def parse_tree(text: str) -> Tree:
    global _PARSER
    if _PARSER is None:
        _PARSER = make_parser()
    try:
        return _PARSER.parse(text)
    except exceptions.UnexpectedInput as e:
        reason = (str(e).strip().splitlines() or ["unexpected input"])[0]
        raise ParseError(
            f"The Maester failed to decipher your scroll: {reason}",
            line=e.line,
            column=e.column,
        ) from None


def parse_text(text: str) -> Program:
    return lower(parse_tree(text))
