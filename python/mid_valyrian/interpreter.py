from __future__ import annotations

import pprint
import sys
from typing import Dict, List, Optional, Sequence, TextIO

from .ast import (
    Program, Stmt, VarDecl, Assign, FuncDecl, CallStmt, If, ForLoop, While,
    Return, Speak, MainBlock,
    Expr, Literal, Identifier, Binary, Unary, Input, Call,
    BinaryOperator, UnaryOperator, Value, ValueKind, ReturnSignal, VOID,
    I64_MIN, I64_MAX,
)
from .errors import (
    ArgumentMismatchError, DivisionByZeroError, InputOutputError,
    InterpreterRuntimeError, InvalidOperationError, ParseError,
    TypeMismatchError, UndefinedFunctionError, UndefinedVariableError,
)

PROMPT = "Speak your words: "

# each interpreted call costs several Python frames
RECURSION_LIMIT = 10000

_NUMERIC = (ValueKind.INTEGER, ValueKind.FLOAT)
_ARITHMETIC = (
    BinaryOperator.ADD, BinaryOperator.SUBTRACT,
    BinaryOperator.MULTIPLY, BinaryOperator.DIVIDE,
)
_ORDERING = {
    BinaryOperator.GREATER: lambda l, r: l > r,
    BinaryOperator.LESS: lambda l, r: l < r,
    BinaryOperator.GREATER_EQUAL: lambda l, r: l >= r,
    BinaryOperator.LESS_EQUAL: lambda l, r: l <= r,
}
_LOGICAL = {
    BinaryOperator.AND: lambda l, r: l and r,
    BinaryOperator.OR: lambda l, r: l or r,
}


def _float_arith(op: BinaryOperator, l: float, r: float) -> float:
    if op is BinaryOperator.ADD:
        return l + r
    if op is BinaryOperator.SUBTRACT:
        return l - r
    if op is BinaryOperator.MULTIPLY:
        return l * r
    return l / r


def _int_arith(op: BinaryOperator, l: int, r: int) -> int:
    if op is BinaryOperator.ADD:
        res = l + r
    elif op is BinaryOperator.SUBTRACT:
        res = l - r
    elif op is BinaryOperator.MULTIPLY:
        res = l * r
    else:
        # truncate toward zero
        res = abs(l) // abs(r)
        if (l < 0) != (r < 0):
            res = -res
    if not I64_MIN <= res <= I64_MAX:
        raise InterpreterRuntimeError(f"integer overflow in {l} {op.value} {r}")
    return res


class Interpreter:
    """Tree-walking evaluator over one flat global namespace.

    Function parameters are bound into the same table as every other
    variable and restored when the call finishes.
    """

    def __init__(
        self,
        debug: bool = False,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.variables: Dict[str, Value] = {}
        self.functions: Dict[str, FuncDecl] = {}
        self.debug = debug
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def _trace(self, text: str) -> None:
        print(f"[debug] {text}", file=self.stdout)

    # --- entry ---
    def interpret(self, program: Program) -> None:
        if self.debug:
            self._trace("AST:\n" + pprint.pformat(program))

        for st in program.statements:
            if isinstance(st, FuncDecl):
                self.functions[st.name] = st

        old_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
        try:
            for st in program.statements:
                if isinstance(st, MainBlock):
                    # a return only ends this main block
                    self.execute_block(st.body)
                elif isinstance(st, FuncDecl):
                    continue
                elif self.execute(st) is not None:
                    break
        except RecursionError:
            raise InterpreterRuntimeError("the call stack grew taller than the Wall") from None
        finally:
            sys.setrecursionlimit(old_limit)

    # --- statements ---
    def execute_block(self, stmts: Sequence[Stmt]) -> Optional[ReturnSignal]:
        for st in stmts:
            flow = self.execute(st)
            if flow is not None:
                return flow
        return None

    def execute(self, st: Stmt) -> Optional[ReturnSignal]:
        if self.debug:
            self._trace(f"executing: {st}")

        if isinstance(st, Return):
            value = self.evaluate(st.value) if st.value is not None else VOID
            return ReturnSignal(value)

        if isinstance(st, VarDecl):
            self.variables[st.name] = self.evaluate(st.value)
            return None

        if isinstance(st, Assign):
            if st.name not in self.variables:
                raise UndefinedVariableError(st.name)
            self.variables[st.name] = self.evaluate(st.value)
            return None

        if isinstance(st, CallStmt):
            self.call_function(st.name, st.args)
            return None

        if isinstance(st, If):
            if self._condition(st.cond):
                return self.execute_block(st.then_body)
            if st.else_body is not None:
                return self.execute_block(st.else_body)
            return None

        if isinstance(st, ForLoop):
            for _ in range(st.count):
                flow = self.execute_block(st.body)
                if flow is not None:
                    return flow
            return None

        if isinstance(st, While):
            while self._condition(st.cond):
                flow = self.execute_block(st.body)
                if flow is not None:
                    return flow
            return None

        if isinstance(st, Speak):
            value = self.evaluate(st.value)
            print(str(value), file=self.stdout)
            return None

        if isinstance(st, MainBlock):
            return self.execute_block(st.body)

        if isinstance(st, FuncDecl):
            return None

        raise ParseError(f"Unknown statement type: {type(st).__name__}")

    def _condition(self, cond: Expr) -> bool:
        value = self.evaluate(cond)
        if value.kind is not ValueKind.BOOLEAN:
            raise TypeMismatchError("boolean", value.kind.value)
        return value.data

    # --- calls ---
    def call_function(self, name: str, args: List[Expr]) -> Value:
        func = self.functions.get(name)
        if func is None:
            raise UndefinedFunctionError(name)
        if len(args) != len(func.params):
            raise ArgumentMismatchError(name, len(func.params), len(args))

        saved = [(p, self.variables.get(p)) for p in func.params]
        try:
            # later arguments already see the earlier parameters bound
            for param, arg in zip(func.params, args):
                self.variables[param] = self.evaluate(arg)
            flow = self.execute_block(func.body)
        finally:
            for param, old in saved:
                if old is None:
                    self.variables.pop(param, None)
                else:
                    self.variables[param] = old

        return flow.value if flow is not None else VOID

    # --- expressions ---
    def evaluate(self, e: Expr) -> Value:
        if isinstance(e, Literal):
            return Value(e.kind, e.value)

        if isinstance(e, Identifier):
            value = self.variables.get(e.name)
            if value is None:
                raise UndefinedVariableError(e.name)
            return value

        if isinstance(e, Binary):
            left = self.evaluate(e.lhs)
            right = self.evaluate(e.rhs)
            return self.apply_binary(e.op, left, right)

        if isinstance(e, Unary):
            return self.apply_unary(e.op, self.evaluate(e.rhs))

        if isinstance(e, Input):
            return self.read_input()

        if isinstance(e, Call):
            return self.call_function(e.name, e.args)

        raise ParseError(f"Unknown expression type: {type(e).__name__}")

    def read_input(self) -> Value:
        try:
            self.stdout.write(PROMPT)
            self.stdout.flush()
            line = self.stdin.readline()
        except (OSError, ValueError) as e:
            raise InputOutputError(str(e)) from e
        return Value(ValueKind.TEXT, line.strip())

    def apply_binary(self, op: BinaryOperator, left: Value, right: Value) -> Value:
        lk, rk = left.kind, right.kind

        if op in _ARITHMETIC:
            if op is BinaryOperator.DIVIDE and rk in _NUMERIC and right.data == 0:
                raise DivisionByZeroError()
            if lk is ValueKind.INTEGER and rk is ValueKind.INTEGER:
                return Value(ValueKind.INTEGER, _int_arith(op, left.data, right.data))
            if lk in _NUMERIC and rk in _NUMERIC:
                return Value(ValueKind.FLOAT, _float_arith(op, float(left.data), float(right.data)))
            if op is BinaryOperator.ADD and lk is ValueKind.TEXT and rk is ValueKind.TEXT:
                return Value(ValueKind.TEXT, left.data + right.data)

        elif op in _ORDERING:
            if lk is ValueKind.INTEGER and rk is ValueKind.INTEGER:
                return Value(ValueKind.BOOLEAN, _ORDERING[op](left.data, right.data))

        elif op in _LOGICAL:
            if lk is ValueKind.BOOLEAN and rk is ValueKind.BOOLEAN:
                return Value(ValueKind.BOOLEAN, _LOGICAL[op](left.data, right.data))

        if op is BinaryOperator.EQUAL:
            return Value(ValueKind.BOOLEAN, left == right)
        if op is BinaryOperator.NOT_EQUAL:
            return Value(ValueKind.BOOLEAN, left != right)

        raise InvalidOperationError(op.value, lk.value, rk.value)

    def apply_unary(self, op: UnaryOperator, operand: Value) -> Value:
        if op is UnaryOperator.MINUS and operand.kind is ValueKind.INTEGER:
            if operand.data == I64_MIN:
                raise InterpreterRuntimeError(f"integer overflow in -({operand.data})")
            return Value(ValueKind.INTEGER, -operand.data)
        if op is UnaryOperator.MINUS and operand.kind is ValueKind.FLOAT:
            return Value(ValueKind.FLOAT, -operand.data)
        if op is UnaryOperator.NOT and operand.kind is ValueKind.BOOLEAN:
            return Value(ValueKind.BOOLEAN, not operand.data)
        raise ParseError(
            f"Invalid unary operation: {op.value} on {operand.kind.value} {operand}"
        )
