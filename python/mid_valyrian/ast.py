from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1


# ---- Types ----
class DataType(Enum):
    SCROLL = "scroll"  # text
    BLADE = "blade"    # integer
    WINE = "wine"      # float
    VOW = "vow"        # boolean
    SIGIL = "sigil"    # character
    VOID = "void"

    @classmethod
    def from_name(cls, name: str) -> Optional["DataType"]:
        for t in cls:
            if t.value == name:
                return t
        return None


class ValueKind(Enum):
    TEXT = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    CHAR = "char"
    VOID = "void"


# ---- Operators ----
class BinaryOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    GREATER = ">"
    LESS = "<"
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    EQUAL = "=="
    NOT_EQUAL = "!="
    AND = "&&"
    OR = "||"

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["BinaryOperator"]:
        for op in cls:
            if op.value == symbol:
                return op
        return None


class UnaryOperator(Enum):
    MINUS = "-"
    NOT = "!"

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["UnaryOperator"]:
        for op in cls:
            if op.value == symbol:
                return op
        return None


# ---- Runtime values ----
@dataclass(frozen=True, eq=False)
class Value:
    kind: ValueKind
    data: Any = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.kind is other.kind and self.data == other.data

    def __hash__(self) -> int:
        return hash((self.kind, self.data))

    def __str__(self) -> str:
        if self.kind is ValueKind.BOOLEAN:
            return "aye" if self.data else "nay"
        if self.kind is ValueKind.FLOAT:
            return format_float(self.data)
        if self.kind is ValueKind.VOID:
            return "void"
        return str(self.data)


VOID = Value(ValueKind.VOID)


def format_float(x: float) -> str:
    if x != x:
        return "NaN"
    if x in (float("inf"), float("-inf")):
        return "inf" if x > 0 else "-inf"
    # positional form of the shortest round-trip digits, never an exponent
    text = format(Decimal(repr(x)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass
class ReturnSignal:
    value: Value


# ---- Program ----
@dataclass
class Program:
    statements: List["Stmt"]


# ---- Statements ----
class Stmt: pass

@dataclass
class VarDecl(Stmt):
    name: str
    data_type: DataType  # advisory only
    value: "Expr"

@dataclass
class Assign(Stmt):
    name: str
    value: "Expr"

@dataclass
class FuncDecl(Stmt):
    name: str
    params: List[str]
    body: List[Stmt]

@dataclass
class CallStmt(Stmt):
    name: str
    args: List["Expr"]

@dataclass
class If(Stmt):
    cond: "Expr"
    then_body: List[Stmt]
    else_body: Optional[List[Stmt]]

@dataclass
class ForLoop(Stmt):
    count: int
    body: List[Stmt]

@dataclass
class While(Stmt):
    cond: "Expr"
    body: List[Stmt]

@dataclass
class Return(Stmt):
    value: Optional["Expr"]

@dataclass
class Speak(Stmt):
    value: "Expr"

@dataclass
class MainBlock(Stmt):
    body: List[Stmt]


# ---- Expressions ----
class Expr: pass

@dataclass
class Literal(Expr):
    kind: ValueKind
    value: Any

@dataclass
class Identifier(Expr):
    name: str

@dataclass
class Binary(Expr):
    op: BinaryOperator
    lhs: Expr
    rhs: Expr

@dataclass
class Unary(Expr):
    op: UnaryOperator
    rhs: Expr

@dataclass
class Input(Expr):
    prompt: str

@dataclass
class Call(Expr):
    name: str
    args: List[Expr]
