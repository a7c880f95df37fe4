from __future__ import annotations
from typing import Optional


class ValyrianError(Exception):
    """Base class for every error a Mid Valyrian run can surface."""


class ParseError(ValyrianError):
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        where = f" (line {line}, column {column})" if line is not None and line > 0 else ""
        super().__init__(f"The Maester's scroll contains errors: {message}{where}")


class UndefinedVariableError(ValyrianError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable '{name}' is not known in this realm")


class UndefinedFunctionError(ValyrianError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function '{name}' has not been declared by the council")


class TypeMismatchError(ValyrianError):
    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(f"Type mismatch: expected {expected}, found {found}")


class DivisionByZeroError(ValyrianError):
    def __init__(self):
        super().__init__("The Night King has entered your call stack (division by zero)")


class ArgumentMismatchError(ValyrianError):
    def __init__(self, name: str, expected: int, found: int):
        self.name = name
        self.expected = expected
        self.found = found
        super().__init__(
            f"The Red Priest miscounted the offerings: '{name}' expects "
            f"{expected} argument(s), got {found}"
        )


class InvalidOperationError(ValyrianError):
    def __init__(self, op: str, left_type: str, right_type: str):
        self.op = op
        self.left_type = left_type
        self.right_type = right_type
        super().__init__(
            f"Arrows must fly true: invalid operation {op} on {left_type} and {right_type}"
        )


class InputOutputError(ValyrianError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Dracarys! Your program has been consumed by flames: {reason}")


class InterpreterRuntimeError(ValyrianError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Runtime terror in the Seven Kingdoms: {reason}")
