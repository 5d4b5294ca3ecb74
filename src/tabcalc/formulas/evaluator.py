"""Evaluation of classified formula expressions.

Cell references are resolved through a ``CellResolver`` callback, which lets
the owning sheet recurse into the referenced cell (and guard against cycles)
without this module knowing about sheets.

Every result is returned as display text produced by ``beautify``.  A formula
that references another formula therefore consumes the referenced cell's
rounded display value, not its exact value.
"""

from __future__ import annotations

import logging
import math
import operator
from enum import Enum
from functools import reduce
from typing import Protocol

from tabcalc.formatting import beautify, beautify_string, is_number
from tabcalc.formulas.errors import (
    ArityMismatchError,
    DivisionByZeroError,
    MalformedExpressionError,
    NonNumericValueError,
    UnknownFunctionError,
)
from tabcalc.formulas.parser import Expression, ExpressionKind

logger = logging.getLogger(__name__)


class CellResolver(Protocol):
    """Protocol for resolving a cell address to its display value."""

    def resolve_cell(self, address: str) -> str:
        """Resolve a cell value (may trigger recursive evaluation)."""
        ...


class Function(str, Enum):
    """The closed set of spreadsheet functions."""

    ADD = "ADD"
    MULTIPLY = "MULTIPLY"
    SUBTRACT = "SUBTRACT"
    DIVIDE = "DIVIDE"
    MOD = "MOD"


FUNCTION_NAMES = frozenset(f.value for f in Function)

# (argument count, whether the count is a minimum)
_ARITY: dict[Function, tuple[int, bool]] = {
    Function.ADD: (2, True),
    Function.MULTIPLY: (2, True),
    Function.SUBTRACT: (2, False),
    Function.DIVIDE: (2, False),
    Function.MOD: (2, False),
}


def evaluate_expression(expression: Expression, resolver: CellResolver) -> str:
    """Evaluate a classified formula body to display text.

    Args:
        expression: Result of ``classify()``.
        resolver: Resolves referenced cells to their display values.

    Returns:
        The formatted value.

    Raises:
        MalformedExpressionError: The body matched no grammar.
        UnknownFunctionError: The function is not in the registry.
        ArityMismatchError: Wrong number of function arguments.
        NonNumericValueError: An argument or the result is not a number.
        DivisionByZeroError: DIVIDE or MOD by zero.
    """
    kind = expression.kind

    if kind is ExpressionKind.cell_reference:
        return beautify_string(resolver.resolve_cell(expression.key))
    if kind is ExpressionKind.number_literal:
        return beautify(float(expression.key))
    if kind is ExpressionKind.invalid:
        raise MalformedExpressionError(expression.body)

    if expression.key not in FUNCTION_NAMES:
        raise UnknownFunctionError(expression.key)
    return evaluate_call(Function(expression.key), list(expression.arguments), resolver)


def evaluate_call(func: Function, raw_args: list[str], resolver: CellResolver) -> str:
    """Check arity, resolve *raw_args* and apply *func*."""
    expected, at_least = _ARITY[func]
    actual = len(raw_args)
    if (at_least and actual < expected) or (not at_least and actual != expected):
        raise ArityMismatchError(func.value, expected, actual, at_least=at_least)

    values = [_resolve_argument(func, arg, resolver) for arg in raw_args]
    result = _FUNC_TABLE[func](values)
    logger.debug("%s(%s) = %r", func.value, ", ".join(raw_args), result)

    if not math.isfinite(result):
        raise NonNumericValueError(
            func.value, str(result), f"Result of '{func.value}' is not a finite number: {result}"
        )
    return beautify(result)


def _resolve_argument(func: Function, raw: str, resolver: CellResolver) -> float:
    """Turn a raw argument (number literal or address) into a float."""
    if is_number(raw):
        return float(raw)
    value = resolver.resolve_cell(raw).strip()
    if not is_number(value):
        raise NonNumericValueError(
            func.value, value, f"Non-numeric argument for '{func.value}': {raw} is '{value}'"
        )
    return float(value)


# ---------- Operations ----------


def _fn_add(args: list[float]) -> float:
    return reduce(operator.add, args)


def _fn_multiply(args: list[float]) -> float:
    return reduce(operator.mul, args)


def _fn_subtract(args: list[float]) -> float:
    return args[0] - args[1]


def _fn_divide(args: list[float]) -> float:
    """Float division.  A zero divisor raises ``DivisionByZeroError``, which is
    also a ``ZeroDivisionError``, so callers catching the built-in still work.
    """
    if args[1] == 0:
        raise DivisionByZeroError(Function.DIVIDE.value)
    return args[0] / args[1]


def _fn_mod(args: list[float]) -> float:
    """Float remainder with the sign of the dividend; zero divisor as in DIVIDE."""
    if args[1] == 0:
        raise DivisionByZeroError(Function.MOD.value)
    return math.fmod(args[0], args[1])


_FUNC_TABLE = {
    Function.ADD: _fn_add,
    Function.MULTIPLY: _fn_multiply,
    Function.SUBTRACT: _fn_subtract,
    Function.DIVIDE: _fn_divide,
    Function.MOD: _fn_mod,
}
