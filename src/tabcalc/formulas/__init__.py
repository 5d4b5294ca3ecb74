"""Formula classification and evaluation.

Public API::

    from tabcalc.formulas import classify, evaluate_expression
"""

from tabcalc.formulas.errors import (
    ArityMismatchError,
    CellNotFoundError,
    DivisionByZeroError,
    FormulaError,
    InvalidAddressError,
    MalformedExpressionError,
    NonNumericValueError,
    RecursionLimitError,
    SheetError,
    UnknownFunctionError,
)
from tabcalc.formulas.evaluator import (
    FUNCTION_NAMES,
    CellResolver,
    Function,
    evaluate_call,
    evaluate_expression,
)
from tabcalc.formulas.parser import (
    Expression,
    ExpressionKind,
    classify,
    parse_formula,
)

__all__ = [
    "ArityMismatchError",
    "CellNotFoundError",
    "CellResolver",
    "DivisionByZeroError",
    "Expression",
    "ExpressionKind",
    "FUNCTION_NAMES",
    "FormulaError",
    "Function",
    "InvalidAddressError",
    "MalformedExpressionError",
    "NonNumericValueError",
    "RecursionLimitError",
    "SheetError",
    "UnknownFunctionError",
    "classify",
    "evaluate_call",
    "evaluate_expression",
    "parse_formula",
]
