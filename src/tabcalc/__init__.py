"""tabcalc -- a minimal spreadsheet engine.

Public API::

    from tabcalc import Sheet

    sheet = Sheet.from_text("=ADD(A2, 5)\\tB2\\n10\\tx")
    sheet.get_value("A1")  # "15"
"""

from tabcalc.address import Address, address_for, column_letters, column_number, is_valid_address
from tabcalc.formatting import beautify, beautify_string
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
from tabcalc.grid import parse_grid
from tabcalc.sheet import Cell, Sheet

__version__ = "0.1.0"

__all__ = [
    "Address",
    "ArityMismatchError",
    "Cell",
    "CellNotFoundError",
    "DivisionByZeroError",
    "FormulaError",
    "InvalidAddressError",
    "MalformedExpressionError",
    "NonNumericValueError",
    "RecursionLimitError",
    "Sheet",
    "SheetError",
    "UnknownFunctionError",
    "__version__",
    "address_for",
    "beautify",
    "beautify_string",
    "column_letters",
    "column_number",
    "is_valid_address",
    "parse_grid",
]
