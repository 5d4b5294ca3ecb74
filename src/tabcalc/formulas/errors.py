"""Error types for sheet lookups and formula evaluation."""

from __future__ import annotations


class SheetError(Exception):
    """Base class for all sheet errors."""

    error_code = "sheet_error"


class InvalidAddressError(SheetError):
    """Address string is not of the form ``A1``.

    Attributes:
        address: The rejected address string.
    """

    error_code = "invalid_address"

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Invalid cell index '{address}'")


class CellNotFoundError(SheetError):
    """Well-formed address with no cell behind it."""

    error_code = "cell_not_found"

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Cell '{address}' does not exist")


class FormulaError(SheetError):
    """Base class for formula evaluation errors."""

    error_code = "formula_error"


class MalformedExpressionError(FormulaError):
    """Formula body is not a cell reference, number or function call.

    Attributes:
        expression: The formula body (without the leading ``=``).
    """

    error_code = "malformed_expression"

    def __init__(self, expression: str) -> None:
        self.expression = expression
        super().__init__(f"Invalid expression '{expression}'")


class UnknownFunctionError(FormulaError):
    """Syntactically valid call to a function outside the registry."""

    error_code = "unknown_function"

    def __init__(self, func_name: str) -> None:
        self.func_name = func_name
        super().__init__(f"Unknown function '{func_name}'")


class ArityMismatchError(FormulaError):
    """Wrong number of arguments for a function.

    Attributes:
        func_name: The function being called.
        expected: Required argument count.
        actual: Argument count supplied.
        at_least: True when *expected* is a minimum rather than exact.
    """

    error_code = "arity_mismatch"

    def __init__(self, func_name: str, expected: int, actual: int, *, at_least: bool = False) -> None:
        self.func_name = func_name
        self.expected = expected
        self.actual = actual
        self.at_least = at_least
        bound = f"at least {expected}" if at_least else str(expected)
        super().__init__(
            f"Wrong number of arguments for '{func_name}': expected {bound}, got {actual}"
        )


class RecursionLimitError(FormulaError):
    """Reference chain is circular or deeper than the configured limit.

    Attributes:
        cycle_path: Addresses on the evaluation chain, in lookup order.
    """

    error_code = "recursion_limit"

    def __init__(self, cycle_path: list[str], message: str | None = None) -> None:
        self.cycle_path = cycle_path
        msg = message or f"Circular cell reference: {' -> '.join(cycle_path)}"
        super().__init__(msg)


class NonNumericValueError(FormulaError):
    """A function argument or result is not a finite number.

    Attributes:
        func_name: The function being evaluated.
        value: The offending value.
    """

    error_code = "non_numeric_value"

    def __init__(self, func_name: str, value: str, message: str | None = None) -> None:
        self.func_name = func_name
        self.value = value
        msg = message or f"Non-numeric argument for '{func_name}': '{value}'"
        super().__init__(msg)


class DivisionByZeroError(FormulaError, ZeroDivisionError):
    """DIVIDE or MOD with a zero divisor."""

    error_code = "division_by_zero"

    def __init__(self, func_name: str) -> None:
        self.func_name = func_name
        super().__init__(f"Division by zero in '{func_name}'")
