"""Spreadsheet-style cell addressing.

Columns use bijective base-26 (A=1 ... Z=26, AA=27, ...); rows are 1-based
decimal numbers.  A cell's address is derived from its position in the
row-major cell list and the width of the grid.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_VALID_ADDR_RE = re.compile(r"[A-Z]+[1-9][0-9]*")


@dataclass(frozen=True)
class Address:
    """A cell address such as ``B12``."""

    column: str
    row: str

    def __str__(self) -> str:
        return f"{self.column}{self.row}"


def column_letters(n: int) -> str:
    """Convert a 1-based column number to letters.  0="", 1=A, 27=AA, 53=BA."""
    if n < 0:
        raise ValueError(f"Column number must be non-negative, got {n}")
    letters = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def column_number(letters: str) -> int:
    """Convert column letters back to a 1-based number.  A=1, Z=26, AA=27."""
    n = 0
    for ch in letters:
        if not "A" <= ch <= "Z":
            raise ValueError(f"Invalid column letters: {letters!r}")
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


def row_label(n: int) -> str:
    return str(n)


def address_for(linear_index: int, row_count: int, col_count: int) -> Address:
    """Derive the address of the cell at *linear_index* in row-major order.

    Args:
        linear_index: Zero-based position in the flattened grid.
        row_count: Number of rows in the grid (not needed for the mapping,
            kept so callers pass the full grid shape).
        col_count: Width of the grid.

    Returns:
        The cell's ``Address``.
    """
    if col_count < 1:
        raise ValueError(f"Grid must have at least one column, got {col_count}")
    return Address(
        column=column_letters(linear_index % col_count + 1),
        row=row_label(linear_index // col_count + 1),
    )


def is_valid_address(text: str) -> bool:
    """Return True if *text* is a well-formed address (``A1``, ``AB120``)."""
    return _VALID_ADDR_RE.fullmatch(text) is not None
