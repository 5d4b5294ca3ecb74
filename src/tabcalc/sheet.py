"""Sheet and cell model with on-demand formula evaluation.

A ``Sheet`` is built once from a grid of raw cell strings and never changes
afterwards.  Lookups evaluate on demand: a formula cell is recomputed every
time it (or a cell referencing it) is looked up.  Nothing is cached, so the
sheet holds no mutable state and concurrent lookups are safe.

Each lookup carries the chain of addresses currently being evaluated.  An
address that reappears on its own chain is a circular reference and raises
``RecursionLimitError`` with the cycle path, as does a chain longer than
``max_depth``.

Usage::

    sheet = Sheet.from_text("=ADD(A2, 5)\\tB2\\n10\\tx")
    sheet.get_value("A1")   # "15"
    sheet.get_raw("A1")     # "=ADD(A2, 5)"
    sheet.render()          # "15\\tB2\\n10\\tx"
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from tabcalc.address import Address, address_for, is_valid_address
from tabcalc.formatting import beautify_string
from tabcalc.formulas.errors import (
    CellNotFoundError,
    InvalidAddressError,
    RecursionLimitError,
)
from tabcalc.formulas.evaluator import CellResolver, evaluate_expression
from tabcalc.formulas.parser import Expression, parse_formula
from tabcalc.grid import parse_grid

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100


class Cell:
    """One grid position: raw content, address and optional formula."""

    def __init__(self, content: str, index: int, sheet: Sheet) -> None:
        self.content = content
        self.index = index
        self.sheet = sheet
        self.address: Address = address_for(index, sheet.row_count, sheet.col_count)
        self.expression: Expression | None = parse_formula(content) if self.is_formula else None

    @property
    def is_formula(self) -> bool:
        return self.content.startswith("=")

    @property
    def address_string(self) -> str:
        return str(self.address)

    def evaluate(self, resolver: CellResolver) -> str:
        """Return the cell's value; plain content is returned unchanged."""
        if self.expression is None:
            return self.content
        return evaluate_expression(self.expression, resolver)

    def __repr__(self) -> str:
        return f"Cell({self.address_string}, {self.content!r})"


class _ChainResolver:
    """CellResolver bound to one evaluation chain of a sheet."""

    def __init__(self, sheet: Sheet, chain: tuple[str, ...]) -> None:
        self._sheet = sheet
        self._chain = chain

    def resolve_cell(self, address: str) -> str:
        return self._sheet._evaluate(address, self._chain)


class Sheet:
    """An immutable grid of cells answering lookups by address.

    Parameters
    ----------
    grid : list[list[str]] | None
        Rows of raw cell strings.  ``None`` or ``[]`` builds an empty sheet.
        The grid is assumed rectangular; addresses are derived from the
        width of the first row.
    max_depth : int
        Longest chain of cell references followed before giving up with
        ``RecursionLimitError``.
    """

    def __init__(self, grid: list[list[str]] | None = None, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_depth = max_depth
        self._grid: list[list[str]] = [list(row) for row in grid or []]
        self.row_count = len(self._grid)
        self.col_count = len(self._grid[0]) if self._grid else 0

        contents = [content for row in self._grid for content in row]
        if contents and self.col_count == 0:
            raise ValueError("The first row of a non-empty grid must have at least one cell")

        self._cells: list[Cell] = [Cell(content, i, self) for i, content in enumerate(contents)]
        self._by_address: dict[str, Cell] = {}
        for cell in self._cells:
            self._by_address.setdefault(cell.address_string, cell)

        logger.debug(
            "Built sheet: %d rows, %d columns, %d cells",
            self.row_count, self.col_count, len(self._cells),
        )

    @classmethod
    def from_text(cls, text: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Sheet:
        """Build a sheet from raw text (see ``parse_grid`` for the format)."""
        return cls(parse_grid(text), max_depth=max_depth)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def grid(self) -> list[list[str]]:
        """A copy of the raw grid."""
        return [list(row) for row in self._grid]

    @property
    def cells(self) -> list[Cell]:
        """All cells in row-major order."""
        return list(self._cells)

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address in self._by_address

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_raw(self, address: str) -> str:
        """Return the unevaluated content stored at *address*.

        Raises:
            InvalidAddressError: *address* is not of the form ``A1``.
            CellNotFoundError: No cell has that address.
        """
        return self._find(address).content

    def get_value(self, address: str) -> str:
        """Evaluate the cell at *address* and return its display text.

        Raises:
            InvalidAddressError: *address* is not of the form ``A1``.
            CellNotFoundError: No cell has that address.
            FormulaError: Evaluation of the cell, or of a cell it
                references, failed.
        """
        try:
            return self._evaluate(address, ())
        except RecursionError as exc:
            raise _recursion_limit(address) from exc

    def __getitem__(self, address: str) -> str:
        return self.get_value(address)

    def render(self) -> str:
        """Serialize the sheet as tab-separated rows.

        Formula cells show their formatted result; plain cells show their
        content verbatim, so a sheet without formulas renders back to its
        tab-normalized input.  Row lengths follow the original grid.  An
        empty sheet renders as ``""``.
        """
        cells = iter(self._cells)
        lines = []
        for row in self._grid:
            values = [self._render_cell(next(cells)) for _ in row]
            lines.append("\t".join(values))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Sheet(rows={self.row_count}, cols={self.col_count})"

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _find(self, address: str) -> Cell:
        if not is_valid_address(address):
            raise InvalidAddressError(address)
        cell = self._by_address.get(address)
        if cell is None:
            raise CellNotFoundError(address)
        return cell

    def _evaluate(self, address: str, chain: tuple[str, ...]) -> str:
        """Evaluate *address* as part of the lookup chain *chain*."""
        cell = self._find(address)

        if address in chain:
            cycle_start = chain.index(address)
            raise RecursionLimitError([*chain[cycle_start:], address])
        chain = (*chain, address)
        if len(chain) > self.max_depth:
            raise RecursionLimitError(
                list(chain),
                f"Reference chain deeper than {self.max_depth} cells starting at '{chain[0]}'",
            )

        return beautify_string(cell.evaluate(_ChainResolver(self, chain)))

    def _render_cell(self, cell: Cell) -> str:
        address = cell.address_string
        try:
            return cell.evaluate(_ChainResolver(self, (address,)))
        except RecursionError as exc:
            raise _recursion_limit(address) from exc


def _recursion_limit(address: str) -> RecursionLimitError:
    return RecursionLimitError([address], f"Recursion limit exceeded while evaluating '{address}'")
