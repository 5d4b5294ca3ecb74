"""Split raw sheet text into a grid of cell-content strings."""

from __future__ import annotations

import re

# Cells are separated by a tab or by two or more whitespace characters.
_CELL_SEPARATOR_RE = re.compile(r"\s{2,}|\t")


def parse_grid(text: str) -> list[list[str]]:
    """Parse multi-line sheet text into rows of cell contents.

    Whitespace-only input yields an empty grid (no rows), which is distinct
    from a grid whose cells are empty.  Tokens that are pure whitespace
    (e.g. produced by trailing separators) are dropped.

    Args:
        text: Raw sheet text, one row per line.

    Returns:
        List of rows, each a list of raw cell strings.
    """
    text = text.strip()
    if not text:
        return []

    rows: list[list[str]] = []
    for line in text.split("\n"):
        cells = [cell for cell in _CELL_SEPARATOR_RE.split(line) if cell.strip()]
        rows.append(cells)
    return rows
