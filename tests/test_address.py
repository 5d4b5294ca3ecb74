"""Tests for spreadsheet-style addressing."""

from __future__ import annotations

import pytest

from tabcalc.address import (
    Address,
    address_for,
    column_letters,
    column_number,
    is_valid_address,
    row_label,
)


class TestColumnLetters:
    @pytest.mark.parametrize(
        "n, expected",
        [
            (0, ""),
            (1, "A"),
            (2, "B"),
            (26, "Z"),
            (27, "AA"),
            (28, "AB"),
            (52, "AZ"),
            (53, "BA"),
            (702, "ZZ"),
            (703, "AAA"),
        ],
    )
    def test_known_values(self, n: int, expected: str) -> None:
        assert column_letters(n) == expected

    def test_round_trip(self) -> None:
        for n in range(0, 2000):
            assert column_number(column_letters(n)) == n

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            column_letters(-1)


class TestColumnNumber:
    def test_inverse_values(self) -> None:
        assert column_number("A") == 1
        assert column_number("Z") == 26
        assert column_number("AA") == 27
        assert column_number("BA") == 53

    def test_rejects_lowercase(self) -> None:
        with pytest.raises(ValueError):
            column_number("a")


class TestAddressFor:
    @pytest.mark.parametrize("cols", [1, 2, 5, 26, 30])
    def test_first_cell_is_a1(self, cols: int) -> None:
        assert address_for(0, 3, cols) == Address("A", "1")

    def test_row_major_order(self) -> None:
        addrs = [str(address_for(i, 2, 3)) for i in range(6)]
        assert addrs == ["A1", "B1", "C1", "A2", "B2", "C2"]

    def test_wide_grid_crosses_z(self) -> None:
        assert str(address_for(26, 1, 30)) == "AA1"
        assert str(address_for(30, 2, 30)) == "A2"

    def test_zero_columns_rejected(self) -> None:
        with pytest.raises(ValueError):
            address_for(0, 0, 0)

    def test_row_label(self) -> None:
        assert row_label(12) == "12"


class TestAddress:
    def test_equality_by_column_and_row(self) -> None:
        assert Address("B", "12") == Address("B", "12")
        assert Address("B", "12") != Address("B", "1")

    def test_str(self) -> None:
        assert str(Address("AB", "7")) == "AB7"


class TestIsValidAddress:
    @pytest.mark.parametrize("text", ["A1", "Z99", "AB120", "A10"])
    def test_valid(self, text: str) -> None:
        assert is_valid_address(text)

    @pytest.mark.parametrize("text", ["1A", "A0", "A01", "a1", "A", "1", "", "A1 ", "A1\n", "A-1"])
    def test_invalid(self, text: str) -> None:
        assert not is_valid_address(text)
