"""Tests for sheet construction, lookups and rendering."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from tabcalc import (
    ArityMismatchError,
    CellNotFoundError,
    InvalidAddressError,
    MalformedExpressionError,
    NonNumericValueError,
    RecursionLimitError,
    Sheet,
    UnknownFunctionError,
)


# ────────────────────────────────────────────────────────────────
# Fixtures
# ────────────────────────────────────────────────────────────────


@pytest.fixture
def basic_sheet() -> Sheet:
    """A1=ADD(A2,5)  B1=B2 (text)  A2=10  B2=x"""
    return Sheet([["=ADD(A2,5)", "B2"], ["10", "x"]])


# ────────────────────────────────────────────────────────────────
# Construction
# ────────────────────────────────────────────────────────────────


class TestConstruction:
    def test_empty_text(self) -> None:
        sheet = Sheet.from_text("   \n  ")
        assert sheet.is_empty
        assert len(sheet) == 0
        assert sheet.render() == ""
        assert str(sheet) == ""

    def test_default_is_empty(self) -> None:
        assert Sheet().is_empty

    def test_from_text(self) -> None:
        sheet = Sheet.from_text("1\t2\n3\t4")
        assert sheet.grid == [["1", "2"], ["3", "4"]]
        assert sheet.row_count == 2
        assert sheet.col_count == 2
        assert not sheet.is_empty

    def test_cells_in_row_major_order(self, basic_sheet: Sheet) -> None:
        assert [c.address_string for c in basic_sheet] == ["A1", "B1", "A2", "B2"]
        assert [c.content for c in basic_sheet.cells] == ["=ADD(A2,5)", "B2", "10", "x"]

    def test_formula_cells_hold_expressions(self, basic_sheet: Sheet) -> None:
        a1, b1 = basic_sheet.cells[:2]
        assert a1.is_formula and a1.expression is not None
        assert not b1.is_formula and b1.expression is None

    def test_contains(self, basic_sheet: Sheet) -> None:
        assert "B2" in basic_sheet
        assert "C1" not in basic_sheet
        assert 3 not in basic_sheet

    def test_grid_is_a_copy(self, basic_sheet: Sheet) -> None:
        basic_sheet.grid[0][0] = "changed"
        assert basic_sheet.get_raw("A1") == "=ADD(A2,5)"

    def test_bad_formula_does_not_fail_construction(self) -> None:
        sheet = Sheet([["=nonsense", "=FOO(1)"]])
        assert len(sheet) == 2

    def test_invalid_max_depth(self) -> None:
        with pytest.raises(ValueError):
            Sheet([["1"]], max_depth=0)


# ────────────────────────────────────────────────────────────────
# Lookups
# ────────────────────────────────────────────────────────────────


class TestGetValue:
    def test_formula(self, basic_sheet: Sheet) -> None:
        assert basic_sheet.get_value("A1") == "15"

    def test_text_that_looks_like_address(self, basic_sheet: Sheet) -> None:
        assert basic_sheet.get_value("B1") == "B2"

    def test_plain_number(self, basic_sheet: Sheet) -> None:
        assert basic_sheet.get_value("A2") == "10"

    def test_plain_text(self, basic_sheet: Sheet) -> None:
        assert basic_sheet.get_value("B2") == "x"

    def test_getitem_alias(self, basic_sheet: Sheet) -> None:
        assert basic_sheet["A1"] == "15"

    def test_plain_numbers_are_formatted(self) -> None:
        sheet = Sheet([["3.14159", "007", "2.5"]])
        assert sheet.get_value("A1") == "3.14"
        assert sheet.get_value("B1") == "7"
        assert sheet.get_value("C1") == "2.50"

    def test_reference_formula(self) -> None:
        sheet = Sheet([["=B1", "=C1", "4.5"]])
        assert sheet.get_value("A1") == "4.50"

    def test_reference_to_text(self) -> None:
        sheet = Sheet([["=B1", "hello"]])
        assert sheet.get_value("A1") == "hello"

    def test_number_formula(self) -> None:
        sheet = Sheet([["=-2.345"]])
        assert sheet.get_value("A1") == "-2.35"

    def test_nested_formulas_use_rounded_values(self) -> None:
        sheet = Sheet([["=DIVIDE(10,3)", "=ADD(A1,1)"]])
        assert sheet.get_value("A1") == "3.33"
        assert sheet.get_value("B1") == "4.33"

    def test_rounding_accumulates_across_chain(self) -> None:
        # 3.33 * 3 = 9.99, not 10
        sheet = Sheet([["=DIVIDE(10,3)", "=MULTIPLY(A1,3)"]])
        assert sheet.get_value("B1") == "9.99"

    def test_long_non_cyclic_chain(self) -> None:
        row = [f"=ADD({chr(ord('A') + i + 1)}1,1)" for i in range(10)] + ["0"]
        sheet = Sheet([row])
        assert sheet.get_value("A1") == "10"

    def test_repeated_lookups_are_stable(self, basic_sheet: Sheet) -> None:
        assert [basic_sheet.get_value("A1") for _ in range(3)] == ["15", "15", "15"]

    def test_concurrent_lookups(self) -> None:
        sheet = Sheet([["=ADD(B1,C1)", "=MULTIPLY(C1,2)", "3"]])
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(sheet.get_value, ["A1"] * 20))
        assert set(results) == {"9"}


class TestGetRaw:
    def test_returns_unevaluated_content(self, basic_sheet: Sheet) -> None:
        assert basic_sheet.get_raw("A1") == "=ADD(A2,5)"

    def test_no_number_formatting(self) -> None:
        sheet = Sheet([["3.14159"]])
        assert sheet.get_raw("A1") == "3.14159"

    def test_invalid_address(self, basic_sheet: Sheet) -> None:
        with pytest.raises(InvalidAddressError):
            basic_sheet.get_raw("a1")

    def test_missing_cell(self, basic_sheet: Sheet) -> None:
        with pytest.raises(CellNotFoundError):
            basic_sheet.get_raw("C3")


class TestLookupErrors:
    def test_invalid_address(self, basic_sheet: Sheet) -> None:
        with pytest.raises(InvalidAddressError, match="Invalid cell index '1A'") as exc_info:
            basic_sheet.get_value("1A")
        assert exc_info.value.address == "1A"

    def test_out_of_range(self, basic_sheet: Sheet) -> None:
        with pytest.raises(CellNotFoundError, match="Cell 'Z99' does not exist"):
            basic_sheet.get_value("Z99")

    def test_empty_sheet_lookup(self) -> None:
        with pytest.raises(CellNotFoundError):
            Sheet().get_value("A1")

    def test_arity(self) -> None:
        sheet = Sheet([["=SUBTRACT(1,2,3)"]])
        with pytest.raises(ArityMismatchError, match="SUBTRACT.*expected 2, got 3"):
            sheet.get_value("A1")

    def test_unknown_function(self) -> None:
        sheet = Sheet([["=FOO(1,2)"]])
        with pytest.raises(UnknownFunctionError, match="FOO"):
            sheet.get_value("A1")

    def test_malformed(self) -> None:
        sheet = Sheet([["=ADD(1"]])
        with pytest.raises(MalformedExpressionError):
            sheet.get_value("A1")

    def test_error_propagates_through_references(self) -> None:
        sheet = Sheet([["=ADD(B1,1)", "=FOO(1)"]])
        with pytest.raises(UnknownFunctionError):
            sheet.get_value("A1")

    def test_reference_to_missing_cell(self) -> None:
        sheet = Sheet([["=ADD(Z9,1)"]])
        with pytest.raises(CellNotFoundError):
            sheet.get_value("A1")

    def test_reference_to_invalid_address(self) -> None:
        sheet = Sheet([["=A0"]])
        with pytest.raises(InvalidAddressError):
            sheet.get_value("A1")

    def test_text_argument(self) -> None:
        sheet = Sheet([["=ADD(B1,1)", "x"]])
        with pytest.raises(NonNumericValueError):
            sheet.get_value("A1")


# ────────────────────────────────────────────────────────────────
# Recursion guard
# ────────────────────────────────────────────────────────────────


class TestRecursionGuard:
    def test_self_reference(self) -> None:
        sheet = Sheet([["=A1"]])
        with pytest.raises(RecursionLimitError) as exc_info:
            sheet.get_value("A1")
        assert exc_info.value.cycle_path == ["A1", "A1"]

    def test_two_cell_cycle(self) -> None:
        sheet = Sheet([["=B1", "=ADD(A1,1)"]])
        with pytest.raises(RecursionLimitError, match="A1 -> B1 -> A1") as exc_info:
            sheet.get_value("A1")
        assert exc_info.value.cycle_path == ["A1", "B1", "A1"]

    def test_cycle_path_starts_at_repeated_cell(self) -> None:
        sheet = Sheet([["=B1", "=C1", "=B1"]])
        with pytest.raises(RecursionLimitError) as exc_info:
            sheet.get_value("A1")
        assert exc_info.value.cycle_path == ["B1", "C1", "B1"]

    def test_same_cell_twice_is_not_a_cycle(self) -> None:
        sheet = Sheet([["=ADD(B1,B1)", "2"]])
        assert sheet.get_value("A1") == "4"

    def test_depth_limit(self) -> None:
        row = [f"={chr(ord('A') + i + 1)}1" for i in range(5)] + ["1"]
        sheet = Sheet([row], max_depth=3)
        with pytest.raises(RecursionLimitError, match="deeper than 3"):
            sheet.get_value("A1")
        assert Sheet([row], max_depth=6).get_value("A1") == "1"

    def test_python_recursion_limit_is_converted(self) -> None:
        rows = [[f"=A{i + 2}"] for i in range(2999)] + [["1"]]
        sheet = Sheet(rows, max_depth=10**6)
        with pytest.raises(RecursionLimitError, match="Recursion limit exceeded while evaluating 'A1'") as exc_info:
            sheet.get_value("A1")
        assert exc_info.value.cycle_path == ["A1"]
        assert isinstance(exc_info.value.__cause__, RecursionError)

    def test_render_converts_python_recursion_limit(self) -> None:
        rows = [[f"=A{i + 2}"] for i in range(2999)] + [["1"]]
        with pytest.raises(RecursionLimitError):
            Sheet(rows, max_depth=10**6).render()

    def test_render_fails_on_cycle(self) -> None:
        sheet = Sheet([["=B1", "=A1"]])
        with pytest.raises(RecursionLimitError):
            sheet.render()


# ────────────────────────────────────────────────────────────────
# Rendering
# ────────────────────────────────────────────────────────────────


class TestRender:
    def test_plain_text_round_trip(self) -> None:
        text = "name\tcity\nalice\tparis\nbob\tlondon"
        assert Sheet.from_text(text).render() == text

    def test_plain_numeric_cells_render_verbatim(self) -> None:
        text = "1.5\t2.0\n007\tx"
        assert Sheet.from_text(text).render() == text

    def test_formula_results_formatted_plain_cells_verbatim(self) -> None:
        sheet = Sheet([["3.14159", "=ADD(A1,0)"], ["=A1", "010"]])
        assert sheet.render() == "3.14159\t3.14\n3.14\t010"
        assert sheet.get_value("A1") == "3.14"

    def test_space_separated_input_renders_with_tabs(self) -> None:
        assert Sheet.from_text("a   b\nc  d").render() == "a\tb\nc\td"

    def test_evaluated_values(self, basic_sheet: Sheet) -> None:
        assert basic_sheet.render() == "15\tB2\n10\tx"

    def test_str_alias(self, basic_sheet: Sheet) -> None:
        assert str(basic_sheet) == basic_sheet.render()

    def test_ragged_rows_keep_shape(self) -> None:
        sheet = Sheet([["a", "b"], ["c"], ["d", "e", "f"]])
        assert sheet.render() == "a\tb\nc\nd\te\tf"

    def test_render_propagates_errors(self) -> None:
        sheet = Sheet([["1", "=FOO(1)"]])
        with pytest.raises(UnknownFunctionError):
            sheet.render()
