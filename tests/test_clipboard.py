# tests/test_clipboard.py
"""
Тесты для модуля excel_reports/core/clipboard.py.
"""
import pytest

from excel_reports.core.clipboard import (
    ClipboardBackend,
    ClipboardBridge,
    InMemoryClipboard,
    clear_values,
    parse_clipboard_text,
    paste_values,
    serialize_range,
)
from excel_reports.core.merge import merge_cells
from excel_reports.exceptions import ClipboardError
from excel_reports.storage.cells import CellRange, Coordinate


class BrokenClipboard(ClipboardBackend):
    """Буфер обмена, к которому нет доступа."""

    def get_text(self) -> str:
        raise RuntimeError("нет доступа")

    def set_text(self, text: str):
        raise RuntimeError("нет доступа")


@pytest.fixture
def filled_grid(grid):
    return (grid.set(1, 0, value="a").set(1, 1, value="b")
                .set(2, 0, value="c").set(2, 1, value="d"))


def test_serialize_single_cell_is_raw_value(filled_grid):
    assert serialize_range(filled_grid, CellRange.single(1, 0)) == "a"


def test_serialize_range_as_tsv(filled_grid):
    assert serialize_range(filled_grid, CellRange(1, 0, 2, 1)) == "a\tb\nc\td\n"


def test_serialize_uses_stored_value_not_italic_display(grid):
    from excel_reports.core.styles import toggle_style
    italic = toggle_style(grid.set(1, 0, value="Text"), [Coordinate(1, 0)], "italic")
    assert serialize_range(italic, CellRange.single(1, 0)) == "Text"


def test_parse_plain_text_is_single_value():
    assert parse_clipboard_text("hello, world") == [["hello, world"]]
    assert parse_clipboard_text("") == [[""]]


def test_parse_tsv_block():
    assert parse_clipboard_text("a\tb\nc\td\n") == [["a", "b"], ["c", "d"]]
    assert parse_clipboard_text("x\r\n\r\ny") == [["x"], [""], ["y"]]


def test_paste_block_from_anchor(grid):
    result = paste_values(grid, Coordinate(2, 1), [["1", "2"], ["3", "4"]])
    assert [result.value(2, 1), result.value(2, 2), result.value(3, 1), result.value(3, 2)] == ["1", "2", "3", "4"]


def test_paste_is_clipped_at_grid_edge(small_grid):
    result = paste_values(small_grid, Coordinate(5, 3), [["1", "2"], ["3", "4"]])
    assert result.value(5, 3) == "1"
    assert len(result) == 1


def test_paste_skips_hidden_merge_members(grid):
    merged = merge_cells(grid, CellRange(1, 0, 1, 1))
    result = paste_values(merged, Coordinate(1, 0), [["x", "y", "z"]])
    assert result.value(1, 0) == "x"
    assert result.value(1, 1) == ""
    assert result.value(1, 2) == "z"


def test_paste_keeps_styles(grid):
    from excel_reports.core.styles import toggle_style
    bold = toggle_style(grid, [Coordinate(1, 0)], "bold")
    result = paste_values(bold, Coordinate(1, 0), [["v"]])
    assert result.style(1, 0).bold is True


def test_clear_values_keeps_styles(filled_grid):
    result = clear_values(filled_grid, [Coordinate(1, 0), Coordinate(3, 3)])
    assert result.value(1, 0) == ""
    assert result.value(1, 1) == "b"


def test_bridge_copy_cut_paste(filled_grid):
    backend = InMemoryClipboard()
    bridge = ClipboardBridge(backend)

    assert bridge.copy(filled_grid, CellRange(1, 0, 1, 1)) == "a\tb\n"
    assert backend.text == "a\tb\n"

    cut = bridge.cut(filled_grid, CellRange.single(2, 0), [Coordinate(2, 0)])
    assert backend.text == "c"
    assert cut.value(2, 0) == ""

    pasted = bridge.paste(cut, Coordinate(5, 5))
    assert pasted.value(5, 5) == "c"


def test_bridge_wraps_backend_errors(filled_grid):
    bridge = ClipboardBridge(BrokenClipboard())
    with pytest.raises(ClipboardError):
        bridge.copy(filled_grid, CellRange.single(1, 0))
    with pytest.raises(ClipboardError):
        bridge.paste(filled_grid, Coordinate(1, 0))


@pytest.mark.parametrize("value", ["line1\nline2", "a\tb", 'say "hi"', "cr\r\nlf"])
def test_single_cell_with_delimiters_survives_copy_paste(grid, value):
    """Значение с табуляцией, переводом строки или кавычкой вставляется в одну ячейку без изменений."""
    bridge = ClipboardBridge(InMemoryClipboard())
    source = grid.set(1, 0, value=value)
    bridge.copy(source, CellRange.single(1, 0))
    pasted = bridge.paste(source, Coordinate(5, 0))
    assert pasted.value(5, 0) == value
    assert pasted.value(5, 1) == ""
    assert pasted.value(6, 0) == ""


def test_plain_single_cell_is_copied_verbatim(grid):
    assert serialize_range(grid.set(1, 0, value="plain text"), CellRange.single(1, 0)) == "plain text"


def test_multiline_value_inside_range_round_trip(grid):
    source = grid.set(1, 0, value="x\ny").set(1, 1, value="z")
    text = serialize_range(source, CellRange(1, 0, 1, 1))
    assert parse_clipboard_text(text) == [["x\ny", "z"]]


def test_unclosed_quote_is_pasted_literally():
    """Незакрытая кавычка из внешнего текста не поглощает разделители."""
    assert parse_clipboard_text('"abc\tdef\nx\ty') == [['"abc', 'def'], ['x', 'y']]


def test_text_after_closing_quote_is_pasted_literally():
    assert parse_clipboard_text('"a"b\tc\n') == [['"a"b', 'c']]
