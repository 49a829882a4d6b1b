# tests/test_csv_exporter.py
"""
Тесты для модуля excel_reports/exporter/csv_exporter.py.
"""
import csv

import pytest

from excel_reports.exceptions import ExportError
from excel_reports.exporter.csv_exporter import DEFAULT_EXPORT_FILENAME, export_grid_csv, serialize_grid_csv


def test_serialize_quotes_every_field(grid):
    """Каждое поле в кавычках, запятая внутри значения сохраняется."""
    content = serialize_grid_csv(grid.set(1, 0, value="Hello, World"))
    first_line = content.split("\n")[0]
    assert first_line.startswith('"Hello, World",""')
    assert first_line.count('","') == grid.columns - 1


def test_serialize_doubles_quotes(small_grid):
    content = serialize_grid_csv(small_grid.set(1, 0, value='say "hi"'))
    assert content.split("\n")[0] == '"say ""hi""","","",""'


def test_serialize_covers_whole_grid(small_grid):
    lines = serialize_grid_csv(small_grid).split("\n")
    assert lines[-1] == ""
    assert len(lines) - 1 == small_grid.rows


def test_export_writes_utf8_file(tmp_path, small_grid):
    grid = small_grid.set(2, 1, value="Привет")
    path = export_grid_csv(grid, tmp_path)
    assert path == tmp_path / DEFAULT_EXPORT_FILENAME
    with open(path, encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert len(rows) == 5
    assert rows[1] == ["", "Привет", "", ""]


def test_export_does_not_touch_grid(tmp_path, small_grid):
    grid = small_grid.set(1, 0, value="x")
    export_grid_csv(grid, tmp_path, "report.csv")
    assert grid.value(1, 0) == "x"
    assert (tmp_path / "report.csv").exists()


def test_export_error_is_wrapped(tmp_path, small_grid):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(ExportError):
        export_grid_csv(small_grid, blocker / "sub")
