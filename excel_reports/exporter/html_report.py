# excel_reports/exporter/html_report.py
"""
HTML-представление сетки для печати.

В таблицу попадает только заполненная область: от A1 до последней строки и
столбца, где есть значение, стиль или объединение. Стили и объединения
переносятся в атрибуты style/rowspan/colspan, курсив печатается шрифтом.
"""

from html import escape as html_escape
from typing import List, Tuple

from excel_reports.storage.cells import EMPTY_CELL, Cell, CellStyle, Coordinate, Grid, column_letter
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

PRINT_CSS = (
    "table { border-collapse: collapse; font-family: sans-serif; font-size: 10pt; }"
    " th { background-color: #F3F4F6; color: #6B7280; font-weight: normal; padding: 2px 4px; }"
    " td { border: 1px solid #D1D5DB; padding: 2px 4px; }"
)

BORDER_CSS = "border: 2px solid #9CA3AF"


def used_extent(grid: Grid) -> Tuple[int, int]:
    """(последняя строка, число столбцов) заполненной области; не меньше 1 x 1."""
    last_row, last_col = 1, 0
    for key, cell in grid.items():
        if cell == EMPTY_CELL:
            continue
        coord = Coordinate.from_key(key)
        last_row = max(last_row, coord.row + cell.row_span - 1)
        last_col = max(last_col, coord.col + cell.col_span - 1)
    return last_row, last_col + 1


def style_css(style: CellStyle) -> str:
    rules: List[str] = []
    if style.bold:
        rules.append("font-weight: bold")
    if style.italic:
        rules.append("font-style: italic")
    if style.underline:
        rules.append("text-decoration: underline")
    if style.border:
        rules.append(BORDER_CSS)
    if style.background_color:
        rules.append(f"background-color: {style.background_color}")
    if style.color:
        rules.append(f"color: {style.color}")
    if style.text_align:
        rules.append(f"text-align: {style.text_align}")
    return "; ".join(rules)


def _render_cell(cell: Cell) -> str:
    attrs = ""
    if cell.is_merge_start:
        if cell.row_span > 1:
            attrs += f' rowspan="{cell.row_span}"'
        if cell.col_span > 1:
            attrs += f' colspan="{cell.col_span}"'
    css = style_css(cell.style)
    if css:
        attrs += f' style="{html_escape(css)}"'
    text = html_escape(cell.value).replace("\n", "<br>")
    return f"<td{attrs}>{text}</td>"


def render_grid_html(grid: Grid, title: str = "Лист 1") -> str:
    """Возвращает HTML-документ с таблицей заполненной области сетки."""
    rows, columns = used_extent(grid)
    parts: List[str] = []
    parts.append("<html>")
    parts.append("<head>")
    parts.append('<meta charset="utf-8">')
    parts.append(f"<title>{html_escape(title)}</title>")
    parts.append(f"<style>{PRINT_CSS}</style>")
    parts.append("</head>")
    parts.append("<body>")
    parts.append("<table>")

    parts.append("<tr><th></th>" + "".join(f"<th>{column_letter(col)}</th>" for col in range(columns)) + "</tr>")
    for row in range(1, rows + 1):
        cells = [f"<th>{row}</th>"]
        for col in range(columns):
            cell = grid.get(row, col)
            if cell.is_hidden:
                continue
            cells.append(_render_cell(cell))
        parts.append("<tr>" + "".join(cells) + "</tr>")

    parts.append("</table>")
    parts.append("</body>")
    parts.append("</html>")
    logger.debug(f"Сформирован HTML для печати: {rows} x {columns}.")
    return "\n".join(parts)
