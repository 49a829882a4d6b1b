# excel_reports/core/clipboard.py
"""
Копирование, вырезание и вставка через буфер обмена.

Диапазон копируется как TSV (значения через табуляцию, строки через '\n'),
одна ячейка - как её исходное значение. Вставка симметрична: TSV разбирается
и записывается блоком, начиная с активной ячейки.
"""

import csv
import io
from typing import Dict, List

from excel_reports.exceptions import ClipboardError
from excel_reports.storage.cells import Cell, CellRange, Coordinate, Grid
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

TSV_SPECIAL_CHARS = ("\t", "\n", "\r", '"')


class ClipboardBackend:
    """Источник/приёмник текста буфера обмена."""

    def get_text(self) -> str:
        raise NotImplementedError

    def set_text(self, text: str):
        raise NotImplementedError


class InMemoryClipboard(ClipboardBackend):
    """Буфер обмена в памяти (тесты и запуск без GUI)."""

    def __init__(self, text: str = ""):
        self.text = text

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str):
        self.text = text


def serialize_range(grid: Grid, cell_range: CellRange) -> str:
    """
    Текстовое представление диапазона для буфера обмена.

    Всегда используются хранимые значения, а не отображаемые (курсив и т.п.).
    """
    r = cell_range.clamp()
    if r.is_single_cell:
        value = grid.value(r.start_row, r.start_col)
        # Значение с разделителями копируется как TSV, иначе вставка разобьёт его на ячейки
        if not any(ch in value for ch in TSV_SPECIAL_CHARS):
            return value

    output = io.StringIO()
    writer = csv.writer(output, delimiter='\t', lineterminator='\n')
    for row in range(r.start_row, r.end_row + 1):
        writer.writerow([grid.value(row, col) for col in range(r.start_col, r.end_col + 1)])
    return output.getvalue()


def parse_clipboard_text(text: str) -> List[List[str]]:
    """
    Разбирает текст буфера обмена в матрицу значений.

    Текст без табуляций и переводов строк - это одно значение. Кавычки
    разбираются по правилам CSV; если кавычка не закрыта или за ней идут
    лишние символы, текст разбирается повторно и кавычки считаются
    обычными символами.
    """
    if '\t' not in text and '\n' not in text and '\r' not in text:
        return [[text]]
    try:
        return _read_tsv(text, strict=True, quoting=csv.QUOTE_MINIMAL)
    except csv.Error as e:
        logger.debug(f"TSV с кавычками не разобран ({e}), кавычки считаются текстом.")
    try:
        return _read_tsv(text, strict=False, quoting=csv.QUOTE_NONE)
    except csv.Error as e:
        raise ClipboardError(f"Ошибка разбора TSV из буфера обмена: {e}") from e


def _read_tsv(text: str, strict: bool, quoting: int) -> List[List[str]]:
    reader = csv.reader(io.StringIO(text, newline=''), delimiter='\t', strict=strict, quoting=quoting)
    return [row if row else [""] for row in reader]


def paste_values(grid: Grid, anchor: Coordinate, matrix: List[List[str]]) -> Grid:
    """
    Записывает матрицу значений начиная с anchor.

    Значения за границами сетки отбрасываются, скрытые ячейки объединений
    пропускаются. Стили ячеек сохраняются.
    """
    start = grid.merge_anchor_of(anchor.row, anchor.col)
    updates: Dict[Coordinate, Cell] = {}
    skipped = 0
    for r_idx, values in enumerate(matrix):
        for c_idx, value in enumerate(values):
            row, col = start.row + r_idx, start.col + c_idx
            if not grid.is_valid(row, col):
                skipped += 1
                continue
            cell = grid.get(row, col)
            if cell.is_hidden:
                skipped += 1
                continue
            updates[Coordinate(row, col)] = cell.with_changes(value=value)
    if skipped:
        logger.debug(f"Вставка: пропущено {skipped} значений (за границей сетки или в объединении).")
    return grid.replace_cells(updates)


def clear_values(grid: Grid, cells: List[Coordinate]) -> Grid:
    """Очищает значения ячеек, стили не трогает."""
    updates: Dict[Coordinate, Cell] = {}
    for coord in cells:
        cell = grid.get(coord.row, coord.col)
        if cell.value:
            updates[coord] = cell.with_changes(value="")
    return grid.replace_cells(updates)


class ClipboardBridge:
    """Связывает операции сетки с конкретным буфером обмена."""

    def __init__(self, backend: ClipboardBackend):
        self.backend = backend

    def copy(self, grid: Grid, cell_range: CellRange) -> str:
        text = serialize_range(grid, cell_range)
        try:
            self.backend.set_text(text)
        except ClipboardError:
            raise
        except Exception as e:
            raise ClipboardError(f"Не удалось записать в буфер обмена: {e}") from e
        logger.info(f"Скопировано в буфер обмена: {cell_range.label}.")
        return text

    def cut(self, grid: Grid, cell_range: CellRange, cells: List[Coordinate]) -> Grid:
        """Копирует диапазон и очищает значения. Если копирование не удалось, сетка не меняется."""
        self.copy(grid, cell_range)
        return clear_values(grid, cells)

    def read(self) -> str:
        try:
            return self.backend.get_text()
        except ClipboardError:
            raise
        except Exception as e:
            raise ClipboardError(f"Не удалось прочитать буфер обмена: {e}") from e

    def paste(self, grid: Grid, anchor: Coordinate) -> Grid:
        text = self.read()
        matrix = parse_clipboard_text(text)
        logger.info(f"Вставка из буфера обмена в {anchor.key}: {len(matrix)} строк.")
        return paste_values(grid, anchor, matrix)
