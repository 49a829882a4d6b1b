# excel_reports/storage/__init__.py
"""
Хранилище сетки в памяти: модель ячеек и история снимков.
"""

from .cells import (
    BOOLEAN_STYLE_KEYS,
    DEFAULT_COLUMNS,
    DEFAULT_ROWS,
    EMPTY_CELL,
    TEXT_ALIGNMENTS,
    Cell,
    CellRange,
    CellStyle,
    Coordinate,
    Grid,
    cell_key,
    column_letter,
)
from .history import HistoryManager

__all__ = [
    "BOOLEAN_STYLE_KEYS",
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "EMPTY_CELL",
    "TEXT_ALIGNMENTS",
    "Cell",
    "CellRange",
    "CellStyle",
    "Coordinate",
    "Grid",
    "HistoryManager",
    "cell_key",
    "column_letter",
]
