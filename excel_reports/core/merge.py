# excel_reports/core/merge.py
"""
Объединение и разъединение ячеек.

Левая верхняя ячейка диапазона становится якорем объединения: хранит значение,
стиль и размеры (row_span/col_span). Остальные ячейки помечаются merged=True,
очищаются и не отображаются.
"""

from typing import Dict, List

from excel_reports.exceptions import MergeError
from excel_reports.storage.cells import Cell, CellRange, Coordinate, Grid
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)


def merge_cells(grid: Grid, cell_range: CellRange) -> Grid:
    """
    Объединяет диапазон.

    Диапазон расширяется до целых существующих объединений, которые
    при этом поглощаются новым.

    Raises:
        MergeError: Если диапазон состоит из одной ячейки.
    """
    r = grid.expand_to_merges(cell_range)
    if r.is_single_cell:
        raise MergeError("Выделите как минимум две ячейки для объединения.")

    anchor = r.top_left
    updates: Dict[Coordinate, Cell] = {}
    for coord in r.coordinates():
        cell = grid.get(coord.row, coord.col)
        if coord == anchor:
            updates[coord] = cell.with_changes(
                is_merge_start=True,
                merged=False,
                row_span=r.row_count,
                col_span=r.col_count,
            )
        else:
            updates[coord] = cell.with_changes(
                merged=True,
                is_merge_start=False,
                row_span=1,
                col_span=1,
                value="",
            )

    logger.info(f"Объединён диапазон {r.label} ({r.cell_count} ячеек).")
    return grid.replace_cells(updates)


def merged_blocks_in(grid: Grid, cell_range: CellRange) -> List[CellRange]:
    """Объединения, пересекающиеся с диапазоном."""
    return [block for block in grid.merge_blocks() if block.intersects(cell_range)]


def unmerge_cells(grid: Grid, cell_range: CellRange) -> Grid:
    """
    Разъединяет все объединения, пересекающиеся с диапазоном.

    Значение остаётся в левой верхней ячейке, остальные ячейки снова
    становятся самостоятельными (и пустыми).

    Raises:
        MergeError: Если в диапазоне нет объединённых ячеек.
    """
    blocks = merged_blocks_in(grid, cell_range)
    if not blocks:
        raise MergeError("В выделении нет объединённых ячеек.")

    updates: Dict[Coordinate, Cell] = {}
    for block in blocks:
        for coord in block.coordinates():
            cell = grid.get(coord.row, coord.col)
            updates[coord] = cell.with_changes(
                merged=False,
                is_merge_start=False,
                row_span=1,
                col_span=1,
            )
        logger.info(f"Разъединён диапазон {block.label}.")
    return grid.replace_cells(updates)
