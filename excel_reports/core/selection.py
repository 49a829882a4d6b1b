# excel_reports/core/selection.py
"""
Состояние выделения: одна ячейка или прямоугольный диапазон (выделение мышью).
"""

from enum import Enum
from typing import List, Optional

from excel_reports.storage.cells import CellRange, Coordinate, Grid
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)


class SelectionMode(Enum):
    IDLE = "idle"
    CELL = "cell"
    SELECTING = "selecting"
    RANGE = "range"


class SelectionController:
    """
    Хранит текущее выделение. Одновременно активно только одно из:
    ничего, одна ячейка, диапазон.

    Скрытые ячейки объединения не выделяются напрямую: вместо них
    выделяется левая верхняя ячейка объединения.
    """

    def __init__(self):
        self._cell: Optional[Coordinate] = None
        self._range: Optional[CellRange] = None
        self._selecting = False

    # --- Состояние ---
    @property
    def mode(self) -> SelectionMode:
        if self._range is not None:
            return SelectionMode.SELECTING if self._selecting else SelectionMode.RANGE
        if self._cell is not None:
            return SelectionMode.CELL
        return SelectionMode.IDLE

    @property
    def selected_cell(self) -> Optional[Coordinate]:
        return self._cell

    @property
    def selected_range(self) -> Optional[CellRange]:
        """Диапазон в том виде, как его задала мышь (без нормализации)."""
        return self._range

    @property
    def is_selecting(self) -> bool:
        return self._selecting

    @property
    def active_cell(self) -> Optional[Coordinate]:
        """Активная ячейка: выделенная ячейка или угол, с которого начато выделение диапазона."""
        if self._cell is not None:
            return self._cell
        if self._range is not None:
            return Coordinate(self._range.start_row, self._range.start_col)
        return None

    def clear(self):
        self._cell = None
        self._range = None
        self._selecting = False

    # --- События мыши ---
    def mouse_down(self, row: int, col: int, grid: Grid):
        """Начало выделения диапазона: start = end = (row, col)."""
        grid.validate(row, col)
        anchor = grid.merge_anchor_of(row, col)
        self._cell = None
        self._range = CellRange.single(anchor.row, anchor.col)
        self._selecting = True

    def mouse_enter(self, row: int, col: int) -> bool:
        """Продление выделения при перетаскивании. Нормализация выполняется при чтении."""
        if not self._selecting or self._range is None:
            return False
        if (self._range.end_row, self._range.end_col) == (row, col):
            return False
        self._range = self._range._replace(end_row=row, end_col=col)
        return True

    def mouse_up(self) -> bool:
        """Завершение перетаскивания. Диапазон из одной ячейки сворачивается в ячейку."""
        if not self._selecting:
            return False
        self._selecting = False
        if self._range is not None and self._range.is_single_cell:
            self._cell = Coordinate(self._range.start_row, self._range.start_col)
            self._range = None
        logger.debug(f"Выделение завершено: {self.label or '<пусто>'}")
        return True

    def click(self, row: int, col: int, grid: Grid):
        """Выделение одной ячейки, диапазон сбрасывается."""
        grid.validate(row, col)
        self._cell = grid.merge_anchor_of(row, col)
        self._range = None
        self._selecting = False

    def select_range(self, cell_range: CellRange, grid: Grid):
        """Программное выделение диапазона (например, из строки адреса)."""
        r = cell_range.clamp()
        grid.validate(r.start_row, r.start_col)
        grid.validate(r.end_row, r.end_col)
        if r.is_single_cell:
            self.click(r.start_row, r.start_col, grid)
            return
        self._cell = None
        self._range = cell_range
        self._selecting = False

    # --- Навигация ---
    def move(self, d_row: int, d_col: int, grid: Grid) -> bool:
        """
        Сдвигает выделение одной ячейки стрелками.

        На границе сетки ничего не происходит. Объединённый блок
        проходится целиком: выделение встаёт на его левую верхнюю ячейку.
        """
        start = self.active_cell
        if start is None:
            return False
        current_anchor = grid.merge_anchor_of(start.row, start.col)
        row, col = start
        while True:
            row += d_row
            col += d_col
            if not grid.is_valid(row, col):
                return False
            target = grid.merge_anchor_of(row, col)
            if target != current_anchor:
                self._cell = target
                self._range = None
                self._selecting = False
                return True

    # --- Производные значения ---
    def normalized_range(self, grid: Optional[Grid] = None) -> Optional[CellRange]:
        """Нормализованный диапазон; с сеткой - расширенный до целых объединений."""
        if self._range is None:
            return None
        if grid is None:
            return self._range.clamp()
        return grid.expand_to_merges(self._range)

    def is_cell_in_range(self, row: int, col: int) -> bool:
        if self._range is None:
            return False
        return self._range.contains(row, col)

    def target_range(self, grid: Grid) -> Optional[CellRange]:
        """Диапазон, к которому применяются операции (для одной ячейки - её объединение)."""
        if self._range is not None:
            return grid.expand_to_merges(self._range)
        if self._cell is not None:
            block = grid.merge_block_at(self._cell.row, self._cell.col)
            return block or CellRange.single(self._cell.row, self._cell.col)
        return None

    def target_cells(self, grid: Grid) -> List[Coordinate]:
        """Ячейки для изменения стиля/значения; скрытые ячейки объединений пропускаются."""
        if self._range is not None:
            cells = grid.expand_to_merges(self._range).coordinates()
            return [c for c in cells if not grid.get(c.row, c.col).is_hidden]
        if self._cell is not None:
            return [grid.merge_anchor_of(self._cell.row, self._cell.col)]
        return []

    @property
    def label(self) -> str:
        """Адрес для строки формул: 'A1' или 'A1:B3'."""
        if self._range is not None:
            return self._range.label
        if self._cell is not None:
            return self._cell.key
        return ""
