# excel_reports/storage/cells.py
"""
Модель данных сетки: координаты, диапазоны, стили, ячейки и сама сетка (Grid).

Grid неизменяема: каждое изменение возвращает новую сетку, которая разделяет
с предыдущей все нетронутые объекты Cell. Поэтому снимки истории - это просто
ссылки на экземпляры Grid.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Tuple

from openpyxl.utils import coordinate_to_tuple, get_column_letter, range_boundaries
from openpyxl.utils.exceptions import CellCoordinatesException

from excel_reports.exceptions import CellAddressError, ValidationError

# --- Размеры сетки по умолчанию ---
DEFAULT_ROWS = 101
DEFAULT_COLUMNS = 26

TEXT_ALIGNMENTS = ("left", "center", "right")
BOOLEAN_STYLE_KEYS = ("bold", "italic", "underline", "border")


def column_letter(col: int) -> str:
    """Буква столбца по индексу с нуля: 0 -> 'A', 25 -> 'Z'."""
    return get_column_letter(col + 1)


def cell_key(row: int, col: int) -> str:
    """Ключ ячейки в сетке: (3, 1) -> 'B3'."""
    return f"{column_letter(col)}{row}"


class Coordinate(NamedTuple):
    """Адрес ячейки: строка с 1, столбец с 0."""
    row: int
    col: int

    @property
    def key(self) -> str:
        return cell_key(self.row, self.col)

    @classmethod
    def from_key(cls, key: str) -> "Coordinate":
        """Разбирает адрес вида 'B3'."""
        try:
            row, col = coordinate_to_tuple(key)
        except (CellCoordinatesException, ValueError, TypeError) as e:
            raise CellAddressError(f"Не удалось распознать адрес ячейки '{key}': {e}") from e
        return cls(row, col - 1)


class CellRange(NamedTuple):
    """
    Прямоугольный диапазон ячеек (границы включительно).

    Углы могут быть не упорядочены (выделение мышью снизу вверх),
    поэтому перед использованием диапазон нормализуется через clamp().
    """
    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @classmethod
    def single(cls, row: int, col: int) -> "CellRange":
        return cls(row, col, row, col)

    @classmethod
    def from_label(cls, label: str) -> "CellRange":
        """Разбирает 'A1:B3' или 'C5'."""
        try:
            min_col, min_row, max_col, max_row = range_boundaries(label)
        except (CellCoordinatesException, ValueError, TypeError) as e:
            raise CellAddressError(f"Не удалось распознать диапазон '{label}': {e}") from e
        if None in (min_col, min_row, max_col, max_row):
            raise CellAddressError(f"Диапазон '{label}' должен содержать строки и столбцы.")
        return cls(min_row, min_col - 1, max_row, max_col - 1)

    def clamp(self) -> "CellRange":
        """Возвращает нормализованный диапазон: start <= end по обеим осям."""
        return CellRange(
            start_row=min(self.start_row, self.end_row),
            start_col=min(self.start_col, self.end_col),
            end_row=max(self.start_row, self.end_row),
            end_col=max(self.start_col, self.end_col),
        )

    def contains(self, row: int, col: int) -> bool:
        r = self.clamp()
        return r.start_row <= row <= r.end_row and r.start_col <= col <= r.end_col

    def coordinates(self) -> Iterator[Coordinate]:
        """Все ячейки диапазона построчно."""
        r = self.clamp()
        for row in range(r.start_row, r.end_row + 1):
            for col in range(r.start_col, r.end_col + 1):
                yield Coordinate(row, col)

    @property
    def row_count(self) -> int:
        return abs(self.end_row - self.start_row) + 1

    @property
    def col_count(self) -> int:
        return abs(self.end_col - self.start_col) + 1

    @property
    def cell_count(self) -> int:
        return self.row_count * self.col_count

    @property
    def is_single_cell(self) -> bool:
        return self.cell_count == 1

    @property
    def top_left(self) -> Coordinate:
        r = self.clamp()
        return Coordinate(r.start_row, r.start_col)

    @property
    def label(self) -> str:
        r = self.clamp()
        start = cell_key(r.start_row, r.start_col)
        if r.is_single_cell:
            return start
        return f"{start}:{cell_key(r.end_row, r.end_col)}"

    def intersects(self, other: "CellRange") -> bool:
        a, b = self.clamp(), other.clamp()
        return not (
            a.end_row < b.start_row or b.end_row < a.start_row
            or a.end_col < b.start_col or b.end_col < a.start_col
        )

    def union(self, other: "CellRange") -> "CellRange":
        """Наименьший диапазон, покрывающий оба."""
        a, b = self.clamp(), other.clamp()
        return CellRange(
            min(a.start_row, b.start_row), min(a.start_col, b.start_col),
            max(a.end_row, b.end_row), max(a.end_col, b.end_col),
        )


@dataclass(frozen=True)
class CellStyle:
    """Стиль ячейки. Булевы флаги переключаются кнопками панели инструментов."""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    border: bool = False
    background_color: Optional[str] = None
    color: Optional[str] = None
    text_align: Optional[str] = None

    def __post_init__(self):
        if self.text_align is not None and self.text_align not in TEXT_ALIGNMENTS:
            raise ValidationError(f"Недопустимое выравнивание '{self.text_align}'. Ожидалось одно из {TEXT_ALIGNMENTS}.")

    def flag(self, key: str) -> bool:
        if key not in BOOLEAN_STYLE_KEYS:
            raise ValidationError(f"'{key}' не является переключаемым атрибутом стиля.")
        return bool(getattr(self, key))

    def with_changes(self, **changes: Any) -> "CellStyle":
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class Cell:
    """
    Ячейка сетки.

    Для объединённых ячеек: левая верхняя (is_merge_start) хранит значение,
    стиль и размеры объединения; остальные помечены merged=True и не отображаются.
    """
    value: str = ""
    style: CellStyle = field(default_factory=CellStyle)
    row_span: int = 1
    col_span: int = 1
    merged: bool = False
    is_merge_start: bool = False

    @property
    def is_hidden(self) -> bool:
        return self.merged and not self.is_merge_start

    def with_changes(self, **changes: Any) -> "Cell":
        return dataclasses.replace(self, **changes)


EMPTY_CELL = Cell()


class Grid:
    """
    Разреженная неизменяемая сетка ячеек: ключ 'B3' -> Cell.

    Отсутствующий ключ означает пустую ячейку без стиля.
    """

    __slots__ = ("_cells", "rows", "columns")

    def __init__(self, cells: Optional[Mapping[str, Cell]] = None,
                 rows: int = DEFAULT_ROWS, columns: int = DEFAULT_COLUMNS):
        if rows < 1 or not 1 <= columns <= DEFAULT_COLUMNS:
            raise ValidationError(f"Недопустимый размер сетки: {rows}x{columns}.")
        self._cells: Dict[str, Cell] = dict(cells or {})
        self.rows = rows
        self.columns = columns

    @classmethod
    def empty(cls, rows: int = DEFAULT_ROWS, columns: int = DEFAULT_COLUMNS) -> "Grid":
        return cls(None, rows, columns)

    def _derive(self, cells: Dict[str, Cell]) -> "Grid":
        # cells уже является новой копией словаря, повторно не копируем
        grid = Grid.__new__(Grid)
        grid._cells = cells
        grid.rows = self.rows
        grid.columns = self.columns
        return grid

    # --- Адресация ---
    def is_valid(self, row: int, col: int) -> bool:
        return 1 <= row <= self.rows and 0 <= col < self.columns

    def validate(self, row: int, col: int):
        if not self.is_valid(row, col):
            raise CellAddressError(
                f"Ячейка ({row}, {col}) вне сетки {self.rows}x{self.columns}."
            )

    @property
    def bounds(self) -> CellRange:
        return CellRange(1, 0, self.rows, self.columns - 1)

    def coordinates(self) -> Iterator[Coordinate]:
        return self.bounds.coordinates()

    # --- Чтение ---
    def get(self, row: int, col: int) -> Cell:
        self.validate(row, col)
        return self._cells.get(cell_key(row, col), EMPTY_CELL)

    def value(self, row: int, col: int) -> str:
        return self.get(row, col).value

    def style(self, row: int, col: int) -> CellStyle:
        return self.get(row, col).style

    # --- Запись (copy-on-write) ---
    def set(self, row: int, col: int, **changes: Any) -> "Grid":
        """Возвращает новую сетку, где изменена только одна ячейка."""
        current = self.get(row, col)
        cells = dict(self._cells)
        cells[cell_key(row, col)] = current.with_changes(**changes)
        return self._derive(cells)

    def replace_cells(self, updates: Mapping[Coordinate, Cell]) -> "Grid":
        """Пакетная замена ячеек за одно копирование словаря."""
        if not updates:
            return self
        cells = dict(self._cells)
        for coord, cell in updates.items():
            self.validate(coord.row, coord.col)
            cells[cell_key(coord.row, coord.col)] = cell
        return self._derive(cells)

    # --- Объединения ---
    def merge_anchors(self) -> List[Tuple[Coordinate, Cell]]:
        """Все левые верхние ячейки объединений."""
        return [
            (Coordinate.from_key(key), cell)
            for key, cell in self._cells.items()
            if cell.is_merge_start
        ]

    def merge_blocks(self) -> List[CellRange]:
        blocks = []
        for anchor, cell in self.merge_anchors():
            blocks.append(CellRange(
                anchor.row, anchor.col,
                anchor.row + cell.row_span - 1, anchor.col + cell.col_span - 1,
            ))
        return blocks

    def merge_block_at(self, row: int, col: int) -> Optional[CellRange]:
        """Диапазон объединения, покрывающего ячейку, или None."""
        cell = self.get(row, col)
        if not (cell.merged or cell.is_merge_start):
            return None
        for block in self.merge_blocks():
            if block.contains(row, col):
                return block
        return None

    def merge_anchor_of(self, row: int, col: int) -> Coordinate:
        """Ячейка-представитель: левая верхняя ячейка объединения или сама ячейка."""
        block = self.merge_block_at(row, col)
        if block is None:
            return Coordinate(row, col)
        return block.top_left

    def expand_to_merges(self, cell_range: CellRange) -> CellRange:
        """Расширяет диапазон так, чтобы объединения не пересекались с ним частично."""
        result = cell_range.clamp()
        blocks = self.merge_blocks()
        changed = True
        while changed:
            changed = False
            for block in blocks:
                if result.intersects(block):
                    expanded = result.union(block)
                    if expanded != result:
                        result = expanded
                        changed = True
        return result

    # --- Служебное ---
    def items(self) -> Iterable[Tuple[str, Cell]]:
        return self._cells.items()

    def __len__(self) -> int:
        return len(self._cells)

    def _significant(self) -> Dict[str, Cell]:
        return {key: cell for key, cell in self._cells.items() if cell != EMPTY_CELL}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        if self is other:
            return True
        return (self.rows, self.columns) == (other.rows, other.columns) and \
            self._significant() == other._significant()

    __hash__ = None

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.columns}, cells={len(self._cells)})"
