# excel_reports/core/styles.py
"""
Изменение стилей ячеек и вычисление трёхпозиционного состояния кнопок
панели инструментов (включено / выключено / смешанно).

Все функции чистые: принимают сетку и список ячеек, возвращают новую сетку.
"""

import re
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from excel_reports.exceptions import ValidationError
from excel_reports.storage.cells import (
    BOOLEAN_STYLE_KEYS,
    TEXT_ALIGNMENTS,
    Cell,
    CellStyle,
    Coordinate,
    Grid,
)
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

# Палитра заливки: строки - оттенки, столбцы - цвета
# (белый, серый, тёмно-зелёный, зелёный, тёмно-синий, голубой, фиолетовый, розовый, красный, оранжевый, жёлтый)
THEME_COLORS: List[List[str]] = [
    ['#FFFFFF', '#000000', '#008000', '#9EF01A', '#0466C8', '#7BDFF2', '#9D4EDD', '#E27396', '#D00000', '#FAA307', '#FFFF3F'],
    ['#F2F2F2', '#7F7F7F', '#007200', '#16DB65', '#0353A4', '#48CAE4', '#7B2CBF', '#FF4D6D', '#D90429', '#F48C06', '#FCF300'],
    ['#D9D9D9', '#595959', '#006400', '#34D399', '#023E7D', '#00B4D8', '#5A189A', '#F72585', '#C1121F', '#F3722C', '#FFEA00'],
    ['#BFBFBF', '#3F3F3F', '#004B23', '#10B981', '#002855', '#0096C7', '#7209B7', '#F20089', '#9D0208', '#FB5607', '#FFD000'],
    ['#A6A6A6', '#262626', '#007F5F', '#059669', '#001845', '#023E8A', '#B5179E', '#DD2D4D', '#780000', '#E36414', '#F4E409'],
]

STANDARD_COLORS: List[str] = [
    '#FFFF00', '#F48C06', '#FF0000', '#F72585', '#C00000', '#92D050', '#00B050', '#007F5F',
    '#277DA1', '#00B0F0', '#0070C0', '#002060', '#6930C3', '#5A189A', '#774936', '#161A1D',
]

_COLOR_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


class StyleState(Enum):
    ON = "on"
    OFF = "off"
    MIXED = "mixed"


def _check_style_key(key: str):
    if key not in BOOLEAN_STYLE_KEYS:
        raise ValidationError(f"'{key}' не является переключаемым атрибутом стиля. Допустимо: {BOOLEAN_STYLE_KEYS}.")


def _check_color(color: Optional[str]):
    if color is not None and not _COLOR_PATTERN.match(color):
        raise ValidationError(f"Недопустимый цвет '{color}'. Ожидался формат #RGB или #RRGGBB.")


def _visible(grid: Grid, cells: Iterable[Coordinate]) -> List[Coordinate]:
    # Скрытые ячейки объединения стилизуются только через левую верхнюю ячейку
    return [c for c in cells if not grid.get(c.row, c.col).is_hidden]


def _apply_style(grid: Grid, cells: Iterable[Coordinate], change: Callable[[CellStyle], CellStyle]) -> Grid:
    updates: Dict[Coordinate, Cell] = {}
    for coord in _visible(grid, cells):
        cell = grid.get(coord.row, coord.col)
        updates[coord] = cell.with_changes(style=change(cell.style))
    return grid.replace_cells(updates)


def style_state(grid: Grid, cells: Iterable[Coordinate], key: str) -> StyleState:
    """
    Состояние атрибута для выделения.

    ON - атрибут включён у всех ячеек, OFF - ни у одной (или выделения нет),
    MIXED - у части ячеек.
    """
    _check_style_key(key)
    any_on = False
    any_off = False
    for coord in _visible(grid, cells):
        if grid.style(coord.row, coord.col).flag(key):
            any_on = True
        else:
            any_off = True
        if any_on and any_off:
            return StyleState.MIXED
    return StyleState.ON if any_on else StyleState.OFF


def toggle_style(grid: Grid, cells: Iterable[Coordinate], key: str) -> Grid:
    """
    Переключает булев атрибут.

    Выделение приводится к одному состоянию: если атрибут включён у всех
    ячеек, он выключается у всех; иначе (OFF или MIXED) включается у всех.
    """
    targets = list(cells)
    state = style_state(grid, targets, key)
    new_value = state is not StyleState.ON
    logger.debug(f"Переключение '{key}' для {len(targets)} ячеек: {state.value} -> {new_value}.")
    return _apply_style(grid, targets, lambda style: style.with_changes(**{key: new_value}))


def set_alignment(grid: Grid, cells: Iterable[Coordinate], align: str) -> Grid:
    if align not in TEXT_ALIGNMENTS:
        raise ValidationError(f"Недопустимое выравнивание '{align}'. Ожидалось одно из {TEXT_ALIGNMENTS}.")
    return _apply_style(grid, cells, lambda style: style.with_changes(text_align=align))


def set_background(grid: Grid, cells: Iterable[Coordinate], color: Optional[str]) -> Grid:
    """Заливка ячеек; None убирает заливку."""
    _check_color(color)
    return _apply_style(grid, cells, lambda style: style.with_changes(background_color=color))


def set_text_color(grid: Grid, cells: Iterable[Coordinate], color: Optional[str]) -> Grid:
    """Цвет текста; None возвращает цвет по умолчанию."""
    _check_color(color)
    return _apply_style(grid, cells, lambda style: style.with_changes(color=color))


# --- Отображение курсива ---
# Курсив показывается символами Unicode "Mathematical Sans-Serif Italic".
# Хранимое значение не меняется: копирование и экспорт работают с исходным текстом.
_ITALIC_UPPER_START = 0x1D608
_ITALIC_LOWER_START = 0x1D622


def to_sans_serif_italic(text: str) -> str:
    result = []
    for ch in str(text):
        if 'A' <= ch <= 'Z':
            result.append(chr(_ITALIC_UPPER_START + ord(ch) - ord('A')))
        elif 'a' <= ch <= 'z':
            result.append(chr(_ITALIC_LOWER_START + ord(ch) - ord('a')))
        else:
            result.append(ch)
    return ''.join(result)


def display_value(cell: Cell) -> str:
    """Текст для отображения в сетке (только представление)."""
    if cell.style.italic:
        return to_sans_serif_italic(cell.value)
    return cell.value


def style_states(grid: Grid, cells: Iterable[Coordinate]) -> Dict[str, StyleState]:
    """Состояния всех переключаемых атрибутов для панели инструментов."""
    targets = list(cells)
    return {key: style_state(grid, targets, key) for key in BOOLEAN_STYLE_KEYS}

