# excel_reports/constructor/widgets/grid_table_model.py
"""
Модель данных для QTableView: показывает сетку GridEditorController.

Модель только читает состояние контроллера. Все изменения идут через
контроллер, поэтому setData не поддерживается.
"""

from typing import Any, Union

from PySide6.QtCore import QAbstractTableModel, QModelIndex, QPersistentModelIndex, Qt
from PySide6.QtGui import QBrush, QColor, QFont

from excel_reports.core.grid_controller import GridEditorController
from excel_reports.storage.cells import column_letter
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

# Подсветка ячеек выделенного диапазона
RANGE_HIGHLIGHT_LIGHT = "#F3F4F6"
RANGE_HIGHLIGHT_DARK = "#1F2937"

# Рамка ячейки со стилем border (2px), рисует делегат
BORDER_COLOR_LIGHT = "#9CA3AF"
BORDER_COLOR_DARK = "#4B5563"
BORDER_WIDTH = 2
BORDER_ROLE = Qt.ItemDataRole.UserRole.value + 1

ALIGNMENT_FLAGS = {
    'left': Qt.AlignmentFlag.AlignLeft,
    'center': Qt.AlignmentFlag.AlignHCenter,
    'right': Qt.AlignmentFlag.AlignRight,
}

ModelIndex = Union[QModelIndex, QPersistentModelIndex]


class GridTableModel(QAbstractTableModel):
    """
    Адаптер сетки для QTableView.

    Строки модели с 0 соответствуют строкам сетки с 1.
    """

    def __init__(self, controller: GridEditorController, dark_mode: bool = False, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.dark_mode = dark_mode

    def rowCount(self, parent: ModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self.controller.grid.rows

    def columnCount(self, parent: ModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self.controller.grid.columns

    def data(self, index: ModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid():
            return None

        row, col = index.row() + 1, index.column()
        grid = self.controller.grid
        if not grid.is_valid(row, col):
            return None
        cell = grid.get(row, col)
        style = cell.style

        if role == Qt.ItemDataRole.DisplayRole:
            if cell.is_hidden:
                return ""
            # Курсив - только отображение, хранимое значение не меняется
            return self.controller.display_value(row, col)
        elif role == Qt.ItemDataRole.EditRole:
            return cell.value
        elif role == Qt.ItemDataRole.BackgroundRole:
            if style.background_color:
                return QBrush(QColor(style.background_color))
            if self.controller.selection.is_cell_in_range(row, col):
                return QBrush(QColor(RANGE_HIGHLIGHT_DARK if self.dark_mode else RANGE_HIGHLIGHT_LIGHT))
        elif role == Qt.ItemDataRole.ForegroundRole:
            if style.color:
                return QBrush(QColor(style.color))
        elif role == Qt.ItemDataRole.FontRole:
            font = QFont()
            font.setBold(style.bold)
            font.setUnderline(style.underline)
            return font
        elif role == Qt.ItemDataRole.TextAlignmentRole:
            h_flag = ALIGNMENT_FLAGS.get(style.text_align or 'left', Qt.AlignmentFlag.AlignLeft)
            return h_flag | Qt.AlignmentFlag.AlignVCenter
        elif role == BORDER_ROLE:
            if style.border and not cell.is_hidden:
                return BORDER_COLOR_DARK if self.dark_mode else BORDER_COLOR_LIGHT

        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return column_letter(section)
        return str(section + 1)

    def flags(self, index: ModelIndex) -> Qt.ItemFlag:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        row, col = index.row() + 1, index.column()
        if self.controller.is_cell_hidden(row, col):
            # Скрытая часть объединения не выделяется и не редактируется
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable | Qt.ItemFlag.ItemIsEditable

    def refresh(self):
        """Сообщает представлению, что изменилась вся сетка (без сброса модели)."""
        rows, cols = self.rowCount(), self.columnCount()
        if rows and cols:
            self.dataChanged.emit(self.index(0, 0), self.index(rows - 1, cols - 1))
