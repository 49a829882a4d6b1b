# excel_reports/core/editing.py
"""
Режим редактирования ячейки: просмотр <-> редактирование.

Черновик (draft) меняется на каждое нажатие клавиши, но в сетку и историю
попадает только при фиксации (Enter, Tab, потеря фокуса).
"""

from enum import Enum
from typing import Optional, Tuple

from excel_reports.storage.cells import Coordinate
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)


class EditingMode(Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class EditingStateMachine:
    """Конечный автомат редактирования одной ячейки."""

    def __init__(self):
        self._cell: Optional[Coordinate] = None
        self._draft = ""
        self._original = ""
        self._caret = 0

    @property
    def mode(self) -> EditingMode:
        return EditingMode.EDITING if self._cell is not None else EditingMode.VIEWING

    @property
    def is_editing(self) -> bool:
        return self._cell is not None

    @property
    def cell(self) -> Optional[Coordinate]:
        return self._cell

    @property
    def draft(self) -> str:
        return self._draft

    @property
    def original(self) -> str:
        return self._original

    @property
    def caret(self) -> int:
        return self._caret

    def begin(self, cell: Coordinate, current_value: str):
        """Двойной клик или Enter: черновик заполняется текущим значением ячейки."""
        self._cell = cell
        self._original = current_value
        self._draft = current_value
        self._caret = len(current_value)
        logger.debug(f"Начато редактирование {cell.key}.")

    def begin_overwrite(self, cell: Coordinate, text: str, current_value: str):
        """Ввод символа при выделенной ячейке: символ заменяет значение, курсор в конце."""
        self._cell = cell
        self._original = current_value
        self._draft = text
        self._caret = len(text)
        logger.debug(f"Начато редактирование {cell.key} с замещением значения.")

    def update_draft(self, text: str, caret: Optional[int] = None) -> bool:
        if not self.is_editing:
            return False
        self._draft = text
        self._caret = len(text) if caret is None else max(0, min(caret, len(text)))
        return True

    def commit(self) -> Optional[Tuple[Coordinate, str]]:
        """Завершает редактирование и возвращает (ячейка, значение) для записи в сетку."""
        if self._cell is None:
            return None
        result = (self._cell, self._draft)
        self._reset()
        logger.debug(f"Редактирование {result[0].key} зафиксировано.")
        return result

    def cancel(self) -> Optional[str]:
        """Отмена без фиксации. Возвращает исходное значение для восстановления поля ввода."""
        if self._cell is None:
            return None
        original = self._original
        logger.debug(f"Редактирование {self._cell.key} отменено.")
        self._reset()
        return original

    def _reset(self):
        self._cell = None
        self._draft = ""
        self._original = ""
        self._caret = 0
