# excel_reports/storage/history.py
"""
История редактирования сетки (Undo/Redo) на основе снимков Grid.

Снимок создаётся только в точках фиксации (Enter, Tab, потеря фокуса,
операции панели инструментов), а не на каждое нажатие клавиши.
"""

from typing import List, Optional

from excel_reports.storage.cells import Grid
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 500


class HistoryManager:
    """
    Стек снимков сетки с указателем на текущий снимок.

    Инвариант: 0 <= index < len(snapshots). Новая фиксация отбрасывает все
    снимки после index (ветка Redo теряется). При переполнении max_depth
    удаляются самые старые снимки.
    """

    def __init__(self, initial: Optional[Grid] = None, max_depth: Optional[int] = DEFAULT_MAX_DEPTH):
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth должен быть >= 1, получено {max_depth}")
        self._snapshots: List[Grid] = [initial if initial is not None else Grid.empty()]
        self._index = 0
        self.max_depth = max_depth

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Grid:
        return self._snapshots[self._index]

    @property
    def snapshots(self) -> List[Grid]:
        return list(self._snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def commit(self, grid: Grid) -> bool:
        """
        Фиксирует новый снимок.

        Returns:
            bool: False, если сетка не отличается от текущего снимка и запись не добавлена.
        """
        if grid == self.current:
            logger.debug("Снимок совпадает с текущим, запись в историю пропущена.")
            return False

        del self._snapshots[self._index + 1:]
        self._snapshots.append(grid)

        if self.max_depth is not None and len(self._snapshots) > self.max_depth:
            overflow = len(self._snapshots) - self.max_depth
            del self._snapshots[:overflow]
            logger.debug(f"История превысила {self.max_depth} снимков, удалено старых: {overflow}.")

        self._index = len(self._snapshots) - 1
        logger.debug(f"Снимок зафиксирован: index={self._index}, всего={len(self._snapshots)}.")
        return True

    def undo(self) -> Optional[Grid]:
        if not self.can_undo:
            logger.debug("Undo: нет более ранних снимков.")
            return None
        self._index -= 1
        logger.debug(f"Undo: index={self._index}.")
        return self.current

    def redo(self) -> Optional[Grid]:
        if not self.can_redo:
            logger.debug("Redo: нет отменённых снимков.")
            return None
        self._index += 1
        logger.debug(f"Redo: index={self._index}.")
        return self.current

