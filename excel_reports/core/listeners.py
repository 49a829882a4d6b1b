# excel_reports/core/listeners.py
"""
Глобальные (уровня окна) слушатели событий: отпускание кнопки мыши и нажатия клавиш.

Контроллер регистрирует обработчики при создании и снимает их в dispose(),
чтобы обработчики не оставались после закрытия редактора.
"""

from typing import Callable, Dict, List

from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

MOUSE_UP = "mouseup"
KEY_DOWN = "keydown"


class ListenerHub:
    """Реестр обработчиков событий окна."""

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}

    def add_listener(self, event: str, callback: Callable):
        self._listeners.setdefault(event, []).append(callback)
        logger.debug(f"Добавлен обработчик события '{event}'.")

    def remove_listener(self, event: str, callback: Callable) -> bool:
        callbacks = self._listeners.get(event, [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        logger.debug(f"Удалён обработчик события '{event}'.")
        return True

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *args) -> bool:
        """Вызывает обработчики события. Возвращает True, если хотя бы один его обработал."""
        handled = False
        for callback in list(self._listeners.get(event, [])):
            if callback(*args):
                handled = True
        return handled
