# excel_reports/core/__init__.py
"""
Логика табличного редактора: выделение, редактирование, стили, объединения,
буфер обмена, статистика и центральный контроллер.
"""

from .grid_controller import GridEditorController, GridEditorState, KeyEvent, Notification

__all__ = [
    "GridEditorController",
    "GridEditorState",
    "KeyEvent",
    "Notification",
]
