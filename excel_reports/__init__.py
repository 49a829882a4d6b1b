# excel_reports/__init__.py
"""
Excel Reports: табличный редактор отчётов (сетка ячеек, стили, объединения,
история Undo/Redo, буфер обмена и экспорт в CSV).
"""

__version__ = "0.1.0"
