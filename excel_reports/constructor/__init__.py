# excel_reports/constructor/__init__.py
"""
Графический интерфейс редактора отчётов (PySide6).
"""
