# excel_reports/exceptions/__init__.py
"""
Пакет пользовательских исключений для редактора отчётов.
"""

from .app_exceptions import (
    AppBaseError,
    ValidationError,
    CellAddressError,
    MergeError,
    ClipboardError,
    ExportError,
    ConfigError,
)

__all__ = [
    "AppBaseError",
    "ValidationError",
    "CellAddressError",
    "MergeError",
    "ClipboardError",
    "ExportError",
    "ConfigError",
]
