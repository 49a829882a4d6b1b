# excel_reports/exceptions/app_exceptions.py
"""
Модуль с пользовательскими исключениями для редактора отчётов.
"""


class AppBaseError(Exception):
    """Базовый класс для всех исключений приложения."""
    pass


class ValidationError(AppBaseError):
    """Исключение, возникающее при валидации данных."""
    pass


class CellAddressError(ValidationError):
    """Адрес ячейки или диапазона вне границ сетки либо не распознан."""
    pass


class MergeError(AppBaseError):
    """Объединение ячеек невозможно для текущего выделения."""
    pass


class ClipboardError(AppBaseError):
    """Буфер обмена недоступен (нет приложения Qt, нет разрешения и т.п.)."""
    pass


class ExportError(AppBaseError):
    """Исключение, возникающее во время экспорта сетки в файл."""
    pass


class ConfigError(AppBaseError):
    """Файл настроек не читается или содержит некорректные значения."""
    pass
