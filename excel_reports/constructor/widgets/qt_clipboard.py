# excel_reports/constructor/widgets/qt_clipboard.py
"""
Буфер обмена Qt для ClipboardBridge.
"""

from PySide6.QtGui import QClipboard, QGuiApplication

from excel_reports.core.clipboard import ClipboardBackend
from excel_reports.exceptions import ClipboardError


class QtClipboard(ClipboardBackend):
    """Системный буфер обмена через QGuiApplication.clipboard()."""

    def _clipboard(self) -> QClipboard:
        if QGuiApplication.instance() is None:
            raise ClipboardError("Приложение Qt не запущено, буфер обмена недоступен.")
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            raise ClipboardError("Система не предоставила буфер обмена.")
        return clipboard

    def get_text(self) -> str:
        return self._clipboard().text()

    def set_text(self, text: str):
        self._clipboard().setText(text)
