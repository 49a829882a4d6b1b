# excel_reports/constructor/gui_app.py
"""
Запуск графического интерфейса редактора отчётов.
Точка входа, импортируемая main.py.
"""

import sys
from typing import Optional

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from excel_reports import __version__
from excel_reports.constructor.main_window import MainWindow
from excel_reports.utils.settings import EditorSettings


def main(settings: Optional[EditorSettings] = None) -> int:
    """
    Создаёт QApplication, показывает MainWindow и запускает цикл событий.

    Returns:
        int: Код завершения приложения.
    """
    app = QApplication.instance() or QApplication(sys.argv)

    QCoreApplication.setApplicationName("Excel Reports")
    QCoreApplication.setApplicationVersion(__version__)

    window = MainWindow(settings)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
