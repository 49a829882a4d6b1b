# excel_reports/constructor/main_window.py
"""
Главное окно редактора отчётов.
"""

from typing import Optional

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMainWindow

from excel_reports.constructor.widgets.grid_editor_widget import GridEditorWidget
from excel_reports.utils.logger import get_logger
from excel_reports.utils.settings import EditorSettings

logger = get_logger(__name__)


class MainWindow(QMainWindow):
    """
    Главное окно приложения.
    Содержит один табличный редактор (Лист 1).
    """

    def __init__(self, settings: Optional[EditorSettings] = None, parent=None):
        super().__init__(parent)
        logger.debug("Создание экземпляра MainWindow")
        self.setWindowTitle("Отчёты Excel")
        self.resize(1200, 800)

        self.editor = GridEditorWidget(settings, self)
        self.setCentralWidget(self.editor)
        self._create_menus()

        logger.info("MainWindow инициализировано")

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("&Файл")

        export_action = QAction("&Экспорт в CSV...", self)
        export_action.triggered.connect(self.editor.export_with_dialog)
        file_menu.addAction(export_action)

        print_action = QAction("&Печать...", self)
        print_action.triggered.connect(self.editor.print_grid)
        file_menu.addAction(print_action)

        file_menu.addSeparator()
        exit_action = QAction("В&ыход", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # Ctrl+C/X/V и Ctrl+Z/Y обрабатывает контроллер, здесь только пункты меню
        edit_menu = self.menuBar().addMenu("&Правка")
        edit_menu.addAction(self.editor.undo_action)
        edit_menu.addAction(self.editor.redo_action)
        edit_menu.addSeparator()
        edit_menu.addAction(self.editor.cut_action)
        edit_menu.addAction(self.editor.copy_action)
        edit_menu.addAction(self.editor.paste_action)

    def closeEvent(self, event):
        logger.info("Закрытие главного окна.")
        self.editor.teardown()
        super().closeEvent(event)
