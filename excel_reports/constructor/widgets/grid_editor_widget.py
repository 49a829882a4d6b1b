# excel_reports/constructor/widgets/grid_editor_widget.py
"""
Виджет табличного редактора: панель инструментов, строка формул, сетка и строка состояния.

Виджет не хранит данных сетки. Он переводит события Qt в вызовы
GridEditorController и перерисовывается по подписке на его состояние.
"""

from pathlib import Path
from typing import Callable, Dict, Optional

from PySide6.QtCore import QEvent, QModelIndex, QObject, Qt, Slot
from PySide6.QtGui import QAction, QColor, QIcon, QKeyEvent, QMouseEvent, QPen, QPixmap, QTextDocument
from PySide6.QtPrintSupport import QPrintDialog, QPrinter
from PySide6.QtWidgets import (
    QAbstractItemView, QApplication, QDialog, QFileDialog, QHBoxLayout, QLabel, QLineEdit, QMenu, QMessageBox,
    QStyledItemDelegate, QTableView, QToolBar, QToolButton, QVBoxLayout, QWidget
)

from excel_reports.constructor.widgets.grid_table_model import BORDER_ROLE, BORDER_WIDTH, GridTableModel
from excel_reports.constructor.widgets.qt_clipboard import QtClipboard
from excel_reports.core.grid_controller import GridEditorController, GridEditorState, KeyEvent, Notification
from excel_reports.core.listeners import KEY_DOWN, MOUSE_UP, ListenerHub
from excel_reports.core.styles import STANDARD_COLORS, THEME_COLORS, StyleState
from excel_reports.exporter.html_report import render_grid_html
from excel_reports.utils.logger import get_logger
from excel_reports.utils.settings import EditorSettings

logger = get_logger(__name__)

QT_KEY_NAMES = {
    Qt.Key.Key_Return: "Enter",
    Qt.Key.Key_Enter: "Enter",
    Qt.Key.Key_Tab: "Tab",
    Qt.Key.Key_Escape: "Escape",
    Qt.Key.Key_Up: "ArrowUp",
    Qt.Key.Key_Down: "ArrowDown",
    Qt.Key.Key_Left: "ArrowLeft",
    Qt.Key.Key_Right: "ArrowRight",
}

STYLE_BUTTONS = (
    ("bold", "Ж", "Полужирный (Ctrl+B)"),
    ("italic", "К", "Курсив (Ctrl+I)"),
    ("underline", "Ч", "Подчёркнутый (Ctrl+U)"),
    ("border", "▢", "Граница"),
)

ALIGN_BUTTONS = (
    ("left", "⯇", "По левому краю"),
    ("center", "≡", "По центру"),
    ("right", "⯈", "По правому краю"),
)

MESSAGE_ICONS = {
    "info": QMessageBox.Icon.Information,
    "success": QMessageBox.Icon.Information,
    "warning": QMessageBox.Icon.Warning,
    "error": QMessageBox.Icon.Critical,
}

DARK_STYLESHEET = """
QWidget { background-color: #111827; color: #E5E7EB; }
QTableView { gridline-color: #374151; selection-background-color: #1F2937; }
QHeaderView::section { background-color: #1F2937; color: #9CA3AF; }
QLineEdit { background-color: #1F2937; border: 1px solid #374151; }
"""


def to_key_event(event: QKeyEvent) -> Optional[KeyEvent]:
    """
    Переводит QKeyEvent в KeyEvent контроллера.

    Qt на macOS сообщает Cmd как ControlModifier, поэтому контроллер в
    Qt-интерфейсе всегда работает с Ctrl как с модификатором сочетаний.
    """
    modifiers = event.modifiers()
    ctrl = bool(modifiers & Qt.KeyboardModifier.ControlModifier)
    meta = bool(modifiers & Qt.KeyboardModifier.MetaModifier)
    alt = bool(modifiers & Qt.KeyboardModifier.AltModifier)
    shift = bool(modifiers & Qt.KeyboardModifier.ShiftModifier)

    qt_key = event.key()
    if qt_key in QT_KEY_NAMES:
        key = QT_KEY_NAMES[qt_key]
    elif (ctrl or meta) and Qt.Key.Key_A <= qt_key <= Qt.Key.Key_Z:
        # При зажатом Ctrl event.text() содержит управляющий символ
        key = chr(qt_key).lower()
    else:
        key = event.text()
        if not key:
            return None
    return KeyEvent(key, ctrl=ctrl, meta=meta, alt=alt, shift=shift)


def color_icon(color: str, size: int = 14) -> QIcon:
    pixmap = QPixmap(size, size)
    pixmap.fill(QColor(color))
    return QIcon(pixmap)


class CellEditorDelegate(QStyledItemDelegate):
    """
    Делегат ячеек: рисует рамку стиля border и создаёт редактор ячейки
    (QLineEdit, связанный с черновиком контроллера).
    """

    def __init__(self, controller: GridEditorController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.active_editor: Optional[QLineEdit] = None

    def paint(self, painter, option, index):
        super().paint(painter, option, index)
        border_color = index.data(BORDER_ROLE)
        if not border_color:
            return
        painter.save()
        pen = QPen(QColor(border_color))
        pen.setWidth(BORDER_WIDTH)
        painter.setPen(pen)
        half = BORDER_WIDTH // 2
        painter.drawRect(option.rect.adjusted(half, half, -half, -half))
        painter.restore()

    def createEditor(self, parent, option, index):
        editor = QLineEdit(parent)
        editor.setFrame(False)
        editor.textEdited.connect(self._on_text_edited)
        self.active_editor = editor
        return editor

    def setEditorData(self, editor, index):
        draft = self.controller.editing.draft
        if editor.text() != draft:
            editor.setText(draft)
            editor.setCursorPosition(self.controller.editing.caret)

    def setModelData(self, editor, model, index):
        # Значение записывает контроллер при фиксации черновика
        pass

    def destroyEditor(self, editor, index):
        if editor is self.active_editor:
            self.active_editor = None
        super().destroyEditor(editor, index)

    @Slot(str)
    def _on_text_edited(self, text: str):
        editor = self.active_editor
        caret = editor.cursorPosition() if editor is not None else None
        self.controller.update_draft(text, caret)


class GridEditorWidget(QWidget):
    """
    Табличный редактор на одном листе.

    Фильтр событий приложения устанавливается в конструкторе и снимается в
    teardown(): отпускание кнопки мыши и нажатия клавиш передаются в
    ListenerHub, где их обрабатывает контроллер.
    """

    def __init__(self, settings: Optional[EditorSettings] = None, parent=None):
        super().__init__(parent)
        self.settings = settings or EditorSettings()
        self.listener_hub = ListenerHub()
        self.controller = GridEditorController(
            settings=self.settings,
            clipboard=QtClipboard(),
            listener_hub=self.listener_hub,
            notifier=self._show_notification,
            is_mac=False,
        )
        self.model = GridTableModel(self.controller, dark_mode=self.settings.ui.dark_mode, parent=self)
        self.delegate = CellEditorDelegate(self.controller, self)
        self._editor_index: Optional[QModelIndex] = None
        self._press_cell = None
        self._style_actions: Dict[str, QAction] = {}
        self._style_titles: Dict[str, str] = {}
        self._event_filter_installed = False

        self._setup_ui()
        self._setup_connections()

        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)
            self._event_filter_installed = True

        self.controller.subscribe(self._on_state_changed)
        self._on_state_changed(self.controller.state)
        logger.debug("GridEditorWidget инициализирован.")

    # --- Построение интерфейса ---
    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        self.toolbar = QToolBar("Форматирование", self)
        self._create_toolbar()
        layout.addWidget(self.toolbar)

        formula_layout = QHBoxLayout()
        formula_layout.setContentsMargins(4, 0, 4, 0)
        self.address_label = QLabel("", self)
        self.address_label.setMinimumWidth(70)
        self.formula_bar = QLineEdit(self)
        self.formula_bar.setPlaceholderText("Значение ячейки")
        formula_layout.addWidget(QLabel("Ячейка:", self))
        formula_layout.addWidget(self.address_label)
        formula_layout.addWidget(self.formula_bar, 1)
        layout.addLayout(formula_layout)

        self.table_view = QTableView(self)
        self.table_view.setModel(self.model)
        self.table_view.setItemDelegate(self.delegate)
        self.table_view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table_view.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.table_view.viewport().installEventFilter(self)
        layout.addWidget(self.table_view, 1)

        status_layout = QHBoxLayout()
        status_layout.setContentsMargins(4, 0, 4, 2)
        self.ready_label = QLabel("Готово", self)
        self.sheet_label = QLabel("Лист 1", self)
        self.stats_label = QLabel("", self)
        status_layout.addWidget(self.ready_label)
        status_layout.addWidget(self.sheet_label)
        status_layout.addStretch(1)
        status_layout.addWidget(self.stats_label)
        layout.addLayout(status_layout)

        if self.settings.ui.dark_mode:
            self.setStyleSheet(DARK_STYLESHEET)

    def _create_toolbar(self):
        for key, title, tooltip in STYLE_BUTTONS:
            action = QAction(title, self)
            action.setCheckable(True)
            action.setToolTip(tooltip)
            action.triggered.connect(lambda checked=False, k=key: self.controller.toggle_style(k))
            self.toolbar.addAction(action)
            self._style_actions[key] = action
            self._style_titles[key] = title

        self.toolbar.addSeparator()
        for align, title, tooltip in ALIGN_BUTTONS:
            action = QAction(title, self)
            action.setToolTip(tooltip)
            action.triggered.connect(lambda checked=False, a=align: self.controller.set_alignment(a))
            self.toolbar.addAction(action)

        self.toolbar.addSeparator()
        self.fill_button = QToolButton(self)
        self.fill_button.setText("Заливка")
        self.fill_button.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
        self.fill_menu = self._create_color_menu(self.controller.set_background, "Нет заливки")
        self.fill_button.setMenu(self.fill_menu)
        self.toolbar.addWidget(self.fill_button)
        self.text_color_button = QToolButton(self)
        self.text_color_button.setText("Цвет текста")
        self.text_color_button.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
        self.text_color_menu = self._create_color_menu(self.controller.set_text_color, "Авто")
        self.text_color_button.setMenu(self.text_color_menu)
        self.toolbar.addWidget(self.text_color_button)

        self.toolbar.addSeparator()
        self.merge_action = QAction("Объединить", self)
        self.merge_action.triggered.connect(self.controller.merge)
        self.toolbar.addAction(self.merge_action)
        self.unmerge_action = QAction("Разъединить", self)
        self.unmerge_action.triggered.connect(self.controller.unmerge)
        self.toolbar.addAction(self.unmerge_action)

        self.toolbar.addSeparator()
        self.copy_action = QAction("Копировать", self)
        self.copy_action.setToolTip("Копировать (Ctrl+C)")
        self.copy_action.triggered.connect(self.copy)
        self.toolbar.addAction(self.copy_action)
        self.cut_action = QAction("Вырезать", self)
        self.cut_action.setToolTip("Вырезать (Ctrl+X)")
        self.cut_action.triggered.connect(self.cut)
        self.toolbar.addAction(self.cut_action)
        self.paste_action = QAction("Вставить", self)
        self.paste_action.setToolTip("Вставить (Ctrl+V)")
        self.paste_action.triggered.connect(self.paste)
        self.toolbar.addAction(self.paste_action)

        self.toolbar.addSeparator()
        # Сочетания клавиш обрабатывает контроллер, у действий только подсказки
        self.undo_action = QAction("Отменить", self)
        self.undo_action.setToolTip("Отменить (Ctrl+Z)")
        self.undo_action.triggered.connect(self.controller.undo)
        self.toolbar.addAction(self.undo_action)
        self.redo_action = QAction("Повторить", self)
        self.redo_action.setToolTip("Повторить (Ctrl+Y)")
        self.redo_action.triggered.connect(self.controller.redo)
        self.toolbar.addAction(self.redo_action)

        self.toolbar.addSeparator()
        self.export_action = QAction("Экспорт CSV", self)
        self.export_action.triggered.connect(self._on_export)
        self.toolbar.addAction(self.export_action)
        self.print_action = QAction("Печать", self)
        self.print_action.setToolTip("Печать заполненной области")
        self.print_action.triggered.connect(self.print_grid)
        self.toolbar.addAction(self.print_action)

    def _create_color_menu(self, apply_color: Callable[[Optional[str]], bool], reset_title: str) -> QMenu:
        """Меню палитры: цвета темы, стандартные цвета и сброс цвета."""
        menu = QMenu(self)
        for row in THEME_COLORS:
            for color in row:
                action = menu.addAction(color_icon(color), color)
                action.triggered.connect(lambda checked=False, c=color: apply_color(c))
        menu.addSeparator()
        for color in STANDARD_COLORS:
            action = menu.addAction(color_icon(color), color)
            action.triggered.connect(lambda checked=False, c=color: apply_color(c))
        menu.addSeparator()
        reset = menu.addAction(reset_title)
        reset.triggered.connect(lambda: apply_color(None))
        menu.aboutToShow.connect(self.controller.open_color_picker)
        menu.aboutToHide.connect(self.controller.close_color_picker)
        return menu

    def _setup_connections(self):
        self.formula_bar.textEdited.connect(self._on_formula_bar_edited)
        self.formula_bar.returnPressed.connect(self._on_formula_bar_return)
        self.formula_bar.editingFinished.connect(self.controller.formula_bar_commit)

    # --- Обработка состояния ---
    def _on_state_changed(self, state: GridEditorState):
        self._sync_spans(state)
        self.model.refresh()

        anchor = state.editing_cell or state.selected_cell
        if anchor is None and state.selected_range is not None:
            anchor = self.controller.selection.active_cell
        if anchor is not None:
            self.table_view.setCurrentIndex(self.model.index(anchor.row - 1, anchor.col))

        self._sync_editor(state)

        self.address_label.setText(self.controller.address_label)
        if not self.formula_bar.hasFocus():
            self.formula_bar.setText(self.controller.formula_bar_text)

        self.stats_label.setText(self.controller.status_text)

        states = self.controller.style_states()
        for key, action in self._style_actions.items():
            style_state = states.get(key, StyleState.OFF)
            action.setChecked(style_state is StyleState.ON)
            title = self._style_titles[key]
            action.setText(f"{title}•" if style_state is StyleState.MIXED else title)

        self.undo_action.setEnabled(state.can_undo)
        self.redo_action.setEnabled(state.can_redo)

    def _sync_spans(self, state: GridEditorState):
        self.table_view.clearSpans()
        for block in state.grid.merge_blocks():
            self.table_view.setSpan(block.start_row - 1, block.start_col, block.row_count, block.col_count)

    def _sync_editor(self, state: GridEditorState):
        if state.editing_cell is None:
            if self._editor_index is not None:
                self.table_view.closePersistentEditor(self._editor_index)
                self._editor_index = None
                self.table_view.setFocus()
            return

        index = self.model.index(state.editing_cell.row - 1, state.editing_cell.col)
        if self._editor_index != index:
            if self._editor_index is not None:
                self.table_view.closePersistentEditor(self._editor_index)
            self.table_view.openPersistentEditor(index)
            self._editor_index = index
            editor = self.delegate.active_editor
            if editor is not None and not self.formula_bar.hasFocus():
                editor.setFocus()
        editor = self.delegate.active_editor
        if editor is not None and editor.text() != state.draft:
            editor.setText(state.draft)
            editor.setCursorPosition(self.controller.editing.caret)

    # --- Строка формул ---
    @Slot(str)
    def _on_formula_bar_edited(self, text: str):
        self.controller.formula_bar_input(text)

    @Slot()
    def _on_formula_bar_return(self):
        self.controller.formula_bar_commit()
        self.table_view.setFocus()

    # --- Буфер обмена ---
    @Slot()
    def copy(self):
        self.controller.copy()

    @Slot()
    def cut(self):
        self.controller.cut()

    @Slot()
    def paste(self):
        self.controller.paste()

    # --- Экспорт и печать ---
    @Slot()
    def _on_export(self):
        self.export_with_dialog()

    def export_with_dialog(self) -> Optional[Path]:
        """Спрашивает путь к CSV-файлу и экспортирует сетку. None - отмена или ошибка."""
        default_path = self.controller.default_export_path()
        output_path, _ = QFileDialog.getSaveFileName(self, "Экспорт в CSV", str(default_path), "CSV (*.csv)")
        if not output_path:
            logger.debug("Экспорт отменён пользователем.")
            return None
        path = Path(output_path)
        return self.controller.export_csv(path.parent, path.name)

    @Slot()
    def print_grid(self) -> bool:
        """Печатает заполненную область сетки через системный диалог печати."""
        self.controller.blur()
        printer = QPrinter(QPrinter.PrinterMode.HighResolution)
        dialog = QPrintDialog(printer, self)
        dialog.setWindowTitle("Печать")
        if dialog.exec() != QDialog.DialogCode.Accepted:
            logger.debug("Печать отменена пользователем.")
            return False

        document = QTextDocument(self)
        document.setHtml(render_grid_html(self.controller.grid))
        document.print_(printer)
        logger.info("Сетка отправлена на печать.")
        return True

    # --- Уведомления ---
    def _show_notification(self, notification: Notification):
        box = QMessageBox(self)
        box.setIcon(MESSAGE_ICONS.get(notification.variant, QMessageBox.Icon.Information))
        box.setWindowTitle(notification.title)
        box.setText(notification.message)
        box.exec()

    # --- Фильтр событий ---
    def _cell_at(self, event: QMouseEvent):
        index = self.table_view.indexAt(event.position().toPoint())
        if not index.isValid():
            return None
        return index.row() + 1, index.column()

    def _owns(self, obj: QObject) -> bool:
        if not isinstance(obj, QWidget):
            return False
        if obj is self.formula_bar:
            return False
        return obj is self.table_view or self.table_view.isAncestorOf(obj)

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        event_type = event.type()

        if obj is self.table_view.viewport():
            if event_type == QEvent.Type.MouseButtonPress and event.button() == Qt.MouseButton.LeftButton:
                cell = self._cell_at(event)
                if cell is not None:
                    self._press_cell = cell
                    self.controller.mouse_down(*cell)
                    self.table_view.setFocus()
                return True
            if event_type == QEvent.Type.MouseMove and event.buttons() & Qt.MouseButton.LeftButton:
                cell = self._cell_at(event)
                if cell is not None:
                    self.controller.mouse_enter(*cell)
                return True
            if event_type == QEvent.Type.MouseButtonDblClick:
                cell = self._cell_at(event)
                if cell is not None:
                    self.controller.double_click(*cell)
                return True
            if event_type == QEvent.Type.MouseButtonRelease and event.button() == Qt.MouseButton.LeftButton:
                press_cell, self._press_cell = self._press_cell, None
                self.listener_hub.emit(MOUSE_UP)
                cell = self._cell_at(event)
                if cell is not None and cell == press_cell:
                    self.controller.click(*cell)
                return True

        if event_type == QEvent.Type.MouseButtonRelease and self._press_cell is not None:
            # Кнопка отпущена за пределами сетки
            self._press_cell = None
            self.listener_hub.emit(MOUSE_UP)
            return False

        if event_type == QEvent.Type.KeyPress and self._owns(obj):
            key_event = to_key_event(event)
            if key_event is not None and self.listener_hub.emit(KEY_DOWN, key_event):
                return True

        if event_type == QEvent.Type.FocusOut and obj is self.delegate.active_editor:
            if not self.formula_bar.hasFocus():
                self.controller.blur()

        return super().eventFilter(obj, event)

    # --- Завершение ---
    def teardown(self):
        """Снимает фильтр событий приложения и обработчики контроллера."""
        if self._event_filter_installed:
            app = QApplication.instance()
            if app is not None:
                app.removeEventFilter(self)
            self._event_filter_installed = False
        self.controller.unsubscribe(self._on_state_changed)
        self.controller.dispose()
        logger.debug("GridEditorWidget: обработчики событий сняты.")

    def closeEvent(self, event):
        self.teardown()
        super().closeEvent(event)
