# excel_reports/core/grid_controller.py
"""
Центральный контроллер табличного редактора.

Координирует выделение, редактирование, стили, объединения, буфер обмена,
историю и экспорт. Всё переходное состояние принадлежит контроллеру и
публикуется наружу одним неизменяемым снимком GridEditorState.
"""

import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from excel_reports.core import merge as merge_engine
from excel_reports.core import styles as style_engine
from excel_reports.core.clipboard import ClipboardBackend, ClipboardBridge, InMemoryClipboard
from excel_reports.core.editing import EditingStateMachine
from excel_reports.core.listeners import KEY_DOWN, MOUSE_UP, ListenerHub
from excel_reports.core.selection import SelectionController
from excel_reports.core.statistics import StatusStats, compute_stats, format_stats
from excel_reports.exceptions import ClipboardError, ExportError, MergeError
from excel_reports.exporter.csv_exporter import export_grid_csv
from excel_reports.storage.cells import CellRange, Coordinate, Grid
from excel_reports.storage.history import HistoryManager
from excel_reports.utils.app_paths import get_default_export_directory
from excel_reports.utils.logger import get_logger
from excel_reports.utils.settings import EditorSettings

logger = get_logger(__name__)


class KeyEvent(NamedTuple):
    """Нажатие клавиши. key - имя клавиши ('Enter', 'ArrowUp') или печатный символ."""
    key: str
    ctrl: bool = False
    meta: bool = False
    alt: bool = False
    shift: bool = False


class Notification(NamedTuple):
    """Сообщение пользователю (variant: info, warning, error, success)."""
    title: str
    message: str
    variant: str = "info"


@dataclass(frozen=True)
class GridEditorState:
    """Снимок состояния редактора для отрисовки."""
    grid: Grid
    selected_cell: Optional[Coordinate]
    selected_range: Optional[CellRange]
    is_selecting: bool
    editing_cell: Optional[Coordinate]
    draft: str
    show_color_picker: bool
    can_undo: bool
    can_redo: bool


ARROW_KEYS: Dict[str, Tuple[int, int]] = {
    "ArrowUp": (-1, 0),
    "ArrowDown": (1, 0),
    "ArrowLeft": (0, -1),
    "ArrowRight": (0, 1),
}


class GridEditorController:
    """
    Контроллер одной сетки.

    Обработчики глобальных событий (отпускание мыши, клавиатура) регистрируются
    в ListenerHub при создании и снимаются в dispose(). Контроллер можно
    использовать как контекстный менеджер.
    """

    def __init__(self,
                 settings: Optional[EditorSettings] = None,
                 clipboard: Optional[ClipboardBackend] = None,
                 listener_hub: Optional[ListenerHub] = None,
                 notifier: Optional[Callable[[Notification], None]] = None,
                 is_mac: Optional[bool] = None):
        self.settings = settings or EditorSettings()
        initial = Grid.empty(self.settings.grid.rows, self.settings.grid.columns)
        self.history = HistoryManager(initial, max_depth=self.settings.history.max_depth)
        self.selection = SelectionController()
        self.editing = EditingStateMachine()
        self.clipboard = ClipboardBridge(clipboard or InMemoryClipboard())
        self.notifier = notifier
        self.is_mac = platform.system() == "Darwin" if is_mac is None else is_mac
        self.show_color_picker = False
        self._subscribers: List[Callable[[GridEditorState], None]] = []

        self._hub = listener_hub
        if self._hub is not None:
            self._hub.add_listener(MOUSE_UP, self._on_window_mouse_up)
            self._hub.add_listener(KEY_DOWN, self.handle_key)

        logger.debug(f"GridEditorController инициализирован: сетка {initial.rows}x{initial.columns}.")

    # --- Жизненный цикл ---
    def dispose(self):
        """Снимает глобальные обработчики событий."""
        if self._hub is not None:
            self._hub.remove_listener(MOUSE_UP, self._on_window_mouse_up)
            self._hub.remove_listener(KEY_DOWN, self.handle_key)
            self._hub = None
            logger.debug("GridEditorController: глобальные обработчики сняты.")
        self._subscribers.clear()

    def __enter__(self) -> "GridEditorController":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False

    # --- Состояние ---
    @property
    def grid(self) -> Grid:
        return self.history.current

    @property
    def state(self) -> GridEditorState:
        return GridEditorState(
            grid=self.grid,
            selected_cell=self.selection.selected_cell,
            selected_range=self.selection.selected_range,
            is_selecting=self.selection.is_selecting,
            editing_cell=self.editing.cell,
            draft=self.editing.draft,
            show_color_picker=self.show_color_picker,
            can_undo=self.history.can_undo,
            can_redo=self.history.can_redo,
        )

    def subscribe(self, callback: Callable[[GridEditorState], None]):
        """Подписка на изменения состояния (для перерисовки представления)."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[GridEditorState], None]):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _changed(self):
        state = self.state
        for callback in list(self._subscribers):
            callback(state)

    def _notify_user(self, title: str, message: str, variant: str = "info"):
        log = logger.warning if variant in ("warning", "error") else logger.info
        log(f"{title}: {message}")
        if self.notifier is not None:
            self.notifier(Notification(title, message, variant))

    def _commit(self, grid: Grid) -> bool:
        return self.history.commit(grid)

    # --- Мышь ---
    def mouse_down(self, row: int, col: int):
        # Клик по другой ячейке снимает фокус с поля ввода, черновик фиксируется
        self.commit_edit()
        self.selection.mouse_down(row, col, self.grid)
        self._changed()

    def mouse_enter(self, row: int, col: int):
        if self.selection.mouse_enter(row, col):
            self._changed()

    def mouse_up(self) -> bool:
        if self.selection.mouse_up():
            self._changed()
            return True
        return False

    def _on_window_mouse_up(self, *args) -> bool:
        # Кнопка может быть отпущена за пределами сетки
        return self.mouse_up()

    def click(self, row: int, col: int):
        self.commit_edit()
        self.selection.click(row, col, self.grid)
        self._changed()

    def double_click(self, row: int, col: int):
        self.click(row, col)
        self.begin_edit()

    # --- Редактирование ---
    def begin_edit(self) -> bool:
        """Режим редактирования для активной ячейки; поле заполняется текущим значением."""
        cell = self._active_anchor()
        if cell is None:
            return False
        self.selection.click(cell.row, cell.col, self.grid)
        self.editing.begin(cell, self.grid.value(cell.row, cell.col))
        self._changed()
        return True

    def begin_overwrite(self, text: str) -> bool:
        """Ввод символа без режима редактирования: символ заменяет содержимое ячейки."""
        cell = self._active_anchor()
        if cell is None:
            return False
        self.selection.click(cell.row, cell.col, self.grid)
        self.editing.begin_overwrite(cell, text, self.grid.value(cell.row, cell.col))
        self._changed()
        return True

    def update_draft(self, text: str, caret: Optional[int] = None) -> bool:
        if self.editing.update_draft(text, caret):
            self._changed()
            return True
        return False

    def commit_edit(self, move: Optional[Tuple[int, int]] = None) -> bool:
        """
        Фиксирует черновик в сетке и историю.

        Args:
            move: Сдвиг выделения после фиксации, например (1, 0) для Enter.
                  На границе сетки выделение остаётся на месте.
        """
        result = self.editing.commit()
        if result is None:
            return False
        cell, value = result
        if self.grid.value(cell.row, cell.col) != value:
            self._commit(self.grid.set(cell.row, cell.col, value=value))
        self.selection.click(cell.row, cell.col, self.grid)
        if move is not None:
            self.selection.move(move[0], move[1], self.grid)
        self._changed()
        return True

    def cancel_edit(self) -> Optional[str]:
        """Отмена редактирования без записи в историю; возвращает исходное значение."""
        original = self.editing.cancel()
        if original is not None:
            self._changed()
        return original

    def blur(self) -> bool:
        return self.commit_edit()

    def set_cell_value(self, row: int, col: int, value: str) -> bool:
        """Программная запись значения одной ячейки (одна запись в истории)."""
        anchor = self.grid.merge_anchor_of(row, col)
        recorded = self._commit(self.grid.set(anchor.row, anchor.col, value=value))
        self._changed()
        return recorded

    # --- Строка формул ---
    @property
    def address_label(self) -> str:
        return self.selection.label

    @property
    def formula_bar_text(self) -> str:
        if self.editing.is_editing:
            return self.editing.draft
        cell = self._active_anchor()
        if cell is None:
            return ""
        return self.grid.value(cell.row, cell.col)

    def formula_bar_input(self, text: str) -> bool:
        if not self.editing.is_editing and not self.begin_edit():
            return False
        return self.update_draft(text)

    def formula_bar_commit(self) -> bool:
        return self.commit_edit()

    # --- Навигация ---
    def move_selection(self, d_row: int, d_col: int) -> bool:
        moved = self.selection.move(d_row, d_col, self.grid)
        if moved:
            self._changed()
        return moved

    def _active_anchor(self) -> Optional[Coordinate]:
        cell = self.selection.active_cell
        if cell is None:
            return None
        return self.grid.merge_anchor_of(cell.row, cell.col)

    # --- Клавиатура ---
    def handle_key(self, event: KeyEvent) -> bool:
        """
        Обрабатывает нажатие клавиши.

        Returns:
            bool: True, если событие обработано сеткой.
        """
        key = event.key

        if key == "Escape":
            handled = False
            if self.show_color_picker:
                self.show_color_picker = False
                handled = True
            if self.editing.is_editing:
                self.editing.cancel()
                handled = True
            if handled:
                self._changed()
            return handled

        mod = event.meta if self.is_mac else event.ctrl

        if self.editing.is_editing:
            # Сочетания клавиш при редактировании обрабатывает поле ввода
            if mod:
                return False
            if key == "Enter":
                return self.commit_edit(move=(1, 0))
            if key == "Tab":
                return self.commit_edit(move=(0, 1))
            return False

        if mod:
            action = self._shortcuts().get(key.lower())
            if action is None:
                return False
            action()
            return True

        if event.ctrl or event.meta or event.alt:
            return False

        if self.selection.active_cell is None:
            return False

        if key == "Enter":
            return self.begin_edit()
        if key in ARROW_KEYS:
            return self.move_selection(*ARROW_KEYS[key])
        if len(key) == 1 and key.isprintable():
            return self.begin_overwrite(key)
        return False

    def _shortcuts(self) -> Dict[str, Callable[[], object]]:
        return {
            "c": self.copy,
            "x": self.cut,
            "v": self.paste,
            "z": self.undo,
            "y": self.redo,
            "b": lambda: self.toggle_style("bold"),
            "i": lambda: self.toggle_style("italic"),
            "u": lambda: self.toggle_style("underline"),
        }

    # --- Стили ---
    def _apply_to_selection(self, operation: Callable[[Grid, List[Coordinate]], Grid]) -> bool:
        # Нажатие кнопки панели снимает фокус с поля ввода
        self.commit_edit()
        cells = self.selection.target_cells(self.grid)
        if not cells:
            return False
        recorded = self._commit(operation(self.grid, cells))
        self._changed()
        return recorded

    def toggle_style(self, key: str) -> bool:
        return self._apply_to_selection(lambda grid, cells: style_engine.toggle_style(grid, cells, key))

    def set_alignment(self, align: str) -> bool:
        return self._apply_to_selection(lambda grid, cells: style_engine.set_alignment(grid, cells, align))

    def set_background(self, color: Optional[str]) -> bool:
        self.show_color_picker = False
        return self._apply_to_selection(lambda grid, cells: style_engine.set_background(grid, cells, color))

    def set_text_color(self, color: Optional[str]) -> bool:
        return self._apply_to_selection(lambda grid, cells: style_engine.set_text_color(grid, cells, color))

    def style_states(self) -> Dict[str, style_engine.StyleState]:
        return style_engine.style_states(self.grid, self.selection.target_cells(self.grid))

    def open_color_picker(self):
        self.show_color_picker = not self.show_color_picker
        self._changed()

    def close_color_picker(self):
        if self.show_color_picker:
            self.show_color_picker = False
            self._changed()

    # --- Объединение ---
    def merge(self) -> bool:
        self.commit_edit()
        cell_range = self.selection.normalized_range(self.grid)
        if cell_range is None:
            self._notify_user("Объединение ячеек", "Выделите диапазон ячеек для объединения (нажмите и протяните).", "warning")
            return False
        try:
            new_grid = merge_engine.merge_cells(self.grid, cell_range)
        except MergeError as e:
            self._notify_user("Объединение ячеек", str(e), "warning")
            return False
        self._commit(new_grid)
        anchor = cell_range.top_left
        self.selection.click(anchor.row, anchor.col, self.grid)
        self._changed()
        return True

    def unmerge(self) -> bool:
        self.commit_edit()
        cell_range = self.selection.target_range(self.grid)
        if cell_range is None:
            self._notify_user("Разъединение ячеек", "Выделите объединённые ячейки.", "warning")
            return False
        try:
            new_grid = merge_engine.unmerge_cells(self.grid, cell_range)
        except MergeError as e:
            self._notify_user("Разъединение ячеек", str(e), "warning")
            return False
        self._commit(new_grid)
        self._changed()
        return True

    # --- Буфер обмена ---
    def copy(self) -> bool:
        cell_range = self.selection.target_range(self.grid)
        if cell_range is None:
            return False
        try:
            self.clipboard.copy(self.grid, cell_range)
        except ClipboardError as e:
            self._notify_user("Копирование", f"Буфер обмена недоступен: {e}", "warning")
            return False
        return True

    def cut(self) -> bool:
        cell_range = self.selection.target_range(self.grid)
        if cell_range is None:
            return False
        try:
            new_grid = self.clipboard.cut(self.grid, cell_range, self.selection.target_cells(self.grid))
        except ClipboardError as e:
            self._notify_user("Вырезание", f"Буфер обмена недоступен: {e}", "warning")
            return False
        self._commit(new_grid)
        self._changed()
        return True

    def paste(self) -> bool:
        anchor = self._active_anchor()
        if anchor is None:
            return False
        try:
            new_grid = self.clipboard.paste(self.grid, anchor)
        except ClipboardError as e:
            self._notify_user("Вставка", f"Буфер обмена недоступен: {e}", "warning")
            return False
        self._commit(new_grid)
        self._changed()
        return True

    # --- История ---
    def undo(self) -> bool:
        self.editing.cancel()
        restored = self.history.undo()
        self._changed()
        return restored is not None

    def redo(self) -> bool:
        self.editing.cancel()
        restored = self.history.redo()
        self._changed()
        return restored is not None

    # --- Экспорт ---
    def default_export_path(self) -> Path:
        """Путь, который предлагается в диалоге сохранения."""
        export_settings = self.settings.export
        directory = export_settings.directory
        if directory is None:
            directory = get_default_export_directory()
        return Path(directory) / export_settings.filename

    def export_csv(self, directory: Optional[Path] = None, filename: Optional[str] = None) -> Optional[Path]:
        """Сохраняет сетку в CSV. Без аргументов используются каталог и имя файла из настроек."""
        export_settings = self.settings.export
        target_dir = directory if directory is not None else export_settings.directory
        try:
            path = export_grid_csv(self.grid, target_dir, filename or export_settings.filename)
        except ExportError as e:
            self._notify_user("Экспорт", str(e), "error")
            return None
        self._notify_user("Экспорт", f"Файл сохранён: {path}", "success")
        return path

    # --- Производные значения ---
    def status_stats(self) -> StatusStats:
        cell_range = self.selection.normalized_range(self.grid)
        if cell_range is not None:
            return compute_stats(self.grid, cell_range.coordinates())
        anchor = self._active_anchor()
        if anchor is not None:
            return compute_stats(self.grid, [anchor])
        return StatusStats()

    @property
    def status_text(self) -> str:
        """Текст строки состояния; при пустом выделении - нули."""
        return format_stats(self.status_stats())

    def display_value(self, row: int, col: int) -> str:
        return style_engine.display_value(self.grid.get(row, col))

    def is_cell_hidden(self, row: int, col: int) -> bool:
        return self.grid.get(row, col).is_hidden
