# tests/test_grid_controller.py
"""
Тесты для модуля excel_reports/core/grid_controller.py.
"""
import pytest

from excel_reports.core.grid_controller import GridEditorController, KeyEvent
from excel_reports.core.listeners import KEY_DOWN, MOUSE_UP, ListenerHub
from excel_reports.core.styles import StyleState
from excel_reports.storage.cells import CellRange, Coordinate


def ctrl(key: str) -> KeyEvent:
    return KeyEvent(key, ctrl=True)


def select_range(controller, start, end):
    """Выделение мышью: нажатие, протягивание, отпускание."""
    controller.mouse_down(*start)
    controller.mouse_enter(*end)
    controller.mouse_up()


def type_text(controller, text):
    for ch in text:
        if not controller.handle_key(KeyEvent(ch)):
            controller.update_draft(controller.editing.draft + ch)


# --- Сценарии ---

def test_status_stats_for_range(controller):
    """A1=10, B1=20, выделение A1:B1: количество 2, сумма 30, среднее 15."""
    controller.set_cell_value(1, 0, "10")
    controller.set_cell_value(1, 1, "20")
    select_range(controller, (1, 0), (1, 1))
    stats = controller.status_stats()
    assert (stats.count, stats.sum, stats.avg) == (2, 30.0, 15.0)


def test_type_and_tab_commits_and_moves_right(controller):
    """C3, ввод '5', Tab: значение записано, выделение на D3."""
    controller.click(3, 2)
    assert controller.handle_key(KeyEvent("5")) is True
    assert controller.editing.draft == "5"
    assert controller.handle_key(KeyEvent("Tab")) is True
    assert controller.grid.value(3, 2) == "5"
    assert controller.selection.selected_cell == Coordinate(3, 3)
    assert not controller.editing.is_editing


def test_merge_range(controller):
    """A1:B2 объединяется в блок 2x2 с якорем A1."""
    select_range(controller, (1, 0), (2, 1))
    assert controller.merge() is True
    grid = controller.grid
    assert (grid.get(1, 0).row_span, grid.get(1, 0).col_span) == (2, 2)
    for row, col in ((1, 1), (2, 0), (2, 1)):
        assert grid.get(row, col).merged
        assert controller.is_cell_hidden(row, col)
    assert controller.selection.selected_cell == Coordinate(1, 0)


def test_three_edits_undo_twice_redo_once(controller):
    """После 3 правок, 2 undo и 1 redo сетка равна состоянию после правки 2."""
    controller.set_cell_value(1, 0, "1")
    controller.set_cell_value(1, 1, "2")
    after_second = controller.grid
    controller.set_cell_value(1, 2, "3")
    controller.undo()
    controller.undo()
    controller.redo()
    assert controller.grid == after_second


def test_export_csv(controller, tmp_path, notifications):
    """A1='Hello, World', B1='' -> строка "Hello, World","",..."""
    controller.set_cell_value(1, 0, "Hello, World")
    path = controller.export_csv()
    assert path == tmp_path / "excel_report.csv"
    first_line = path.read_text(encoding="utf-8").split("\n")[0]
    assert first_line.startswith('"Hello, World","",')
    assert notifications[-1].variant == "success"


def test_export_csv_to_chosen_path(controller, tmp_path):
    """Путь из диалога сохранения: каталог создаётся, имя файла берётся из диалога."""
    controller.set_cell_value(1, 0, "x")
    path = controller.export_csv(tmp_path / "sub", "custom.csv")
    assert path == tmp_path / "sub" / "custom.csv"
    assert path.read_text(encoding="utf-8").startswith('"x",')


def test_default_export_path_prefills_dialog(controller, tmp_path):
    assert controller.default_export_path() == tmp_path / "excel_report.csv"


def test_status_text_without_selection_shows_zeros(controller):
    assert controller.status_text == "Среднее: 0.00    Количество: 0    Сумма: 0.00"


def test_status_text_for_non_numeric_cell_shows_zeros(controller):
    controller.set_cell_value(1, 0, "текст")
    controller.click(1, 0)
    assert controller.status_stats().count == 0
    assert controller.status_text == "Среднее: 0.00    Количество: 0    Сумма: 0.00"


def test_status_text_for_numeric_range(controller):
    controller.set_cell_value(1, 0, "10")
    controller.set_cell_value(1, 1, "20")
    select_range(controller, (1, 0), (1, 1))
    assert controller.status_text == "Среднее: 15.00    Количество: 2    Сумма: 30.00"


# --- Редактирование ---

def test_double_click_begins_edit_with_value(controller):
    controller.set_cell_value(2, 1, "abc")
    controller.double_click(2, 1)
    assert controller.state.editing_cell == Coordinate(2, 1)
    assert controller.state.draft == "abc"


def test_draft_is_not_committed_per_keystroke(controller):
    controller.click(1, 0)
    type_text(controller, "12")
    assert controller.editing.draft == "12"
    assert controller.grid.value(1, 0) == ""
    assert not controller.history.can_undo


def test_enter_commits_and_moves_down(controller):
    controller.click(1, 0)
    controller.handle_key(KeyEvent("Enter"))
    controller.update_draft("x")
    controller.handle_key(KeyEvent("Enter"))
    assert controller.grid.value(1, 0) == "x"
    assert controller.selection.selected_cell == Coordinate(2, 0)


def test_enter_at_bottom_edge_stays(controller):
    last_row = controller.grid.rows
    controller.click(last_row, 0)
    controller.handle_key(KeyEvent("7"))
    controller.handle_key(KeyEvent("Enter"))
    assert controller.grid.value(last_row, 0) == "7"
    assert controller.selection.selected_cell == Coordinate(last_row, 0)


def test_escape_cancels_edit(controller):
    controller.set_cell_value(1, 0, "keep")
    controller.click(1, 0)
    controller.handle_key(KeyEvent("z"))
    assert controller.handle_key(KeyEvent("Escape")) is True
    assert controller.grid.value(1, 0) == "keep"
    assert not controller.editing.is_editing


def test_blur_commits_draft(controller):
    controller.click(1, 0)
    controller.handle_key(KeyEvent("9"))
    assert controller.blur() is True
    assert controller.grid.value(1, 0) == "9"


def test_mouse_down_elsewhere_commits_edit(controller):
    controller.click(1, 0)
    controller.handle_key(KeyEvent("4"))
    controller.mouse_down(5, 5)
    assert controller.grid.value(1, 0) == "4"
    assert not controller.editing.is_editing


def test_commit_without_change_adds_no_history(controller):
    controller.click(1, 0)
    controller.handle_key(KeyEvent("Enter"))
    controller.handle_key(KeyEvent("Enter"))
    assert not controller.history.can_undo


# --- Клавиатура ---

@pytest.mark.parametrize("key, expected", [
    ("ArrowUp", Coordinate(4, 3)),
    ("ArrowDown", Coordinate(6, 3)),
    ("ArrowLeft", Coordinate(5, 2)),
    ("ArrowRight", Coordinate(5, 4)),
])
def test_arrow_keys_move_selection(controller, key, expected):
    controller.click(5, 3)
    assert controller.handle_key(KeyEvent(key)) is True
    assert controller.selection.selected_cell == expected


def test_arrow_at_boundary_is_noop(controller):
    controller.click(1, 0)
    assert controller.handle_key(KeyEvent("ArrowUp")) is False
    assert controller.handle_key(KeyEvent("ArrowLeft")) is False
    assert controller.selection.selected_cell == Coordinate(1, 0)


@pytest.mark.parametrize("key, attr", [("b", "bold"), ("i", "italic"), ("u", "underline")])
def test_style_shortcuts(controller, key, attr):
    controller.click(1, 0)
    assert controller.handle_key(ctrl(key)) is True
    assert getattr(controller.grid.style(1, 0), attr) is True


def test_undo_redo_shortcuts(controller):
    controller.set_cell_value(1, 0, "v")
    assert controller.handle_key(ctrl("z")) is True
    assert controller.grid.value(1, 0) == ""
    assert controller.handle_key(ctrl("y")) is True
    assert controller.grid.value(1, 0) == "v"


def test_copy_paste_shortcuts(controller, clipboard):
    controller.set_cell_value(1, 0, "a")
    controller.set_cell_value(1, 1, "b")
    select_range(controller, (1, 0), (1, 1))
    assert controller.handle_key(ctrl("c")) is True
    assert clipboard.text == "a\tb\n"

    controller.click(3, 0)
    assert controller.handle_key(ctrl("v")) is True
    assert (controller.grid.value(3, 0), controller.grid.value(3, 1)) == ("a", "b")


def test_cut_shortcut_clears_values(controller, clipboard):
    controller.set_cell_value(2, 2, "move me")
    controller.click(2, 2)
    assert controller.handle_key(ctrl("x")) is True
    assert clipboard.text == "move me"
    assert controller.grid.value(2, 2) == ""
    controller.undo()
    assert controller.grid.value(2, 2) == "move me"


def test_mac_uses_meta_modifier(clipboard):
    with GridEditorController(clipboard=clipboard, is_mac=True) as controller:
        controller.click(1, 0)
        assert controller.handle_key(KeyEvent("b", ctrl=True)) is False
        assert controller.handle_key(KeyEvent("b", meta=True)) is True
        assert controller.grid.style(1, 0).bold is True


def test_shortcuts_ignored_while_editing(controller):
    controller.click(1, 0)
    controller.handle_key(KeyEvent("a"))
    assert controller.handle_key(ctrl("b")) is False
    assert controller.editing.is_editing
    assert controller.grid.style(1, 0).bold is False


def test_keys_without_selection_are_ignored(controller):
    assert controller.handle_key(KeyEvent("a")) is False
    assert controller.handle_key(KeyEvent("ArrowDown")) is False


def test_unknown_shortcut_is_not_handled(controller):
    controller.click(1, 0)
    assert controller.handle_key(ctrl("q")) is False


# --- Стили ---

def test_toggle_style_on_range_and_toolbar_state(controller):
    controller.click(1, 0)
    controller.toggle_style("bold")
    select_range(controller, (1, 0), (1, 1))
    assert controller.style_states()["bold"] is StyleState.MIXED
    controller.toggle_style("bold")
    assert controller.style_states()["bold"] is StyleState.ON


def test_color_picker_open_and_close(controller):
    controller.click(1, 0)
    controller.open_color_picker()
    assert controller.state.show_color_picker
    controller.set_background("#FFFF00")
    assert not controller.state.show_color_picker
    assert controller.grid.style(1, 0).background_color == "#FFFF00"

    controller.open_color_picker()
    assert controller.handle_key(KeyEvent("Escape")) is True
    assert not controller.state.show_color_picker


def test_alignment_and_text_color(controller):
    controller.click(2, 0)
    controller.set_alignment("right")
    controller.set_text_color("#D00000")
    style = controller.grid.style(2, 0)
    assert (style.text_align, style.color) == ("right", "#D00000")


def test_italic_display_value(controller):
    controller.set_cell_value(1, 0, "a")
    controller.click(1, 0)
    controller.toggle_style("italic")
    assert controller.display_value(1, 0) == "\U0001D622"
    assert controller.formula_bar_text == "a"


# --- Объединение ---

def test_merge_without_range_warns(controller, notifications):
    controller.click(1, 0)
    assert controller.merge() is False
    assert notifications[-1].variant == "warning"
    assert "протяните" in notifications[-1].message


def test_unmerge(controller, notifications):
    select_range(controller, (1, 0), (2, 1))
    controller.merge()
    assert controller.unmerge() is True
    assert controller.grid.merge_blocks() == []
    assert controller.unmerge() is False
    assert notifications[-1].variant == "warning"


def test_range_over_merge_expands_stats(controller):
    controller.set_cell_value(1, 1, "5")
    select_range(controller, (1, 1), (2, 2))
    controller.merge()
    controller.set_cell_value(3, 0, "1")
    select_range(controller, (2, 0), (3, 1))
    assert controller.selection.normalized_range(controller.grid) == CellRange(1, 0, 3, 2)
    assert controller.status_stats().count == 2


# --- Строка формул ---

def test_formula_bar(controller):
    controller.set_cell_value(1, 0, "old")
    controller.click(1, 0)
    assert controller.address_label == "A1"
    assert controller.formula_bar_text == "old"
    controller.formula_bar_input("new")
    assert controller.formula_bar_text == "new"
    controller.formula_bar_commit()
    assert controller.grid.value(1, 0) == "new"


def test_address_label_for_range(controller):
    select_range(controller, (3, 1), (1, 0))
    assert controller.address_label == "A1:B3"
    assert controller.selection.active_cell == Coordinate(3, 1)


# --- Слушатели и подписки ---

def test_listeners_registered_and_disposed(listener_hub):
    controller = GridEditorController(listener_hub=listener_hub, is_mac=False)
    assert listener_hub.listener_count(MOUSE_UP) == 1
    assert listener_hub.listener_count(KEY_DOWN) == 1
    controller.dispose()
    assert listener_hub.listener_count(MOUSE_UP) == 0
    assert listener_hub.listener_count(KEY_DOWN) == 0


def test_window_mouse_up_ends_drag(controller, listener_hub):
    controller.mouse_down(1, 0)
    controller.mouse_enter(3, 3)
    assert listener_hub.emit(MOUSE_UP) is True
    assert not controller.state.is_selecting
    assert controller.state.selected_range == CellRange(1, 0, 3, 3)


def test_window_keydown_reaches_controller(controller, listener_hub):
    controller.click(2, 2)
    assert listener_hub.emit(KEY_DOWN, KeyEvent("ArrowDown")) is True
    assert controller.selection.selected_cell == Coordinate(3, 2)


def test_context_manager_disposes():
    hub = ListenerHub()
    with GridEditorController(listener_hub=hub, is_mac=False):
        assert hub.listener_count(KEY_DOWN) == 1
    assert hub.listener_count(KEY_DOWN) == 0


def test_subscribers_receive_state(controller):
    states = []
    controller.subscribe(states.append)
    controller.click(2, 3)
    assert states[-1].selected_cell == Coordinate(2, 3)
    controller.unsubscribe(states.append)
    controller.click(1, 0)
    assert states[-1].selected_cell == Coordinate(2, 3)


def test_undo_cancels_active_edit(controller):
    controller.set_cell_value(1, 0, "x")
    controller.click(1, 0)
    controller.handle_key(KeyEvent("y"))
    controller.undo()
    assert not controller.editing.is_editing
    assert controller.grid.value(1, 0) == ""
