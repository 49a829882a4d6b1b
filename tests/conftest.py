# tests/conftest.py
"""
Общие фикстуры для тестов редактора отчётов.
"""
import sys
from pathlib import Path

import pytest

# Добавляем корень проекта в путь поиска модулей
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from excel_reports.core.clipboard import InMemoryClipboard
from excel_reports.core.grid_controller import GridEditorController
from excel_reports.core.listeners import ListenerHub
from excel_reports.storage.cells import Grid
from excel_reports.utils.settings import EditorSettings


@pytest.fixture
def grid():
    """Пустая сетка стандартного размера 101 x 26."""
    return Grid.empty()


@pytest.fixture
def small_grid():
    """Маленькая сетка 5 x 4 для проверок на границах."""
    return Grid.empty(rows=5, columns=4)


@pytest.fixture
def clipboard():
    return InMemoryClipboard()


@pytest.fixture
def listener_hub():
    return ListenerHub()


@pytest.fixture
def notifications():
    """Список сообщений, отправленных пользователю."""
    return []


@pytest.fixture
def controller(tmp_path, clipboard, listener_hub, notifications):
    """Контроллер с буфером обмена в памяти; экспорт - во временный каталог."""
    settings = EditorSettings.model_validate({'export': {'directory': str(tmp_path)}})
    ctrl = GridEditorController(
        settings=settings,
        clipboard=clipboard,
        listener_hub=listener_hub,
        notifier=notifications.append,
        is_mac=False,
    )
    yield ctrl
    ctrl.dispose()
