# tests/test_history.py
"""
Тесты для модуля excel_reports/storage/history.py.
"""
import pytest

from excel_reports.storage.cells import Grid
from excel_reports.storage.history import HistoryManager


@pytest.fixture
def history(grid):
    return HistoryManager(grid)


def test_initial_state(history, grid):
    assert history.current is grid
    assert history.index == 0
    assert not history.can_undo
    assert not history.can_redo


def test_undo_redo_round_trip(history, grid):
    """После фиксации undo возвращает прежний снимок, а redo - новый."""
    edited = grid.set(1, 0, value="1")
    assert history.commit(edited) is True
    assert history.undo() is grid
    assert history.redo() is edited
    assert history.current == edited


def test_undo_and_redo_at_edges_return_none(history, grid):
    assert history.undo() is None
    history.commit(grid.set(1, 0, value="1"))
    assert history.redo() is None


def test_commit_truncates_redo_branch(history, grid):
    first = grid.set(1, 0, value="1")
    second = first.set(1, 0, value="2")
    history.commit(first)
    history.commit(second)
    history.undo()

    branch = first.set(2, 0, value="x")
    history.commit(branch)
    assert not history.can_redo
    assert history.snapshots == [grid, first, branch]


def test_commit_skips_equal_snapshot(history, grid):
    assert history.commit(Grid.empty()) is False
    assert len(history) == 1


def test_max_depth_drops_oldest(grid):
    history = HistoryManager(grid, max_depth=3)
    current = grid
    for i in range(5):
        current = current.set(1, 0, value=str(i))
        history.commit(current)
    assert len(history) == 3
    assert history.index == 2
    assert history.snapshots[0].value(1, 0) == "2"
    assert history.current.value(1, 0) == "4"


def test_invalid_max_depth():
    with pytest.raises(ValueError):
        HistoryManager(max_depth=0)

