# tests/test_app_paths.py
"""
Тесты для модуля excel_reports/utils/app_paths.py.
"""
from excel_reports.utils import app_paths


def test_linux_uses_xdg_data_home(tmp_path, monkeypatch):
    monkeypatch.setattr(app_paths.platform, "system", lambda: "Linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    app_dir = app_paths.get_app_data_directory()
    assert app_dir == tmp_path / app_paths.APP_NAME
    assert app_dir.is_dir()


def test_default_export_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(app_paths.platform, "system", lambda: "Linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert app_paths.get_default_export_directory() == tmp_path / app_paths.APP_NAME / "exports"
    assert app_paths.get_default_config_path().name == "grid_editor.yaml"


def test_unknown_os_fallback(tmp_path, monkeypatch):
    monkeypatch.setattr(app_paths.platform, "system", lambda: "Plan9")
    monkeypatch.setattr(app_paths.Path, "home", classmethod(lambda cls: tmp_path))
    app_dir = app_paths.get_app_data_directory(create=False)
    assert app_dir == tmp_path / ".excelreports"
    assert not app_dir.exists()
