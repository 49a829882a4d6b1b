# excel_reports/utils/app_paths.py
"""
Модуль для определения путей к системным каталогам приложения.
Используется для каталога экспорта по умолчанию и файла настроек пользователя.
"""
import os
import platform
from pathlib import Path

from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

APP_NAME = "ExcelReports"


def get_app_data_directory(app_name: str = APP_NAME, create: bool = True) -> Path:
    """
    Определяет стандартный путь к каталогу данных приложения в зависимости от ОС.

    Args:
        app_name (str): Имя приложения, используется для создания подкаталога.
        create (bool): Создать каталог, если он не существует.

    Returns:
        Path: Путь к каталогу данных приложения.
    """
    system = platform.system()

    if system == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / app_name
    elif system == "Linux":
        # XDG Base Directory Specification
        xdg_data_home = os.environ.get("XDG_DATA_HOME")
        base_path = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
        app_dir = base_path / app_name
    elif system == "Darwin":
        app_dir = Path.home() / "Library" / "Application Support" / app_name
    else:
        logger.warning(f"Неизвестная ОС ({system}), используем fallback путь.")
        app_dir = Path.home() / f".{app_name.lower()}"

    if create:
        try:
            app_dir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Каталог данных приложения готов: {app_dir}")
        except OSError as e:
            logger.error(f"Не удалось создать каталог данных приложения '{app_dir}': {e}")

    return app_dir


def get_default_export_directory() -> Path:
    """Каталог, куда по умолчанию сохраняются выгрузки CSV."""
    return get_app_data_directory() / "exports"


def get_default_config_path() -> Path:
    """Путь к пользовательскому файлу настроек редактора."""
    return get_app_data_directory(create=False) / "grid_editor.yaml"
