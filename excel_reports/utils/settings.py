# excel_reports/utils/settings.py
"""
Загрузка настроек редактора из YAML-файла.

Пример файла (config/grid_editor.yaml):

    grid:
      rows: 101
      columns: 26
    history:
      max_depth: 500
    export:
      filename: excel_report.csv
      directory: null
    logging:
      enabled: true
      file: logs/excel_reports.log
    ui:
      dark_mode: false
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from excel_reports.exceptions import ConfigError
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

# Столбцы отображаются одной буквой A-Z
MAX_COLUMNS = 26


class GridSettings(BaseModel):
    """Размеры сетки."""
    rows: int = Field(default=101, ge=1)
    columns: int = Field(default=MAX_COLUMNS, ge=1, le=MAX_COLUMNS)


class HistorySettings(BaseModel):
    """Глубина стека Undo/Redo. None означает неограниченную историю."""
    max_depth: Optional[int] = Field(default=500, ge=1)


class ExportSettings(BaseModel):
    filename: str = "excel_report.csv"
    directory: Optional[Path] = None


class LoggingSettings(BaseModel):
    enabled: bool = True
    file: Optional[str] = None


class UISettings(BaseModel):
    dark_mode: bool = False


class EditorSettings(BaseModel):
    """Корневая модель настроек редактора отчётов."""
    grid: GridSettings = Field(default_factory=GridSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    ui: UISettings = Field(default_factory=UISettings)


def parse_settings(raw: Optional[Dict[str, Any]]) -> EditorSettings:
    """
    Проверяет словарь настроек и возвращает EditorSettings.

    Raises:
        ConfigError: Если структура или значения настроек некорректны.
    """
    if raw is None:
        return EditorSettings()
    if not isinstance(raw, dict):
        raise ConfigError(f"Ожидался словарь настроек, получен {type(raw).__name__}.")
    try:
        return EditorSettings.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigError(f"Некорректные настройки редактора: {e}") from e


def load_settings(config_path: Optional[Union[str, Path]] = None) -> EditorSettings:
    """
    Загружает настройки из YAML-файла.

    Args:
        config_path: Путь к YAML-файлу. Если файл не существует, возвращаются
                     настройки по умолчанию.

    Returns:
        EditorSettings: Проверенные настройки.

    Raises:
        ConfigError: Если файл не читается или содержит некорректные данные.
    """
    if config_path is None:
        logger.debug("Путь к настройкам не указан, используются значения по умолчанию.")
        return EditorSettings()

    path = Path(config_path)
    if not path.exists():
        logger.info(f"Файл настроек не найден: {path}. Используются значения по умолчанию.")
        return EditorSettings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Не удалось прочитать файл настроек '{path}': {e}") from e

    settings = parse_settings(raw)
    logger.info(f"Настройки загружены из {path}.")
    return settings
