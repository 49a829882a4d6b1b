# excel_reports/exporter/csv_exporter.py
"""
Экспорт сетки в CSV.

Выгружается вся сетка фиксированного размера (по умолчанию 101 x 26), каждое
поле в кавычках, кавычки внутри значения удваиваются. Стили и объединения
не экспортируются.
"""

import csv
import io
from pathlib import Path
from typing import Optional, Union

from excel_reports.exceptions import ExportError
from excel_reports.storage.cells import Grid
from excel_reports.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_EXPORT_FILENAME = "excel_report.csv"


def serialize_grid_csv(grid: Grid) -> str:
    """Возвращает содержимое всей сетки в формате CSV."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')
    for row in range(1, grid.rows + 1):
        writer.writerow([grid.value(row, col) for col in range(grid.columns)])
    return output.getvalue()


def export_grid_csv(grid: Grid, directory: Optional[Union[str, Path]] = None,
                    filename: str = DEFAULT_EXPORT_FILENAME) -> Path:
    """
    Сохраняет сетку в CSV-файл (UTF-8).

    Args:
        grid (Grid): Снимок сетки. Не изменяется.
        directory: Каталог выгрузки. Если None, используется каталог экспорта приложения.
        filename (str): Имя файла.

    Returns:
        Path: Путь к созданному файлу.

    Raises:
        ExportError: Если файл не удалось записать.
    """
    if directory is None:
        from excel_reports.utils.app_paths import get_default_export_directory
        directory = get_default_export_directory()

    output_path = Path(directory) / filename
    logger.info(f"Начало экспорта сетки в CSV: {output_path}")

    content = serialize_grid_csv(grid)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Ошибка записи CSV '{output_path}': {e}", exc_info=True)
        raise ExportError(f"Не удалось сохранить файл '{output_path}': {e}") from e

    logger.info(f"Экспорт завершён: {output_path} ({grid.rows} строк).")
    return output_path
