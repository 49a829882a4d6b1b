# excel_reports/core/statistics.py
"""
Сводка для строки состояния: количество, сумма и среднее числовых значений
в выделении.
"""

import math
from typing import Iterable, NamedTuple, Optional

from excel_reports.storage.cells import Coordinate, Grid


class StatusStats(NamedTuple):
    count: int = 0
    sum: float = 0.0
    avg: float = 0.0


def parse_number(raw: str) -> Optional[float]:
    """
    Разбирает число с учётом локали: допускается ',' вместо '.' как
    десятичный разделитель. Пустые и нечисловые строки дают None.
    """
    text = str(raw).strip()
    if not text or '_' in text:
        return None
    try:
        number = float(text.replace(',', '.', 1))
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def compute_stats(grid: Grid, cells: Iterable[Coordinate]) -> StatusStats:
    values = []
    for coord in cells:
        number = parse_number(grid.value(coord.row, coord.col))
        if number is not None:
            values.append(number)
    count = len(values)
    total = math.fsum(values)
    return StatusStats(count=count, sum=total, avg=total / count if count else 0.0)


def format_stats(stats: StatusStats) -> str:
    return f"Среднее: {stats.avg:.2f}    Количество: {stats.count}    Сумма: {stats.sum:.2f}"
