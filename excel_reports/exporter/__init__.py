# excel_reports/exporter/__init__.py
"""
Экспортёры сетки: CSV-файл и HTML для печати.
"""

from .csv_exporter import DEFAULT_EXPORT_FILENAME, export_grid_csv, serialize_grid_csv
from .html_report import render_grid_html

__all__ = ["DEFAULT_EXPORT_FILENAME", "export_grid_csv", "render_grid_html", "serialize_grid_csv"]
