# excel_reports/utils/__init__.py
