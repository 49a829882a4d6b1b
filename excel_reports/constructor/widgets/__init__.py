# excel_reports/constructor/widgets/__init__.py
