#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CLI точка входа в редактор отчётов Excel.
Загружает настройки, настраивает логирование и запускает графический интерфейс.
"""

import argparse
import sys
from pathlib import Path

# Корень проекта в пути поиска модулей (запуск как python main.py)
sys.path.insert(0, str(Path(__file__).parent))

from excel_reports import __version__
from excel_reports.exceptions import ConfigError
from excel_reports.utils.app_paths import get_default_config_path
from excel_reports.utils.logger import get_logger, set_logging_enabled, setup_logger
from excel_reports.utils.settings import load_settings

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Отчёты Excel - табличный редактор с форматированием, объединением ячеек и экспортом в CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:
  python main.py
  python main.py --config config/grid_editor.yaml
  python main.py --log-file ./logs/editor.log
  python main.py --no-log --dark
        """
    )

    parser.add_argument(
        '--config',
        metavar='FILE',
        help='Путь к YAML-файлу настроек (по умолчанию: файл в каталоге данных приложения)'
    )

    parser.add_argument(
        '--log-file',
        metavar='FILE',
        help='Путь к файлу лога (переопределяет logging.file из настроек)'
    )

    parser.add_argument(
        '--no-log',
        action='store_true',
        help='Отключить логирование'
    )

    parser.add_argument(
        '--dark',
        action='store_true',
        help='Тёмная тема интерфейса'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def main(argv=None) -> int:
    """Главная функция точки входа. Возвращает код завершения."""
    args = build_parser().parse_args(argv)

    config_path = args.config or get_default_config_path()
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        print(f"Ошибка: {e}", file=sys.stderr)
        return 2

    if args.no_log or not settings.logging.enabled:
        set_logging_enabled(False)
    else:
        setup_logger(args.log_file or settings.logging.file)

    if args.dark:
        settings.ui.dark_mode = True

    logger.info(f"Запуск редактора отчётов {__version__}...")
    try:
        from excel_reports.constructor.gui_app import main as gui_main
        return gui_main(settings)
    except Exception as e:
        logger.critical(f"Критическая ошибка при запуске GUI: {e}", exc_info=True)
        print(f"Ошибка: Критическая ошибка при запуске GUI: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
