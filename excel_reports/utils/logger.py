# excel_reports/utils/logger.py
"""
Модуль для настройки и предоставления логгера для всего редактора отчётов.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# --- Настройки логгера ---
# Имя корневого логгера приложения
ROOT_LOGGER_NAME = "excel_reports"

BASE_LOG_LEVEL = logging.DEBUG

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Уровень логирования для файлового хендлера (может отличаться от консольного)
FILE_LOG_LEVEL = logging.DEBUG

# Уровень логирования для консольного хендлера
CONSOLE_LOG_LEVEL = logging.INFO

# --- Глобальное состояние логирования ---
_LOGGING_ENABLED = True

_logger_instance: Optional[logging.Logger] = None

_log_file_path: Optional[str] = None


def setup_logger(log_file_path: Optional[str] = None, force_recreate: bool = False) -> logging.Logger:
    """
    Настраивает и возвращает корневой логгер приложения.

    Вызывается один раз при запуске (в main.py). Последующие вызовы get_logger
    возвращают дочерние логгеры, наследующие эти настройки.

    Args:
        log_file_path (Optional[str]): Путь к файлу лога. Если None, логирование в файл отключено.
        force_recreate (bool): Если True, заново настраивает хендлеры (используется в тестах).

    Returns:
        logging.Logger: Настроенный корневой логгер приложения.
    """
    global _logger_instance, _log_file_path

    if _logger_instance is not None and not force_recreate:
        return _logger_instance

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(BASE_LOG_LEVEL if _LOGGING_ENABLED else logging.CRITICAL + 1)

    # Очистка хендлеров, чтобы избежать дублирования сообщений при повторной настройке
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    # --- Файловый хендлер ---
    _log_file_path = None
    if log_file_path and _LOGGING_ENABLED:
        try:
            Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file_path, mode='a', encoding='utf-8')
            file_handler.setLevel(FILE_LOG_LEVEL)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            _log_file_path = log_file_path
            logger.debug(f"FileHandler добавлен. Логи будут записываться в: {log_file_path}")
        except OSError as e:
            # Ошибка файла лога не должна прерывать запуск редактора
            print(f"Ошибка при настройке FileHandler для лога '{log_file_path}': {e}", file=sys.stderr)

    # --- Консольный хендлер ---
    if _LOGGING_ENABLED:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(CONSOLE_LOG_LEVEL)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
        logger.debug("ConsoleHandler добавлен.")

    _logger_instance = logger

    logger.info(f"Корневой логгер приложения '{ROOT_LOGGER_NAME}' успешно настроен.")
    if _log_file_path:
        logger.info(f"Логирование в файл включено: {_log_file_path}")
    elif _LOGGING_ENABLED:
        logger.info("Логирование в файл отключено.")

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """
    Возвращает логгер для конкретного модуля.

    Args:
        module_name (str): Имя модуля, обычно __name__.

    Returns:
        logging.Logger: Дочерний логгер корневого логгера приложения.
    """
    # Модули пакета уже начинаются с "excel_reports."
    if module_name == ROOT_LOGGER_NAME or module_name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(module_name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")


def get_log_file_path() -> Optional[str]:
    """Возвращает путь к файлу лога, если он был настроен."""
    return _log_file_path


def set_logging_enabled(enabled: bool):
    """
    Включает или отключает логирование для всего приложения.

    Args:
        enabled (bool): True для включения, False для отключения.
    """
    global _LOGGING_ENABLED
    _LOGGING_ENABLED = enabled
    logger_instance = logging.getLogger(ROOT_LOGGER_NAME)
    level_to_set = BASE_LOG_LEVEL if enabled else logging.CRITICAL + 1
    for handler in logger_instance.handlers:
        handler.setLevel(level_to_set)
    logger_instance.setLevel(level_to_set)
    if _logger_instance:
        _logger_instance.info(f"Логирование {'включено' if enabled else 'отключено'}.")


def is_logging_enabled() -> bool:
    """Проверяет, включено ли логирование."""
    return _LOGGING_ENABLED
