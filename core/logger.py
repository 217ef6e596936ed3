"""
Logging for xlf-auto-translate.

All module loggers hang below one application logger, which owns the two
handlers a run needs:
- stdout, INFO and above: the per-message progress a user watches
- ~/.xlf_auto_translate/logs/xlf_auto_translate.log, DEBUG and above: kept
  for diagnosing failed leaves
"""
import logging
import os
import sys

APP_LOGGER = "xlf_auto_translate"

# Per-user home for config, secrets and logs; never inside the installed package
USER_DATA_DIR = os.path.join(os.path.expanduser("~"), ".xlf_auto_translate")


def default_log_dir() -> str:
    return os.environ.get("XLF_AUTO_TRANSLATE_LOG_DIR") or os.path.join(USER_DATA_DIR, "logs")


LOG_DIR = default_log_dir()
LOG_FILE = os.path.join(LOG_DIR, "xlf_auto_translate.log")

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s() | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_console_handler = None


def _app_logger() -> logging.Logger:
    global _console_handler
    app_logger = logging.getLogger(APP_LOGGER)
    if app_logger.handlers:
        return app_logger

    app_logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    os.makedirs(LOG_DIR, exist_ok=True)
    file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    _console_handler = logging.StreamHandler(sys.stdout)
    _console_handler.setLevel(logging.INFO)
    _console_handler.setFormatter(formatter)

    app_logger.addHandler(file_handler)
    app_logger.addHandler(_console_handler)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """
    Returns the logger for a module.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A child of the application logger, so it shares its file and console output.
    """
    _app_logger()
    return logging.getLogger(f"{APP_LOGGER}.{name}")


def set_console_level(level: int):
    """Changes how chatty stdout is; the log file always gets DEBUG."""
    _app_logger()
    _console_handler.setLevel(level)


def setup_exception_hook():
    """
    Installs a global exception hook so a crash ends up in the log file too.
    Call this once at CLI / server startup.
    """
    crash_logger = get_logger("crash")

    def exception_hook(exc_type, exc_value, exc_tb):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        crash_logger.critical("Uncaught exception!", exc_info=(exc_type, exc_value, exc_tb))
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = exception_hook
