"""Logger with level-colored terminal output."""
import logging
import sys

from resourcescope.settings import default_settings

COLORS = {
    'DEBUG': '\033[34m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[95m',
}
RESET = '\033[0m'

PACKAGE_LOGGER = 'resourcescope'
DEFAULT_LEVEL = 'WARNING'


class ColorizedFormatter(logging.Formatter):
    def __init__(self, use_color: bool = True):
        super().__init__(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        )
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_color:
            return message
        color = COLORS.get(record.levelname)
        if color is None:
            return message
        return color + message + RESET


def _configured_level() -> tuple[str, ValueError | None]:
    try:
        return default_settings().log_level, None
    except ValueError as error:
        return DEFAULT_LEVEL, error


def package_logger() -> logging.Logger:
    """
    The single handler lives on the package logger, which does not propagate,
    so every module logger below it writes each record exactly once. Colors are
    used only when stderr is a terminal.

    Invalid environment settings must not break importing the package, so the
    level falls back to WARNING and the problem is logged instead.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if any(getattr(handler, '_colorized', False) for handler in logger.handlers):
        return logger
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorizedFormatter(use_color=sys.stderr.isatty()))
    handler._colorized = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    level, error = _configured_level()
    logger.setLevel(level)
    if error is not None:
        logger.warning('Invalid settings in the environment (%s), logging at %s.', error, level)
    return logger


def colorized_logger(name: str) -> logging.Logger:
    package_logger()
    return logging.getLogger(name)
