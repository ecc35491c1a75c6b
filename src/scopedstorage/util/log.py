import logging

from rich.console import Console
from rich.logging import RichHandler

_logger = logging.getLogger("scopedstorage")


def _create_rich_handler():
    console = Console(stderr=True)
    h = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=True,
    )
    h.setFormatter(logging.Formatter("%(message)s"))
    return h


_handler = _create_rich_handler()
_logger.setLevel(logging.INFO)
_logger.propagate = False
_logger.addHandler(_handler)


def _log(level, msg, *args, exc_info=None):
    _logger.log(level, msg, *args, exc_info=exc_info)


def debug(msg, *args, exc_info=None):
    _log(logging.DEBUG, msg, *args, exc_info=exc_info)


def info(msg, *args):
    _log(logging.INFO, msg, *args)


def warning(msg, *args):
    _log(logging.WARNING, msg, *args)


def error(msg, *args, exc_info=None):
    _log(logging.ERROR, msg, *args, exc_info=exc_info)


def set_default_level(level):
    if isinstance(level, str):
        level = level.upper()
    _logger.setLevel(level)