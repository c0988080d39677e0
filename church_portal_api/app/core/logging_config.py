"""
Logging configuration for the Church Portal API.

``setup_logging`` attaches a console handler and, when ``LOG_FILE`` is
set, a file handler to the root logger.  Format, date format and level
come from ``Settings``.  The handlers are named so a second call (one
per ``create_app``) recognises its own setup and leaves it alone, even
when other handlers such as pytest's capture handler are attached.

A log file that cannot be opened is not fatal: a warning is logged and
the application keeps logging to the console.
"""

import logging
from pathlib import Path
from typing import Optional


DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER_NAME = "church_portal_api.console"
FILE_HANDLER_NAME = "church_portal_api.file"


def _open_log_file(logfile: str, formatter: logging.Formatter) -> Optional[logging.Handler]:
    """Return a file handler for ``logfile``, creating missing directories."""
    log_path = Path(logfile).expanduser().resolve()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("Cannot write log file %s (%s); logging to console only", log_path, e)
        return None
    handler.set_name(FILE_HANDLER_NAME)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    fmt: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATE_FORMAT,
    logger: Optional[logging.Logger] = None,
) -> logging.Logger:
    """Configure ``logger`` (the root logger by default) and return it.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive; unknown names mean ``INFO``.
    logfile : Optional[str]
        Path of a log file.  Parent directories are created on demand.
    fmt, datefmt : str
        ``logging.Formatter`` format strings.
    logger : Optional[logging.Logger]
        Logger to configure instead of the root logger.
    """
    target = logger if logger is not None else logging.getLogger()
    if any(handler.get_name() == CONSOLE_HANDLER_NAME for handler in target.handlers):
        return target

    target.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    target.addHandler(console_handler)

    if logfile:
        file_handler = _open_log_file(logfile, formatter)
        if file_handler is not None:
            target.addHandler(file_handler)
    return target
