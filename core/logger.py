"""Application-wide logging setup."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FILE = 'pomodoro_timer.log'
_MAX_BYTES = 1024 * 1024  # 1 MB
_BACKUP_COUNT = 3
_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s] %(message)s'
_DATE_FORMAT = '%Y-%m-%dT%H:%M:%S'

STREAM_HANDLER_NAME = 'pomodoro-stderr'
FILE_HANDLER_NAME = 'pomodoro-file'


def setup_logging(
    log_dir: Optional[Path] = None,
    level: Union[int, str] = logging.INFO
) -> logging.Logger:
    """
    Configure the root logger with a stderr handler and, when log_dir is
    given, a rotating log file. Falls back to stderr only if the file
    cannot be opened. Calling it again replaces the handlers it added.

    Returns:
        The configured root logger.
    """
    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    for handler in list(root.handlers):
        if handler.get_name() in (STREAM_HANDLER_NAME, FILE_HANDLER_NAME):
            root.removeHandler(handler)
            handler.close()

    stream = logging.StreamHandler(sys.stderr)
    stream.set_name(STREAM_HANDLER_NAME)
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if log_dir is not None:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                Path(log_dir) / LOG_FILE,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding='utf-8',
            )
        except OSError as e:
            root.warning("Could not open log file in %s: %s", log_dir, e)
        else:
            file_handler.set_name(FILE_HANDLER_NAME)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    return root
