import logging
import os
import sys
from logging import Handler

from tqdm import tqdm

LOGGER_NAME = "ddtr"


class TqdmLoggingHandler(Handler):
    """Send ddtr log lines to stderr via tqdm.write, above the dispatcher's progress bar."""
    def __init__(self, level=logging.NOTSET):
        super().__init__(level)

    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception:
            self.handleError(record)


def setup_logger(log_level_str: str, log_file_path: str, log_to_console: bool) -> logging.Logger:
    """
    Configure the ``ddtr`` logger from the ``logLevel``, ``logFilePath`` and
    ``logToConsole`` settings.

    The config loader, Baidu client, dispatcher, writer and batch runner all log
    through children of this logger. Calling it again replaces the handlers
    from the previous call and closes them, so records are never duplicated.

    Args:
        log_level_str: Level name such as 'INFO'. Unknown names fall back to INFO.
        log_file_path: Log file, created with its directory on first use. Empty means no file.
        log_to_console: Mirror records to stderr while translations are in flight.

    Returns:
        The ``ddtr`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)

    log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    logger.setLevel(log_level)

    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    # Records stay out of the root logger and the CLI's stdout report.
    logger.propagate = False

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    # --- File Handler ---
    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    # --- End File Handler ---

    # --- Console Handler ---
    if log_to_console:
        tqdm_handler = TqdmLoggingHandler()
        tqdm_handler.setFormatter(formatter)
        logger.addHandler(tqdm_handler)
    # --- End Console Handler ---

    return logger
