import logging
import os
from datetime import date

LOGGER_NAME = "VendorCatalog"
LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class DailyLogFileHandler(logging.FileHandler):
    """
    Writes to <base_dir>/<YYYY>/<MM>/vendor-catalog-<YYYY-MM-DD>.log and
    switches file on the first record of a new day.
    """

    def __init__(self, base_dir, encoding="utf-8"):
        self.base_dir = base_dir
        self.day = date.today()
        super().__init__(self._path_for(self.day), encoding=encoding, delay=True)

    def _path_for(self, day):
        folder = os.path.join(self.base_dir, day.strftime("%Y"), day.strftime("%m"))
        os.makedirs(folder, exist_ok=True)
        return os.path.join(folder, f"vendor-catalog-{day.isoformat()}.log")

    def emit(self, record):
        today = date.today()
        if today != self.day:
            self.acquire()
            try:
                self.close()
                self.day = today
                self.baseFilename = os.path.abspath(self._path_for(today))
            finally:
                self.release()
        super().emit(record)


def _log_dir():
    # APP_LOG_DIR wins; otherwise storage/logs next to the app package
    return os.environ.get("APP_LOG_DIR") or os.path.abspath(
        os.path.join(os.path.dirname(__file__), "..", "..", "storage", "logs")
    )


def configure_logger():
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(os.environ.get("APP_LOG_LEVEL", "DEBUG"))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in (logging.StreamHandler(), DailyLogFileHandler(_log_dir())):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


Log = configure_logger()

__all__ = ["Log"]
