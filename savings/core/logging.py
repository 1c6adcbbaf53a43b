import logging
import json
from logging import Formatter

from savings.core.config import settings
from savings.utils.serialization import recursive_normalize

class JsonFormatter(Formatter):
    """Средство форматирования JSON для журналов."""

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if hasattr(record, "extra"):
            log_data.update(recursive_normalize(record.extra))

        if record.exc_info:
            log_data["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)

def setup_logging():
    """Настраивает ведение журнала с помощью JSON formatter."""
    root_logger = logging.getLogger()

    if root_logger.hasHandlers():
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.APP.LOG_LEVEL)
