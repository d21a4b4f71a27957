# htbridge/core/logging_config.py
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from htbridge.core.config import settings
from htbridge.core.log_context import AdapterLogFilter

PROJECT_ROOT = Path(__file__).resolve().parents[2]
log_dir = Path(settings.LOG_DIR)
if not log_dir.is_absolute():
    log_dir = PROJECT_ROOT / log_dir
log_dir.mkdir(parents=True, exist_ok=True)
LOG_FILE_PATH = log_dir / f"{settings.ADAPTER_ID}-bridge.log"

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(adapter)s] [%(name)s]  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handlers(level: int) -> list:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    adapter_filter = AdapterLogFilter()

    file_handler = TimedRotatingFileHandler(
        LOG_FILE_PATH,
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
        delay=True,
    )
    file_handler.suffix = "%Y-%m-%d"

    console_handler = logging.StreamHandler(sys.stdout)

    handlers = [file_handler, console_handler]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(adapter_filter)
    return handlers


level = _resolve_level(settings.LOG_LEVEL)

root_logger = logging.getLogger()
root_logger.setLevel(level)

for handler in list(root_logger.handlers):
    root_logger.removeHandler(handler)

for handler in _build_handlers(level):
    root_logger.addHandler(handler)

# nats-py logs every reconnect attempt at INFO.
logging.getLogger("nats").setLevel(logging.WARNING)

logger = logging.getLogger("htbridge")

logger.info(f"✅ Logging initialized. Writing logs to: {LOG_FILE_PATH}")
logger.info(f"logging start time UTC: {datetime.now(timezone.utc).isoformat()}")

__all__ = ["logging", "logger"]
