import logging
from typing import Optional

from htbridge.core.config import settings


class AdapterLogFilter(logging.Filter):
    """Stamps every record with the adapter id so several bridges can share a log sink."""

    def __init__(self, adapter_id: Optional[str] = None):
        super().__init__()
        self.adapter_id = adapter_id or settings.ADAPTER_ID

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "adapter"):
            record.adapter = self.adapter_id
        return True
