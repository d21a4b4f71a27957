import json
import logging
from typing import Optional, Union

import nats

from htbridge.core.config import settings

logging = logging.getLogger(__name__)


class NATSClient:
    def __init__(self, url: Optional[str] = None):
        self.url = url or settings.NATS_URL
        self.nc = None

    @property
    def is_connected(self) -> bool:
        return self.nc is not None and self.nc.is_connected

    async def connect(self):
        logging.info(f"Connecting to NATS: {self.url}")
        self.nc = await nats.connect(
            self.url,
            name=settings.ADAPTER_NAME,
            disconnected_cb=self._on_disconnected,
            reconnected_cb=self._on_reconnected,
        )
        logging.info("Connected to NATS")

    async def _on_disconnected(self):
        logging.warning("NATS connection lost, waiting for reconnect...")

    async def _on_reconnected(self):
        logging.info(f"NATS reconnected: {self.nc.connected_url.netloc}")

    async def ensure_connected(self):
        if not self.nc or not self.nc.is_connected:
            await self.connect()

    async def publish(self, subject: str, payload: Union[str, bytes]):
        await self.ensure_connected()

        data = payload.encode("utf-8") if isinstance(payload, str) else payload
        await self.nc.publish(subject, data)

    async def publish_json(self, subject: str, payload: dict):
        await self.publish(subject, json.dumps(payload))

    async def subscribe(self, subject: str, handler):
        await self.ensure_connected()

        sub = await self.nc.subscribe(subject, cb=handler)
        logging.info(f"[NATS] Subscribed to subject: {subject}")

        return sub

    async def close(self):
        if self.nc is None:
            return

        try:
            logging.info("Closing NATS connection...")
            await self.nc.drain()
        except Exception:
            logging.debug("NATS drain failed", exc_info=True)

        try:
            await self.nc.close()
        except Exception:
            logging.debug("NATS close failed", exc_info=True)

        self.nc = None
        logging.info("NATS connection closed.")


nats_client = NATSClient()
