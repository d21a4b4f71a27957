# htbridge/infrastructure/gateway/gateway_http_adapter.py
import logging
from typing import Any, Optional

import httpx

from htbridge.core.config import settings

logger = logging.getLogger(__name__)


class GatewayHttpAdapter:
    """Mirrors devices and property values to an HTTP gateway, when configured."""

    def __init__(self, base_url: Optional[str], timeout: float = 5.0):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def is_enabled(self) -> bool:
        return bool(self.base_url)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def _send(self, method: str, path: str, payload: dict) -> bool:
        if not self.is_enabled():
            logger.debug("GatewayHttpAdapter disabled (GATEWAY_URL not set). Skipping %s %s", method, path)
            return False

        try:
            resp = await self._get_client().request(method, path, json=payload)
            resp.raise_for_status()
            logger.debug(f"GatewayHttpAdapter: {method} {path} ok")
            return True
        except httpx.HTTPStatusError as exc:
            logger.error(
                f"GatewayHttpAdapter: gateway responded with error: {exc.response.status_code} {exc.response.text}"
            )
        except httpx.RequestError as exc:
            logger.error(f"GatewayHttpAdapter: request error on {method} {path}: {exc}")
        return False

    async def add_thing(self, description: dict) -> bool:
        return await self._send("POST", "/things/", description)

    async def update_property(self, device_id: str, name: str, value: Any) -> bool:
        return await self._send("PUT", f"/things/{device_id}/properties/{name}", {name: value})

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


gateway_http_adapter = GatewayHttpAdapter(settings.GATEWAY_URL)
