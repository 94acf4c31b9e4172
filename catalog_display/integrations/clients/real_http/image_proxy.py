"""
Remote Image Proxy HTTP Client.

Fetches a single image (Google Drive by default) on behalf of the browser so
catalog pages can reference Drive file ids without CORS or cookie issues.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

import httpx

from catalog_display.error_handler import BadRequestError, UpstreamError
from catalog_display.integrations.contracts.products import ProxiedImage

logger = logging.getLogger(__name__)

# Drive ids are letters, digits, underscores and hyphens
IMAGE_ID_PATTERN = re.compile(r"[\w-]{10,}", re.ASCII)
DEFAULT_CONTENT_TYPE = "image/jpeg"


class ImageProxyClient:
    def __init__(
        self,
        url_template: str = "https://drive.google.com/uc?export=view&id={id}",
        timeout_seconds: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url_template = url_template
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @staticmethod
    def validate_id(image_id: str) -> str:
        candidate = str(image_id or "").strip()
        if not IMAGE_ID_PATTERN.fullmatch(candidate):
            raise BadRequestError("bad id", code=400)
        return candidate

    async def fetch_remote_image(self, image_id: str) -> ProxiedImage:
        candidate = self.validate_id(image_id)
        url = self.url_template.format(id=candidate)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.error("[img] fetch error: %s %s", exc, url)
            raise UpstreamError("upstream error", code=502, details=str(exc)) from exc

        if not response.is_success:
            logger.error("[img] fetch failed: %s %s", response.status_code, url)
            raise UpstreamError("upstream error", code=response.status_code)

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        return ProxiedImage(content_type=content_type, content=response.content)
