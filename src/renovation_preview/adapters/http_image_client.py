"""HTTP client for downloading photos and textures."""

from dataclasses import dataclass
from urllib.parse import urljoin

import httpx

from renovation_preview.services.images import ImageClient

DEFAULT_TIMEOUT_SECONDS = 20.0


@dataclass
class HttpxImageClient(ImageClient):
    """Image client using httpx; relative URLs resolve against ``base_url``."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def create(
        cls, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS
    ) -> "HttpxImageClient":
        """Create an image client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout=timeout,
        )

    def resolve_url(self, url: str) -> str:
        """Return an absolute URL for ``url``."""
        if url.startswith(("http://", "https://")):
            return url
        return urljoin(self.base_url.rstrip("/") + "/", url.lstrip("/"))

    async def fetch_bytes(self, url: str) -> bytes:
        """Download an image and return its raw bytes."""
        response = await self.http_client.get(
            self.resolve_url(url), timeout=self.timeout
        )
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
