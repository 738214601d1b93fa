"""Object storage for profile photos and collection images."""
import base64
import hashlib
from abc import ABC, abstractmethod

import httpx

from nft_marketplace.config import Settings, get_settings


class ObjectStorageABC(ABC):
    """Uploads images and returns the URL they are served from."""

    @abstractmethod
    async def upload_image_base64(self, data: str, key: str) -> str:
        """Store base64-encoded image data under `key` and return its URL."""

    @abstractmethod
    async def upload_image(self, file: bytes) -> str:
        """Store raw image bytes under a content-derived key and return its URL."""

    @abstractmethod
    async def get_signed_url(self, key: str) -> str:
        """Return a URL a client can fetch `key` from."""

    async def close(self) -> None:
        """Clean up resources (HTTP clients). Override if needed."""

    async def __aenter__(self) -> "ObjectStorageABC":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()


class MoralisIpfsStorage(ObjectStorageABC):
    """Pins images to IPFS through the Moralis `ipfs/uploadFolder` endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._gateway_url = settings.ipfs_gateway_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=settings.moralis_ipfs_url,
            headers={"X-API-Key": settings.moralis_api_key, "accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @staticmethod
    def _strip_data_uri(data: str) -> str:
        """Drop a `data:image/png;base64,` prefix if present."""
        if data.startswith("data:") and "," in data:
            return data.split(",", 1)[1]
        return data

    async def _upload(self, path: str, content: str) -> str:
        response = await self._client.post(
            "/ipfs/uploadFolder",
            json=[{"path": path, "content": content}],
        )
        response.raise_for_status()
        uploaded = response.json()
        if not uploaded or "path" not in uploaded[0]:
            raise OSError(f"IPFS upload returned no path for '{path}'")
        return uploaded[0]["path"]

    async def upload_image_base64(self, data: str, key: str) -> str:
        return await self._upload(key, self._strip_data_uri(data))

    async def upload_image(self, file: bytes) -> str:
        key = hashlib.sha256(file).hexdigest()
        return await self._upload(key, base64.b64encode(file).decode("ascii"))

    async def get_signed_url(self, key: str) -> str:
        # IPFS content is public; a gateway URL needs no signature.
        if key.startswith(("http://", "https://")):
            return key
        return f"{self._gateway_url}/{key.lstrip('/')}"

    async def close(self) -> None:
        await self._client.aclose()
