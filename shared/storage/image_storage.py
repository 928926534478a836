"""
Client for the object-storage bucket that holds product images.

Images are referenced from products by public URL; the object path is the part
of the URL after ``/<bucket>/``.
"""
from typing import Iterable, List, Optional

import httpx
import structlog

from shared.config import settings
from shared.errors import StorageError

logger = structlog.get_logger(__name__)


class ImageStorage:

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self.timeout = timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {service_key}",
            "apikey": service_key,
        }

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    def path_from_url(self, url: str) -> Optional[str]:
        """Object path for a public URL, or None when the URL is not one of ours."""
        if not isinstance(url, str):
            return None
        parts = url.split(f"/{self.bucket}/")
        if len(parts) < 2 or not parts[1]:
            return None
        return parts[1]

    def paths_from_urls(self, urls: Iterable[str]) -> List[str]:
        return [p for p in (self.path_from_url(u) for u in urls) if p]

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._headers, timeout=self.timeout, transport=self._transport
        )

    async def remove(self, paths: List[str]) -> None:
        if not paths:
            return
        url = f"{self.base_url}/storage/v1/object/{self.bucket}"
        try:
            async with self._client() as client:
                resp = await client.request("DELETE", url, json={"prefixes": paths})
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("image_remove_failed", bucket=self.bucket, paths=paths, error=str(e))
            raise StorageError("Failed to delete images") from e
        logger.info("images_removed", bucket=self.bucket, count=len(paths))

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{path}"
        try:
            async with self._client() as client:
                resp = await client.post(
                    url,
                    content=content,
                    headers={"Content-Type": content_type, "x-upsert": "false"},
                )
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("image_upload_failed", bucket=self.bucket, path=path, error=str(e))
            raise StorageError("Failed to upload image") from e
        return self.public_url(path)


_image_storage: Optional[ImageStorage] = None


def get_image_storage() -> ImageStorage:
    global _image_storage
    if _image_storage is None:
        _image_storage = ImageStorage(
            base_url=settings.STORAGE_URL,
            service_key=settings.STORAGE_SERVICE_KEY,
            bucket=settings.STORAGE_BUCKET,
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )
    return _image_storage
