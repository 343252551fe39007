"""Object storage for generated files (CSV exports, decks, ad copy)."""

from typing import Dict, Optional, Tuple

import httpx

from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations.http import HTTPCollaborator

logger = get_logger(LogComponent.INTEGRATIONS)


class SupabaseStorage(HTTPCollaborator):
    """Uploads to a Supabase storage bucket and returns public URLs."""

    name = "supabase"

    def __init__(
        self,
        url: Optional[str],
        anon_key: Optional[str],
        bucket: str = "decks",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(self.require(url, "SUPABASE_URL"), timeout=timeout, transport=transport)
        self.anon_key = self.require(anon_key, "SUPABASE_ANON_KEY")
        self.bucket = bucket

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    async def upload(self, data: bytes, path: str, content_type: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.anon_key}",
            "apikey": self.anon_key,
            "Content-Type": content_type,
            "x-upsert": "true",
        }
        async with self.client() as client:
            response = await client.post(
                f"/storage/v1/object/{self.bucket}/{path}",
                content=data,
                headers=headers,
            )
        self.check(response)
        logger.info(f"Uploaded {len(data)} bytes to {self.bucket}/{path}")
        return self.public_url(path)


class MemoryStorage:
    """In-process storage for dry runs and tests.

    Attributes:
        objects: Uploaded payloads keyed by path, with their content type
    """

    def __init__(self, base_url: str = "memory://storage"):
        self.base_url = base_url.rstrip("/")
        self.objects: Dict[str, Tuple[bytes, str]] = {}

    async def upload(self, data: bytes, path: str, content_type: str) -> str:
        self.objects[path] = (data, content_type)
        return f"{self.base_url}/{path}"

    def read(self, path: str) -> bytes:
        return self.objects[path][0]
