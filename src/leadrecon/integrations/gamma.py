"""Gamma document generation API client."""

from typing import Any, Dict, Literal, Optional

import httpx

from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations.base import GammaDocument
from leadrecon.integrations.http import HTTPCollaborator

logger = get_logger(LogComponent.INTEGRATIONS)

ExportFormat = Literal["pdf", "pptx"]


class GammaClient(HTTPCollaborator):
    """Generates Gamma documents and exports them as PDF or PPTX."""

    name = "gamma"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.gamma.app/v1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.api_key = self.require(api_key, "GAMMA_API_KEY")

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def generate(
        self,
        prompt: str,
        idempotency_key: str,
        template_id: Optional[str] = None,
        brand: Optional[Dict[str, Any]] = None,
        variables: Optional[Dict[str, str]] = None,
    ) -> GammaDocument:
        payload: Dict[str, Any] = {"prompt": prompt}
        if template_id:
            payload["templateId"] = template_id
        if brand:
            payload["brand"] = brand
        if variables:
            payload["variables"] = variables

        headers = {**self._headers(), "X-Idempotency-Key": idempotency_key}
        async with self.client() as client:
            response = await client.post("/generate", json=payload, headers=headers)
        body = self.check(response).json()

        document = GammaDocument(doc_id=body["docId"], share_url=body.get("shareUrl"))
        logger.info(f"Gamma document generated: {document.doc_id}")
        return document

    async def export(self, doc_id: str, fmt: ExportFormat) -> bytes:
        async with self.client() as client:
            response = await client.get(
                f"/documents/{doc_id}/export",
                params={"format": fmt},
                headers=self._headers(),
            )
        return self.check(response).content
