"""Google Slides client: builds a presentation from an outline, exports PDF via Drive."""

from typing import Any, Dict, List, Optional, Sequence

import httpx

from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations.base import SlideOutline
from leadrecon.integrations.http import HTTPCollaborator

logger = get_logger(LogComponent.INTEGRATIONS)

DRIVE_EXPORT_URL = "https://www.googleapis.com/drive/v3/files/{file_id}/export"


class GoogleSlidesClient(HTTPCollaborator):
    """Google Slides REST client authenticated with an OAuth access token."""

    name = "google-slides"

    def __init__(
        self,
        access_token: Optional[str],
        base_url: str = "https://slides.googleapis.com/v1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.access_token = self.require(access_token, "GOOGLE_ACCESS_TOKEN")

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def create_presentation(
        self,
        title: str,
        slides: Sequence[SlideOutline],
        colors: Sequence[str] = (),
        logo_url: Optional[str] = None,
    ) -> str:
        async with self.client(headers=self._headers()) as client:
            response = await client.post("/presentations", json={"title": title})
            presentation_id = self.check(response).json()["presentationId"]

            requests = slide_requests(slides, logo_url=logo_url)
            if requests:
                response = await client.post(
                    f"/presentations/{presentation_id}:batchUpdate",
                    json={"requests": requests},
                )
                self.check(response)

        logger.info(f"Created presentation {presentation_id} with {len(slides)} slides")
        return presentation_id

    async def export_pdf(self, presentation_id: str) -> bytes:
        async with self.client(headers=self._headers()) as client:
            response = await client.get(
                DRIVE_EXPORT_URL.format(file_id=presentation_id),
                params={"mimeType": "application/pdf"},
            )
        return self.check(response).content


def slide_requests(slides: Sequence[SlideOutline], logo_url: Optional[str] = None) -> List[Dict[str, Any]]:
    """batchUpdate requests creating one title-and-body slide per outline entry."""
    requests: List[Dict[str, Any]] = []
    for index, slide in enumerate(slides, start=1):
        slide_id = f"slide_{index}"
        title_id = f"{slide_id}_title"
        body_id = f"{slide_id}_body"
        requests.append({
            "createSlide": {
                "objectId": slide_id,
                "slideLayoutReference": {"predefinedLayout": "TITLE_AND_BODY"},
                "placeholderIdMappings": [
                    {"layoutPlaceholder": {"type": "TITLE"}, "objectId": title_id},
                    {"layoutPlaceholder": {"type": "BODY"}, "objectId": body_id},
                ],
            }
        })
        requests.append({"insertText": {"objectId": title_id, "text": slide.title}})
        if slide.bullets:
            requests.append({"insertText": {"objectId": body_id, "text": "\n".join(slide.bullets)}})

    if logo_url and slides:
        requests.append({
            "createImage": {
                "url": logo_url,
                "elementProperties": {"pageObjectId": "slide_1"},
            }
        })
    return requests
