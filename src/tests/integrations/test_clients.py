"""Tests for the HTTP collaborator clients against mocked transports."""

import json
from typing import Callable, List

import httpx
import pytest

from leadrecon.core.config import IntegrationSettings
from leadrecon.core.errors import CollaboratorUnavailable, IntegrationError
from leadrecon.integrations import (
    Collaborators,
    GammaClient,
    GoogleSlidesClient,
    HostedFunnelBuilder,
    MirascopeCopywriter,
    SlideOutline,
    StripeClient,
    SupabaseStorage,
)
from leadrecon.integrations.slides import slide_requests


def recording_transport(handler: Callable[[httpx.Request], httpx.Response], seen: List[httpx.Request]):
    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)
    return httpx.MockTransport(record)


class TestSupabaseStorage:
    """Test uploads to the storage bucket."""

    @pytest.mark.asyncio
    async def test_upload(self):
        seen: List[httpx.Request] = []
        transport = recording_transport(lambda request: httpx.Response(200, json={"Key": "ok"}), seen)
        storage = SupabaseStorage("https://sb.test/", "anon", bucket="decks", transport=transport)

        url = await storage.upload(b"a,b\n", "profiles/evt_001/leads.csv", "text/csv")

        assert url == "https://sb.test/storage/v1/object/public/decks/profiles/evt_001/leads.csv"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/storage/v1/object/decks/profiles/evt_001/leads.csv"
        assert request.headers["authorization"] == "Bearer anon"
        assert request.headers["apikey"] == "anon"
        assert request.headers["content-type"] == "text/csv"
        assert request.headers["x-upsert"] == "true"
        assert request.content == b"a,b\n"

    @pytest.mark.asyncio
    async def test_error_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        storage = SupabaseStorage("https://sb.test", "anon", transport=transport)
        with pytest.raises(IntegrationError, match="supabase returned 500"):
            await storage.upload(b"x", "a.txt", "text/plain")

    def test_missing_credentials(self):
        with pytest.raises(CollaboratorUnavailable, match="SUPABASE_URL"):
            SupabaseStorage(None, "anon")
        with pytest.raises(CollaboratorUnavailable, match="SUPABASE_ANON_KEY"):
            SupabaseStorage("https://sb.test", "")


class TestGammaClient:
    @pytest.mark.asyncio
    async def test_generate_and_export(self):
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/generate":
                return httpx.Response(200, json={"docId": "doc_9", "shareUrl": "https://gamma.app/docs/doc_9"})
            return httpx.Response(200, content=b"PDFDATA")

        client = GammaClient("g-key", transport=recording_transport(handler, seen))
        document = await client.generate(
            "Make a deck",
            idempotency_key="gamma-generate-evt_001",
            template_id="tmpl",
            variables={"HOST_NAME": "Ada"},
        )
        assert document.doc_id == "doc_9"
        assert document.share_url == "https://gamma.app/docs/doc_9"

        generate = seen[0]
        assert generate.headers["authorization"] == "Bearer g-key"
        assert generate.headers["x-idempotency-key"] == "gamma-generate-evt_001"
        assert json.loads(generate.content) == {
            "prompt": "Make a deck",
            "templateId": "tmpl",
            "variables": {"HOST_NAME": "Ada"},
        }

        assert await client.export("doc_9", "pdf") == b"PDFDATA"
        assert seen[1].url.path == "/v1/documents/doc_9/export"
        assert seen[1].url.params["format"] == "pdf"

    def test_missing_key(self):
        with pytest.raises(CollaboratorUnavailable, match="GAMMA_API_KEY"):
            GammaClient(None)


class TestStripeClient:
    """Test product and price creation."""

    @pytest.mark.asyncio
    async def test_tripwire_and_bump(self):
        seen: List[httpx.Request] = []
        counter = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            counter["n"] += 1
            prefix = "prod" if request.url.path.endswith("/products") else "price"
            return httpx.Response(200, json={"id": f"{prefix}_{counter['n']}"})

        client = StripeClient("sk_test", transport=recording_transport(handler, seen))
        products = await client.create_products("evt_001", "Ada", 297, 1000, bump_price=99.5)

        assert [(p.kind, p.product_id, p.price_id, p.recurring) for p in products] == [
            ("tripwire", "prod_1", "price_2", False),
            ("bump", "prod_3", "price_4", True),
        ]
        assert [r.url.path for r in seen] == ["/v1/products", "/v1/prices", "/v1/products", "/v1/prices"]

        product_form = httpx.QueryParams(seen[0].content.decode())
        assert product_form["name"] == "Ada Lead Intelligence - 1000 credits"
        assert product_form["metadata[event_id]"] == "evt_001"

        tripwire_price = httpx.QueryParams(seen[1].content.decode())
        assert tripwire_price["unit_amount"] == "29700"
        assert "recurring[interval]" not in tripwire_price

        bump_price = httpx.QueryParams(seen[3].content.decode())
        assert bump_price["unit_amount"] == "9950"
        assert bump_price["recurring[interval]"] == "month"
        assert seen[0].headers["authorization"] == "Bearer sk_test"

    @pytest.mark.asyncio
    async def test_no_bump(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "x"}))
        products = await StripeClient("sk_test", transport=transport).create_products("e", "Ada", 10, 5)
        assert [p.kind for p in products] == ["tripwire"]


class TestGoogleSlidesClient:
    def test_slide_requests(self):
        requests = slide_requests(
            [SlideOutline(title="One", bullets=["a", "b"]), SlideOutline(title="Two")],
            logo_url="https://logo.test/x.png",
        )
        kinds = [next(iter(r)) for r in requests]
        assert kinds == ["createSlide", "insertText", "insertText", "createSlide", "insertText", "createImage"]
        assert requests[2]["insertText"] == {"objectId": "slide_1_body", "text": "a\nb"}
        assert requests[-1]["createImage"]["elementProperties"]["pageObjectId"] == "slide_1"

    @pytest.mark.asyncio
    async def test_create_and_export(self):
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/presentations":
                return httpx.Response(200, json={"presentationId": "p1"})
            if request.url.host == "www.googleapis.com":
                return httpx.Response(200, content=b"%PDF")
            return httpx.Response(200, json={})

        client = GoogleSlidesClient("token", transport=recording_transport(handler, seen))
        presentation_id = await client.create_presentation("Deck", [SlideOutline(title="One")])
        assert presentation_id == "p1"
        assert seen[1].url.path == "/v1/presentations/p1:batchUpdate"
        assert len(json.loads(seen[1].content)["requests"]) == 2

        assert await client.export_pdf("p1") == b"%PDF"
        assert seen[2].url.path == "/drive/v3/files/p1/export"
        assert seen[2].url.params["mimeType"] == "application/pdf"
        assert seen[2].headers["authorization"] == "Bearer token"


class TestCollaboratorsFromSettings:
    """Test the production wiring."""

    def test_missing_credentials_leave_slots_empty(self):
        collaborators = Collaborators.from_settings(IntegrationSettings(
            gamma_api_key=None,
            supabase_url=None,
            supabase_anon_key=None,
            google_access_token=None,
            stripe_secret_key=None,
        ))
        assert collaborators.storage is None
        assert collaborators.gamma is None
        assert collaborators.slides is None
        assert collaborators.payments is None
        assert isinstance(collaborators.funnels, HostedFunnelBuilder)
        assert isinstance(collaborators.copywriter, MirascopeCopywriter)
        with pytest.raises(CollaboratorUnavailable, match="gamma"):
            collaborators.require("gamma")

    def test_configured(self):
        collaborators = Collaborators.from_settings(IntegrationSettings(
            gamma_api_key="g",
            supabase_url="https://sb.test",
            supabase_anon_key="anon",
            google_access_token="t",
            stripe_secret_key="sk",
        ))
        assert isinstance(collaborators.storage, SupabaseStorage)
        assert isinstance(collaborators.gamma, GammaClient)
        assert collaborators.funnels.storage is collaborators.storage
