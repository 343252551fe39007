"""Stripe product and price creation for the event offer."""

from typing import Dict, List, Optional

import httpx

from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations.base import ProductPrice
from leadrecon.integrations.http import HTTPCollaborator

logger = get_logger(LogComponent.INTEGRATIONS)


class StripeClient(HTTPCollaborator):
    """Creates a one-time tripwire product and an optional monthly bump product."""

    name = "stripe"

    def __init__(
        self,
        secret_key: Optional[str],
        base_url: str = "https://api.stripe.com/v1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.secret_key = self.require(secret_key, "STRIPE_SECRET_KEY")

    async def create_products(
        self,
        event_id: str,
        host_name: str,
        tripwire_price: float,
        tripwire_credits: int,
        bump_price: Optional[float] = None,
    ) -> List[ProductPrice]:
        products: List[ProductPrice] = []
        async with self.client(headers={"Authorization": f"Bearer {self.secret_key}"}) as client:
            products.append(await self._create(
                client,
                kind="tripwire",
                name=f"{host_name} Lead Intelligence - {tripwire_credits} credits",
                amount=tripwire_price,
                event_id=event_id,
            ))
            if bump_price is not None:
                products.append(await self._create(
                    client,
                    kind="bump",
                    name=f"{host_name} Lead Intelligence - monthly",
                    amount=bump_price,
                    event_id=event_id,
                    recurring=True,
                ))
        logger.info(f"Created {len(products)} Stripe product(s) for {event_id}")
        return products

    async def _create(
        self,
        client: httpx.AsyncClient,
        kind: str,
        name: str,
        amount: float,
        event_id: str,
        recurring: bool = False,
    ) -> ProductPrice:
        response = await client.post("/products", data={
            "name": name,
            "metadata[event_id]": event_id,
            "metadata[kind]": kind,
        })
        product_id = self.check(response).json()["id"]

        price: Dict[str, str] = {
            "product": product_id,
            "unit_amount": str(round(amount * 100)),
            "currency": "usd",
        }
        if recurring:
            price["recurring[interval]"] = "month"
        response = await client.post("/prices", data=price)
        price_id = self.check(response).json()["id"]

        return ProductPrice(
            kind=kind,
            product_id=product_id,
            price_id=price_id,
            amount=amount,
            recurring=recurring,
        )
