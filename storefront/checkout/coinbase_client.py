"""
Adaptateur Coinbase Commerce (API REST /charges via httpx).
Coinbase attend un prix total en unité majeure, sérialisé en chaîne: "200.00".
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Sequence

import httpx

from storefront.checkout.resolver import LineItem, order_total

API_VERSION = "2018-03-22"

# module storefront.checkout.coinbase_client
def to_major_units(amount: Decimal) -> str:
    return str(Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

def build_charge(line_items: Sequence[LineItem], currency: str, *, success_url: str, cancel_url: str) -> Dict[str, Any]:
    """
    Charge "fixed_price" pour tout le panier:
    - name: "Order for N item(s)"
    - description: "2xP1, 1xP2" (avec la variante entre parenthèses si présente)
    """
    item_count = sum(li.quantity for li in line_items)
    parts = []
    for li in line_items:
        label = f"{li.quantity}x{li.product_id}"
        if li.description:
            label += f" ({li.description})"
        parts.append(label)
    return {
        "name": f"Order for {item_count} item{'' if item_count == 1 else 's'}",
        "description": ", ".join(parts)[:200],
        "pricing_type": "fixed_price",
        "local_price": {"amount": to_major_units(order_total(line_items)), "currency": currency.upper()},
        "requested_info": ["email", "name"],
        "redirect_url": success_url,
        "cancel_url": cancel_url,
    }


class CoinbaseProvider:
    name = "coinbase"

    def __init__(self, api_key: str, currency: str, api_url: str = "https://api.commerce.coinbase.com",
                 timeout: float = 5.0, transport: Optional[httpx.BaseTransport] = None):
        self.api_key = api_key
        self.currency = currency
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def create_session(self, line_items: Sequence[LineItem], *, success_url: str, cancel_url: str) -> str:
        if not self.api_key:
            raise RuntimeError("COINBASE_API_KEY manquant")
        headers = {
            "X-CC-Api-Key": self.api_key,
            "X-CC-Version": API_VERSION,
            "Content-Type": "application/json",
        }
        payload = build_charge(line_items, self.currency, success_url=success_url, cancel_url=cancel_url)
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            resp = client.post(f"{self.api_url}/charges", json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json().get("data") or {}
        url = data.get("hosted_url")
        if not url:
            raise RuntimeError("Charge Coinbase sans hosted_url")
        return url
