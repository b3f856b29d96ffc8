"""
Adaptateur Stripe: centralise la configuration du SDK et la création des sessions Checkout.
Stripe attend des montants en plus petite unité (centimes): 19.99 USD -> 1999.
"""
import threading

import stripe
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Sequence

from storefront import config
from storefront.checkout.resolver import LineItem

# module storefront.checkout.stripe_client
def to_minor_units(amount: Decimal) -> int:
    """Convertit un montant en unité majeure vers la plus petite unité (arrondi half-up)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def to_line_items(line_items: Sequence[LineItem], currency: str) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) à partir des lignes résolues.
    - unit_amount en centimes
    - product_data: nom, description de variante, images, métadonnées (couleur, stockage)
    """
    result: List[Dict[str, Any]] = []
    for li in line_items:
        product_data: Dict[str, Any] = {"name": li.name}
        if li.description:
            product_data["description"] = li.description
        if li.images:
            product_data["images"] = li.images[:8]
        if li.metadata:
            product_data["metadata"] = dict(li.metadata)
        result.append({
            "quantity": li.quantity,
            "price_data": {
                "currency": currency,
                "unit_amount": to_minor_units(li.unit_price),
                "product_data": product_data,
            },
        })
    return result

_http_client_lock = threading.Lock()

def require_stripe() -> stripe:
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY.
    - Une seule tentative par requête, timeout PROVIDER_TIMEOUT_SECONDS.
    - Le client HTTP (session requests) est créé une seule fois pour le process.
    """
    if not config.STRIPE_SECRET_KEY:
        raise RuntimeError("STRIPE_SECRET_KEY manquant")
    stripe.api_key = config.STRIPE_SECRET_KEY
    stripe.max_network_retries = 0
    if not isinstance(stripe.default_http_client, stripe.RequestsClient):
        with _http_client_lock:
            if not isinstance(stripe.default_http_client, stripe.RequestsClient):
                stripe.default_http_client = stripe.RequestsClient(timeout=config.PROVIDER_TIMEOUT_SECONDS)
    return stripe


class StripeProvider:
    name = "stripe"

    def __init__(self, currency: str, shipping_countries: Sequence[str]):
        self.currency = currency
        self.shipping_countries = list(shipping_countries)

    def build_params(self, line_items: Sequence[LineItem], *, success_url: str, cancel_url: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": to_line_items(line_items, self.currency),
            "success_url": success_url,
            "cancel_url": cancel_url,
            "automatic_tax": {"enabled": False},
        }
        if self.shipping_countries:
            params["shipping_address_collection"] = {"allowed_countries": self.shipping_countries}
        return params

    def create_session(self, line_items: Sequence[LineItem], *, success_url: str, cancel_url: str) -> str:
        """
        Crée une session Stripe Checkout et retourne son URL de redirection.
        Les erreurs SDK remontent telles quelles; le service les convertit en ProviderError.
        """
        require_stripe()
        session = stripe.checkout.Session.create(
            **self.build_params(line_items, success_url=success_url, cancel_url=cancel_url)
        )
        url = session.get("url") if isinstance(session, dict) else getattr(session, "url", None)
        if not url:
            raise RuntimeError("Session Stripe sans URL")
        return url
