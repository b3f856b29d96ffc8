"""
Conversion de devises pour l'affichage du catalogue public.

La conversion est purement présentationnelle: elle n'alimente jamais la
tarification du checkout, toujours calculée dans la devise de base.
"""
import logging
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

import httpx

from storefront.errors import InvalidCurrency, ProviderError

logger = logging.getLogger(__name__)

_CODE_RE = re.compile(r"^[A-Za-z]{3}$")
_CENT = Decimal("0.01")


def _round_price(value: Decimal) -> float:
    return float(value.quantize(_CENT, rounding=ROUND_HALF_UP))


class CurrencyConverter:
    """
    Client du service de taux de change (format open.er-api.com):
    GET {api_url}/{BASE} -> {"result": "success", "rates": {"EUR": 0.92, ...}}
    """

    def __init__(self, api_url: str, base: str, timeout: float = 5.0, transport: Optional[httpx.BaseTransport] = None):
        self.api_url = api_url.rstrip("/")
        self.base = base.upper()
        self.timeout = timeout
        self._transport = transport

    def fetch_rates(self) -> Dict[str, Any]:
        url = f"{self.api_url}/{self.base}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(url)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.exception("catalog.currency.fetch_rates failed url=%s", url)
            raise ProviderError("Currency conversion unavailable") from e
        if data.get("result") not in (None, "success") or not isinstance(data.get("rates"), dict):
            logger.error("catalog.currency.fetch_rates unexpected payload base=%s result=%s", self.base, data.get("result"))
            raise ProviderError("Currency conversion unavailable")
        return data["rates"]

    def rate_for(self, currency: str) -> Decimal:
        code = (currency or "").strip()
        if not _CODE_RE.match(code):
            raise InvalidCurrency()
        code = code.upper()
        if code == self.base:
            return Decimal("1")
        rate = self.fetch_rates().get(code)
        if rate is None:
            raise InvalidCurrency()
        return Decimal(str(rate))

    def convert(self, amount: float, currency: str) -> float:
        return _round_price(Decimal(str(amount)) * self.rate_for(currency))

    def convert_products(self, products: List[Dict[str, Any]], rate: Decimal) -> List[Dict[str, Any]]:
        """
        Retourne une copie des produits avec les prix convertis (2 décimales).
        - rate: taux obtenu via rate_for(), un seul appel au service par requête.
        - Les prix de stockage (overrides.storage[].price) sont convertis aussi.
        """
        converted: List[Dict[str, Any]] = []
        for product in products:
            item = dict(product)
            item["price"] = _round_price(Decimal(str(product.get("price") or 0)) * rate)
            overrides = product.get("overrides")
            if overrides and overrides.get("storage"):
                storage = []
                for s in overrides["storage"]:
                    s = dict(s)
                    if s.get("price") is not None:
                        s["price"] = _round_price(Decimal(str(s["price"])) * rate)
                    storage.append(s)
                item["overrides"] = {**overrides, "storage": storage}
            converted.append(item)
        return converted
