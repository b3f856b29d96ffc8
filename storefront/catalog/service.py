# module storefront.catalog.service
from typing import Any, Dict, List, Optional
import logging

from storefront.catalog.currency import CurrencyConverter
from storefront.catalog.models import Product

logger = logging.getLogger(__name__)

def list_products(store, converter: Optional[CurrencyConverter] = None, currency: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Catalogue public.
    - Sans devise: renvoie le snapshot tel quel.
    - Avec devise: prix convertis pour l'affichage (InvalidCurrency si code inconnu).
    La devise est vérifiée avant la lecture du catalogue.
    """
    if currency:
        if converter is None:
            raise RuntimeError("Aucun convertisseur de devises configuré")
        rate = converter.rate_for(currency)
        logger.debug("catalog.service.list_products currency=%s rate=%s", currency, rate)
        return converter.convert_products(store.get_products(), rate)
    return store.get_products()

def get_admin_products(store) -> List[Dict[str, Any]]:
    return store.get_products()

def replace_products(store, products: List[Product]) -> int:
    """
    Remplace tout le catalogue (last writer wins) et retourne le nombre de produits.
    """
    data = [p.model_dump(mode="json", exclude_none=True) for p in products]
    store.replace_products(data)
    logger.info("catalog.service.replace_products backend=%s count=%s", getattr(store, "backend", "?"), len(data))
    return len(data)
