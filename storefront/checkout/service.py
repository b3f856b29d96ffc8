"""
Cas d'usage 'checkout': orchestre validation de forme, résolution des lignes et provider.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from storefront import config
from storefront.catalog.repository import products_by_id
from storefront.checkout import resolver
from storefront.checkout.coinbase_client import CoinbaseProvider
from storefront.checkout.schemas import validate_checkout_request
from storefront.checkout.stripe_client import StripeProvider
from storefront.errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass
class CheckoutOptions:
    """Capacités du pipeline, fixées à la configuration (et non par variante de serveur)."""
    providers: Dict[str, Any] = field(default_factory=dict)
    variants_enabled: bool = False
    storage_pricing: str = "replace"
    success_url: str = "http://localhost:8000/success/"
    cancel_url: str = "http://localhost:8000/cancel/"


def build_providers(names: List[str]) -> Dict[str, Any]:
    """
    Instancie les providers nommés dans CHECKOUT_PROVIDERS.
    Un nom inconnu est une erreur de configuration (RuntimeError au démarrage).
    """
    providers: Dict[str, Any] = {}
    for name in names:
        if name == "stripe":
            providers[name] = StripeProvider(config.CATALOG_CURRENCY, config.SHIPPING_COUNTRIES)
        elif name == "coinbase":
            providers[name] = CoinbaseProvider(
                config.COINBASE_API_KEY,
                config.CATALOG_CURRENCY,
                api_url=config.COINBASE_API_URL,
                timeout=config.PROVIDER_TIMEOUT_SECONDS,
            )
        else:
            raise RuntimeError(f"Provider de paiement inconnu: {name}")
    return providers


def options_from_config() -> CheckoutOptions:
    if config.STORAGE_PRICING not in resolver.STORAGE_PRICING_POLICIES:
        raise RuntimeError(f"STORAGE_PRICING inconnu: {config.STORAGE_PRICING}")
    return CheckoutOptions(
        providers=build_providers(config.CHECKOUT_PROVIDERS),
        variants_enabled=config.VARIANTS_ENABLED,
        storage_pricing=config.STORAGE_PRICING,
        success_url=f"{config.BASE_URL}{config.CHECKOUT_SUCCESS_PATH}",
        cancel_url=f"{config.BASE_URL}{config.CHECKOUT_CANCEL_PATH}",
    )


def prepare_line_items(payload: Any, store, options: CheckoutOptions):
    """
    Valide la forme puis résout les lignes sur un snapshot du catalogue.
    Retour: (provider_tag, [LineItem]). Aucun effet de bord.
    """
    req = validate_checkout_request(
        payload,
        providers=list(options.providers.keys()),
        variants_enabled=options.variants_enabled,
    )
    snapshot = products_by_id(store.get_products())
    line_items = resolver.resolve_line_items(req.items, snapshot, storage_pricing=options.storage_pricing)
    return req.type, line_items


def create_checkout_session(payload: Any, store, options: CheckoutOptions) -> Dict[str, str]:
    """
    Crée une session de paiement hébergée et retourne {"url": ...}.
    - ShapeError / BusinessRuleError: remontent telles quelles (400), provider jamais appelé
    - Échec provider: cause loggée, ProviderError générique (500)
    """
    provider_tag, line_items = prepare_line_items(payload, store, options)
    provider = options.providers[provider_tag]
    try:
        url = provider.create_session(line_items, success_url=options.success_url, cancel_url=options.cancel_url)
    except Exception as e:
        logger.exception("checkout.service.create_checkout_session provider=%s failed", provider_tag)
        raise ProviderError(f"Unable to create {provider_tag} checkout session") from e
    logger.info(
        "checkout.service.create_checkout_session provider=%s items=%s total=%s",
        provider_tag, len(line_items), resolver.order_total(line_items),
    )
    return {"url": url}
