"""
Module 'checkout' (feature-first): point d'entrée public.
Réunit contrats de requête, résolution des lignes, adaptateurs providers et service.
"""

from .schemas import CheckoutItem, CheckoutRequest, validate_checkout_request
from .resolver import LineItem, resolve_line_items, unit_price_for, order_total
from .stripe_client import StripeProvider, to_minor_units
from .coinbase_client import CoinbaseProvider, build_charge
from .service import CheckoutOptions, create_checkout_session, options_from_config

__all__ = [
    # schemas
    "CheckoutItem",
    "CheckoutRequest",
    "validate_checkout_request",
    # resolver
    "LineItem",
    "resolve_line_items",
    "unit_price_for",
    "order_total",
    # providers
    "StripeProvider",
    "to_minor_units",
    "CoinbaseProvider",
    "build_charge",
    # service
    "CheckoutOptions",
    "create_checkout_session",
    "options_from_config",
]
