"""
Factory d'application recommandée pour les entrypoints (ex: storefront.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from typing import Optional
from fastapi import FastAPI

from storefront import config
from storefront.admin.service import AdminAuthorizer
from storefront.catalog.currency import CurrencyConverter
from storefront.catalog.repository import get_catalog_store
from storefront.checkout.service import CheckoutOptions, options_from_config
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware, register_no_cache_middleware
from .exception_handlers import register_exception_handlers
from .routers import register_routers

def create_app(
    *,
    catalog=None,
    authorizer: Optional[AdminAuthorizer] = None,
    checkout_options: Optional[CheckoutOptions] = None,
    converter: Optional[CurrencyConverter] = None,
) -> FastAPI:
    """
    Construit l'app FastAPI et injecte les collaborateurs dans app.state:
      - catalog: store du catalogue (CATALOG_BACKEND par défaut)
      - authorizer: session admin unique (ADMIN_SECRET_HASH + ADMIN_TOTP_SECRET)
      - checkout_options: providers actifs, variantes, politique de prix, URLs de retour
      - converter: conversion de devises pour l'affichage
    Chaque collaborateur peut être fourni explicitement (tests, multi-instances).
    """
    app = FastAPI(title="Storefront API", lifespan=lifespan)
    app.state.catalog = catalog if catalog is not None else get_catalog_store()
    app.state.authorizer = authorizer or AdminAuthorizer(config.ADMIN_SECRET_HASH, config.ADMIN_TOTP_SECRET)
    app.state.checkout_options = checkout_options or options_from_config()
    app.state.converter = converter or CurrencyConverter(
        config.CURRENCY_API_URL,
        base=config.CATALOG_CURRENCY,
        timeout=config.PROVIDER_TIMEOUT_SECONDS,
    )
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
