"""
Registre central des routers (catalogue public, checkout, admin, health).
"""
from fastapi import FastAPI
from storefront.catalog.views import router as catalog_router
from storefront.checkout.views import router as checkout_router
from storefront.admin.views import router as admin_router
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API publique
    app.include_router(catalog_router)
    app.include_router(checkout_router)
    # Admin
    app.include_router(admin_router)
    # Health & monitoring
    app.include_router(health_router)
