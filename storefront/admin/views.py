import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from storefront.catalog import service as catalog_service
from storefront.catalog.models import ProductList
from storefront.catalog.views import get_catalog
from storefront.admin.schemas import LoginRequest
from storefront.errors import ShapeError
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import get_authorizer, require_admin
from storefront.utils.validators import parse_model, read_json_body

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin"])

# module storefront.admin.views
@router.post("/login", dependencies=[Depends(optional_rate_limit(times=15, seconds=60))])
async def admin_login(request: Request, authorizer=Depends(get_authorizer)):
    """
    Connexion admin: {"password": "...", "totp": "123456"}.
    - bcrypt (hash ADMIN_SECRET_HASH) + TOTP (ADMIN_TOTP_SECRET)
    - Succès: {"access_token", "token_type": "bearer"}; le token précédent est révoqué
    - Échec: 401
    """
    body = parse_model(LoginRequest, await read_json_body(request))
    # bcrypt est volontairement lent: hors event loop
    token = await run_in_threadpool(authorizer.login, body.password, body.totp)
    logger.info("admin.views.admin_login success")
    return JSONResponse({"access_token": token, "token_type": "bearer"})

@router.get("/products")
def admin_list_products(store=Depends(get_catalog), _token: str = Depends(require_admin)):
    return JSONResponse(catalog_service.get_admin_products(store))

@router.patch("/products")
async def admin_replace_products(request: Request, store=Depends(get_catalog), _token: str = Depends(require_admin)):
    """
    Remplace tout le catalogue par la liste envoyée (tableau JSON de produits).
    - Invariants vérifiés à l'écriture: au moins une couleur et un stockage par produit
      à variantes, ids uniques, colorcomp limité aux couleurs déclarées
    """
    payload = await read_json_body(request)
    if not isinstance(payload, list):
        raise ShapeError(field="body", reason="list_type", message="body: Expected a list of products")
    products = parse_model(ProductList, {"products": payload})
    count = await run_in_threadpool(catalog_service.replace_products, store, products.products)
    return JSONResponse({"ok": True, "count": count})

@router.post("/logout")
def admin_logout(authorizer=Depends(get_authorizer), _token: str = Depends(require_admin)):
    """Révoque le token courant: plus aucun token valide jusqu'au prochain login."""
    authorizer.logout()
    logger.info("admin.views.admin_logout")
    return JSONResponse({"ok": True})
