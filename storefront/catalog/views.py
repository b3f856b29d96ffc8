import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from storefront.catalog import service as catalog_service
from storefront.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Catalog"])

def get_catalog(request: Request):
    return request.app.state.catalog

def get_converter(request: Request):
    return getattr(request.app.state, "converter", None)

# module storefront.catalog.views
@router.get("/products", dependencies=[Depends(optional_rate_limit(times=15, seconds=60))])
async def list_products(
    currency: Optional[str] = None,
    store=Depends(get_catalog),
    converter=Depends(get_converter),
):
    """
    Catalogue public.
    - ?currency=EUR: prix convertis pour l'affichage uniquement
    - Devise invalide: 400 {"error": "Invalid currency"} (catalogue non lu)
    """
    products = await run_in_threadpool(catalog_service.list_products, store, converter, currency)
    return JSONResponse(products)
