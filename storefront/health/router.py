import logging
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from storefront.utils.rate_limit import rate_limit_health_info

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health"])

def catalog_health_info(store) -> dict:
    info = {"backend": getattr(store, "backend", None), "ok": False, "products": None, "error": None}
    try:
        info["products"] = len(store.get_products())
        info["ok"] = True
    except Exception as e:
        logger.exception("health.catalog_health_info failed")
        info["error"] = str(e)
    return info

@router.get("")
def health_root(request: Request):
    catalog = catalog_health_info(request.app.state.catalog)
    return JSONResponse({
        "ok": catalog["ok"],
        "catalog": catalog,
        "providers": list(request.app.state.checkout_options.providers.keys()),
        "rate_limit": rate_limit_health_info(request),
    })
