import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from storefront.catalog.views import get_catalog
from storefront.checkout import service as checkout_service
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.validators import read_json_body

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Checkout"])

def get_checkout_options(request: Request) -> checkout_service.CheckoutOptions:
    return request.app.state.checkout_options

# module storefront.checkout.views
@router.post("/create-checkout-session", dependencies=[Depends(optional_rate_limit(times=15, seconds=60))])
async def create_checkout_session(
    request: Request,
    store=Depends(get_catalog),
    options: checkout_service.CheckoutOptions = Depends(get_checkout_options),
):
    """
    Crée une session de paiement hébergée pour le panier.
    - Entrée JSON: {"type": "stripe", "items": [{"id", "quantity", "overrides"?: {"color", "size"}}]}
    - Étapes:
      1) Contrat de forme (ShapeError -> 400)
      2) Résolution sur un snapshot du catalogue (BusinessRuleError -> 400)
      3) Appel provider hors event loop (ProviderError -> 500)
    - Retour: {"url": "<redirect>"}
    """
    payload = await read_json_body(request)
    result = await run_in_threadpool(checkout_service.create_checkout_session, payload, store, options)
    return JSONResponse(result)
