"""
Contrat de forme de POST /create-checkout-session, vérifié une fois à la frontière.

{type, items: [{id, quantity, overrides?: {color, size}}]}

validate_checkout_request ne vérifie que la forme: l'existence du produit et la
légalité des variantes relèvent du resolver.
"""
from typing import Any, Iterable, List, Optional
from pydantic import BaseModel, Field

from storefront.errors import ShapeError
from storefront.utils.validators import parse_model


class OverrideSelection(BaseModel):
    color: str
    size: int


class CheckoutItem(BaseModel):
    id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    overrides: Optional[OverrideSelection] = None


class CheckoutRequest(BaseModel):
    type: str
    items: List[CheckoutItem] = Field(..., min_length=1)


def validate_checkout_request(payload: Any, *, providers: Iterable[str], variants_enabled: bool) -> CheckoutRequest:
    """
    Valide le corps brut d'une requête checkout.
    - type: doit être un provider actif (configuration)
    - items: liste non vide de {id: str non vide, quantity: int > 0}
    - variants_enabled: chaque item doit porter overrides.color et overrides.size
    Soulève ShapeError au premier champ fautif.
    """
    if not isinstance(payload, dict):
        raise ShapeError(field="body", reason="type_error", message="body: Request body must be a JSON object")
    req = parse_model(CheckoutRequest, payload)

    allowed = [p.lower() for p in providers]
    if req.type.lower() not in allowed:
        raise ShapeError(
            field="type",
            reason="unsupported_provider",
            message=f"type: must be one of {', '.join(allowed)}",
        )
    req.type = req.type.lower()

    if variants_enabled:
        for i, item in enumerate(req.items):
            if item.overrides is None:
                raise ShapeError(
                    field=f"items.{i}.overrides",
                    reason="missing",
                    message=f"items.{i}.overrides: color and size are required",
                )
    return req
