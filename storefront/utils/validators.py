import json
from typing import Any
from fastapi import Request
from pydantic import ValidationError

from storefront.errors import ShapeError

async def read_json_body(request: Request) -> Any:
    """
    Lit le corps JSON brut. Un JSON malformé est une ShapeError (400), jamais un crash.
    """
    raw = await request.body()
    if not raw:
        raise ShapeError(field="body", reason="missing", message="body: Request body is required")
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        raise ShapeError(field="body", reason="json_invalid", message="body: Malformed JSON")

def shape_error_from_details(error: dict) -> ShapeError:
    """
    Convertit une erreur Pydantic en ShapeError (chemin du champ + raison).
    Ex: loc=("items", 0, "quantity"), type="greater_than" -> field="items.0.quantity".
    """
    loc = [str(p) for p in (error.get("loc") or ()) if p != "body"]
    field = ".".join(loc) or "body"
    reason = str(error.get("type") or "invalid")
    msg = error.get("msg") or "Invalid value"
    return ShapeError(field=field, reason=reason, message=f"{field}: {msg}")

def shape_error_from(exc: ValidationError) -> ShapeError:
    errors = exc.errors()
    return shape_error_from_details(errors[0] if errors else {})

def parse_model(model, payload: Any):
    """Valide payload contre un modèle Pydantic; la première erreur devient une ShapeError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise shape_error_from(e) from e
