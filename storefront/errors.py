"""
Taxonomie des erreurs métier du storefront.

- ShapeError: la requête ne respecte pas le contrat (400), faute client.
- BusinessRuleError: produit inconnu, variante invalide/incompatible (400).
- ProviderError: échec d'un provider externe (paiement, conversion) (500).
- AuthError: identifiants ou bearer token invalides (401).

Les handlers enregistrés par la factory rendent ces erreurs en {"error": message}.
"""
from typing import Any, Dict, Optional


class StorefrontError(Exception):
    status_code = 500
    default_message = "Erreur interne"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ShapeError(StorefrontError):
    status_code = 400
    default_message = "Invalid request"

    def __init__(self, field: str, reason: str, message: Optional[str] = None):
        self.field = field
        self.reason = reason
        super().__init__(message or f"Invalid request: {field} ({reason})")

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "field": self.field, "reason": self.reason}


class BusinessRuleError(StorefrontError):
    status_code = 400
    default_message = "Invalid order"


class UnknownProduct(BusinessRuleError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Invalid product id: {product_id}")


class InvalidColorOverride(BusinessRuleError):
    def __init__(self, product_id: str, color: Optional[str]):
        self.product_id = product_id
        self.color = color
        super().__init__(f"Invalid color override for {product_id}: {color}")


class InvalidStorageOverride(BusinessRuleError):
    def __init__(self, product_id: str, size: Optional[int]):
        self.product_id = product_id
        self.size = size
        super().__init__(f"Invalid storage override for {product_id}: {size}")


class IncompatibleOverride(BusinessRuleError):
    def __init__(self, product_id: str, color: str, size: int):
        self.product_id = product_id
        self.color = color
        self.size = size
        super().__init__(f"Color {color} is not available with {size}GB for {product_id}")


class InvalidCurrency(StorefrontError):
    status_code = 400
    default_message = "Invalid currency"


class ProviderError(StorefrontError):
    status_code = 500
    default_message = "Payment provider error"


class AuthError(StorefrontError):
    status_code = 401
    default_message = "Unauthorized"
