"""
Résolution pure des lignes du panier (pas de provider, pas d'I/O).

Pour chaque item, dans l'ordre de la requête:
  1) produit introuvable -> UnknownProduct
  2) si le produit déclare des overrides: couleur connue, taille connue,
     couleur présente dans colorcomp si la taille en déclare un
  3) prix unitaire selon la politique de stockage ("replace" ou "additive")
  4) description "<Couleur>, <taille>GB"
La première erreur annule toute la requête: aucune session partielle.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from storefront.checkout.schemas import CheckoutItem
from storefront.errors import (
    IncompatibleOverride,
    InvalidColorOverride,
    InvalidStorageOverride,
    UnknownProduct,
)

STORAGE_PRICING_POLICIES = ("replace", "additive")


@dataclass(frozen=True)
class LineItem:
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    description: Optional[str] = None
    images: List[str] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity


def _to_decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def _find_color(overrides: Dict[str, Any], key: Optional[str]) -> Optional[Dict[str, Any]]:
    return next((c for c in overrides.get("color") or [] if c.get("name") == key), None)


def _find_storage(overrides: Dict[str, Any], size: Optional[int]) -> Optional[Dict[str, Any]]:
    if size is None:
        return None
    return next((s for s in overrides.get("storage") or [] if int(s.get("size")) == int(size)), None)


def unit_price_for(product: Dict[str, Any], storage: Optional[Dict[str, Any]], storage_pricing: str = "replace") -> Decimal:
    """
    Prix unitaire dans la devise de base (unité majeure).
    - replace: prix du stockage s'il existe, sinon prix de base
    - additive: prix de base + prix du stockage (0 si absent)
    """
    base = _to_decimal(product.get("price") or 0)
    upsell = storage.get("price") if storage else None
    if upsell is None:
        return base
    if storage_pricing == "additive":
        return base + _to_decimal(upsell)
    return _to_decimal(upsell)


def resolve_item(item: CheckoutItem, product: Dict[str, Any], storage_pricing: str = "replace") -> LineItem:
    overrides = product.get("overrides") or None
    product_id = str(product.get("id"))
    description = None
    metadata: Dict[str, str] = {"product_id": product_id}
    storage = None

    if overrides:
        selection = item.overrides
        color_key = selection.color if selection else None
        size = selection.size if selection else None

        color = _find_color(overrides, color_key)
        if color is None:
            raise InvalidColorOverride(product_id, color_key)
        storage = _find_storage(overrides, size)
        if storage is None:
            raise InvalidStorageOverride(product_id, size)
        compatible = storage.get("colorcomp")
        if compatible and color_key not in compatible:
            raise IncompatibleOverride(product_id, color_key, size)

        description = f"{color.get('readable')}, {storage.get('size')}GB"
        metadata.update({"color": str(color_key), "storage": str(storage.get("size"))})

    return LineItem(
        product_id=product_id,
        name=product.get("short_name") or product.get("long_name") or product_id,
        unit_price=unit_price_for(product, storage, storage_pricing),
        quantity=item.quantity,
        description=description,
        images=list(product.get("images") or []),
        metadata=metadata,
    )


def resolve_line_items(
    items: Sequence[CheckoutItem],
    products_by_id: Dict[str, Dict[str, Any]],
    *,
    storage_pricing: str = "replace",
) -> List[LineItem]:
    if storage_pricing not in STORAGE_PRICING_POLICIES:
        raise ValueError(f"Politique de prix inconnue: {storage_pricing}")
    line_items: List[LineItem] = []
    for item in items:
        product = products_by_id.get(item.id)
        if product is None:
            raise UnknownProduct(item.id)
        line_items.append(resolve_item(item, product, storage_pricing))
    return line_items


def order_total(line_items: Sequence[LineItem]) -> Decimal:
    return sum((li.total for li in line_items), Decimal("0"))
