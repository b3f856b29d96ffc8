"""
Schémas Pydantic du catalogue (écriture admin et lecture publique).
Les invariants de variantes sont vérifiés à l'écriture, jamais à la lecture.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class ColorOverride(BaseModel):
    name: str = Field(..., pattern=r"^[a-z]+$", description="Clé machine (minuscules)")
    color: str = Field(..., pattern=r"^#[0-9a-fA-F]{6}$", description="Code hexadécimal")
    readable: str = Field(..., pattern=r"^[a-zA-Z]+$", description="Nom affiché")


class StorageOverride(BaseModel):
    size: int = Field(..., gt=0, description="Taille en GB")
    name: str = Field(..., min_length=1, description="Nom affiché, ex: 128 GB")
    price: Optional[float] = Field(None, gt=0)
    colorcomp: Optional[List[str]] = None

    @field_validator("colorcomp")
    @classmethod
    def empty_colorcomp_is_none(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        # Le formulaire admin envoie [""] quand le champ est vide
        cleaned = [c.strip() for c in (v or []) if c and c.strip()]
        return cleaned or None


class VariantOverrides(BaseModel):
    color: List[ColorOverride] = Field(default_factory=list)
    storage: List[StorageOverride] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_overrides(self) -> "VariantOverrides":
        if not self.color or not self.storage:
            raise ValueError("At least one color and one storage override are required")
        known = {c.name for c in self.color}
        for s in self.storage:
            unknown = [c for c in (s.colorcomp or []) if c not in known]
            if unknown:
                raise ValueError(f"Unknown colors in colorcomp for {s.size}GB: {', '.join(unknown)}")
        return self


class Product(BaseModel):
    id: str = Field(..., min_length=1)
    short_name: str
    long_name: str
    price: float = Field(..., gt=0, description="Prix dans la devise de base (unité majeure)")
    images: List[str] = Field(default_factory=list)
    quality: Literal["new", "used"] = "new"
    description: str = ""
    stock: bool = False
    overrides: Optional[VariantOverrides] = None


class ProductList(BaseModel):
    """Liste complète de remplacement envoyée par PATCH /admin/products."""
    products: List[Product]

    @model_validator(mode="after")
    def unique_ids(self) -> "ProductList":
        seen = set()
        for p in self.products:
            if p.id in seen:
                raise ValueError(f"Duplicate product id: {p.id}")
            seen.add(p.id)
        return self
