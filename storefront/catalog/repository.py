"""
Accès aux données du catalogue.

Trois backends partagent la même interface (get_products / replace_products):
- JsonFileCatalog: fichier JSON (défaut), écriture atomique (fichier temporaire + os.replace)
- MemoryCatalog: liste en mémoire (dev/tests)
- SupabaseCatalog: table Supabase, une ligne par produit avec sa position d'affichage

Le remplacement est « last writer wins »: aucune version, aucun verrou.
"""
import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import storefront.infra.supabase_client as supabase_client
from storefront import config

logger = logging.getLogger(__name__)

# module storefront.catalog.repository
class MemoryCatalog:
    backend = "memory"

    def __init__(self, products: Optional[Iterable[Dict[str, Any]]] = None):
        self._products: List[Dict[str, Any]] = copy.deepcopy(list(products or []))

    def get_products(self) -> List[Dict[str, Any]]:
        # Copie: un snapshot ne doit pas bouger pendant une résolution de panier
        return copy.deepcopy(self._products)

    def replace_products(self, products: List[Dict[str, Any]]) -> None:
        self._products = copy.deepcopy(list(products))


class JsonFileCatalog:
    backend = "file"

    def __init__(self, path: Path):
        self.path = Path(path)

    def get_products(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        # Format historique: {"products": [...]}
        if isinstance(data, dict):
            data = data.get("products") or []
        return list(data)

    def replace_products(self, products: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".products-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(list(products), fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            logger.exception("catalog.repository.JsonFileCatalog.replace_products failed path=%s", self.path)
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


class SupabaseCatalog:
    backend = "supabase"

    def __init__(self, table: str = "products"):
        self.table = table

    def get_products(self) -> List[Dict[str, Any]]:
        res = (
            supabase_client.get_supabase()
            .table(self.table)
            .select("*")
            .order("position")
            .execute()
        )
        rows = res.data or []
        return [{k: v for k, v in row.items() if k != "position"} for row in rows]

    def replace_products(self, products: List[Dict[str, Any]]) -> None:
        client = supabase_client.get_service_supabase()
        rows = [{**p, "position": i} for i, p in enumerate(products)]
        try:
            client.table(self.table).delete().neq("id", "").execute()
            if rows:
                client.table(self.table).insert(rows).execute()
        except Exception:
            logger.exception("catalog.repository.SupabaseCatalog.replace_products failed count=%s", len(rows))
            raise


def get_catalog_store():
    """
    Construit le store configuré (CATALOG_BACKEND).
    - "file" (défaut): CATALOG_PATH
    - "memory": catalogue vide, utile en dev
    - "supabase": table SUPABASE_PRODUCTS_TABLE
    """
    backend = config.CATALOG_BACKEND
    if backend == "memory":
        return MemoryCatalog()
    if backend == "supabase":
        return SupabaseCatalog(config.SUPABASE_PRODUCTS_TABLE)
    if backend != "file":
        raise RuntimeError(f"CATALOG_BACKEND inconnu: {backend}")
    return JsonFileCatalog(config.CATALOG_PATH)


def products_by_id(products: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Retourne un dict {id: produit} à partir d'un snapshot du catalogue.
    """
    return {str(p.get("id")): p for p in products}
