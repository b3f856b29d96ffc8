import json
from unittest.mock import MagicMock

import pytest

from storefront import config
from storefront.catalog import repository as repo
from storefront.catalog.repository import JsonFileCatalog, MemoryCatalog, SupabaseCatalog, products_by_id


class _Resp:
    def __init__(self, data=None):
        self.data = data


def test_memory_snapshot_is_isolated(products):
    store = MemoryCatalog(products)
    snap = store.get_products()
    snap[0]["price"] = 1
    assert store.get_products()[0]["price"] == 100.00


def test_memory_replace(products):
    store = MemoryCatalog()
    assert store.get_products() == []
    store.replace_products(products[:1])
    assert [p["id"] for p in store.get_products()] == ["P1"]


def test_file_missing_is_empty(tmp_path):
    assert JsonFileCatalog(tmp_path / "nope.json").get_products() == []


def test_file_replace_then_read(tmp_path, products):
    path = tmp_path / "data" / "products.json"
    store = JsonFileCatalog(path)
    store.replace_products(products)
    assert store.get_products() == products
    # Pas de fichier temporaire résiduel
    assert [p.name for p in path.parent.iterdir()] == ["products.json"]


def test_file_legacy_format(tmp_path, products):
    path = tmp_path / "products.json"
    path.write_text(json.dumps({"products": products}), encoding="utf-8")
    assert [p["id"] for p in JsonFileCatalog(path).get_products()] == ["P1", "P2"]


def test_supabase_get_products_strips_position(monkeypatch):
    client = MagicMock()
    query = client.table.return_value.select.return_value.order.return_value
    query.execute.return_value = _Resp([{"id": "P1", "price": 10, "position": 0}])
    monkeypatch.setattr("storefront.infra.supabase_client.get_supabase", lambda: client)

    assert SupabaseCatalog("products").get_products() == [{"id": "P1", "price": 10}]
    client.table.assert_called_with("products")
    client.table.return_value.select.return_value.order.assert_called_with("position")


def test_supabase_replace_products(monkeypatch, products):
    client = MagicMock()
    table = client.table.return_value
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: client)

    SupabaseCatalog("products").replace_products(products)

    table.delete.return_value.neq.assert_called_with("id", "")
    rows = table.insert.call_args[0][0]
    assert [(r["id"], r["position"]) for r in rows] == [("P1", 0), ("P2", 1)]


def test_supabase_replace_error_propagates(monkeypatch):
    client = MagicMock()
    client.table.return_value.delete.return_value.neq.return_value.execute.side_effect = Exception("boom")
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: client)
    with pytest.raises(Exception):
        SupabaseCatalog().replace_products([{"id": "P1"}])


@pytest.mark.parametrize(
    "backend, cls",
    [("file", JsonFileCatalog), ("memory", MemoryCatalog), ("supabase", SupabaseCatalog)],
)
def test_get_catalog_store(monkeypatch, backend, cls):
    monkeypatch.setattr(config, "CATALOG_BACKEND", backend)
    assert isinstance(repo.get_catalog_store(), cls)


def test_get_catalog_store_unknown(monkeypatch):
    monkeypatch.setattr(config, "CATALOG_BACKEND", "mongo")
    with pytest.raises(RuntimeError):
        repo.get_catalog_store()


def test_products_by_id(products):
    index = products_by_id(products)
    assert set(index) == {"P1", "P2"}
    assert index["P2"]["short_name"] == "Phone Two"
