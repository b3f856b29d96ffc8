from decimal import Decimal

import httpx
import pytest

from storefront.catalog.currency import CurrencyConverter
from storefront.catalog.service import list_products, replace_products
from storefront.catalog.models import ProductList
from storefront.errors import InvalidCurrency, ProviderError


def test_rate_lookup(converter, rates_calls):
    assert converter.rate_for("eur") == Decimal("0.5")
    assert rates_calls == ["/v6/latest/USD"]


def test_base_currency_needs_no_call(converter, rates_calls):
    assert converter.rate_for("USD") == Decimal("1")
    assert rates_calls == []


@pytest.mark.parametrize("code", ["", "EU", "EURO", "12$"])
def test_malformed_code_needs_no_call(converter, rates_calls, code):
    with pytest.raises(InvalidCurrency):
        converter.rate_for(code)
    assert rates_calls == []


def test_unknown_code(converter):
    with pytest.raises(InvalidCurrency) as exc:
        converter.rate_for("XYZ")
    assert exc.value.message == "Invalid currency"


def test_rates_service_down():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    conv = CurrencyConverter("https://rates.example.test", base="usd", transport=transport)
    with pytest.raises(ProviderError):
        conv.rate_for("EUR")


def test_rates_service_error_payload():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"result": "error"}))
    conv = CurrencyConverter("https://rates.example.test", base="usd", transport=transport)
    with pytest.raises(ProviderError):
        conv.rate_for("EUR")


def test_convert(converter):
    assert converter.convert(19.99, "EUR") == 10.0


def test_convert_products_includes_storage(converter, products):
    converted = converter.convert_products(products, Decimal("0.5"))
    assert converted[0]["price"] == 50.0
    storage = converted[1]["overrides"]["storage"]
    assert [s.get("price") for s in storage] == [None, 75.0, 100.0]
    # Source intacte
    assert products[1]["overrides"]["storage"][1]["price"] == 150.00


def test_list_products_invalid_currency_skips_catalog(catalog, converter):
    with pytest.raises(InvalidCurrency):
        list_products(catalog, converter, "XYZ")
    assert catalog.reads == 0


def test_list_products_without_currency(catalog, converter, rates_calls):
    assert [p["price"] for p in list_products(catalog, converter)] == [100.00, 120.00]
    assert rates_calls == []


def test_replace_products_drops_nulls(catalog, products):
    count = replace_products(catalog, ProductList(products=products[:1]).products)
    assert count == 1
    (stored,) = catalog.get_products()
    assert "overrides" not in stored
    assert stored["price"] == 100.0
