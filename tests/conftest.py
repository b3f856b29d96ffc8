import os

# Pas de Redis en tests: le lifespan désactive proprement le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import bcrypt
import httpx
import pyotp
import pytest
from typing import Generator, List, Dict, Any
from fastapi.testclient import TestClient

from storefront.admin.service import AdminAuthorizer
from storefront.app_setup.factory import create_app
from storefront.catalog.currency import CurrencyConverter
from storefront.catalog.repository import MemoryCatalog
from storefront.checkout.service import CheckoutOptions

ADMIN_PASSWORD = "Session_Admin_12$"
TOTP_SECRET = "JBSWY3DPEHPK3PXP"
RATES = {"USD": 1, "EUR": 0.5, "GBP": 0.8}

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class FakeProvider:
    """Provider de paiement factice: enregistre les appels, renvoie une URL unique par session."""

    def __init__(self, name: str = "stripe"):
        self.name = name
        self.calls: List[Dict[str, Any]] = []
        self.error: Exception | None = None

    def create_session(self, line_items, *, success_url: str, cancel_url: str) -> str:
        self.calls.append({"line_items": list(line_items), "success_url": success_url, "cancel_url": cancel_url})
        if self.error is not None:
            raise self.error
        return f"https://pay.example.test/session/{len(self.calls)}"


class CountingCatalog(MemoryCatalog):
    def __init__(self, products=None):
        super().__init__(products)
        self.reads = 0

    def get_products(self):
        self.reads += 1
        return super().get_products()


@pytest.fixture(scope="session")
def admin_hash() -> str:
    # rounds=4: bcrypt rapide pour les tests
    return bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")

@pytest.fixture
def totp_code():
    return lambda: pyotp.TOTP(TOTP_SECRET).now()

@pytest.fixture
def products() -> List[Dict[str, Any]]:
    return [
        {
            "id": "P1",
            "short_name": "Phone One",
            "long_name": "Phone One (unlocked)",
            "price": 100.00,
            "images": ["https://img.example.test/p1.jpg"],
            "quality": "new",
            "description": "Plain phone",
            "stock": False,
        },
        {
            "id": "P2",
            "short_name": "Phone Two",
            "long_name": "Phone Two (unlocked)",
            "price": 120.00,
            "images": [],
            "quality": "used",
            "description": "Phone with variants",
            "stock": True,
            "overrides": {
                "color": [
                    {"name": "blk", "color": "#000000", "readable": "Black"},
                    {"name": "wht", "color": "#ffffff", "readable": "White"},
                ],
                "storage": [
                    {"size": 64, "name": "64 GB"},
                    {"size": 128, "name": "128 GB", "price": 150.00},
                    {"size": 256, "name": "256 GB", "price": 200.00, "colorcomp": ["blk"]},
                ],
            },
        },
    ]

@pytest.fixture
def catalog(products) -> CountingCatalog:
    return CountingCatalog(products)

@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()

@pytest.fixture
def checkout_options(fake_provider) -> CheckoutOptions:
    return CheckoutOptions(
        providers={"stripe": fake_provider},
        variants_enabled=False,
        storage_pricing="replace",
        success_url="https://shop.example.test/success/",
        cancel_url="https://shop.example.test/cancel/",
    )

@pytest.fixture
def rates_calls() -> List[str]:
    return []

@pytest.fixture
def converter(rates_calls) -> CurrencyConverter:
    def handler(request: httpx.Request) -> httpx.Response:
        rates_calls.append(request.url.path)
        return httpx.Response(200, json={"result": "success", "base_code": "USD", "rates": RATES})
    return CurrencyConverter("https://rates.example.test/v6/latest", base="usd", transport=httpx.MockTransport(handler))

@pytest.fixture
def authorizer(admin_hash) -> AdminAuthorizer:
    return AdminAuthorizer(admin_hash, TOTP_SECRET)

@pytest.fixture
def app(catalog, authorizer, checkout_options, converter):
    return create_app(
        catalog=catalog,
        authorizer=authorizer,
        checkout_options=checkout_options,
        converter=converter,
    )

@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture
def admin_token(client, totp_code) -> str:
    res = client.post("/admin/login", json={"password": ADMIN_PASSWORD, "totp": totp_code()})
    assert res.status_code == 200
    return res.json()["access_token"]
