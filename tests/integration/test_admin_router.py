import pyotp

ADMIN_PASSWORD = "Session_Admin_12$"
TOTP_SECRET = "JBSWY3DPEHPK3PXP"

NEW_PRODUCT = {
    "id": "P3",
    "short_name": "Phone Three",
    "long_name": "Phone Three (unlocked)",
    "price": 80,
    "images": [],
    "quality": "new",
    "description": "",
    "stock": True,
}


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_admin_products_requires_login(client):
    res = client.get("/admin/products")
    assert res.status_code == 401
    assert "error" in res.json()
    assert res.headers["WWW-Authenticate"] == "Bearer"


def test_admin_any_token_rejected_before_login(client):
    assert client.get("/admin/products", headers=_auth("guess")).status_code == 401


def test_admin_login_and_list(client, admin_token, products):
    res = client.get("/admin/products", headers=_auth(admin_token))
    assert res.status_code == 200
    assert res.json() == products
    assert "no-store" in res.headers["Cache-Control"]


def test_admin_token_requires_bearer_scheme(client, admin_token):
    assert client.get("/admin/products", headers={"Authorization": admin_token}).status_code == 401
    assert client.get("/admin/products", headers={"Authorization": f"Token {admin_token}"}).status_code == 401
    assert client.get("/admin/products", headers={"Authorization": f"bearer {admin_token}"}).status_code == 200


def test_admin_wrong_token(client, admin_token):
    assert client.get("/admin/products", headers=_auth(admin_token[:-1] + "?")).status_code == 401


def test_admin_login_wrong_password(client):
    res = client.post("/admin/login", json={"password": "nope", "totp": pyotp.TOTP(TOTP_SECRET).now()})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid credentials"}


def test_admin_login_malformed_totp(client):
    res = client.post("/admin/login", json={"password": ADMIN_PASSWORD, "totp": "12ab"})
    assert res.status_code == 400
    assert res.json()["field"] == "totp"


def test_admin_second_login_revokes_first(client, admin_token, totp_code):
    res = client.post("/admin/login", json={"password": ADMIN_PASSWORD, "totp": totp_code()})
    assert res.status_code == 200
    second = res.json()["access_token"]
    assert res.json()["token_type"] == "bearer"
    assert client.get("/admin/products", headers=_auth(admin_token)).status_code == 401
    assert client.get("/admin/products", headers=_auth(second)).status_code == 200


def test_admin_replace_catalog_round_trip(client, admin_token, products):
    new_catalog = [products[1], NEW_PRODUCT]
    res = client.patch("/admin/products", json=new_catalog, headers=_auth(admin_token))
    assert res.status_code == 200
    assert res.json() == {"ok": True, "count": 2}

    public = client.get("/products").json()
    assert [p["id"] for p in public] == ["P2", "P3"]
    assert public[1]["price"] == 80

    # Le checkout voit immédiatement le nouveau catalogue
    gone = client.post("/create-checkout-session", json={"type": "stripe", "items": [{"id": "P1", "quantity": 1}]})
    assert gone.status_code == 400


def test_admin_replace_requires_token(client, catalog):
    res = client.patch("/admin/products", json=[NEW_PRODUCT])
    assert res.status_code == 401
    assert [p["id"] for p in catalog.get_products()] == ["P1", "P2"]


def test_admin_replace_invalid_catalog(client, admin_token, catalog, products):
    broken = dict(products[1])
    broken["overrides"] = {**products[1]["overrides"], "storage": []}
    res = client.patch("/admin/products", json=[broken], headers=_auth(admin_token))
    assert res.status_code == 400
    # Catalogue inchangé
    assert [p["id"] for p in catalog.get_products()] == ["P1", "P2"]


def test_admin_replace_body_must_be_list(client, admin_token):
    res = client.patch("/admin/products", json={"products": []}, headers=_auth(admin_token))
    assert res.status_code == 400
    assert res.json()["reason"] == "list_type"


def test_admin_replace_duplicate_ids(client, admin_token):
    res = client.patch("/admin/products", json=[NEW_PRODUCT, NEW_PRODUCT], headers=_auth(admin_token))
    assert res.status_code == 400


def test_admin_logout_revokes_token(client, admin_token):
    res = client.post("/admin/logout", headers=_auth(admin_token))
    assert res.status_code == 200
    assert res.json() == {"ok": True}
    assert client.get("/admin/products", headers=_auth(admin_token)).status_code == 401
    # Plus de session: un second logout est refusé
    assert client.post("/admin/logout", headers=_auth(admin_token)).status_code == 401


def test_admin_logout_requires_token(client):
    assert client.post("/admin/logout").status_code == 401


def test_admin_login_rate_limited_despite_rotating_headers(client, monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    codes = [
        client.post(
            "/admin/login",
            json={"password": "guess", "totp": "000000"},
            headers={"Authorization": f"Bearer junk{i}"},
        ).status_code
        for i in range(20)
    ]
    assert set(codes[:15]) <= {401}
    assert codes[15:] == [429] * 5
