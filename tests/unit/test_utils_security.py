from fastapi import FastAPI, Depends
from fastapi.testclient import TestClient

from storefront.app_setup.exception_handlers import register_exception_handlers
from storefront.utils.security import get_current_user, require_admin, is_admin, COOKIE_NAME


def _make_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/me")
    def me(user=Depends(get_current_user)):
        return user

    @app.get("/admin")
    def admin(user=Depends(require_admin)):
        return {"ok": True}

    return app


def _fake_token_lookup(token):
    roles = {"admin-token": "ADMIN", "customer-token": "CUSTOMER"}
    return {"id": f"id-{token}", "email": "x@example.com", "role": roles[token], "token": token}


def test_is_admin():
    assert is_admin({"role": "ADMIN"}) is True
    assert is_admin({"role": "CUSTOMER"}) is False
    assert is_admin({}) is False


def test_missing_token_is_401():
    r = TestClient(_make_app()).get("/me")
    assert r.status_code == 401
    assert "error" in r.json()


def test_bearer_takes_priority_over_cookie(monkeypatch):
    monkeypatch.setattr("storefront.auth.service.get_user_from_token", _fake_token_lookup)
    client = TestClient(_make_app())
    client.cookies.set(COOKIE_NAME, "customer-token")
    r = client.get("/me", headers={"Authorization": "Bearer admin-token"})
    assert r.status_code == 200
    assert r.json()["role"] == "ADMIN"


def test_cookie_fallback(monkeypatch):
    monkeypatch.setattr("storefront.auth.service.get_user_from_token", _fake_token_lookup)
    client = TestClient(_make_app())
    client.cookies.set(COOKIE_NAME, "customer-token")
    assert client.get("/me").json()["id"] == "id-customer-token"


def test_require_admin_forbids_customer(monkeypatch):
    monkeypatch.setattr("storefront.auth.service.get_user_from_token", _fake_token_lookup)
    client = TestClient(_make_app())
    r = client.get("/admin", headers={"Authorization": "Bearer customer-token"})
    assert r.status_code == 403
    assert r.json() == {"error": "Accès réservé aux administrateurs"}
    assert client.get("/admin", headers={"Authorization": "Bearer admin-token"}).status_code == 200
