import os

# Avant l'import de l'app: pas de Redis ni de vraies clés en tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from typing import Any, Dict, Generator
from fastapi.testclient import TestClient

from storefront.app_setup.factory import create_app
from storefront.utils.security import get_current_user

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

CUSTOMER: Dict[str, Any] = {
    "id": "test-user",
    "email": "test@example.com",
    "name": "Test User",
    "role": "CUSTOMER",
    "token": "fake-token",
}

ADMIN: Dict[str, Any] = {
    "id": "admin-user-id",
    "email": "admin@example.com",
    "name": "Admin User",
    "role": "ADMIN",
    "token": "fake-admin-token",
}

@pytest.fixture(scope="session")
def app():
    return create_app()

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Simuler un client authentifié; require_user et require_admin en dépendent
@pytest.fixture(autouse=True)
def _override_current_user(app):
    app.dependency_overrides[get_current_user] = lambda: dict(CUSTOMER)
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_current_user, None)

@pytest.fixture
def as_admin(app):
    """Requêtes suivantes exécutées en tant qu'administrateur."""
    app.dependency_overrides[get_current_user] = lambda: dict(ADMIN)
    return ADMIN

@pytest.fixture
def stripe_keys(monkeypatch):
    monkeypatch.setattr("storefront.config.STRIPE_SECRET_KEY", "sk_test_dummy")
    monkeypatch.setattr("storefront.config.STRIPE_WEBHOOK_SECRET", "whsec_test_dummy")
    return "whsec_test_dummy"

@pytest.fixture
def customer() -> Dict[str, Any]:
    return dict(CUSTOMER)

@pytest.fixture
def admin() -> Dict[str, Any]:
    return dict(ADMIN)
