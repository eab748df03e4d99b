import bcrypt
import pytest
from unittest.mock import MagicMock

from storefront.errors import ConflictError, NotFoundError, ValidationError
from storefront.users import service as users_service
from storefront.users.models import Role


@pytest.fixture
def repo(monkeypatch):
    fake = MagicMock()
    fake.get_user_by_email.return_value = None
    fake.create_user.side_effect = lambda data: {"created_at": "2024-01-01T00:00:00Z", **data, "id": data.get("id") or "new-id"}
    monkeypatch.setattr("storefront.users.service.repository", fake)
    return fake


def test_hash_password_is_bcrypt():
    hashed = users_service.hash_password("s3cret!")
    assert hashed.startswith("$2b$10$")
    assert bcrypt.checkpw(b"s3cret!", hashed.encode("utf-8"))


def test_signup_always_customer_and_hides_password(repo):
    user = users_service.signup("ada@example.com", password="s3cret!", name="Ada")
    stored = repo.create_user.call_args.args[0]
    assert stored["role"] == "CUSTOMER"
    assert stored["password"] != "s3cret!"
    assert "password" not in user
    assert user["email"] == "ada@example.com"


def test_signup_with_external_id_without_password(repo):
    user = users_service.signup("ada@example.com", user_id="auth-uid-1")
    assert user["id"] == "auth-uid-1"
    assert repo.create_user.call_args.args[0]["password"] is None


def test_signup_requires_password_or_id(repo):
    with pytest.raises(ValidationError):
        users_service.signup("ada@example.com")


def test_signup_duplicate_email(repo):
    repo.get_user_by_email.return_value = {"id": "u1"}
    with pytest.raises(ConflictError):
        users_service.signup("ada@example.com", password="s3cret!")
    repo.create_user.assert_not_called()


def test_admin_create_user_with_role(repo):
    user = users_service.create_user(name="Root", email="root@example.com", password="s3cret!", role=Role.ADMIN)
    assert user["role"] == "ADMIN"


def test_set_role_syncs_auth_best_effort(repo):
    repo.update_user_role.return_value = {"id": "u1", "role": "ADMIN"}
    repo.set_auth_user_role.return_value = False
    assert users_service.set_role("u1", Role.ADMIN)["role"] == "ADMIN"
    repo.set_auth_user_role.assert_called_once_with("u1", "ADMIN")


def test_set_role_unknown_user(repo):
    repo.update_user_role.return_value = None
    with pytest.raises(NotFoundError):
        users_service.set_role("nope", Role.ADMIN)
