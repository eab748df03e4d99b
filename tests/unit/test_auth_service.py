import pytest
from supabase import AuthApiError, AuthRetryableError, AuthSessionMissingError

from storefront.auth import service as auth_service
from storefront.errors import AuthenticationError, PersistenceError


def test_profile_role_is_authoritative(monkeypatch):
    monkeypatch.setattr(auth_service, "_repo_get_user_from_token",
                        lambda t: {"id": "u1", "email": "a@example.com", "user_metadata": {"role": "ADMIN"}})
    monkeypatch.setattr("storefront.auth.service.users_repository.get_user_by_id",
                        lambda uid: {"id": uid, "email": "a@example.com", "name": "Ada", "role": "CUSTOMER"})
    user = auth_service.get_user_from_token("tok")
    assert user == {"id": "u1", "email": "a@example.com", "name": "Ada", "role": "CUSTOMER", "token": "tok"}


def test_invalid_token_is_authentication_error(monkeypatch):
    def reject(token):
        raise AuthApiError("invalid JWT: unable to parse or verify signature", 401, "bad_jwt")

    monkeypatch.setattr(auth_service, "_repo_get_user_from_token", reject)
    with pytest.raises(AuthenticationError):
        auth_service.get_user_from_token("bad")


def test_missing_session_is_authentication_error(monkeypatch):
    def reject(token):
        raise AuthSessionMissingError()

    monkeypatch.setattr(auth_service, "_repo_get_user_from_token", reject)
    with pytest.raises(AuthenticationError):
        auth_service.get_user_from_token("")


def test_identity_provider_unreachable_is_persistence_error(monkeypatch):
    def down(token):
        raise AuthRetryableError("connection refused", 0)

    monkeypatch.setattr(auth_service, "_repo_get_user_from_token", down)
    with pytest.raises(PersistenceError):
        auth_service.get_user_from_token("tok")


def test_identity_provider_5xx_is_persistence_error(monkeypatch):
    def failing(token):
        raise AuthApiError("upstream error", 503, None)

    monkeypatch.setattr(auth_service, "_repo_get_user_from_token", failing)
    with pytest.raises(PersistenceError):
        auth_service.get_user_from_token("tok")


def test_missing_supabase_config_is_not_reported_as_expired_session(monkeypatch):
    def misconfigured(token):
        raise RuntimeError("SUPABASE_URL/SUPABASE_ANON_KEY manquants pour get_supabase()")

    monkeypatch.setattr(auth_service, "_repo_get_user_from_token", misconfigured)
    with pytest.raises(RuntimeError):
        auth_service.get_user_from_token("tok")


def test_missing_profile_is_created_as_customer(monkeypatch):
    created = []
    monkeypatch.setattr(auth_service, "_repo_get_user_from_token",
                        lambda t: {"id": "u2", "email": "b@example.com", "user_metadata": {"full_name": "Bob"}})
    monkeypatch.setattr("storefront.auth.service.users_repository.get_user_by_id", lambda uid: None)
    monkeypatch.setattr("storefront.auth.service.users_repository.create_user",
                        lambda data: created.append(data) or data)
    user = auth_service.get_user_from_token("tok")
    assert user["role"] == "CUSTOMER"
    assert created[0]["name"] == "Bob"


def test_profile_creation_failure_still_authenticates(monkeypatch):
    def fail(data):
        raise PersistenceError("down")

    monkeypatch.setattr(auth_service, "_repo_get_user_from_token", lambda t: {"id": "u3", "email": "c@example.com"})
    monkeypatch.setattr("storefront.auth.service.users_repository.get_user_by_id", lambda uid: None)
    monkeypatch.setattr("storefront.auth.service.users_repository.create_user", fail)
    assert auth_service.get_user_from_token("tok")["role"] == "CUSTOMER"
