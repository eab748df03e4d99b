"""Couche d’accès aux données (Supabase) pour le domaine Utilisateurs (table users).
Les échecs Supabase sont journalisés puis remontés en PersistenceError;
une ligne absente est renvoyée comme None.
"""
from typing import Any, Dict, List, Optional
import logging

from storefront.errors import ConflictError, PersistenceError
from storefront.infra.errors import api_error_code, first_row, UNIQUE_VIOLATION
from storefront.infra.supabase_client import get_service_supabase
from .models import PUBLIC_USER_COLUMNS

logger = logging.getLogger(__name__)

def get_user_by_id(user_id: str) -> Optional[dict]:
    """Récupère un utilisateur par id; None si introuvable."""
    if not user_id:
        return None
    try:
        res = (
            get_service_supabase()
            .table("users")
            .select(PUBLIC_USER_COLUMNS)
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        return first_row(res.data)
    except Exception as e:
        logger.exception("users.repository.get_user_by_id failed id=%s", user_id)
        raise PersistenceError(str(e))

def get_user_by_email(email: str) -> Optional[dict]:
    """Récupère un utilisateur par email (unique); None si introuvable."""
    if not email:
        return None
    try:
        res = (
            get_service_supabase()
            .table("users")
            .select(PUBLIC_USER_COLUMNS)
            .eq("email", email)
            .limit(1)
            .execute()
        )
        return first_row(res.data)
    except Exception as e:
        logger.exception("users.repository.get_user_by_email failed")
        raise PersistenceError(str(e))

def create_user(data: Dict[str, Any]) -> dict:
    """Insère un profil utilisateur. Email déjà pris -> ConflictError."""
    payload = {k: v for k, v in data.items() if v is not None}
    try:
        res = get_service_supabase().table("users").insert(payload).execute()
    except Exception as e:
        if api_error_code(e) == UNIQUE_VIOLATION:
            raise ConflictError("L'email est déjà enregistré")
        logger.exception("users.repository.create_user failed email=%s", data.get("email"))
        raise PersistenceError(str(e))
    return first_row(res.data) or payload

def list_users(limit: int = 100) -> List[dict]:
    try:
        res = (
            get_service_supabase()
            .table("users")
            .select(PUBLIC_USER_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("users.repository.list_users failed")
        raise PersistenceError(str(e))

def update_user_role(user_id: str, role: str) -> Optional[dict]:
    """Met à jour le rôle; None si l'utilisateur n'existe pas."""
    try:
        res = (
            get_service_supabase()
            .table("users")
            .update({"role": role})
            .eq("id", user_id)
            .execute()
        )
        return first_row(res.data)
    except Exception as e:
        logger.exception("users.repository.update_user_role failed id=%s role=%s", user_id, role)
        raise PersistenceError(str(e))

def set_auth_user_role(user_id: str, role: str) -> bool:
    """
    Recopie le rôle dans user_metadata côté Supabase Auth (API admin GoTrue).
    Best-effort: le rôle applicatif fait foi depuis la table users.
    """
    import httpx
    from storefront.config import SUPABASE_URL, SUPABASE_SERVICE_KEY
    if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
        return False
    url = f"{SUPABASE_URL.rstrip('/')}/auth/v1/admin/users/{user_id}"
    headers = {
        "Authorization": f"Bearer {SUPABASE_SERVICE_KEY}",
        "apikey": SUPABASE_SERVICE_KEY,
        "Content-Type": "application/json",
    }
    try:
        resp = httpx.put(url, json={"user_metadata": {"role": role}}, headers=headers, timeout=10)
    except httpx.HTTPError:
        logger.exception("users.repository.set_auth_user_role failed id=%s role=%s", user_id, role)
        return False
    if 200 <= resp.status_code < 300:
        return True
    logger.error("set_auth_user_role failed: status=%s body=%s", resp.status_code, resp.text)
    return False
