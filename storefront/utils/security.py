from fastapi import Request, Depends
from typing import Dict, Any
from storefront.errors import AuthenticationError, AuthorizationError
from storefront.users.models import Role

COOKIE_NAME = "sb_access"

def is_admin(user: Dict[str, Any]) -> bool:
    return (user or {}).get("role") == Role.ADMIN.value

def get_current_user(request: Request) -> Dict[str, Any]:
    # Hybride: priorité au Bearer, fallback cookie
    token = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get(COOKIE_NAME)

    if not token:
        raise AuthenticationError("Non authentifié")

    # Délégué au service Auth
    from storefront.auth.service import get_user_from_token as _svc_get_user_from_token
    return _svc_get_user_from_token(token)

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user

def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if not is_admin(user):
        raise AuthorizationError("Accès réservé aux administrateurs")
    return user
