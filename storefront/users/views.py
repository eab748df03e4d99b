# module storefront.users.views
"""Endpoints Utilisateurs.
- /api/v1/signup: inscription publique (rôle CUSTOMER).
- /api/v1/users/me: profil de l'utilisateur courant.
- /api/v1/users (GET/POST) et /api/v1/users/{id} (PATCH rôle): réservés aux administrateurs.
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends

from storefront.utils.security import require_user, require_admin
from storefront.utils.rate_limit import optional_rate_limit
from . import service as users_service
from .models import SignupRequest, UserCreateRequest, RoleUpdateRequest

signup_router = APIRouter(prefix="/api/v1", tags=["Users API"])
router = APIRouter(prefix="/api/v1/users", tags=["Users API"])


@signup_router.post("/signup", status_code=201, dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def api_signup(req: SignupRequest):
    user = users_service.signup(req.email, password=req.password, name=req.name, user_id=req.id)
    return {"user": user}


@router.get("/me")
def api_me(user: Dict[str, Any] = Depends(require_user)):
    return {k: user.get(k) for k in ("id", "email", "name", "role")}


@router.get("")
def api_list_users(admin: Dict[str, Any] = Depends(require_admin)):
    return users_service.list_users()


@router.post("", status_code=201)
def api_create_user(req: UserCreateRequest, admin: Dict[str, Any] = Depends(require_admin)):
    return users_service.create_user(name=req.name, email=req.email, password=req.password, role=req.role)


@router.patch("/{user_id}")
def api_update_role(user_id: str, req: RoleUpdateRequest, admin: Dict[str, Any] = Depends(require_admin)):
    return users_service.set_role(user_id, req.role)
