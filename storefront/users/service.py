"""Couche service du domaine Utilisateurs: inscription, gestion admin, rôle."""
from typing import Any, Dict, List, Optional
import logging
import bcrypt

from storefront.errors import ConflictError, NotFoundError, ValidationError
from . import repository
from .models import Role, public_user

logger = logging.getLogger(__name__)

def hash_password(password: str) -> str:
    # bcrypt, 10 rounds (compatible avec les hash existants)
    salt = bcrypt.gensalt(rounds=10)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

def signup(email: str, password: Optional[str] = None, name: Optional[str] = None, user_id: Optional[str] = None) -> Dict[str, Any]:
    """Inscription:
    - exige un mot de passe ou un identifiant externe
    - refuse un email déjà enregistré
    - rôle toujours CUSTOMER
    """
    email = (email or "").strip()
    if not email or (not password and not user_id):
        raise ValidationError("Email et mot de passe (ou ID) sont requis")
    if repository.get_user_by_email(email):
        raise ConflictError("L'email est déjà enregistré")

    row = repository.create_user({
        "id": user_id or None,
        "email": email,
        "name": (name or "").strip() or None,
        "password": hash_password(password) if password else None,
        "role": Role.CUSTOMER.value,
    })
    logger.info("users.signup email=%s external=%s", email, bool(user_id))
    return public_user(row)

def create_user(*, name: str, email: str, password: str, role: Role = Role.CUSTOMER) -> Dict[str, Any]:
    """Création par un administrateur (mot de passe obligatoire)."""
    email = (email or "").strip()
    if repository.get_user_by_email(email):
        raise ConflictError("L'email est déjà enregistré")
    row = repository.create_user({
        "name": name.strip(),
        "email": email,
        "password": hash_password(password),
        "role": Role(role).value,
    })
    return public_user(row)

def list_users(limit: int = 100) -> List[Dict[str, Any]]:
    return [public_user(u) for u in repository.list_users(limit=limit)]

def set_role(user_id: str, role: Role) -> Dict[str, Any]:
    """Change le rôle (table users), puis synchronise le fournisseur d'identité en best-effort."""
    updated = repository.update_user_role(user_id, Role(role).value)
    if not updated:
        raise NotFoundError("Utilisateur introuvable")
    if not repository.set_auth_user_role(user_id, Role(role).value):
        logger.warning("users.set_role: rôle non synchronisé côté auth id=%s", user_id)
    return public_user(updated)
