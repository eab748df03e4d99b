"""
Résolution de l'identité: token Supabase -> utilisateur applicatif (table users).
Le rôle fait foi depuis la table users (CUSTOMER | ADMIN), pas depuis les metadata du token.
"""
from typing import Dict, Any
import logging

from supabase import AuthApiError, AuthError, AuthRetryableError, AuthUnknownError

from storefront.errors import AuthenticationError, PersistenceError
from storefront.users import repository as users_repository
from storefront.users.models import Role
from .repository import get_user_from_access_token as _repo_get_user_from_token

logger = logging.getLogger(__name__)

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """
    Normalise l'utilisateur:
    - valide le token auprès du fournisseur d'identité (refus: 401, panne: PersistenceError 500)
    - charge le profil applicatif (rôle); le crée en CUSTOMER s'il est absent
    Retour: {id, email, name, role, token}
    """
    try:
        raw = _repo_get_user_from_token(access_token)
    except (AuthRetryableError, AuthUnknownError) as e:
        logger.exception("auth.service.get_user_from_token: fournisseur d'identité injoignable")
        raise PersistenceError(str(e))
    except AuthApiError as e:
        if (e.status or 0) >= 500:
            logger.exception("auth.service.get_user_from_token: erreur du fournisseur d'identité status=%s", e.status)
            raise PersistenceError(str(e))
        logger.warning("auth.service.get_user_from_token: token rejeté status=%s", e.status)
        raise AuthenticationError("Session expirée, veuillez vous connecter")
    except AuthError:
        logger.warning("auth.service.get_user_from_token: token rejeté")
        raise AuthenticationError("Session expirée, veuillez vous connecter")

    uid = raw.get("id")
    if not uid:
        raise AuthenticationError("Session expirée, veuillez vous connecter")
    email = raw.get("email")
    metadata = raw.get("user_metadata") or {}

    profile = users_repository.get_user_by_id(uid)
    if profile is None:
        # Utilisateur provisionné par le fournisseur d'identité mais sans profil applicatif
        try:
            profile = users_repository.create_user({
                "id": uid,
                "email": email,
                "name": metadata.get("full_name") or metadata.get("name"),
                "role": Role.CUSTOMER.value,
            })
        except PersistenceError:
            profile = {"id": uid, "email": email, "role": Role.CUSTOMER.value}

    return {
        "id": uid,
        "email": profile.get("email") or email,
        "name": profile.get("name"),
        "role": profile.get("role") or Role.CUSTOMER.value,
        "token": access_token,
    }
