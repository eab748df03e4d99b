"""
Accès aux données du panier (table 'cart_items').
Chaque requête est filtrée par user_id: une ligne d'un autre utilisateur n'est jamais lue ni modifiée.
"""
from typing import List, Optional
import logging

from storefront.errors import NotFoundError, PersistenceError
from storefront.infra.errors import api_error_code, first_row, FOREIGN_KEY_VIOLATION
from storefront.infra.supabase_client import get_service_supabase

logger = logging.getLogger(__name__)

# module storefront.cart.repository
def get_cart_items(user_id: str) -> List[dict]:
    try:
        res = (
            get_service_supabase()
            .table("cart_items")
            .select("id, user_id, product_id, quantity, created_at, product:products(*)")
            .eq("user_id", user_id)
            .order("created_at", desc=False)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("cart.repository.get_cart_items failed user_id=%s", user_id)
        raise PersistenceError(str(e))

def add_or_increment(user_id: str, product_id: str, quantity: int) -> dict:
    """
    Ajoute la paire (user, produit) ou incrémente sa quantité en une seule requête
    (RPC add_to_cart: insert ... on conflict do update). Deux ajouts simultanés s'additionnent.
    """
    params = {"p_user": user_id, "p_product": product_id, "p_qty": quantity}
    try:
        res = get_service_supabase().rpc("add_to_cart", params).execute()
    except Exception as e:
        if api_error_code(e) == FOREIGN_KEY_VIOLATION:
            raise NotFoundError("Produit introuvable")
        logger.exception("cart.repository.add_or_increment failed user_id=%s product_id=%s", user_id, product_id)
        raise PersistenceError(str(e))
    row = first_row(res.data)
    if not row:
        raise PersistenceError("add_to_cart: réponse vide")
    return row

def update_quantity(user_id: str, item_id: str, quantity: int) -> Optional[dict]:
    """None si la ligne n'existe pas pour cet utilisateur."""
    try:
        res = (
            get_service_supabase()
            .table("cart_items")
            .update({"quantity": quantity})
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        )
        return first_row(res.data)
    except Exception as e:
        logger.exception("cart.repository.update_quantity failed user_id=%s item_id=%s", user_id, item_id)
        raise PersistenceError(str(e))

def delete_item(user_id: str, item_id: str) -> bool:
    try:
        res = (
            get_service_supabase()
            .table("cart_items")
            .delete()
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        )
        return bool(res.data)
    except Exception as e:
        logger.exception("cart.repository.delete_item failed user_id=%s item_id=%s", user_id, item_id)
        raise PersistenceError(str(e))

def clear_cart(user_id: str) -> int:
    """Supprime toutes les lignes du panier; retourne le nombre de lignes supprimées."""
    try:
        res = get_service_supabase().table("cart_items").delete().eq("user_id", user_id).execute()
        return len(res.data or [])
    except Exception as e:
        logger.exception("cart.repository.clear_cart failed user_id=%s", user_id)
        raise PersistenceError(str(e))
