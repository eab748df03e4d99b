"""
Accès aux données pour les commandes (tables 'orders' et 'order_items').
La création commande + lignes passe par la fonction Postgres create_order_with_items:
une seule transaction, et un doublon de stripe_session_id renvoie la commande existante.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging

from storefront.errors import PersistenceError
from storefront.infra.errors import api_error_code, first_row, UNIQUE_VIOLATION
from storefront.infra.supabase_client import get_service_supabase

logger = logging.getLogger(__name__)

ORDER_COLUMNS = "*, items:order_items(id, product_id, quantity, price, product:products(id, name, images))"

# module storefront.orders.repository
def get_order(order_id: str) -> Optional[dict]:
    if not order_id:
        return None
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .select(ORDER_COLUMNS)
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
        return first_row(res.data)
    except Exception as e:
        logger.exception("orders.repository.get_order failed id=%s", order_id)
        raise PersistenceError(str(e))

def get_order_by_payment_reference(stripe_session_id: str) -> Optional[dict]:
    """Commande déjà matérialisée pour cette session Stripe (clé d'idempotence)."""
    if not stripe_session_id:
        return None
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .select("id, user_id, status, total, stripe_session_id")
            .eq("stripe_session_id", stripe_session_id)
            .limit(1)
            .execute()
        )
        return first_row(res.data)
    except Exception as e:
        logger.exception("orders.repository.get_order_by_payment_reference failed session=%s", stripe_session_id)
        raise PersistenceError(str(e))

def list_orders_by_user(user_id: str) -> List[dict]:
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .select(ORDER_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("orders.repository.list_orders_by_user failed user_id=%s", user_id)
        raise PersistenceError(str(e))

def list_orders(
    *,
    status: Optional[str] = None,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    limit: int = 100,
) -> List[dict]:
    """Listing admin, filtres optionnels statut / client (id ou email de livraison)."""
    try:
        query = (
            get_service_supabase()
            .table("orders")
            .select(ORDER_COLUMNS + ", user:users(id, name, email)")
        )
        if status:
            query = query.eq("status", status)
        if user_id:
            query = query.eq("user_id", user_id)
        if email:
            query = query.ilike("shipping_email", f"%{email}%")
        res = query.order("created_at", desc=True).limit(limit).execute()
        return res.data or []
    except Exception as e:
        logger.exception("orders.repository.list_orders failed status=%s user_id=%s", status, user_id)
        raise PersistenceError(str(e))

def update_status(order_id: str, status: str) -> Optional[dict]:
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .update({"status": status})
            .eq("id", order_id)
            .execute()
        )
        return first_row(res.data)
    except Exception as e:
        logger.exception("orders.repository.update_status failed id=%s status=%s", order_id, status)
        raise PersistenceError(str(e))

def create_order_with_items(order: Dict[str, Any], items: List[Dict[str, Any]]) -> Tuple[dict, bool]:
    """
    Insère la commande et ses lignes de manière atomique (RPC create_order_with_items).
    Retour: (commande, created); created=False si la session Stripe était déjà matérialisée.
    """
    try:
        res = (
            get_service_supabase()
            .rpc("create_order_with_items", {"p_order": order, "p_items": items})
            .execute()
        )
    except Exception as e:
        if api_error_code(e) == UNIQUE_VIOLATION:
            existing = get_order_by_payment_reference(order.get("stripe_session_id") or "")
            if existing:
                return existing, False
        logger.exception(
            "orders.repository.create_order_with_items failed session=%s user_id=%s",
            order.get("stripe_session_id"), order.get("user_id"),
        )
        raise PersistenceError(str(e))

    payload = first_row(res.data) or {}
    row = payload.get("order") or {}
    if not row.get("id"):
        raise PersistenceError("create_order_with_items: réponse vide")
    return row, bool(payload.get("created", True))
