from typing import List
import logging

from storefront.errors import PersistenceError
from storefront.infra.supabase_client import get_service_supabase

logger = logging.getLogger(__name__)

# module storefront.admin.repository
def count_table_rows(table_name: str) -> int:
    """
    Compte les lignes d'une table via Supabase.
    Utilise count='exact' si disponible, sinon fallback sur len(data).
    """
    try:
        res = get_service_supabase().table(table_name).select("id", count="exact").execute()
    except Exception as e:
        logger.exception("admin.repository.count_table_rows failed table=%s", table_name)
        raise PersistenceError(str(e))
    if getattr(res, "count", None) is not None:
        return int(res.count)
    return len(res.data or [])

def fetch_order_totals(exclude_status: str) -> List[dict]:
    """Montants de toutes les commandes hors statut exclu (somme faite en Decimal côté service)."""
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .select("total")
            .neq("status", exclude_status)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("admin.repository.fetch_order_totals failed")
        raise PersistenceError(str(e))

def fetch_recent_orders(limit: int = 5) -> List[dict]:
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .select("id, total, status, shipping_name, shipping_email, created_at, user:users(id, name, email)")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("admin.repository.fetch_recent_orders failed")
        raise PersistenceError(str(e))
