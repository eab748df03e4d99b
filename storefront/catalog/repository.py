from typing import List, Optional, Dict, Any, Iterable
import logging

from storefront.errors import ConflictError, PersistenceError, ValidationError
from storefront.infra.errors import api_error_code, first_row, UNIQUE_VIOLATION, FOREIGN_KEY_VIOLATION
from storefront.infra.supabase_client import get_supabase, get_service_supabase

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "*, category:categories(id, name, slug)"

# module storefront.catalog.repository

# --- Catégories ---

def list_categories() -> List[dict]:
    try:
        res = get_supabase().table("categories").select("*").order("name").execute()
        return res.data or []
    except Exception as e:
        logger.exception("catalog.repository.list_categories failed")
        raise PersistenceError(str(e))

def get_category(category_id: str) -> Optional[dict]:
    if not category_id:
        return None
    try:
        res = get_supabase().table("categories").select("*").eq("id", category_id).limit(1).execute()
        return first_row(res.data)
    except Exception as e:
        logger.exception("catalog.repository.get_category failed id=%s", category_id)
        raise PersistenceError(str(e))

def create_category(data: Dict[str, Any]) -> dict:
    try:
        res = get_service_supabase().table("categories").insert(data).execute()
        return first_row(res.data) or data
    except Exception as e:
        if api_error_code(e) == UNIQUE_VIOLATION:
            raise ConflictError("Une catégorie avec ce slug existe déjà")
        logger.exception("catalog.repository.create_category failed data=%s", data)
        raise PersistenceError(str(e))

def update_category(category_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = get_service_supabase().table("categories").update(data).eq("id", category_id).execute()
        return first_row(res.data)
    except Exception as e:
        if api_error_code(e) == UNIQUE_VIOLATION:
            raise ConflictError("Une catégorie avec ce slug existe déjà")
        logger.exception("catalog.repository.update_category failed id=%s data=%s", category_id, data)
        raise PersistenceError(str(e))

def delete_category(category_id: str) -> bool:
    """True si une ligne a été supprimée. Catégorie encore référencée -> ValidationError."""
    try:
        res = get_service_supabase().table("categories").delete().eq("id", category_id).execute()
        return bool(res.data)
    except Exception as e:
        if api_error_code(e) == FOREIGN_KEY_VIOLATION:
            raise ValidationError("Catégorie encore utilisée par des produits")
        logger.exception("catalog.repository.delete_category failed id=%s", category_id)
        raise PersistenceError(str(e))

# --- Produits ---

def list_products(category_id: Optional[str] = None) -> List[dict]:
    try:
        query = get_supabase().table("products").select(PRODUCT_COLUMNS)
        if category_id:
            query = query.eq("category_id", category_id)
        res = query.order("created_at", desc=True).execute()
        return res.data or []
    except Exception as e:
        logger.exception("catalog.repository.list_products failed category_id=%s", category_id)
        raise PersistenceError(str(e))

def get_product(product_id: str) -> Optional[dict]:
    if not product_id:
        return None
    try:
        res = get_supabase().table("products").select(PRODUCT_COLUMNS).eq("id", product_id).limit(1).execute()
        return first_row(res.data)
    except Exception as e:
        logger.exception("catalog.repository.get_product failed id=%s", product_id)
        raise PersistenceError(str(e))

def fetch_products_by_ids(ids: Iterable[str]) -> List[dict]:
    """
    Récupère les produits par leurs IDs (table 'products').
    - Retourne [] si ids vide.
    """
    id_list = [str(i) for i in ids if i]
    if not id_list:
        return []
    try:
        res = get_service_supabase().table("products").select("*").in_("id", id_list).execute()
        return res.data or []
    except Exception as e:
        logger.exception("catalog.repository.fetch_products_by_ids failed ids=%s", id_list)
        raise PersistenceError(str(e))

def get_products_map(ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """Retourne un dict {id: produit} à partir d’une liste d’IDs."""
    return {str(p.get("id")): p for p in fetch_products_by_ids(ids)}

def create_product(data: Dict[str, Any]) -> dict:
    try:
        res = get_service_supabase().table("products").insert(data).execute()
        return first_row(res.data) or data
    except Exception as e:
        if api_error_code(e) == FOREIGN_KEY_VIOLATION:
            raise ValidationError("Catégorie inexistante")
        logger.exception("catalog.repository.create_product failed data=%s", data)
        raise PersistenceError(str(e))

def update_product(product_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = get_service_supabase().table("products").update(data).eq("id", product_id).execute()
        return first_row(res.data)
    except Exception as e:
        if api_error_code(e) == FOREIGN_KEY_VIOLATION:
            raise ValidationError("Catégorie inexistante")
        logger.exception("catalog.repository.update_product failed id=%s data=%s", product_id, data)
        raise PersistenceError(str(e))

def delete_product(product_id: str) -> bool:
    try:
        res = get_service_supabase().table("products").delete().eq("id", product_id).execute()
        return bool(res.data)
    except Exception as e:
        if api_error_code(e) == FOREIGN_KEY_VIOLATION:
            raise ValidationError("Produit référencé par des commandes, suppression impossible")
        logger.exception("catalog.repository.delete_product failed id=%s", product_id)
        raise PersistenceError(str(e))
