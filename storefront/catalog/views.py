# module storefront.catalog.views
"""Endpoints Catalogue.
- Lecture publique: /api/v1/categories, /api/v1/products (filtre ?categoryId=).
- Écriture (POST/PUT/DELETE): réservée aux administrateurs (require_admin).
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from storefront.utils.security import require_admin
from . import service as catalog_service
from .models import CategoryIn, CategoryUpdate, ProductIn, ProductUpdate

categories_router = APIRouter(prefix="/api/v1/categories", tags=["Catalog API"])
products_router = APIRouter(prefix="/api/v1/products", tags=["Catalog API"])


@categories_router.get("")
def api_list_categories():
    return catalog_service.list_categories()


@categories_router.get("/{category_id}")
def api_get_category(category_id: str):
    return catalog_service.get_category(category_id)


@categories_router.post("", status_code=201)
def api_create_category(req: CategoryIn, admin: Dict[str, Any] = Depends(require_admin)):
    return catalog_service.create_category(req)


@categories_router.put("/{category_id}")
def api_update_category(category_id: str, req: CategoryUpdate, admin: Dict[str, Any] = Depends(require_admin)):
    return catalog_service.update_category(category_id, req)


@categories_router.delete("/{category_id}")
def api_delete_category(category_id: str, admin: Dict[str, Any] = Depends(require_admin)):
    catalog_service.delete_category(category_id)
    return {"message": "Catégorie supprimée"}


@products_router.get("")
def api_list_products(category_id: Optional[str] = Query(default=None, alias="categoryId")):
    return catalog_service.list_products(category_id)


@products_router.get("/{product_id}")
def api_get_product(product_id: str):
    return catalog_service.get_product(product_id)


@products_router.post("", status_code=201)
def api_create_product(req: ProductIn, admin: Dict[str, Any] = Depends(require_admin)):
    return catalog_service.create_product(req)


@products_router.put("/{product_id}")
def api_update_product(product_id: str, req: ProductUpdate, admin: Dict[str, Any] = Depends(require_admin)):
    return catalog_service.update_product(product_id, req)


@products_router.delete("/{product_id}")
def api_delete_product(product_id: str, admin: Dict[str, Any] = Depends(require_admin)):
    catalog_service.delete_product(product_id)
    return {"message": "Produit supprimé"}
