"""Cas d'usage Catalogue: catégories (slug dérivé du nom) et produits (catégorie obligatoire)."""
from typing import Any, Dict, List, Optional

from storefront.errors import NotFoundError, ValidationError
from storefront.utils.text import slugify
from . import repository
from .models import CategoryIn, CategoryUpdate, ProductIn, ProductUpdate, to_row

# --- Catégories ---

def list_categories() -> List[Dict[str, Any]]:
    return repository.list_categories()

def get_category(category_id: str) -> Dict[str, Any]:
    category = repository.get_category(category_id)
    if not category:
        raise NotFoundError("Catégorie introuvable")
    return category

def create_category(req: CategoryIn) -> Dict[str, Any]:
    slug = slugify(req.name)
    if not slug:
        raise ValidationError("Le nom ne produit pas de slug valide")
    return repository.create_category({
        "name": req.name.strip(),
        "slug": slug,
        "description": req.description or None,
    })

def update_category(category_id: str, req: CategoryUpdate) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if req.name:
        data["name"] = req.name.strip()
        data["slug"] = slugify(req.name)
    if "description" in req.model_fields_set:
        data["description"] = req.description or None
    if not data:
        return get_category(category_id)
    updated = repository.update_category(category_id, data)
    if not updated:
        raise NotFoundError("Catégorie introuvable")
    return updated

def delete_category(category_id: str) -> None:
    if not repository.delete_category(category_id):
        raise NotFoundError("Catégorie introuvable")

# --- Produits ---

def _require_category(category_id: Optional[str]) -> None:
    if category_id and not repository.get_category(category_id):
        raise ValidationError("Catégorie inexistante")

def list_products(category_id: Optional[str] = None) -> List[Dict[str, Any]]:
    return repository.list_products(category_id)

def get_product(product_id: str) -> Dict[str, Any]:
    product = repository.get_product(product_id)
    if not product:
        raise NotFoundError("Produit introuvable")
    return product

def create_product(req: ProductIn) -> Dict[str, Any]:
    _require_category(req.category_id)
    return repository.create_product(to_row(req))

def update_product(product_id: str, req: ProductUpdate) -> Dict[str, Any]:
    data = to_row(req)
    if not data:
        return get_product(product_id)
    _require_category(data.get("category_id"))
    updated = repository.update_product(product_id, data)
    if not updated:
        raise NotFoundError("Produit introuvable")
    return updated

def delete_product(product_id: str) -> None:
    if not repository.delete_product(product_id):
        raise NotFoundError("Produit introuvable")
