"""Cas d'usage Panier. L'identité est toujours passée explicitement (user_id)."""
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from storefront.catalog import repository as catalog_repository
from storefront.errors import NotFoundError, ValidationError
from storefront.utils.money import to_decimal
from . import repository

logger = logging.getLogger(__name__)

def cart_subtotal(items: List[Dict[str, Any]]) -> Decimal:
    """Somme prix courant x quantité (indicative, le montant facturé vient de Stripe)."""
    total = Decimal("0.00")
    for it in items:
        total += to_decimal((it.get("product") or {}).get("price")) * int(it.get("quantity") or 0)
    return total

def get_cart(user_id: str) -> Dict[str, Any]:
    items = repository.get_cart_items(user_id)
    return {
        "items": items,
        "count": sum(int(it.get("quantity") or 0) for it in items),
        "subtotal": cart_subtotal(items),
    }

def add_item(user_id: str, product_id: str, quantity: int = 1) -> Dict[str, Any]:
    """
    Ajoute un produit ou incrémente sa quantité.
    - quantity >= 1, produit existant (404 sinon)
    - insertion ou incrément atomiques côté base: aucun ajout concurrent n'est perdu
    """
    if quantity < 1:
        raise ValidationError("La quantité doit être au moins 1")
    if not catalog_repository.get_product(product_id):
        raise NotFoundError("Produit introuvable")

    return repository.add_or_increment(user_id, product_id, quantity)

def set_quantity(user_id: str, item_id: str, quantity: int) -> Optional[Dict[str, Any]]:
    """Fixe la quantité; <= 0 supprime la ligne (retourne None)."""
    if quantity <= 0:
        remove_item(user_id, item_id)
        return None
    updated = repository.update_quantity(user_id, item_id, quantity)
    if not updated:
        raise NotFoundError("Article du panier introuvable")
    return updated

def remove_item(user_id: str, item_id: str) -> None:
    if not repository.delete_item(user_id, item_id):
        raise NotFoundError("Article du panier introuvable")

def clear(user_id: str) -> int:
    removed = repository.clear_cart(user_id)
    logger.info("cart.clear user_id=%s removed=%s", user_id, removed)
    return removed
