# module storefront.cart.views
"""Endpoints Panier (/api/v1/cart), tous authentifiés et limités au panier de l'appelant."""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from storefront.utils.security import require_user
from . import service as cart_service
from .models import CartAddRequest, CartUpdateRequest

router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])


@router.get("")
def api_get_cart(user: Dict[str, Any] = Depends(require_user)):
    return cart_service.get_cart(user["id"])


@router.post("", status_code=201)
def api_add_to_cart(req: CartAddRequest, user: Dict[str, Any] = Depends(require_user)):
    return cart_service.add_item(user["id"], req.product_id, req.quantity)


@router.put("")
def api_update_cart(req: CartUpdateRequest, user: Dict[str, Any] = Depends(require_user)):
    item = cart_service.set_quantity(user["id"], req.item_id, req.quantity)
    if item is None:
        return {"message": "Article supprimé"}
    return item


@router.delete("")
def api_delete_from_cart(
    item_id: Optional[str] = Query(default=None, alias="itemId"),
    user: Dict[str, Any] = Depends(require_user),
):
    """Sans itemId: vide tout le panier."""
    if item_id:
        cart_service.remove_item(user["id"], item_id)
    else:
        cart_service.clear(user["id"])
    return {"message": "Panier mis à jour"}
