# module storefront.orders.views
"""Endpoints Commandes (/api/v1/orders).
- GET liste: commandes de l'appelant, toutes pour un admin (filtres status/userId/email).
- GET /{id}: propriétaire ou admin (403 sinon).
- PUT|PATCH /{id}: statut, admin uniquement.
Les commandes ne sont créées que par la confirmation de paiement (storefront.payments).
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from storefront.utils.security import require_user, require_admin, is_admin
from . import service as orders_service
from .models import OrderStatus, StatusUpdateRequest

router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])


@router.get("")
def api_list_orders(
    status: Optional[OrderStatus] = Query(default=None),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    email: Optional[str] = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    user: Dict[str, Any] = Depends(require_user),
):
    if is_admin(user):
        return orders_service.list_all_orders(user, status=status, user_id=user_id, email=email, limit=limit)
    return orders_service.list_orders_for(user)


@router.get("/{order_id}")
def api_get_order(order_id: str, user: Dict[str, Any] = Depends(require_user)):
    return orders_service.get_order_for(user, order_id)


@router.api_route("/{order_id}", methods=["PUT", "PATCH"])
def api_update_order_status(order_id: str, req: StatusUpdateRequest, admin: Dict[str, Any] = Depends(require_admin)):
    return orders_service.update_status(admin, order_id, req.status)
