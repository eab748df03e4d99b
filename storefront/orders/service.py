"""Couche service des commandes.
Rôles:
- Lecture d'une commande: propriétaire ou administrateur uniquement (toujours vérifié ici).
- Listing: commandes de l'appelant, ou toutes (avec filtres) pour un administrateur.
- Changement de statut: administrateur, transitions de OrderStatus respectées.
"""
from typing import Any, Dict, List, Optional
import logging

from storefront.errors import AuthorizationError, NotFoundError, ValidationError
from storefront.utils.security import is_admin
from . import repository
from .models import OrderStatus, can_transition

logger = logging.getLogger(__name__)

def get_order_for(user: Dict[str, Any], order_id: str) -> Dict[str, Any]:
    order = repository.get_order(order_id)
    if not order:
        raise NotFoundError("Commande introuvable")
    if order.get("user_id") != user.get("id") and not is_admin(user):
        logger.warning("orders.get_order_for refused order_id=%s user_id=%s", order_id, user.get("id"))
        raise AuthorizationError("Cette commande appartient à un autre utilisateur")
    return order

def list_orders_for(user: Dict[str, Any]) -> List[Dict[str, Any]]:
    if is_admin(user):
        return repository.list_orders()
    return repository.list_orders_by_user(user["id"])

def list_all_orders(
    user: Dict[str, Any],
    *,
    status: Optional[OrderStatus] = None,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    limit: int = 100,
) -> List[Dict[str, Any]]:
    if not is_admin(user):
        raise AuthorizationError("Accès réservé aux administrateurs")
    return repository.list_orders(
        status=status.value if status else None,
        user_id=user_id,
        email=email,
        limit=limit,
    )

def update_status(user: Dict[str, Any], order_id: str, status: OrderStatus) -> Dict[str, Any]:
    if not is_admin(user):
        raise AuthorizationError("Accès réservé aux administrateurs")
    order = repository.get_order(order_id)
    if not order:
        raise NotFoundError("Commande introuvable")

    current = OrderStatus(order.get("status") or OrderStatus.PENDING.value)
    if current == status:
        return order
    if not can_transition(current, status):
        raise ValidationError(f"Transition de statut interdite: {current.value} -> {status.value}")

    updated = repository.update_status(order_id, status.value)
    if not updated:
        raise NotFoundError("Commande introuvable")
    logger.info("orders.update_status order_id=%s %s->%s by=%s", order_id, current.value, status.value, user.get("id"))
    return updated
