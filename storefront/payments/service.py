"""
Cas d'usage 'payments': orchestre panier, catalogue, Stripe et commandes.

Cycle de vie d'une session de paiement côté serveur:
  création (checkout) -> notification reçue -> signature vérifiée ou rejetée
  -> événement ignoré ou retenu -> matérialisation -> réglée.
Une session réglée le reste: toute redélivrance aboutit à ALREADY_SETTLED
et ne crée ni commande ni ligne supplémentaire.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from storefront import config
from storefront.cart import repository as cart_repository
from storefront.catalog import repository as catalog_repository
from storefront.errors import AuthorizationError, PersistenceError, ValidationError
from storefront.orders import repository as orders_repository
from storefront.orders.models import OrderStatus
from storefront.utils.money import from_minor_units, CENT

from . import line_items as li
from . import metadata as meta
from . import stripe_client
from .models import SettlementOutcome

logger = logging.getLogger(__name__)

COMPLETED_EVENT = "checkout.session.completed"
SETTLED_PAYMENT_STATUSES = {"paid", "no_payment_required"}

# module storefront.payments.service
def create_checkout_session(
    user: Dict[str, Any],
    *,
    shipping_name: str,
    shipping_email: str,
    shipping_address: str,
    success_url: str,
    cancel_url: str,
) -> Dict[str, Any]:
    """
    Prépare la session Stripe à partir du panier serveur de l'utilisateur.
    Le panier n'est pas modifié ici: il n'est vidé qu'après paiement confirmé.
    Retour: {"sessionId", "url"}
    """
    user_id = str(user.get("id") or "")
    cart_items = cart_repository.get_cart_items(user_id)
    if not cart_items:
        raise ValidationError("Le panier est vide")

    items = li.to_line_items(cart_items, config.STRIPE_CURRENCY)
    metadata = li.make_metadata(user_id, shipping_name, shipping_email, shipping_address)
    session = stripe_client.create_session(
        line_items=items,
        success_url=success_url,
        cancel_url=cancel_url,
        metadata=metadata,
        client_reference_id=user_id,
        customer_email=shipping_email or user.get("email") or None,
    )
    logger.info("payments.checkout session=%s user_id=%s lines=%s", session.get("id"), user_id, len(items))
    return {"sessionId": session.get("id"), "url": session.get("url")}

def _resolve_items(purchased: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Sépare les articles achetés en (lignes de commande, articles non résolus).
    Un article est résolu si son product_id existe encore au catalogue.
    """
    ids = [p["product_id"] for p in purchased if p.get("product_id")]
    products = catalog_repository.get_products_map(ids) if ids else {}

    resolved: List[Dict[str, Any]] = []
    unresolved: List[Dict[str, Any]] = []
    for p in purchased:
        pid = p.get("product_id")
        if pid and pid in products:
            resolved.append({
                "product_id": pid,
                "quantity": p["quantity"],
                "price": p["unit_price"],
            })
        else:
            unresolved.append({
                "product_id": pid,
                "name": p.get("name") or "",
                "quantity": p["quantity"],
                "unit_price": str(p["unit_price"]),
            })
    return resolved, unresolved

def _build_order(
    session: Dict[str, Any],
    user_id: str,
    shipping: Dict[str, str],
    resolved: List[Dict[str, Any]],
    unresolved: List[Dict[str, Any]],
) -> Dict[str, Any]:
    total = from_minor_units(session.get("amount_total"))
    items_sum = sum((Decimal(r["price"]) * r["quantity"] for r in resolved), Decimal("0.00")).quantize(CENT)

    notes: Dict[str, Any] = {}
    if unresolved:
        notes["unresolved_items"] = unresolved
    if items_sum != total:
        notes["amount_mismatch"] = {"total": str(total), "items_sum": str(items_sum)}

    return {
        "user_id": user_id,
        "total": str(total),
        "status": OrderStatus.PROCESSING.value,
        "shipping_name": shipping.get("shipping_name") or "",
        "shipping_email": shipping.get("shipping_email") or "",
        "shipping_address": shipping.get("shipping_address") or "",
        "stripe_session_id": session.get("id"),
        "stripe_payment_id": session.get("payment_intent") if isinstance(session.get("payment_intent"), str) else None,
        "needs_review": bool(notes),
        "review_notes": notes or None,
    }

def _clear_cart_best_effort(user_id: str, session_id: str) -> None:
    try:
        removed = cart_repository.clear_cart(user_id)
        logger.info("payments.settle cart cleared user_id=%s removed=%s", user_id, removed)
    except PersistenceError:
        # La commande est déjà enregistrée: on ne la remet pas en cause
        logger.exception("payments.settle cart clear failed user_id=%s session=%s", user_id, session_id)

def settle_session(
    session_id: str,
    *,
    expected_user_id: Optional[str] = None,
) -> Tuple[SettlementOutcome, Optional[Dict[str, Any]]]:
    """
    Matérialise une session Checkout complétée en commande.
    - relit la session chez Stripe (montant, metadata) puis toutes les pages de ses line_items
    - expected_user_id: si fourni (confirmation côté client), la session doit lui appartenir
    - idempotent: clé stripe_session_id, vérifiée avant insertion et garantie par contrainte unique
    - commande + lignes en une transaction; panier vidé ensuite (best-effort)
    Retour: (issue, commande ou None)
    """
    session = stripe_client.get_session(session_id)
    user_id, shipping = meta.extract_metadata_from_session(session)

    if expected_user_id is not None and user_id != expected_user_id:
        raise AuthorizationError("Session appartenant à un autre utilisateur")

    payment_status = session.get("payment_status") or ""
    if payment_status not in SETTLED_PAYMENT_STATUSES:
        logger.info("payments.settle session=%s non payée (payment_status=%s)", session_id, payment_status)
        return SettlementOutcome.NOT_PAID, None

    if not user_id:
        logger.error("payments.settle session=%s sans user_id en metadata: réconciliation manuelle requise", session_id)
        return SettlementOutcome.MISSING_USER, None

    existing = orders_repository.get_order_by_payment_reference(session_id)
    if existing:
        logger.info("payments.settle session=%s déjà réglée order=%s", session_id, existing.get("id"))
        return SettlementOutcome.ALREADY_SETTLED, existing

    purchased = meta.extract_purchased_items(stripe_client.list_line_items(session_id))
    resolved, unresolved = _resolve_items(purchased)
    order = _build_order(session, user_id, shipping, resolved, unresolved)
    if order["needs_review"]:
        logger.warning("payments.settle session=%s à vérifier: %s", session_id, order["review_notes"])

    items = [{**r, "price": str(r["price"])} for r in resolved]
    row, created = orders_repository.create_order_with_items(order, items)
    if not created:
        logger.info("payments.settle session=%s réglée en parallèle order=%s", session_id, row.get("id"))
        return SettlementOutcome.ALREADY_SETTLED, row

    logger.info(
        "payments.settle order=%s session=%s user_id=%s items=%s total=%s",
        row.get("id"), session_id, user_id, len(items), order["total"],
    )
    _clear_cart_best_effort(user_id, session_id)
    return SettlementOutcome.SETTLED, row

def handle_event(event: Dict[str, Any]) -> SettlementOutcome:
    """
    Traite un événement Stripe déjà authentifié.
    Seul checkout.session.completed est retenu; tout le reste est acquitté sans effet.
    """
    event_type = (event or {}).get("type")
    if event_type != COMPLETED_EVENT:
        logger.debug("payments.webhook ignored type=%s", event_type)
        return SettlementOutcome.IGNORED

    session_obj = ((event.get("data") or {}).get("object")) or {}
    session_id = session_obj.get("id")
    if not session_id:
        logger.warning("payments.webhook event=%s sans session id", event.get("id"))
        return SettlementOutcome.IGNORED

    outcome, _ = settle_session(session_id)
    logger.info("payments.webhook event=%s session=%s outcome=%s", event.get("id"), session_id, outcome.value)
    return outcome

def confirm_session(session_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Alternative au webhook après redirection: règle la session si elle appartient à l'utilisateur.
    Erreurs: 403 si la session est à un autre utilisateur, 400 si le paiement n'est pas confirmé.
    """
    if not session_id:
        raise ValidationError("session_id manquant")
    outcome, order = settle_session(session_id, expected_user_id=str(user.get("id") or ""))
    if outcome == SettlementOutcome.NOT_PAID:
        raise ValidationError("Paiement non confirmé")
    return {"status": outcome.value, "orderId": (order or {}).get("id")}
