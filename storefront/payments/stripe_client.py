"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
Toute erreur du SDK est traduite en PaymentProviderError (ou InvalidWebhook pour la signature).
"""
import logging
from typing import Any, Dict, List, Optional

import stripe
from fastapi import Request

from storefront import config
from storefront.errors import PaymentProviderError
from storefront.payments.models import InvalidWebhook

logger = logging.getLogger(__name__)

LINE_ITEMS_PAGE_SIZE = 100
LINE_ITEMS_EXPAND = ["data.price.product"]

def _as_dict(obj: Any) -> Dict[str, Any]:
    # Les objets stripe>=10 ne sont plus des dict: to_dict() est récursif
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj or {})

# module storefront.payments.stripe_client
def require_stripe():
    """
    Configure stripe.api_key depuis STRIPE_SECRET_KEY et retourne le module stripe.
    Sans clé, soulève PaymentProviderError plutôt que de laisser le SDK échouer plus loin.
    """
    if not config.STRIPE_SECRET_KEY:
        logger.error("stripe: STRIPE_SECRET_KEY non configurée")
        raise PaymentProviderError()
    stripe.api_key = config.STRIPE_SECRET_KEY
    return stripe

def create_session(
    *,
    line_items: List[Dict[str, Any]],
    success_url: str,
    cancel_url: str,
    metadata: Dict[str, str],
    client_reference_id: Optional[str] = None,
    customer_email: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout en mode paiement unique.
    Retour: dict session (ex: {"id": "cs_test_...", "url": "https://..."})
    """
    require_stripe()
    params: Dict[str, Any] = {
        "mode": "payment",
        "line_items": line_items,
        "success_url": success_url,
        "cancel_url": cancel_url,
        "metadata": metadata,
        "payment_method_types": ["card"],
    }
    if client_reference_id:
        params["client_reference_id"] = client_reference_id
    if customer_email:
        params["customer_email"] = customer_email
    try:
        session = stripe.checkout.Session.create(**params)
    except stripe.StripeError as e:
        logger.exception("stripe.create_session failed user_id=%s", client_reference_id)
        raise PaymentProviderError() from e
    return _as_dict(session)

def get_session(session_id: str) -> Dict[str, Any]:
    """Récupère une session Checkout (statut de paiement, montant, metadata)."""
    require_stripe()
    try:
        session = stripe.checkout.Session.retrieve(session_id)
    except stripe.StripeError as e:
        logger.exception("stripe.get_session failed session=%s", session_id)
        raise PaymentProviderError() from e
    return _as_dict(session)

def list_line_items(session_id: str) -> List[Dict[str, Any]]:
    """
    Tous les articles achetés d'une session, produits expand (metadata.product_id).
    Stripe pagine la liste: on suit has_more/starting_after jusqu'à la dernière page.
    """
    require_stripe()
    params: Dict[str, Any] = {"limit": LINE_ITEMS_PAGE_SIZE, "expand": LINE_ITEMS_EXPAND}
    items: List[Dict[str, Any]] = []
    try:
        while True:
            page = _as_dict(stripe.checkout.Session.list_line_items(session_id, **params))
            data = page.get("data") or []
            items.extend(data)
            if not page.get("has_more") or not data:
                break
            params["starting_after"] = data[-1]["id"]
    except stripe.StripeError as e:
        logger.exception("stripe.list_line_items failed session=%s fetched=%s", session_id, len(items))
        raise PaymentProviderError() from e
    return items

async def parse_event(request: Request) -> Dict[str, Any]:
    """
    Parse et valide un événement Stripe signé (webhook).
    - Lit le body brut + en-tête Stripe-Signature
    - Valide la signature via Webhook.construct_event (STRIPE_WEBHOOK_SECRET)
    Retour: l'événement sous forme de dict. InvalidWebhook sinon.
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    if not config.STRIPE_WEBHOOK_SECRET:
        logger.error("stripe.webhook: STRIPE_WEBHOOK_SECRET non configuré, événement rejeté")
        raise InvalidWebhook("Webhook non configuré")
    if not sig_header:
        raise InvalidWebhook("Signature Stripe manquante")
    try:
        event = stripe.Webhook.construct_event(payload, sig_header, config.STRIPE_WEBHOOK_SECRET)
    except stripe.SignatureVerificationError:
        logger.warning("stripe.webhook: signature invalide")
        raise InvalidWebhook("Signature Stripe invalide")
    except ValueError:
        logger.warning("stripe.webhook: payload illisible")
        raise InvalidWebhook("Payload Stripe invalide")
    return _as_dict(event)
