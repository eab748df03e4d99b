import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from storefront import config
from storefront.errors import PaymentProviderError, PersistenceError, ValidationError
from storefront.utils.security import require_user
from storefront.utils.rate_limit import optional_rate_limit
from storefront.payments import stripe_client
from storefront.payments import service as payments_service
from storefront.payments.models import CheckoutRequest, ConfirmRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])

def _redirect_base(request: Request) -> str:
    # Origine du front si elle est explicitement autorisée, sinon BASE_URL
    origin = (request.headers.get("origin") or "").rstrip("/")
    if origin and origin in config.CORS_ORIGINS:
        return origin
    return config.BASE_URL

# module storefront.payments.views
@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_checkout_session(
    request: Request,
    req: CheckoutRequest,
    user: Dict[str, Any] = Depends(require_user),
):
    """
    Crée une session Checkout Stripe pour le panier serveur de l'utilisateur authentifié.
    - Entrée JSON: { "shippingName", "shippingEmail", "shippingAddress" }
    - Sécurité: require_user + rate limit (10 req / 60s)
    - Retour: { "sessionId", "url" }
    - Erreurs: 400 panier vide, 502 Stripe indisponible
    """
    base = _redirect_base(request)
    success_url = f"{base}{config.CHECKOUT_SUCCESS_PATH}?session_id={{CHECKOUT_SESSION_ID}}"
    cancel_url = f"{base}{config.CHECKOUT_CANCEL_PATH}"
    return await run_in_threadpool(
        lambda: payments_service.create_checkout_session(
            user,
            shipping_name=req.shipping_name,
            shipping_email=str(req.shipping_email),
            shipping_address=req.shipping_address,
            success_url=success_url,
            cancel_url=cancel_url,
        )
    )

@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request):
    """
    Webhook Stripe (Checkout): consomme checkout.session.completed pour créer la commande.
    - 400 si signature/payload invalide (InvalidWebhook)
    - 200 {"received": true} pour tout événement authentifié et traité, ignoré ou déjà réglé
    - 500 si la base ou Stripe échoue: Stripe redélivrera l'événement
    """
    event = await stripe_client.parse_event(request)
    try:
        outcome = await run_in_threadpool(payments_service.handle_event, event)
    except (PersistenceError, PaymentProviderError):
        logger.exception("payments.webhook échec de traitement event=%s", event.get("id"))
        return JSONResponse({"error": "Échec du traitement, réessayer"}, status_code=500)
    return {"received": True, "status": outcome.value}

@router.get("/confirm")
def confirm_checkout_get(session_id: str, user: Dict[str, Any] = Depends(require_user)):
    """
    Alternative sans webhook: confirme la session Stripe et crée la commande si besoin.
    - Erreurs: 400 si paiement non confirmé, 403 si session d'un autre utilisateur
    """
    return payments_service.confirm_session(session_id, user)

@router.post("/confirm")
def confirm_checkout_post(
    session_id: Optional[str] = None,
    body: Optional[ConfirmRequest] = Body(default=None),
    user: Dict[str, Any] = Depends(require_user),
):
    """Variante POST: session_id en query ou en JSON {"session_id": "..."}."""
    sid = session_id or (body.session_id if body else None)
    if not sid:
        raise ValidationError("session_id manquant")
    return payments_service.confirm_session(sid, user)
