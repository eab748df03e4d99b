from enum import Enum
from typing import Optional
from pydantic import AliasChoices, BaseModel, EmailStr, Field

from storefront.errors import ValidationError
from storefront.payments.line_items import METADATA_VALUE_MAX


class CheckoutRequest(BaseModel):
    """
    Coordonnées de livraison saisies au checkout.
    Les articles et les prix viennent exclusivement du panier côté serveur;
    un éventuel champ 'items' envoyé par le client est ignoré.
    Chaque valeur part telle quelle en metadata Stripe: au-delà de METADATA_VALUE_MAX, 400
    (l'email est déjà borné à 254 caractères par email-validator).
    """
    shipping_name: str = Field(validation_alias=AliasChoices("shippingName", "shipping_name"), min_length=1, max_length=METADATA_VALUE_MAX)
    shipping_email: EmailStr = Field(validation_alias=AliasChoices("shippingEmail", "shipping_email"))
    shipping_address: str = Field(validation_alias=AliasChoices("shippingAddress", "shipping_address"), min_length=1, max_length=METADATA_VALUE_MAX)


class ConfirmRequest(BaseModel):
    session_id: Optional[str] = None


class SettlementOutcome(str, Enum):
    """Issue du traitement d'une notification Stripe (toutes acquittées en 2xx)."""
    IGNORED = "ignored"                  # type d'événement sans intérêt
    NOT_PAID = "not_paid"                # session complétée sans paiement encaissé
    MISSING_USER = "missing_user"        # metadata user_id absente: réconciliation manuelle
    SETTLED = "settled"                  # commande créée, panier vidé
    ALREADY_SETTLED = "already_settled"  # redélivrance: commande déjà présente


class InvalidWebhook(ValidationError):
    """Signature absente/invalide ou payload illisible: rejet sans changement d'état."""
