"""
Construction des line_items et metadata Stripe à partir du panier serveur (pas de Stripe, pas de DB).
"""
from typing import Any, Dict, List
import logging

from storefront.errors import ValidationError
from storefront.utils.money import to_minor_units

logger = logging.getLogger(__name__)

# Limites Stripe
METADATA_VALUE_MAX = 500
PRODUCT_IMAGES_MAX = 8

# module storefront.payments.line_items
def to_line_items(cart_items: List[Dict[str, Any]], currency: str) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe à partir des lignes du panier jointes aux produits.
    - unit_amount en centimes (arrondi half-up) depuis products.price, jamais depuis le client
    - product_data.metadata.product_id porte l'identifiant interne jusqu'au webhook
    - ignore les lignes dont le produit n'existe plus ou la quantité est invalide
    - soulève ValidationError si aucune ligne valide
    """
    line_items: List[Dict[str, Any]] = []
    for it in cart_items or []:
        product = it.get("product") or {}
        qty = int(it.get("quantity") or 0)
        product_id = str(product.get("id") or it.get("product_id") or "")
        if not product or not product_id or qty <= 0:
            logger.warning("payments.to_line_items: ligne ignorée cart_item=%s", it.get("id"))
            continue

        product_data: Dict[str, Any] = {
            "name": product.get("name") or "Article",
            "metadata": {"product_id": product_id},
        }
        if product.get("description"):
            product_data["description"] = product["description"]
        images = [img for img in (product.get("images") or []) if img]
        if images:
            product_data["images"] = images[:PRODUCT_IMAGES_MAX]

        line_items.append({
            "quantity": qty,
            "price_data": {
                "currency": currency,
                "unit_amount": to_minor_units(product.get("price")),
                "product_data": product_data,
            },
        })
    if not line_items:
        raise ValidationError("Le panier est vide")
    return line_items

def make_metadata(user_id: str, shipping_name: str, shipping_email: str, shipping_address: str) -> Dict[str, str]:
    """
    Métadonnées de session relues par le webhook pour reconstruire la commande
    sans relire le panier (qui a pu changer entre-temps).
    Une valeur trop longue pour Stripe est refusée, jamais tronquée.
    """
    metadata = {
        "user_id": user_id,
        "shipping_name": shipping_name or "",
        "shipping_email": shipping_email or "",
        "shipping_address": shipping_address or "",
    }
    for key, value in metadata.items():
        if len(value) > METADATA_VALUE_MAX:
            raise ValidationError(f"{key} dépasse {METADATA_VALUE_MAX} caractères")
    return metadata
