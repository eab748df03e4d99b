"""
Lecture des sessions Stripe Checkout: métadonnées (user_id, livraison) et articles achetés.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from storefront.utils.money import from_minor_units

# module storefront.payments.metadata
def extract_metadata_from_session(session: Dict[str, Any]) -> Tuple[Optional[str], Dict[str, str]]:
    """
    Extrait (user_id, livraison) depuis session["metadata"].
    Accepte aussi les clés camelCase des sessions créées par l'ancienne version.
    """
    meta = (session or {}).get("metadata") or {}
    user_id = meta.get("user_id") or meta.get("userId") or None
    shipping = {
        "shipping_name": meta.get("shipping_name") or meta.get("shippingName") or "",
        "shipping_email": meta.get("shipping_email") or meta.get("shippingEmail") or "",
        "shipping_address": meta.get("shipping_address") or meta.get("shippingAddress") or "",
    }
    return user_id, shipping

def extract_purchased_items(line_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Articles achetés depuis les line_items de la session (expand data.price.product).
    Retour: [{product_id|None, name, quantity, unit_price: Decimal, amount_total: Decimal}]
    """
    items: List[Dict[str, Any]] = []
    for li in line_items or []:
        price = li.get("price") or {}
        product = price.get("product")
        product_id = None
        name = li.get("description") or ""
        if isinstance(product, dict) and not product.get("deleted"):
            product_id = (product.get("metadata") or {}).get("product_id") or None
            name = product.get("name") or name
        quantity = int(li.get("quantity") or 1)
        if price.get("unit_amount") is not None:
            unit_price = from_minor_units(price.get("unit_amount"))
        else:
            unit_price = (from_minor_units(li.get("amount_subtotal")) / quantity).quantize(Decimal("0.01"))
        items.append({
            "product_id": product_id,
            "name": name,
            "quantity": quantity,
            "unit_price": unit_price,
            "amount_total": from_minor_units(li.get("amount_total")),
        })
    return items
