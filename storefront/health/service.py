from urllib.parse import urlparse
import socket
import logging
from typing import Any, Dict

from storefront.config import SUPABASE_URL, STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET
from storefront.infra.supabase_client import get_service_supabase

logger = logging.getLogger(__name__)

CHECKED_TABLES = ("users", "products", "orders")

def _check_table(client, name: str) -> Dict[str, Any]:
    try:
        res = client.table(name).select("id").limit(1).execute()
        return {"ok": True, "rows": len(res.data or [])}
    except Exception as e:
        logger.warning("health: table %s inaccessible: %s", name, e)
        return {"ok": False, "error": str(e)}

# module storefront.health.service
def health_supabase_info() -> Dict[str, Any]:
    """Résolution DNS de l'hôte Supabase puis lecture d'une ligne par table principale."""
    parsed = urlparse(SUPABASE_URL) if SUPABASE_URL else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError as e:
            dns_ok = False
            dns_error = str(e)

    info: Dict[str, Any] = {
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = get_service_supabase()
        for t in CHECKED_TABLES:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info

def stripe_config_info() -> Dict[str, bool]:
    # Présence seulement, jamais les valeurs
    return {
        "secret_key": bool(STRIPE_SECRET_KEY),
        "webhook_secret": bool(STRIPE_WEBHOOK_SECRET),
    }
