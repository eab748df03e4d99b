# module storefront.admin.service

from decimal import Decimal
from typing import Any, Dict
import logging

from storefront.admin import repository as admin_repository
from storefront.orders.models import OrderStatus
from storefront.utils.money import to_decimal

logger = logging.getLogger(__name__)

RECENT_ORDERS = 5

def get_stats() -> Dict[str, Any]:
    """Compteurs du tableau de bord; le chiffre d'affaires exclut les commandes annulées."""
    totals = admin_repository.fetch_order_totals(exclude_status=OrderStatus.CANCELLED.value)
    revenue = sum((to_decimal(r.get("total")) for r in totals), Decimal("0.00"))
    return {
        "totalUsers": admin_repository.count_table_rows("users"),
        "totalProducts": admin_repository.count_table_rows("products"),
        "totalOrders": admin_repository.count_table_rows("orders"),
        "totalRevenue": revenue,
        "recentOrders": admin_repository.fetch_recent_orders(limit=RECENT_ORDERS),
    }
