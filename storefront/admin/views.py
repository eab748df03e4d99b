from typing import Any, Dict
from fastapi import APIRouter, Depends

from storefront.utils.security import require_admin
from storefront.admin import service as admin_service

router = APIRouter(prefix="/admin", tags=["Admin"])

# module storefront.admin.views
@router.get("/api/stats")
def admin_stats(admin: Dict[str, Any] = Depends(require_admin)):
    return admin_service.get_stats()
