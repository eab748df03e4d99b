from fastapi import APIRouter, Request
from storefront.health.service import health_supabase_info, stripe_config_info
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/details")
def health_details(request: Request):
    return {
        "supabase": health_supabase_info(),
        "stripe": stripe_config_info(),
        "rate_limit": rate_limit_health_info(request),
    }
