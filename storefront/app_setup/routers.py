"""
Registre central des routers (API v1, admin, health).
"""
from fastapi import FastAPI
from storefront.users.views import router as users_router, signup_router
from storefront.catalog.views import categories_router, products_router
from storefront.cart.views import router as cart_router
from storefront.orders.views import router as orders_router
from storefront.payments.views import router as payments_router
from storefront.admin.views import router as admin_router
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(signup_router)
    app.include_router(users_router)
    app.include_router(categories_router)
    app.include_router(products_router)
    app.include_router(cart_router)
    app.include_router(orders_router)
    app.include_router(payments_router)
    # Admin
    app.include_router(admin_router)
    # Health & monitoring
    app.include_router(health_router)
