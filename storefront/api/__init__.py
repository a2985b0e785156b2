# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.routers import carts, health, orders, payments, taxes


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Checkout Service",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(payments.router)
    app.include_router(taxes.router)

    return app
