# order_service/api/__init__.py
from fastapi import FastAPI

from order_service.api.errors import register_exception_handlers
from order_service.api.routers import cart, health, orders


def create_app() -> FastAPI:
    app = FastAPI(
        title="Order Service",
        version="1.0.0",
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(cart.router)
    app.include_router(orders.router)

    register_exception_handlers(app)

    return app
