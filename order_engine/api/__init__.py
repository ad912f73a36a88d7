# order_engine/api/__init__.py
from fastapi import FastAPI
from order_engine.api.errors import register_error_handlers
from order_engine.api.routers import orders
from order_engine.api.routers.health import router as health_router


def create_app():
    app = FastAPI(title="Order Service", version="1.0.0")
    app.include_router(health_router)
    app.include_router(orders.router)
    register_error_handlers(app)
    return app
