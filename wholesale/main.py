# wholesale/main.py
from fastapi import FastAPI
import uvicorn

from wholesale.api.routers import admin_orders, carts, checkout, health, orders, pricing, settings, shipping
from wholesale.data.database import Base, engine
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)

# import wszystkich modeli przed create_all
import wholesale.data.models  # noqa: F401

logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


def create_app() -> FastAPI:
    app = FastAPI(
        title="Wholesale Checkout Service",
        version="1.0.0",
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(shipping.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)
    app.include_router(pricing.router)
    app.include_router(pricing.admin_router)
    app.include_router(admin_orders.router)
    app.include_router(settings.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
