# reweara/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from reweara.core.config import get_settings
from reweara.database import create_db_and_tables, engine

# Table modules must be imported before create_all() sees the metadata
from reweara.models import user, catalog, cart, order, coupon, promotion, wishlist  # noqa: F401

from reweara.routers import admin_stats as stats_routes
from reweara.routers import cart as cart_routes
from reweara.routers import catalog as catalog_routes
from reweara.routers import coupons as coupon_routes
from reweara.routers import orders as order_routes
from reweara.routers import promotions as promotion_routes
from reweara.routers import wishlist as wishlist_routes

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables before serving; a broken DB aborts startup."""
    backend = engine.url.get_backend_name()
    logger.info("Startup: preparing %s database", backend)
    try:
        create_db_and_tables()
    except Exception:
        logger.exception("Startup: %s database unavailable", backend)
        raise
    logger.info("Startup: tables ready")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Everything public lives under the versioned prefix, e.g. /api/v1/cart
for module in (
    catalog_routes,
    cart_routes,
    wishlist_routes,
    order_routes,
    coupon_routes,
    promotion_routes,
    stats_routes,
):
    app.include_router(module.router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Liveness check."""
    return {"status": "ok", "service": "reweara-storefront"}
