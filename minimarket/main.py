# minimarket/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from minimarket.core.config import get_settings
from minimarket.core.errors import MiniMarketError, StoreError
from minimarket.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from minimarket.models import product as _product_models  # noqa: F401
from minimarket.models import user as _user_models  # noqa: F401
from minimarket.models import order as _order_models  # noqa: F401

# Routers
from minimarket.routers.auth import router as auth_router
from minimarket.routers.products import router as products_router
from minimarket.routers.cart import router as cart_router
from minimarket.routers.orders import router as orders_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to %s", settings.DATABASE_URL.split("@")[-1])
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Hami MiniMarket API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- Error mapping ---


@app.exception_handler(MiniMarketError)
async def minimarket_error_handler(request: Request, exc: MiniMarketError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, **exc.extra()},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Store unavailable, please try again"},
    )


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(orders_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "hami-minimarket"}
