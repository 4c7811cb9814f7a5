"""Caviar store FastAPI application.

Serves the catalogue, ordering and identity routers from a single Protean
domain. Every request runs inside the domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from caviar.catalogue.api import product_router
from caviar.config import get_settings
from caviar.domain import caviar
from caviar.identity.api import router as identity_router
from caviar.identity.api.routes import get_otp_store
from caviar.notifications.background import BackgroundNotifier
from caviar.ordering.api import router as order_router
from caviar.ordering.api.routes import set_notifier
from caviar.shared.http import register_error_handlers
from caviar.utils.logging import add_context, clear_context
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay from domain.toml ("production"
# switches the database provider to PostgreSQL).
caviar.init()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    notifier = BackgroundNotifier()
    set_notifier(notifier)
    otp_store = get_otp_store()
    otp_store.start()
    logger.info("Application started", environment=get_settings().environment)
    try:
        yield
    finally:
        otp_store.stop()
        set_notifier(None)
        notifier.shutdown(wait=True)
        logger.info("Application stopped")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Caviar Store API",
    description="Caviar catalogue, order management and staff notifications",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Protean domain context for each request."""
    add_context(method=request.method, path=request.url.path)
    try:
        with caviar.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
register_error_handlers(app)

app.include_router(product_router)
app.include_router(order_router)
app.include_router(identity_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": caviar.name})
