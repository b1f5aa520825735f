"""
Storefront - Main FastAPI Application

Single entry point for the storefront API: catalog, cart, auth and
checkout routes live under /api.
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.logging import get_logger
from storefront.routers import router as storefront_router
from storefront.routers.deps import create_cart_registry

logger = get_logger(__name__)

# Comma-separated; cookies need explicit origins, "*" is not allowed with credentials
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup: one cart store registry per process, owned by the app
    app.state.cart_registry = create_cart_registry()
    logger.info("Storefront API started")
    yield
    # Shutdown: snapshots are already persisted, dropping the stores loses nothing
    app.state.cart_registry = None


app = FastAPI(
    title="Storefront",
    description="Product catalog, shopping cart and checkout API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(storefront_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront"}
