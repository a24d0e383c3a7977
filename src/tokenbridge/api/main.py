"""
tokenbridge REST API
HTTP interface for token lookup, component analysis and transformation.
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader

from .. import __version__
from ..catalog import TokenCatalog, get_default_catalog, load_catalog
from ..config import TransformerConfig, load_config
from ..logger import setup_logging

logger = logging.getLogger(__name__)


# =============================================================================
# API Key Authentication
# =============================================================================

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def load_api_keys() -> set[str]:
    """Valid API keys from TOKENBRIDGE_API_KEYS (comma separated)."""
    env_keys = os.getenv("TOKENBRIDGE_API_KEYS", "")
    return set(k.strip() for k in env_keys.split(",") if k.strip())


async def verify_api_key(api_key: Optional[str] = Security(API_KEY_HEADER)) -> Optional[str]:
    """
    Verify API key when keys are configured.

    With no keys configured the API is open; it is meant to run on localhost
    next to the component repository.
    """
    valid_keys = load_api_keys()
    if not valid_keys:
        return None
    if api_key is None:
        raise HTTPException(status_code=401, detail="Missing API key")
    if api_key not in valid_keys:
        raise HTTPException(status_code=403, detail="Invalid API key")
    return api_key


# =============================================================================
# Shared State
# =============================================================================

class AppState:
    """Shared application state."""
    catalog: Optional[TokenCatalog] = None
    config: Optional[TransformerConfig] = None
    start_time: Optional[float] = None
    version: str = __version__

    def get_config(self) -> TransformerConfig:
        if self.config is None:
            self.config = load_config()
        return self.config

    def get_catalog(self) -> TokenCatalog:
        if self.catalog is None:
            path = self.get_config().catalog_path
            self.catalog = load_catalog(path) if path else get_default_catalog()
        return self.catalog


state = AppState()


def get_state() -> AppState:
    """Dependency to get shared state."""
    return state


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load config and catalog once on startup."""
    setup_logging(level=os.getenv("TOKENBRIDGE_LOG_LEVEL", "INFO"))
    state.start_time = time.time()
    state.config = load_config()
    catalog = state.get_catalog()
    logger.info(f"tokenbridge API ready: {catalog.stats()}")

    yield

    logger.info("tokenbridge API shutting down")


# =============================================================================
# App
# =============================================================================

app = FastAPI(
    title="tokenbridge API",
    description="""
Look up design tokens and rewrite hardcoded styles in component files.

## Authentication

When `TOKENBRIDGE_API_KEYS` is set, include one of the keys in the `X-API-Key` header.
    """,
    version=state.version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

CORS_ORIGINS = os.getenv("TOKENBRIDGE_CORS_ORIGINS", "*").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Routes
# =============================================================================

@app.get("/")
async def root():
    """API root - basic info."""
    return {
        "name": "tokenbridge API",
        "version": state.version,
        "docs": "/docs",
        "description": "Design token lookup and style-to-token transformation.",
    }


from .routers import health, tokens, transform  # noqa: E402

app.include_router(health.router, tags=["health"])

app.include_router(
    tokens.router,
    prefix="/api/v1",
    tags=["tokens"],
    dependencies=[Depends(verify_api_key)],
)

app.include_router(
    transform.router,
    prefix="/api/v1",
    tags=["transform"],
    dependencies=[Depends(verify_api_key)],
)
