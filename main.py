"""
ScholFi auth API: application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, status
from fastapi.responses import JSONResponse

from api.middleware import register_middleware
from auth.dependencies import get_store
from auth.jwt import TokenIssuer
from auth.routes import router as auth_router
from auth.service import AuthService
from config.settings import Settings, config
from database.store import AccountStore, MongoAccountStore

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("pymongo", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[AccountStore] = None,
) -> FastAPI:
    settings = settings or config
    if store is None:
        store = MongoAccountStore(
            uri=settings.mongodb_uri,
            database=settings.mongodb_database,
            collection=settings.accounts_collection,
            server_selection_timeout_ms=settings.request_timeout_ms * 2,
        )
    tokens = TokenIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expiry_seconds=settings.jwt_expiry_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await store.connect()
        except Exception:
            # Keep serving; /health reports the store and requests fail with 5xx.
            logger.exception("Credential store connection failed")
        logger.info("Application ready to accept requests.")
        yield
        await store.close()

    app = FastAPI(
        title="ScholFi Auth API",
        version="1.0.0",
        description="Email + wallet signup and signin issuing bearer tokens.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.tokens = tokens
    app.state.auth_service = AuthService(
        store=store,
        tokens=tokens,
        store_timeout=settings.request_timeout_seconds,
        bcrypt_rounds=settings.bcrypt_rounds,
    )

    register_middleware(app, settings.allowed_origins)

    # Routes
    app.include_router(auth_router, prefix="/auth")
    app.include_router(auth_router, prefix="/api/auth")

    @app.get("/")
    async def root():
        return {"message": "Welcome to ScholFi API"}

    @app.get("/health")
    async def health(store: AccountStore = Depends(get_store)):
        healthy = await store.is_healthy()
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ok" if healthy else "degraded",
                "database": "ok" if healthy else "unavailable",
            },
        )

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
