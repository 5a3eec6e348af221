import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
import uvicorn

import config
from auth import AuthGateway, PasswordAuthProvider
from database import check_connection, init_db
from routers import ambassadors_router, contracts_router, link_router, payouts_router
from utils.logging import configure_logging

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.AUTO_CREATE_TABLES:
        init_db()
    logger.info("%s started", config.APP_NAME)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title=config.APP_NAME, lifespan=lifespan)

    # Ambassador login is checked by the gateway; the provider is swappable
    app.state.auth_gateway = AuthGateway(PasswordAuthProvider())

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Signed cookie session: logged-in ambassador, link state, flash values
    app.add_middleware(SessionMiddleware, secret_key=config.SESSION_SECRET, same_site="lax")

    app.include_router(ambassadors_router)
    app.include_router(link_router)
    app.include_router(contracts_router)
    app.include_router(payouts_router)

    @app.get("/health")
    def health():
        database_ok = check_connection()
        return {"status": "ok" if database_ok else "degraded", "database": database_ok}

    # 404 Fallback Middleware
    @app.middleware("http")
    async def not_found_middleware(request: Request, call_next):
        try:
            response = await call_next(request)
            if response.status_code == 404 and "endpoint" not in request.scope:
                return JSONResponse(status_code=404, content={"error": "Route not found"})
            return response
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=config.PORT, reload=True)
