import logging
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import router as auth_router
from comments import router as comments_router
from core import config
from core.db import Database
from core.logging import setup_logging
from posts import router as posts_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # One pool per process, handed to handlers through app.state.
    app.state.db = await Database.connect()
    try:
        yield
    finally:
        await app.state.db.close()
        app.state.db = None


def create_app() -> FastAPI:
    app = FastAPI(title="feedback-board api", lifespan=lifespan)

    # Allow the local frontend dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(posts_router.router, tags=["posts"])
    app.include_router(comments_router.router, tags=["comments"])

    @app.exception_handler(asyncpg.PostgresError)
    async def database_error_handler(request: Request, exc: asyncpg.PostgresError) -> JSONResponse:
        logger.exception(
            "database_error method=%s path=%s sqlstate=%s",
            request.method,
            request.url.path,
            getattr(exc, "sqlstate", None),
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error."})

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "feedback-board api"}

    return app


app = create_app()
