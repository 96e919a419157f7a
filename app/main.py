"""FastAPI entrypoint for the box-meal ordering service."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from app.api.v1.api import api_router
from app.core.config import settings
from app.db import session as db_session
from app.db.base import Base
from app.db.migrations import apply_migrations
from app.db.seed import ensure_policy_row

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie_name,
    same_site="lax",
    https_only=settings.cookie_secure,
    max_age=settings.session_max_age,
)
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed request bodies and query strings with 400."""
    return JSONResponse(status_code=400, content={"detail": {"error": "INVALID_PAYLOAD", "errors": jsonable_encoder(exc.errors())}})


@app.get("/api/health")
def health() -> dict[str, bool]:
    return {"ok": True}


app.include_router(api_router, prefix="/api")

Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

if Path(settings.public_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="spa")


@app.on_event("startup")
def startup() -> None:
    secret_from_env = bool(os.getenv("SESSION_SECRET"))
    source = "env" if secret_from_env else "fallback"
    logger.info("Session secret source: %s", source)
    if not secret_from_env:
        logger.warning("SESSION_SECRET not set; using development fallback secret.")
    if not settings.admin_pass and not settings.admin_pass_hash:
        logger.warning("[BOOTSTRAP] ADMIN_PASS / ADMIN_PASS_HASH not set; admin login is disabled.")

    Base.metadata.create_all(bind=db_session.engine)
    version = apply_migrations(db_session.engine)
    logger.info("[MIGRATION] Schema version: %s", version)
    with db_session.SessionLocal() as session:
        ensure_policy_row(session)
