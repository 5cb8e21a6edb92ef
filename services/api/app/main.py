"""Printdrop API service entrypoint."""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.api.app.db.init_db import init_db
from services.api.app.identity.base import IdentityProviderError, InvalidAuthorizationCode
from services.api.app.routers.auth import router as auth_router
from services.api.app.routers.files import router as files_router
from services.api.app.routers.order import router as order_router
from services.api.app.routers.pricing import router as pricing_router
from services.api.app.routers.vendor import router as vendor_router
from services.api.app.services.errors import PrintdropError

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level = os.getenv("PRINTDROP_LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


_configure_logging()

app = FastAPI(title="Printdrop API")

app.include_router(auth_router)
app.include_router(pricing_router)
app.include_router(order_router)
app.include_router(files_router)
app.include_router(vendor_router)


@app.exception_handler(PrintdropError)
async def _domain_error(request: Request, exc: PrintdropError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(IdentityProviderError)
async def _identity_error(request: Request, exc: IdentityProviderError) -> JSONResponse:
    if isinstance(exc, InvalidAuthorizationCode):
        return JSONResponse(status_code=401, content={"error": str(exc)})

    logger.error("%s %s identity provider failure: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"error": "Identity provider unavailable"})


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    del request
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    del request
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(messages) or "Invalid request"})


@app.on_event("startup")
def _startup() -> None:
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
