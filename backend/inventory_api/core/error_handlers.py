# backend/inventory_api/core/error_handlers.py
import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory_api.core.exceptions import InventoryError

logger = logging.getLogger(__name__)


def error_body(message: str) -> Dict[str, Any]:
    return {"timestamp": datetime.utcnow().isoformat(), "message": message}


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for e in exc.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()) if p != "body")
        msg = str(e.get("msg") or e.get("type") or "invalid")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {timestamp, message}."""

    @app.exception_handler(InventoryError)
    async def _domain_exc(req: Request, exc: InventoryError):
        if exc.status_code >= 500:
            logger.error(f"{req.method} {req.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{req.method} {req.url.path} rejected ({exc.status_code}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc(req: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exc(req: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning(f"{req.method} {req.url.path} invalid request: {message}")
        return JSONResponse(status_code=400, content=error_body(message))

    @app.exception_handler(Exception)
    async def _unhandled_exc(req: Request, exc: Exception):
        logger.exception(f"Unhandled error on {req.method} {req.url.path}: {exc}")
        return JSONResponse(status_code=500, content=error_body("An error occurred"))
