# storefront/core/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _first_validation_message(exc: RequestValidationError) -> str:
    """
    Build a readable message from the first schema violation.

    Example: "shipping_address.city: Field required"
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    # loc starts with "body" / "query" / "path"
    loc = [str(part) for part in first.get("loc", ())[1:]]
    msg = first.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    body: dict = {"success": False}
    if isinstance(detail, dict):
        body.update(detail)
    else:
        body["message"] = detail
    return JSONResponse(
        status_code=exc.status_code,
        content=body,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": _first_validation_message(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Render every error with the same envelope as successful responses:

        {"success": false, "message": "..."}
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
