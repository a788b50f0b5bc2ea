import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.core.errors import RegistryError

logger = logging.getLogger("ymit.errors")

def _fail(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )

def register_error_handlers(app: FastAPI):
    @app.exception_handler(RegistryError)
    async def registry_exc_handler(request: Request, exc: RegistryError):
        logger.warning(
            "%s path=%s status=%s message=%r",
            type(exc).__name__, request.url.path, exc.status_code, exc.message
        )
        return _fail(exc.status_code, exc.message)

    # starlette's class also covers unmatched routes and wrong methods
    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: HTTPException):
        logger.warning(
            "HTTPException path=%s status=%s detail=%r",
            request.url.path, exc.status_code, exc.detail
        )
        return _fail(exc.status_code, str(exc.detail) if exc.detail else "HTTP error")

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "ValidationError path=%s errors=%s",
            request.url.path, exc.errors()
        )
        # raw inputs may be NaN/Infinity, which strict JSON cannot carry
        details = [{k: v for k, v in e.items() if k != "input"} for e in exc.errors()]
        return _fail(422, "Validation error", details=jsonable_encoder(details))

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error at path=%s", request.url.path)
        return _fail(500, "Internal server error")
