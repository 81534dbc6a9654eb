from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.logger.logger_configuration import logger
from src.app.service.exceptions import MissingFileError, RelayError

UPLOAD_FIELD = "image"


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"[{request.url.path}] {type(exc).__name__}: {exc.message} ({exc.details})")
    else:
        logger.warning(f"[{request.url.path}] {type(exc).__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    # An `image` field that is not a file (e.g. plain text) counts as no upload.
    if any(tuple(error.get("loc", ()))[-1:] == (UPLOAD_FIELD,) for error in errors):
        return await relay_error_handler(request, MissingFileError())

    logger.warning(f"[{request.url.path}] Request validation failed: {errors}")
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "details": jsonable_encoder(errors)},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(f"[{request.url.path}] HTTP {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
