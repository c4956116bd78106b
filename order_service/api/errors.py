# order_service/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from order_service.domain.errors import ServiceError, InternalError
from order_service.utils.logging import get_logger

logger = get_logger(__name__)


async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.kind}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


async def unhandled_error_handler(request: Request, exc: Exception):
    # stack trace tylko w logach, nigdy w odpowiedzi
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError("Internal server error")
    return JSONResponse(status_code=error.status_code, content={"error": error.to_dict()})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
