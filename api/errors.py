import logging
from typing import List, Tuple, Type

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from exceptions import (
    AIConfigurationError,
    AIServiceError,
    ImageUnreadableError,
    InvalidServingsError,
    NoActiveRecipeError,
    RecipeAssistantError,
    RecipeNotFoundError,
    ReplyParseError,
    ServerLimitReachedError,
    StorageFullError,
    UnsupportedRequestError,
    user_message_for,
)

logger = logging.getLogger(__name__)

HTTP_507_INSUFFICIENT_STORAGE = 507

# First match wins, so subclasses come before their bases
ERROR_STATUS_CODES: List[Tuple[Type[Exception], int]] = [
    (StorageFullError, HTTP_507_INSUFFICIENT_STORAGE),
    (ServerLimitReachedError, status.HTTP_429_TOO_MANY_REQUESTS),
    (ReplyParseError, status.HTTP_502_BAD_GATEWAY),
    (AIServiceError, status.HTTP_502_BAD_GATEWAY),
    (AIConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ImageUnreadableError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidServingsError, status.HTTP_400_BAD_REQUEST),
    (UnsupportedRequestError, status.HTTP_400_BAD_REQUEST),
    (RecipeNotFoundError, status.HTTP_404_NOT_FOUND),
    (NoActiveRecipeError, status.HTTP_409_CONFLICT),
]


def status_code_for(error: Exception) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def recipe_error_handler(request: Request, exc: RecipeAssistantError) -> JSONResponse:
    """Turn a core failure into a short notification message"""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": user_message_for(exc)})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Payloads validated inside a route, e.g. by the typed chef dispatcher"""
    logger.info(f"{request.method} {request.url.path} invalid payload: {exc.error_count()} error(s)")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Ungültige Anfrage.", "errors": [error["msg"] for error in exc.errors()]}
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecipeAssistantError, recipe_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
