"""Map domain errors to HTTP responses.

Services raise messagely.errors types and never pick a status code;
this module is the single place where that choice is made. Responses
use FastAPI's usual {"detail": ...} shape.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from messagely.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InvalidTokenError,
    MessagelyError,
    NotFoundError,
    ValidationError,
)

STATUS_CODES: dict[type[MessagelyError], int] = {
    ValidationError: 400,
    AuthenticationError: 401,
    InvalidTokenError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
}

# 401 responses must tell the client how to authenticate.
_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def status_for(exc: MessagelyError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_CODES:
            return STATUS_CODES[error_type]
    return 400


async def messagely_error_handler(request: Request, exc: MessagelyError) -> JSONResponse:
    status_code = status_for(exc)
    headers = _CHALLENGE if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MessagelyError, messagely_error_handler)
