# taskboard/errors.py
"""
Errores de la API y los handlers que los convierten en el sobre JSON
común: {"success": false, "message": ..., "errors": [...]}.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger("taskboard.errors")


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[FieldError]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


# ---------- 401 ----------

class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No authentication token provided"


class InvalidToken(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid authentication token"


class ExpiredToken(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication token has expired"


class AccountDeactivated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User account is deactivated"


class InvalidCredentials(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


# ---------- 403 / 404 / 400 ----------

class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied. Insufficient permissions"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Task not found"


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class Conflict(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class InternalFault(ApiError):
    pass


# ---------- Sobre JSON ----------

def envelope(success: bool, message: Optional[str] = None, data=None, errors=None, **extra) -> dict:
    body = {"success": success}
    if message is not None:
        body["message"] = message
    body.update(extra)
    if data is not None:
        body["data"] = data
    if errors:
        body["errors"] = errors
    return body


def _error_response(status_code: int, message: str, errors=None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(False, message, errors=errors, **extra),
    )


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        log.error("%s %s -> %s", request.method, request.url.path, exc.message)
    return _error_response(
        exc.status_code,
        exc.message,
        errors=[e.to_dict() for e in exc.errors],
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        # loc = ("body", "title") / ("query", "status") / ("body",)
        # JSON roto: loc = ("body", <offset>), el offset no es un campo
        if err.get("type") == "json_invalid":
            errors.append({"field": "body", "message": "Malformed JSON body"})
            continue
        loc = [str(x) for x in err.get("loc", ()) if x not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation error", errors=errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error_response(exc.status_code, "Route not found", path=request.url.path)
    return _error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    # El detalle solo va al log, nunca al cliente
    log.exception("Error no controlado en %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
