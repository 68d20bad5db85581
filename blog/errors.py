
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from blog.web.session import flash, remember_errors
from blog.web.templating import render

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

_REQUEST_PARTS = ("body", "query", "path", "header", "cookie")


class AppError(Exception):
    """Base class for errors that are mapped to an HTTP status at the boundary."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "The given data was invalid."

    def __init__(self, errors: dict[str, list[str]], message: str | None = None):
        super().__init__(message)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, text: str) -> "ValidationError":
        return cls({field: [text]})

    @classmethod
    def from_pydantic(cls, errors) -> "ValidationError":
        """Build from ``exc.errors()`` of pydantic or FastAPI validation errors."""
        fields: dict[str, list[str]] = {}
        for err in errors:
            loc = [str(p) for p in err.get("loc", ())]
            # FastAPI prefixes the request part the value came from
            if len(loc) > 1 and loc[0] in _REQUEST_PARTS:
                loc = loc[1:]
            field = ".".join(loc) or "request"
            fields.setdefault(field, []).append(err.get("msg", "Invalid value."))
        return cls(fields)

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials."


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "This action is unauthorized."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found."


class CsrfError(AppError):
    status_code = 419
    message = "Page expired."


def _is_api(request: Request) -> bool:
    return request.url.path.startswith(API_PREFIX)


def _back(request: Request) -> str:
    back_url = getattr(request.state, "back_url", None)
    if back_url:
        return back_url
    referer = request.headers.get("referer")
    if referer and referer.startswith(str(request.base_url)):
        return referer
    return "/"


async def app_error_handler(request: Request, exc: AppError):
    logger.info("%s %s failed with %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    if _is_api(request):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    if isinstance(exc, (CsrfError, NotFoundError)):
        return render(request, "error.html", {"status_code": exc.status_code, "message": exc.message},
                      status_code=exc.status_code)

    if isinstance(exc, ValidationError):
        remember_errors(request, exc.errors)
    flash(request, exc.message, "error")
    url = "/login" if isinstance(exc, AuthenticationError) else _back(request)
    return RedirectResponse(url=url, status_code=303)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return await app_error_handler(request, ValidationError.from_pydantic(exc.errors()))


async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
    return await app_error_handler(request, ValidationError.from_pydantic(exc.errors()))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PydanticValidationError, pydantic_validation_handler)
