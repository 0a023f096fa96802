"""Error taxonomy shared by the services and the HTTP layer.

Every failure leaves the API as ``{"success": false, "message": ..., "error"?: ...}``.
"""

import logging
from typing import Any, Optional, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class QuizAppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class InvalidInput(QuizAppError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthenticated(QuizAppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(QuizAppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(QuizAppError):
    status_code = status.HTTP_404_NOT_FOUND


class GenerationUnavailable(QuizAppError):
    """The text-generation provider could not be reached or refused the call."""


class MalformedResponse(QuizAppError):
    """The provider answered, but no JSON object could be recovered from it."""

    EXCERPT_LENGTH = 500

    def __init__(self, message: str, raw_text: str, error: Optional[str] = None) -> None:
        super().__init__(message, error)
        self.raw_text = raw_text[: self.EXCERPT_LENGTH]

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["rawText"] = self.raw_text
        return body


def validation_message(exc: Union[RequestValidationError, ValidationError]) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Invalid value")
    return f"{loc}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuizAppError)
    async def _quiz_app_error(request: Request, exc: QuizAppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        err = InvalidInput(validation_message(exc))
        return JSONResponse(status_code=err.status_code, content=err.to_body())

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        err = QuizAppError("Internal server error", error=str(exc))
        return JSONResponse(status_code=err.status_code, content=err.to_body())
