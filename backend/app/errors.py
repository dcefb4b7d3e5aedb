"""
Error types for shopping list operations.

Each error carries the HTTP status it maps to. The exception handler in
app.main renders them as {"error": ..., "message": ...}.
"""

from typing import Optional

from fastapi import Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ShoppingListError(Exception):
    """Base error surfaced to API callers."""

    status_code = 500

    def __init__(self, error: str, message: Optional[str] = None):
        super().__init__(message or error)
        self.error = error
        self.message = message

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        return body


class InvalidInputError(ShoppingListError):
    """Caller-supplied data is malformed or missing."""

    status_code = 400

    def __init__(self, error: str, message: Optional[str] = None, details: Optional[list] = None):
        super().__init__(error, message)
        self.details = details or []

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(ShoppingListError):
    """Referenced resource does not exist or is not owned by the caller."""

    status_code = 404


class EmptyPlanError(ShoppingListError):
    """Meal plan has no scheduled meals."""

    status_code = 400


class NoIngredientsError(ShoppingListError):
    """No non-optional ingredient data resolves for the plan's recipes."""

    status_code = 400


class PersistenceError(ShoppingListError):
    """Writing a computed list failed."""

    status_code = 500


class UnexpectedError(ShoppingListError):
    """Anything else that went wrong while serving a request."""

    status_code = 500


async def shopping_list_error_handler(request: Request, exc: ShoppingListError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are InvalidInput; other validation errors keep FastAPI's 422."""
    errors = exc.errors()
    if not errors or any(error["loc"][0] != "body" for error in errors):
        return await request_validation_exception_handler(request, exc)

    details = [
        {"path": [str(part) for part in error["loc"][1:]], "message": error["msg"]}
        for error in errors
    ]
    return await shopping_list_error_handler(request, InvalidInputError("Invalid request body", details=details))
