"""
API error handlers.

The automation platform expects ``{"success": false, "error": ...}`` with
status 400 for a bad request body, so request validation errors are
rendered in that shape instead of FastAPI's default 422 body.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.models import ErrorResponse

MISSING_FIELDS_MESSAGE = "discordId and sellerId are required in the request body."


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "missing" for err in errors):
        message = MISSING_FIELDS_MESSAGE
    else:
        fields = sorted({str(err["loc"][-1]) for err in errors if err.get("loc")})
        message = f"Invalid value for: {', '.join(fields) or 'request body'}."
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=message).model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers on an application."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
