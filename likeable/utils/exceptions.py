from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse


class LikeableError(Exception):
    """Base class for errors surfaced by the likeable plugin"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(LikeableError):
    """Invalid plugin options. Raised at startup, never over HTTP."""
    default_message = "Invalid likeable configuration"


class LikeValidationError(LikeableError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class LikeConflictError(LikeableError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already liked"


class LikeNotFoundError(LikeableError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class AuthenticationRequiredError(LikeableError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class AuthorizationError(LikeableError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class StoreError(LikeableError):
    default_message = "Store error"


def format_validation_error(validation_error: ValidationError | RequestValidationError) -> Dict[str, Any]:
    """Format a pydantic/FastAPI validation error into a structured response

    Example output:
    {
        "error": "Validation failed",
        "errors": [
            {
                "field": "likeableId",
                "message": "Field required",
                "type": "missing",
                "input": "{'likeable': 'post'}"
            }
        ],
        "error_count": 1
    }
    """
    errors = []

    for error in validation_error.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])

        # Clean up field names for better readability
        field_display = field_path.replace("body.", "").replace("query.", "")

        error_detail = {
            "field": field_display,
            "message": error["msg"],
            "type": error["type"],
            "input": str(error.get("input", ""))[:100]
        }

        if error["type"] in ["int_parsing", "float_parsing"]:
            error_detail["message"] = f"Invalid number format: {error['msg']}"

        errors.append(error_detail)

    return {
        "error": "Validation failed",
        "errors": errors,
        "error_count": len(errors)
    }


def format_error(message: str) -> Dict[str, Any]:
    return {"error": message}


async def likeable_error_handler(request: Request, exc: LikeableError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=format_error(exc.message))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=format_validation_error(exc)
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LikeableError, likeable_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
