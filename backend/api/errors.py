"""Map tracker failures to HTTP responses."""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tracker_core.errors import (
    ConflictError,
    NotFound,
    PermissionDenied,
    TrackerError,
    UpstreamError,
    ValidationError,
)

_STATUS_BY_ERROR: dict[type[TrackerError], int] = {
    PermissionDenied: status.HTTP_403_FORBIDDEN,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ConflictError: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_404_NOT_FOUND,
    UpstreamError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    """Render a TrackerError with its kind and the rule/field/entity it names."""
    code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TrackerError, tracker_error_handler)
