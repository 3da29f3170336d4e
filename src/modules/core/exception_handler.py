"""Domain-aware exception handler for drf-standardized-errors.

Every error response has the shape::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}

Domain errors raised by the services are converted to DRF API exceptions
here, before the standard formatting runs, so views never translate them
one by one.
"""

from __future__ import annotations

import structlog
from drf_standardized_errors.handler import ExceptionHandler
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.exceptions import ErrorDetail
from rest_framework.settings import api_settings

from modules.core.exceptions import (
    DomainError,
    InsufficientStock,
    InvalidOrderTransition,
    InvalidRequest,
    NotFound,
    OrderProcessingError,
)

logger = structlog.get_logger(__name__)

DOMAIN_STATUS_MAP = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InvalidRequest, status.HTTP_400_BAD_REQUEST),
    (InsufficientStock, status.HTTP_409_CONFLICT),
    (InvalidOrderTransition, status.HTTP_409_CONFLICT),
    (OrderProcessingError, status.HTTP_409_CONFLICT),
)


class DomainNotFound(exceptions.NotFound):
    pass


class DomainBadRequest(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST


class DomainConflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT


STATUS_EXCEPTIONS = {
    status.HTTP_404_NOT_FOUND: DomainNotFound,
    status.HTTP_400_BAD_REQUEST: DomainBadRequest,
    status.HTTP_409_CONFLICT: DomainConflict,
}


def _status_for(exc: DomainError) -> int:
    for exc_class, status_code in DOMAIN_STATUS_MAP:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def to_api_exception(exc: DomainError) -> exceptions.APIException:
    status_code = _status_for(exc)
    logger.info(
        "api.domain_error",
        error=exc.__class__.__name__,
        code=exc.code,
        status_code=status_code,
    )
    return STATUS_EXCEPTIONS[status_code](detail=str(exc), code=exc.code)


def pydantic_to_validation_error(exc: PydanticValidationError) -> exceptions.ValidationError:
    """Re-key pydantic errors by dotted location (``items.0.quantity``)."""
    detail: dict = {}
    for error in exc.errors():
        attr = ".".join(str(part) for part in error["loc"]) or api_settings.NON_FIELD_ERRORS_KEY
        detail.setdefault(attr, []).append(ErrorDetail(error["msg"], code=error["type"]))
    return exceptions.ValidationError(detail)


class DomainExceptionHandler(ExceptionHandler):
    def convert_known_exceptions(self, exc: Exception) -> Exception:
        if isinstance(exc, DomainError):
            return to_api_exception(exc)
        if isinstance(exc, PydanticValidationError):
            return pydantic_to_validation_error(exc)
        return super().convert_known_exceptions(exc)
