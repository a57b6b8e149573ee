"""
Error taxonomy for the YogaTube backend.

Every error carries a machine-readable ``error_code`` and the HTTP status the
API surface answers with. Only the exception handler registered in
``app.main`` turns these into responses.
"""

from typing import Optional

from fastapi import status


class YogaTubeError(Exception):
    """Base class for all application errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        http_status_code: HTTP status code to use in API responses
    """

    default_error_code: Optional[str] = None
    default_status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error_code: Optional[str] = None,
                 http_status_code: Optional[int] = None):
        self.message = message
        self.error_code = error_code or self.default_error_code or self.__class__.__name__.upper()
        self.http_status_code = http_status_code or self.default_status_code
        super().__init__(message)


class NotFoundError(YogaTubeError):
    """The requested row does not exist."""

    default_error_code = "NOT_FOUND"
    default_status_code = status.HTTP_404_NOT_FOUND


class DuplicateKeyError(YogaTubeError):
    """A unique constraint rejected the insert."""

    default_error_code = "DUPLICATE_KEY"
    default_status_code = status.HTTP_409_CONFLICT


class UpstreamFailure(YogaTubeError):
    """Network or decode error while talking to the playlist API."""

    default_error_code = "UPSTREAM_FAILURE"
    default_status_code = status.HTTP_502_BAD_GATEWAY


class StorageFailure(YogaTubeError):
    """Connectivity or query error in the relational store."""

    default_error_code = "STORAGE_FAILURE"
    default_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ValidationFailure(YogaTubeError):
    """A request parameter is malformed."""

    default_error_code = "INVALID_INPUT"
    default_status_code = status.HTTP_400_BAD_REQUEST
