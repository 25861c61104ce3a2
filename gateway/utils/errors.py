"""Error taxonomy shared by the translation core and the HTTP layer.

Every error carries the HTTP status the API answers with; the app renders
them all through one handler as ``{"error": "<message>"}``.
"""

from __future__ import annotations

from fastapi import status

__all__ = [
    "GatewayError",
    "ValidationError",
    "ParseError",
    "EncodeError",
    "DecodeError",
    "StorageError",
    "ConnectivityError",
    "WriteError",
    "ReadError",
]


class GatewayError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """Malformed or missing request parameter."""

    status_code = status.HTTP_400_BAD_REQUEST


class ParseError(GatewayError):
    """Period string is neither ``<digits><unit>`` nor a plain integer."""

    status_code = status.HTTP_400_BAD_REQUEST


class EncodeError(GatewayError):
    """An event cannot be represented as a backend point.

    ``key`` names the offending field (``None`` when the event as a whole is
    unusable, e.g. it has no fields) and ``index`` its position in the batch.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, key: str | None = None, index: int | None = None):
        super().__init__(message)
        self.key = key
        self.index = index


class DecodeError(GatewayError):
    """The backend returned a row we cannot turn into an event."""

    status_code = status.HTTP_502_BAD_GATEWAY


class StorageError(GatewayError):
    """Backend unreachable or reported an error."""


class ConnectivityError(StorageError):
    pass


class WriteError(StorageError):
    pass


class ReadError(StorageError):
    pass
