"""
Exceptions raised by the visitor console.

The HTTP client raises APIError/AuthError; the service layer wraps whatever
failed in a ServiceError so stores and pages only deal with one type.
"""

from typing import Optional, Dict, Any, Union


class ConsoleError(Exception):
    """Base exception for all visitor console errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class APIError(ConsoleError):
    """Non-2xx response or transport failure talking to the backend."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[Union[str, int]] = None,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.code = code
        self.path = path


class AuthError(APIError):
    """Missing or rejected bearer token (401 / TOKEN_MISSING)."""
    pass


class ServiceError(ConsoleError):
    """A service call failed; wraps the underlying cause."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.cause = cause

    @property
    def is_auth_error(self) -> bool:
        return isinstance(self.cause, AuthError)


class CameraError(ConsoleError):
    """A captured frame could not be decoded."""
    pass
