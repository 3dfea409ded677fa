from __future__ import annotations


class AppError(Exception):
    """Base error for expected failures."""

    def __init__(self, message: str, *, http_status: int = 400):
        super().__init__(message)
        self.message = message
        self.http_status = http_status


class AuthError(AppError):
    def __init__(self, message: str = "unauthorized"):
        super().__init__(message, http_status=401)


class AccessDenied(AppError):
    """
    Raised when a principal may not read the requested member's data.

    Carries no detail: the same message is returned whether the target id
    exists or not.
    """

    def __init__(self) -> None:
        super().__init__("access denied", http_status=403)


class NotFoundError(AppError):
    def __init__(self, message: str = "not found"):
        super().__init__(message, http_status=404)
