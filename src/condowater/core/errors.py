"""Exceptions raised by the billing core and mapped to HTTP responses."""

from __future__ import annotations


class WaterBillingError(Exception):
    """Base exception carrying a machine-readable code."""

    status_code = 500

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class ValidationError(WaterBillingError):
    """Malformed or missing input."""

    status_code = 400


class NotFoundError(WaterBillingError):
    """Unknown room, reading or month."""

    status_code = 404


class ConflictError(WaterBillingError):
    """Write rejected because it would break a uniqueness rule."""

    status_code = 409


class AuthError(WaterBillingError):
    """Caller identity missing or not allowed."""

    status_code = 401

    def __init__(self, message: str, code: str = "AUTH_REQUIRED", status_code: int = 401):
        super().__init__(message, code)
        self.status_code = status_code
