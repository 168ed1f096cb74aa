from __future__ import annotations


class FleetError(Exception):
    """Base class for errors raised by the coordination services."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FleetError):
    status_code = 400


class AuthenticationError(FleetError):
    status_code = 401


class NotFoundError(FleetError):
    status_code = 404


class ConflictError(FleetError):
    status_code = 409


class DispatchFailure(FleetError):
    """A text notification could not be delivered. Logged, never surfaced."""

    status_code = 502

    def __init__(self, phone_number: str, reason: str):
        super().__init__(f"SMS to {phone_number} failed: {reason}")
        self.phone_number = phone_number
        self.reason = reason
