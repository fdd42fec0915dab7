# services/errors.py

"""
Error types for the Waitlist API.

Each error knows the HTTP status it maps to and a short machine code,
so app.py can turn any of them into a JSON response in one place.
"""


class WaitlistError(Exception):
    code = "WAITLIST_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WaitlistError):
    """Missing field, wrong field type or bad email format."""

    code = "VALIDATION_ERROR"
    status_code = 400


class ConflictError(WaitlistError):
    """The normalized email already has a submission."""

    code = "EMAIL_EXISTS"
    status_code = 400


class ConfigurationError(WaitlistError):
    code = "CONFIGURATION_ERROR"
    status_code = 500


class StorageError(WaitlistError):
    """Connection, query or insert failure in MongoDB."""

    code = "STORAGE_ERROR"
    status_code = 500


class MethodError(WaitlistError):
    code = "METHOD_NOT_ALLOWED"
    status_code = 405
