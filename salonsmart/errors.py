"""Failure taxonomy shared by the stores, repositories and booking wizard.

Every error carries a user-facing message. The HTTP layer turns any of them
into a JSON body with the matching status code; nothing is retried.
"""


class SalonError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SalonError):
    """A required field is missing or out of range. Raised before any write."""
    status_code = 422


class NotFound(SalonError):
    status_code = 404


class WriteError(SalonError):
    status_code = 502


class DataUnavailable(SalonError):
    status_code = 503


class PermissionDenied(SalonError):
    status_code = 403


class SlotUnavailable(WriteError):
    status_code = 409


class WizardError(SalonError):
    status_code = 409
