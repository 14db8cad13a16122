"""Exception classes for the Patient Dashboard.

All exceptions inherit from PatientDashboardError so callers can catch every
dashboard failure at once. The server maps them onto HTTP status codes in
``patient_dashboard.main``; the client raises TransportError itself.
"""
from typing import Optional


class PatientDashboardError(Exception):
    """Base exception for all Patient Dashboard errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PatientDashboardError):
    """Raised when a request is malformed.

    Examples:
        - Missing firstName, lastName, dob or status
        - Status outside Inquiry/Onboarding/Active/Churned
        - Page or limit out of range, or page beyond the last page
    """

    status_code = 400


class NotFoundError(PatientDashboardError):
    """Raised when no patient has the requested identifier."""

    status_code = 404


class StoreError(PatientDashboardError):
    """Raised when the record store fails for any reason.

    The message is the generic one shown to clients; the underlying cause is
    chained and logged, never exposed.
    """

    status_code = 500


class TransportError(PatientDashboardError):
    """Raised client-side when no response was received from the API."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ApiError(PatientDashboardError):
    """Raised client-side when the API answered with an error status.

    ``server_message`` holds the ``error`` field of the response body when the
    server provided one.
    """

    def __init__(self, status_code: int, server_message: Optional[str] = None):
        super().__init__(server_message or f"Request failed with status {status_code}")
        self.status_code = status_code
        self.server_message = server_message
