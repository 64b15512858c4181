"""
Error taxonomy of the admin API.

Every error carries the HTTP status it maps to and a short message that is
safe to show to the client. The exception handler in ``vita_admin.main``
renders them as ``{"error": message}``.
"""

from fastapi import status


class AdminAPIError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class InvalidCredentials(AdminAPIError):
    """Unknown email or wrong password. Both cases look the same to the client."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid email or password"


class InvalidOtp(AdminAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid OTP"


class NotAuthorized(AdminAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized"


class NotFound(AdminAPIError):
    """Malformed, absent or unresolvable subject id. Status is chosen per endpoint."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class AdminAlreadyExists(AdminAPIError):
    status_code = status.HTTP_409_CONFLICT
    message = "Admin already exists"


class NotificationFailure(AdminAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Email could not be sent"


class PersistenceFailure(AdminAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Database operation failed"

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message}


class MentorNotFound(NotFound):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Mentor Not Found"


class UserNotFound(NotFound):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"
