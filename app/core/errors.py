"""Error taxonomy shared by services and the HTTP layer.

Services raise these; ``app.main`` renders each one as ``{"error": message}``
with the exception's ``status_code``.
"""


class AppError(Exception):
    """Base for expected, client-visible failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AppError):
    """Missing or invalid input (including rejected login credentials)."""

    status_code = 400


class ConflictError(AppError):
    """Write rejected because a unique value already exists."""

    status_code = 400


class UnauthenticatedError(AppError):
    """Bearer credential missing, malformed, or failing verification."""

    status_code = 401


class ForbiddenError(AppError):
    """Authenticated principal lacks a permitted role."""

    status_code = 403


class NotFoundError(AppError):
    """No such post or user."""

    status_code = 404


class UploadError(AppError):
    """No file supplied, file rejected, or storage refused the upload."""

    status_code = 400


class InternalError(AppError):
    """Unexpected store or storage failure. Message is always generic."""

    status_code = 500

    def __init__(self, message: str = "Server error") -> None:
        super().__init__(message)
