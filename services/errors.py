class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class DuplicateRecordError(AppError):
    status_code = 409


class AuthProviderError(AppError):
    status_code = 502
