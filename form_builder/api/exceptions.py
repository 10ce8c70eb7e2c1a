"""Application errors surfaced through the ``{ok: false, error}`` envelope."""


class AppError(Exception):
    """Base class for application errors.

    ``is_operational`` marks expected failures (bad input, missing resource)
    as opposed to programming errors.
    """

    def __init__(self, message: str, status_code: int = 500, is_operational: bool = True):
        self.message = message
        self.status_code = status_code
        self.is_operational = is_operational
        super().__init__(message)


class ValidationError(AppError):
    """Request input is invalid."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(AppError):
    """Resource or route not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)
