class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str, resource_id: str | int):
        super().__init__(f"{resource} '{resource_id}' not found", code="NOT_FOUND")


class ValidationError(AppError):
    """Input content is structurally unusable, e.g. a CSV without required headers."""

    status_code = 422

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ConflictError(AppError):
    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")
