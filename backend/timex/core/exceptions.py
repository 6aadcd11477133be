class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class GenerationValidationError(AppError):
    """Raised when a generation request is malformed, before any data is loaded."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_ids: list[str] | str):
        if isinstance(resource_ids, str):
            resource_ids = [resource_ids]
        joined = ", ".join(resource_ids)
        super().__init__(
            f"{resource_type} with id {joined} not found",
            status_code=404,
            details={"missing_ids": list(resource_ids)},
        )

class GenerationCancelledError(AppError):
    """Raised inside a generation run when its cancel event is set."""
    def __init__(self, message: str = "Timetable generation cancelled"):
        super().__init__(message, status_code=499)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
