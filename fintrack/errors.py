from typing import Optional


class FintrackError(Exception):
    """Base class for errors raised to the presentation layer."""


class BackendError(FintrackError):
    """A write against the backend failed; ``message`` is shown to the user as is."""

    def __init__(self, message: str, kind: str = "backend"):
        super().__init__(message)
        self.message = message
        self.kind = kind


class DuplicateCategoryError(BackendError):
    def __init__(self, message: str = "Category with this name already exists"):
        super().__init__(message)


class RecordNotFoundError(BackendError):
    def __init__(self, message: str):
        super().__init__(message, kind="not_found")


class ValidationError(FintrackError):
    def __init__(self, field_errors: dict, message: Optional[str] = None):
        self.field_errors = dict(field_errors)
        self.message = message or "; ".join(self.field_errors.values())
        super().__init__(self.message)
