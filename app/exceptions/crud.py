"""Validation exceptions for caller-supplied report parameters."""

from app.exceptions.base import AppException


class ValidationError(AppException):
    """A report parameter is outside its accepted range."""

    def __init__(self, message: str, field: str | None = None):
        """
        Create a ValidationError representing a rejected report parameter.

        Parameters:
            message (str): Human-readable error message describing the validation failure.
            field (str | None): Optional name of the parameter associated with the error; may be None if not field-specific.
        """
        self.field = field
        super().__init__(message)
