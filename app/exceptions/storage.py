"""Storage-related exceptions raised by the metric repository and dashboard reports."""

from app.exceptions.base import AppException


class StorageUnavailableError(AppException):
    """The underlying database could not be reached or failed to answer."""

    def __init__(self, operation: str, reason: str | None = None):
        """
        Initialize a StorageUnavailableError for a failed repository operation.

        Parameters:
            operation (str): Name of the repository operation that failed (for example, "count").
            reason (str | None): Optional description of the underlying driver error.
        """
        self.operation = operation
        self.reason = reason
        message = f"Storage unavailable during '{operation}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ReportTimeoutError(AppException):
    """A report's storage round-trip exceeded the configured timeout."""

    def __init__(self, report: str, timeout: float):
        self.report = report
        self.timeout = timeout
        super().__init__(f"Report '{report}' timed out after {timeout:g}s")


class InvalidFilterError(AppException):
    """A filter, grouping or sort key does not name a field of the entity."""

    def __init__(self, entity: str, field: str):
        self.entity = entity
        self.field = field
        super().__init__(f"{entity} has no field '{field}'")
